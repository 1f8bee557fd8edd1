from aiohttp import web

from santalink.core.config import Settings
from santalink.web.handlers import routes
from santalink.web.utils import SETTINGS_KEY


def create_app(settings: Settings) -> web.Application:
    app = web.Application()
    app[SETTINGS_KEY] = settings
    app.add_routes(routes)
    return app
