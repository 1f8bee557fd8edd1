from __future__ import annotations

import asyncio

import uvloop
from aiohttp import web
from loguru import logger

from santalink.core.config import load_settings
from santalink.core.logging import setup_logging
from santalink.web import create_app
from santalink.web.utils import SETTINGS_KEY


async def on_startup(app: web.Application) -> None:
    settings = app[SETTINGS_KEY]

    logger.info("server starting...")
    logger.info("Host     - {host}", host=settings.host)
    logger.info("Port     - {port}", port=settings.port)
    logger.info("Base URL - {base_url}", base_url=settings.base_url or "derived from request")
    logger.info("server started")


async def on_shutdown(app: web.Application) -> None:
    logger.info("server stopping...")


def main() -> None:
    settings = load_settings()
    setup_logging(settings.log_level, settings.log_path)

    app = create_app(settings)
    app.on_startup.append(on_startup)
    app.on_shutdown.append(on_shutdown)

    web.run_app(app, host=settings.host, port=settings.port, print=None)
    logger.info("server stopped")


if __name__ == "__main__":
    if not getattr(asyncio, "debug", False):
        uvloop.install()

    main()
