from aiohttp import web

routes = web.RouteTableDef()


@routes.get("/health")
async def health_handler(request: web.Request) -> web.Response:
    return web.json_response({"status": "ok"})
