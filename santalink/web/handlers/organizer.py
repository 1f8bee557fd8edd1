from __future__ import annotations

from aiohttp import web

from santalink.services import session_flow
from santalink.services.assignment import AssignmentError
from santalink.services.state_codec import DecodeResult
from santalink.web import pages
from santalink.web.utils import base_url, log_handler_exception, redirect, request_state

routes = web.RouteTableDef()


def _organizer_page(
    request: web.Request,
    decoded: DecodeResult,
    notice: str | None = None,
    status: int = 200,
) -> web.Response:
    links = session_flow.share_links(base_url(request), decoded.state)
    return pages.organizer_page(
        decoded.state, links, notice=notice, decode_ok=decoded.ok, status=status
    )


@routes.get("/")
async def index_handler(request: web.Request) -> web.Response:
    try:
        return _organizer_page(request, request_state(request))
    except Exception as exc:
        log_handler_exception("index", request.path, exc)
        return pages.message_page("Something went wrong. Please try again later.", status=500)


@routes.get("/add")
async def add_handler(request: web.Request) -> web.Response:
    try:
        decoded = request_state(request)
        state = session_flow.add_participant(decoded.state, request.query.get("name"))
    except AssignmentError as exc:
        return _organizer_page(request, decoded, notice=str(exc), status=400)
    except Exception as exc:
        log_handler_exception("add", request.path, exc)
        return pages.message_page("Something went wrong. Please try again later.", status=500)

    redirect("/", state)


@routes.get("/remove")
async def remove_handler(request: web.Request) -> web.Response:
    try:
        decoded = request_state(request)
        state = session_flow.remove_participant(decoded.state, request.query.get("name"))
    except Exception as exc:
        log_handler_exception("remove", request.path, exc)
        return pages.message_page("Something went wrong. Please try again later.", status=500)

    redirect("/", state)


@routes.get("/generate")
async def generate_handler(request: web.Request) -> web.Response:
    try:
        decoded = request_state(request)
        state = session_flow.assign_session(decoded.state)
    except AssignmentError as exc:
        return _organizer_page(request, decoded, notice=str(exc), status=400)
    except Exception as exc:
        log_handler_exception("generate", request.path, exc)
        return pages.message_page("Something went wrong. Please try again later.", status=500)

    redirect("/", state)


@routes.get("/reset")
async def reset_handler(request: web.Request) -> web.Response:
    redirect("/", session_flow.reset_session())
