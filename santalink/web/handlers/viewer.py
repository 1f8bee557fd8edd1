from __future__ import annotations

from aiohttp import web

from santalink.services import session_flow
from santalink.services.state_codec import decode_reveal_token
from santalink.web import pages
from santalink.web.utils import log_handler_exception, redirect, request_state, state_path

routes = web.RouteTableDef()


@routes.get("/view")
async def view_handler(request: web.Request) -> web.Response:
    try:
        decoded = request_state(request)
        if not decoded.selected:
            return pages.picker_page(decoded.state, decode_ok=decoded.ok)
    except Exception as exc:
        log_handler_exception("view", request.path, exc)
        return pages.message_page("Something went wrong. Please try again later.", status=500)

    redirect("/view/confirm", decoded.state)


@routes.get("/view/confirm")
async def confirm_handler(request: web.Request) -> web.Response:
    try:
        decoded = request_state(request)
        if decoded.selected:
            return pages.confirm_page(decoded.state)
    except Exception as exc:
        log_handler_exception("confirm", request.path, exc)
        return pages.message_page("Something went wrong. Please try again later.", status=500)

    redirect("/view", decoded.state)


@routes.get("/view/reveal")
async def reveal_handler(request: web.Request) -> web.Response:
    try:
        decoded = request_state(request)
        if decoded.selected:
            back_href = state_path("/view", session_flow.clear_selection(decoded.state))
            assignment = session_flow.selected_assignment(decoded.state)
            if assignment is None:
                return pages.message_page(
                    f"No assignment found for {decoded.selected}. Ask the organizer for a new link.",
                    back_href=back_href,
                    status=404,
                )
            return pages.reveal_page(assignment, back_href=back_href)
    except Exception as exc:
        log_handler_exception("reveal", request.path, exc)
        return pages.message_page("Something went wrong. Please try again later.", status=500)

    redirect("/view", decoded.state)


@routes.get("/reveal/{token}")
async def token_reveal_handler(request: web.Request) -> web.Response:
    try:
        assignment = decode_reveal_token(request.match_info["token"])
    except Exception as exc:
        log_handler_exception("token_reveal", request.path, exc)
        return pages.message_page("Something went wrong. Please try again later.", status=500)

    if assignment is None:
        return pages.message_page("This link is not valid.", status=400)
    return pages.reveal_page(assignment)
