from __future__ import annotations

from typing import NoReturn, Optional
from urllib.parse import quote

from aiohttp import web
from loguru import logger

from santalink.core.config import Settings
from santalink.services.state_codec import DecodeResult, SessionState, decode_state, encode_state

SETTINGS_KEY = web.AppKey("settings", Settings)


def request_state(request: web.Request) -> DecodeResult:
    return decode_state(request.rel_url.raw_query_string)


def base_url(request: web.Request) -> str:
    configured = request.app[SETTINGS_KEY].base_url
    if configured:
        return configured
    return f"{request.scheme}://{request.host}"


def state_path(path: str, state: SessionState, name: Optional[str] = None) -> str:
    query = encode_state(state)
    if name is not None:
        extra = f"name={quote(name, safe='')}"
        query = f"{query}&{extra}" if query else extra
    return f"{path}?{query}" if query else path


def redirect(path: str, state: SessionState) -> NoReturn:
    raise web.HTTPFound(state_path(path, state))


def log_handler_exception(action: str, path: str, error: Exception) -> None:
    logger.bind(action=action, path=path).exception(
        "Handler error: {error}", error=str(error)
    )
