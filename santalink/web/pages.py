from __future__ import annotations

import html
from typing import Iterable, List, Optional

from aiohttp import web

from santalink.services.assignment import MIN_PARTICIPANTS, Assignment
from santalink.services.session_flow import ShareLink, clear_selection, format_assignment_message
from santalink.services.state_codec import SessionState, state_params
from santalink.web.utils import state_path

RESET_PROMPT = "Reset everything? This will clear all participants and assignments."


def escape(value: str) -> str:
    return html.escape(value, quote=True)


def render(title: str, body: Iterable[str], status: int = 200) -> web.Response:
    text = "\n".join(
        [
            "<!DOCTYPE html>",
            '<html lang="en">',
            "<head>",
            '<meta charset="utf-8">',
            '<meta name="viewport" content="width=device-width, initial-scale=1">',
            f"<title>{escape(title)}</title>",
            "</head>",
            "<body>",
            *body,
            "</body>",
            "</html>",
        ]
    )
    return web.Response(text=text, status=status, content_type="text/html")


def link(href: str, label: str, **attrs: str) -> str:
    extra = "".join(f' {key}="{escape(value)}"' for key, value in attrs.items())
    return f'<a href="{escape(href)}"{extra}>{escape(label)}</a>'


def hidden_fields(state: SessionState, skip: Iterable[str] = ()) -> List[str]:
    skipped = set(skip)
    return [
        f'<input type="hidden" name="{key}" value="{escape(value)}">'
        for key, value in state_params(state)
        if key not in skipped
    ]


def notices(messages: Iterable[Optional[str]]) -> List[str]:
    return [f'<p class="notice">{escape(message)}</p>' for message in messages if message]


def organizer_page(
    state: SessionState,
    links: List[ShareLink],
    notice: Optional[str] = None,
    decode_ok: bool = True,
    status: int = 200,
) -> web.Response:
    body = ["<h1>Secret Santa</h1>"]
    body.extend(
        notices(
            [
                None if decode_ok else "The assignments in this link could not be read.",
                notice,
            ]
        )
    )

    body.append('<form action="/add" method="get">')
    body.extend(hidden_fields(state))
    body.append('<input type="text" name="name" placeholder="Enter participant name" autofocus>')
    body.append('<button type="submit">Add</button>')
    body.append("</form>")

    count = len(state.participants)
    if count:
        body.append(f"<h2>Participants ({count})</h2>")
        body.append("<ul>")
        for name in state.participants:
            body.append(
                f"<li>{escape(name)} "
                + link(state_path("/remove", state, name=name), "×", title=f"Remove {name}")
                + "</li>"
            )
        body.append("</ul>")
        body.append(
            link("/reset", "Reset all", onclick=f"return confirm('{RESET_PROMPT}')")
        )

    if count >= MIN_PARTICIPANTS and not state.assignments:
        body.append("<p>" + link(state_path("/generate", state), "Generate Secret Santa Assignments") + "</p>")
    elif 0 < count < MIN_PARTICIPANTS:
        body.append(f"<p>Add at least {MIN_PARTICIPANTS} participants to generate assignments</p>")

    if links:
        body.append("<h2>Assignments Generated!</h2>")
        body.append(
            "<p>Share each link with the corresponding person. When they open it, "
            "they'll see who they're buying for. Keep the links secret!</p>"
        )
        body.append("<ul>")
        for share in links:
            body.append(
                f"<li>{escape(share.giver)}: "
                f'<input type="text" readonly value="{escape(share.url)}"></li>'
            )
        body.append("</ul>")
        body.extend(
            notices(
                [
                    "Important: Don't click on the links yourself! Each link reveals who that "
                    "person should buy for. Save this page, then share each link privately "
                    "with the corresponding participant."
                ]
            )
        )
        body.append("<p>" + link(state_path("/view", clear_selection(state)), "Open the participant view") + "</p>")

    return render("Secret Santa", body, status=status)


def picker_page(state: SessionState, decode_ok: bool = True) -> web.Response:
    body = [
        "<h1>Secret Santa</h1>",
        "<p>Select your name to see who you're buying for</p>",
    ]
    body.extend(notices([None if decode_ok else "The assignments in this link could not be read."]))

    if not state.participants:
        body.append("<p>No participants found. Ask the organizer for your link.</p>")
        return render("Secret Santa", body)

    body.append('<form action="/view/confirm" method="get">')
    body.extend(hidden_fields(state, skip=["selected"]))
    body.append('<label for="selected">Your Name</label>')
    body.append('<select id="selected" name="selected">')
    body.append('<option value="">Choose your name...</option>')
    for name in state.participants:
        body.append(f'<option value="{escape(name)}">{escape(name)}</option>')
    body.append("</select>")
    body.append('<button type="submit">Continue</button>')
    body.append("</form>")
    return render("Secret Santa", body)


def confirm_page(state: SessionState) -> web.Response:
    body = [
        "<h1>Is this you??</h1>",
        f"<p>{escape(state.selected or '')}</p>",
        "<p>"
        + link(state_path("/view/reveal", state), "Yes, show me")
        + " "
        + link(state_path("/view", clear_selection(state)), "No, go back")
        + "</p>",
    ]
    return render("Secret Santa", body)


def reveal_page(assignment: Assignment, back_href: Optional[str] = None) -> web.Response:
    body = [
        "<h1>Secret Santa</h1>",
        f"<p>{escape(format_assignment_message(assignment))}</p>",
    ]
    if back_href:
        body.append("<p>" + link(back_href, "Select different name") + "</p>")
    return render("Secret Santa", body)


def message_page(message: str, back_href: Optional[str] = None, status: int = 200) -> web.Response:
    body = ["<h1>Secret Santa</h1>", *notices([message])]
    if back_href:
        body.append("<p>" + link(back_href, "Go back") + "</p>")
    return render("Secret Santa", body, status=status)
