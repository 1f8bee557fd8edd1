import asyncio
import base64
import html
from urllib.parse import quote

from aiohttp import test_utils

from santalink.core.config import Settings
from santalink.services.assignment import Assignment
from santalink.services.state_codec import SessionState, decode_state, encode_reveal_token
from santalink.web import create_app
from santalink.web.utils import state_path

SETTINGS = Settings(
    host="127.0.0.1",
    port=8080,
    base_url="https://santa.example",
    log_level="DEBUG",
    log_path="logs/test.log",
)

ASSIGNED = SessionState(
    participants=("Ann", "Bob", "Cid"),
    assignments=(Assignment("Ann", "Bob"), Assignment("Bob", "Cid"), Assignment("Cid", "Ann")),
)


def fetch(path):
    async def _fetch():
        client = test_utils.TestClient(test_utils.TestServer(create_app(SETTINGS)))
        await client.start_server()
        try:
            response = await client.get(path, allow_redirects=False)
            return response.status, response.headers.get("Location"), await response.text()
        finally:
            await client.close()

    return asyncio.run(_fetch())


def test_health():
    status, _, body = fetch("/health")
    assert status == 200
    assert '"ok"' in body


def test_index_empty_session():
    status, _, body = fetch("/")
    assert status == 200
    assert "Enter participant name" in body
    assert "Generate" not in body


def test_index_hint_below_minimum():
    status, _, body = fetch(state_path("/", SessionState(participants=("Ann", "Bob"))))
    assert status == 200
    assert "Add at least 3 participants" in body


def test_add_redirects_with_new_state():
    status, location, _ = fetch(state_path("/add", SessionState(participants=("Ann",)), name=" Bob "))
    assert status == 302
    assert decode_state(location).participants == ("Ann", "Bob")


def test_add_duplicate_renders_notice():
    status, _, body = fetch(state_path("/add", SessionState(participants=("Ann",)), name="Ann"))
    assert status == 400
    assert "already on the list" in body


def test_add_clears_assignments():
    status, location, _ = fetch(state_path("/add", ASSIGNED, name="Dee"))
    assert status == 302
    decoded = decode_state(location)
    assert decoded.participants == ("Ann", "Bob", "Cid", "Dee")
    assert decoded.assignments == ()


def test_remove_participant():
    status, location, _ = fetch(state_path("/remove", ASSIGNED, name="Cid"))
    assert status == 302
    decoded = decode_state(location)
    assert decoded.participants == ("Ann", "Bob")
    assert decoded.assignments == ()


def test_generate_assignments():
    status, location, _ = fetch(state_path("/generate", SessionState(participants=("Ann", "Bob", "Cid"))))
    assert status == 302
    decoded = decode_state(location)
    assert decoded.participants == ("Ann", "Bob", "Cid")
    assert len(decoded.assignments) == 3
    assert all(item.giver != item.receiver for item in decoded.assignments)


def test_generate_with_too_few_participants():
    status, _, body = fetch(state_path("/generate", SessionState(participants=("Ann", "Bob"))))
    assert status == 400
    assert "at least 3 participants" in body


def test_index_lists_share_links():
    status, _, body = fetch(state_path("/", ASSIGNED))
    assert status == 200
    assert "Assignments Generated!" in body
    assert html.escape("https://santa.example/view/confirm?") in body


def test_reset_redirects_to_empty_session():
    status, location, _ = fetch("/reset")
    assert status == 302
    assert location == "/"


def test_view_redirects_when_selected():
    state = ASSIGNED.with_changes(selected="Bob")
    status, location, _ = fetch(state_path("/view", state))
    assert status == 302
    assert location.startswith("/view/confirm?")
    assert decode_state(location).state == state


def test_view_lists_participants():
    status, _, body = fetch(state_path("/view", ASSIGNED))
    assert status == 200
    for name in ASSIGNED.participants:
        assert f'<option value="{name}">' in body


def test_confirm_without_selection_redirects_back():
    status, location, _ = fetch(state_path("/view/confirm", ASSIGNED))
    assert status == 302
    assert location.startswith("/view?")


def test_confirm_asks_for_identity():
    status, _, body = fetch(state_path("/view/confirm", ASSIGNED.with_changes(selected="Bob")))
    assert status == 200
    assert "Is this you??" in body
    assert "Bob" in body


def test_reveal_shows_receiver():
    status, _, body = fetch(state_path("/view/reveal", ASSIGNED.with_changes(selected="Bob")))
    assert status == 200
    assert "Cid" in body


def test_reveal_unknown_participant():
    status, _, body = fetch(state_path("/view/reveal", ASSIGNED.with_changes(selected="Zed")))
    assert status == 404
    assert "No assignment found" in body


def test_corrupt_assignments_still_render():
    status, _, body = fetch("/view?participants=Ann%2CBob%2CCid&assignments=%25%25%25garbage")
    assert status == 200
    assert "could not be read" in body
    assert '<option value="Ann">' in body


def test_legacy_reveal_token():
    token = encode_reveal_token(Assignment("Ann", "Bob"))
    status, _, body = fetch(f"/reveal/{quote(token, safe='')}")
    assert status == 200
    assert "Bob" in body


def test_legacy_reveal_token_invalid():
    status, _, body = fetch("/reveal/not-a-token")
    assert status == 400
    assert "not valid" in body


def test_deeply_nested_assignments_still_render():
    blob = base64.urlsafe_b64encode(("[" * 3000).encode()).decode()
    query = f"participants=Ann%2CBob%2CCid&assignments={quote(blob, safe='')}"

    status, _, body = fetch(f"/view?{query}")
    assert status == 200
    assert "could not be read" in body

    status, _, body = fetch(f"/?{query}")
    assert status == 200
    assert "could not be read" in body


def test_index_warns_organizer_about_links():
    status, _, body = fetch(state_path("/", ASSIGNED))
    assert status == 200
    assert "click on the links yourself" in body
