"""Session state carried in URL query parameters.

The URL is the only place a session lives. Three parameters are used:

``participants``
    names joined with ``,`` and percent-escaped.
``assignments``
    a JSON list of ``{"giver": ..., "receiver": ...}`` objects, base64
    encoded with the URL-safe alphabet and percent-escaped.
``selected``
    the percent-escaped name whose reveal view should be shown.

Empty fields are left out of the query string entirely. Decoding never
raises: a field that cannot be parsed falls back to its empty value and
the result is flagged as not ok.
"""

from __future__ import annotations

import base64
import json
from dataclasses import dataclass, field, replace
from typing import Any, List, Optional, Tuple
from urllib.parse import parse_qsl, quote

from loguru import logger

from santalink.services.assignment import Assignment, AssignmentSet, is_derangement

PARTICIPANTS_PARAM = "participants"
ASSIGNMENTS_PARAM = "assignments"
SELECTED_PARAM = "selected"
DELIMITER = ","


@dataclass(frozen=True)
class SessionState:
    participants: Tuple[str, ...] = ()
    assignments: AssignmentSet = ()
    selected: Optional[str] = None

    def with_changes(self, **changes: Any) -> SessionState:
        return replace(self, **changes)


@dataclass(frozen=True)
class DecodeResult:
    state: SessionState
    failed_fields: Tuple[str, ...] = field(default=())

    @property
    def ok(self) -> bool:
        return not self.failed_fields

    @property
    def participants(self) -> Tuple[str, ...]:
        return self.state.participants

    @property
    def assignments(self) -> AssignmentSet:
        return self.state.assignments

    @property
    def selected(self) -> Optional[str]:
        return self.state.selected


def _escape(value: str) -> str:
    return quote(value, safe="")


def _b64encode(payload: Any) -> str:
    raw = json.dumps(payload, separators=(",", ":")).encode("utf-8")
    return base64.urlsafe_b64encode(raw).decode("ascii")


def _b64decode(value: str) -> Any:
    # Accepts both alphabets so links built with plain base64 still open.
    normalized = value.strip().replace(" ", "+").replace("-", "+").replace("_", "/")
    normalized += "=" * (-len(normalized) % 4)
    raw = base64.b64decode(normalized, validate=True)
    return json.loads(raw.decode("utf-8"))


def _assignment_from_json(item: Any) -> Assignment:
    if not isinstance(item, dict):
        raise TypeError(f"Expected an object, got {type(item).__name__}.")
    giver = item["giver"]
    receiver = item["receiver"]
    if not isinstance(giver, str) or not isinstance(receiver, str):
        raise TypeError("Giver and receiver must be strings.")
    return Assignment(giver=giver, receiver=receiver)


def encode_assignments(assignments: AssignmentSet) -> str:
    return _b64encode(
        [{"giver": item.giver, "receiver": item.receiver} for item in assignments]
    )


def decode_assignments(value: str) -> AssignmentSet:
    parsed = _b64decode(value)
    if isinstance(parsed, dict):
        return (_assignment_from_json(parsed),)
    if not isinstance(parsed, list) or not parsed:
        raise ValueError("Assignments must be a non-empty list.")

    assignments = tuple(_assignment_from_json(item) for item in parsed)
    givers = [item.giver for item in assignments]
    receivers = [item.receiver for item in assignments]
    if len(set(givers)) != len(givers) or not is_derangement(givers, receivers):
        raise ValueError("Assignments must pair every giver with exactly one other receiver.")
    return assignments


def state_params(state: SessionState) -> List[Tuple[str, str]]:
    """Unescaped query parameters for a session, empty fields left out."""
    params: List[Tuple[str, str]] = []
    if state.participants:
        params.append((PARTICIPANTS_PARAM, DELIMITER.join(state.participants)))
    if state.assignments:
        params.append((ASSIGNMENTS_PARAM, encode_assignments(state.assignments)))
    if state.selected:
        params.append((SELECTED_PARAM, state.selected))
    return params


def encode_state(state: SessionState) -> str:
    return "&".join(f"{key}={_escape(value)}" for key, value in state_params(state))


def _query_part(value: str) -> str:
    if "?" in value:
        value = value.split("?", 1)[1]
    return value.split("#", 1)[0]


def decode_state(value: Optional[str]) -> DecodeResult:
    """Rebuild a session from a query string or a full URL."""
    params = dict(parse_qsl(_query_part(value or ""), keep_blank_values=True))
    failed: List[str] = []

    participants: Tuple[str, ...] = ()
    raw_participants = params.get(PARTICIPANTS_PARAM)
    if raw_participants:
        participants = tuple(
            name for name in raw_participants.split(DELIMITER) if name.strip()
        )

    assignments: AssignmentSet = ()
    raw_assignments = params.get(ASSIGNMENTS_PARAM)
    if raw_assignments:
        try:
            assignments = decode_assignments(raw_assignments)
        except (ValueError, TypeError, KeyError, RecursionError) as exc:
            failed.append(ASSIGNMENTS_PARAM)
            logger.bind(field=ASSIGNMENTS_PARAM).warning(
                "Failed to parse assignments from URL: {error}", error=str(exc)
            )

    selected = params.get(SELECTED_PARAM) or None

    return DecodeResult(
        state=SessionState(participants=participants, assignments=assignments, selected=selected),
        failed_fields=tuple(failed),
    )


def encode_reveal_token(assignment: Assignment) -> str:
    return _b64encode({"giver": assignment.giver, "receiver": assignment.receiver})


def decode_reveal_token(token: str) -> Optional[Assignment]:
    try:
        return _assignment_from_json(_b64decode(token))
    except (ValueError, TypeError, KeyError, RecursionError) as exc:
        logger.bind(field="reveal").warning("Invalid reveal token: {error}", error=str(exc))
        return None


def build_url(base_url: str, path: str, state: SessionState) -> str:
    query = encode_state(state)
    url = f"{base_url.rstrip('/')}{path}"
    return f"{url}?{query}" if query else url
