from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from loguru import logger

from santalink.services.assignment import (
    Assignment,
    ValidationError,
    generate_assignments,
    lookup_assignment,
)
from santalink.services.state_codec import DELIMITER, SessionState, build_url

CONFIRM_PATH = "/view/confirm"


@dataclass(frozen=True)
class ShareLink:
    giver: str
    url: str


def normalize_name(name: Optional[str]) -> str:
    return (name or "").strip()


def add_participant(state: SessionState, name: Optional[str]) -> SessionState:
    name = normalize_name(name)
    if not name:
        raise ValidationError("Please enter a participant name.")
    if DELIMITER in name:
        raise ValidationError(f"Participant names cannot contain {DELIMITER!r}.")
    if name in state.participants:
        raise ValidationError(f"{name} is already on the list.")

    return SessionState(participants=state.participants + (name,))


def remove_participant(state: SessionState, name: Optional[str]) -> SessionState:
    if name not in state.participants:
        return state
    return SessionState(participants=tuple(p for p in state.participants if p != name))


def reset_session() -> SessionState:
    return SessionState()


def assign_session(state: SessionState, rng=None) -> SessionState:
    assignments = generate_assignments(state.participants, rng=rng)
    logger.bind(participants=len(state.participants)).info("Session assigned")
    return SessionState(participants=state.participants, assignments=assignments)


def select_participant(state: SessionState, name: Optional[str]) -> SessionState:
    return state.with_changes(selected=normalize_name(name) or None)


def clear_selection(state: SessionState) -> SessionState:
    return state.with_changes(selected=None)


def selected_assignment(state: SessionState) -> Optional[Assignment]:
    if not state.selected or not state.assignments:
        return None
    return lookup_assignment(state.assignments, state.selected)


def share_links(base_url: str, state: SessionState) -> List[ShareLink]:
    shared = clear_selection(state)
    return [
        ShareLink(
            giver=assignment.giver,
            url=build_url(base_url, CONFIRM_PATH, shared.with_changes(selected=assignment.giver)),
        )
        for assignment in state.assignments
    ]


def format_assignment_message(assignment: Assignment) -> str:
    return f"Ho Ho Ho, {assignment.giver}! You're buying a gift for {assignment.receiver}. Keep it secret!"
