import random

import pytest

from santalink.services import session_flow
from santalink.services.assignment import Assignment, GenerationError, ValidationError
from santalink.services.state_codec import SessionState, decode_state


def roster(*names):
    state = session_flow.reset_session()
    for name in names:
        state = session_flow.add_participant(state, name)
    return state


def test_add_participant_trims_and_keeps_order():
    state = roster(" Ann ", "Bob", "Cid")
    assert state.participants == ("Ann", "Bob", "Cid")


@pytest.mark.parametrize("name", ["", "   ", None, "Ann", " Ann", "Smith, John"])
def test_add_participant_rejects_invalid_names(name):
    state = roster("Ann")
    with pytest.raises(ValidationError):
        session_flow.add_participant(state, name)


def test_adding_clears_assignments():
    state = session_flow.assign_session(roster("A", "B", "C"), rng=random.Random(1))
    assert state.assignments

    state = session_flow.add_participant(state, "D")
    assert state.participants == ("A", "B", "C", "D")
    assert state.assignments == ()


def test_removing_clears_assignments():
    state = session_flow.assign_session(roster("A", "B", "C"), rng=random.Random(1))
    state = session_flow.remove_participant(state, "C")
    assert state.participants == ("A", "B")
    assert state.assignments == ()


def test_removing_unknown_name_is_noop():
    state = session_flow.assign_session(roster("A", "B", "C"), rng=random.Random(1))
    assert session_flow.remove_participant(state, "Z") == state


def test_reset_session():
    assert session_flow.reset_session() == SessionState()


def test_assign_session_requires_three():
    state = roster("A", "B")
    with pytest.raises(ValidationError):
        session_flow.assign_session(state)
    assert state.assignments == ()


def test_assign_session_failure_keeps_state():
    class IdentityRng:
        def randint(self, a, b):
            return b

    state = roster("A", "B", "C")
    with pytest.raises(GenerationError):
        session_flow.assign_session(state, rng=IdentityRng())
    assert state.assignments == ()


def test_selected_assignment():
    state = SessionState(
        participants=("A", "B", "C"),
        assignments=(Assignment("A", "B"), Assignment("B", "C"), Assignment("C", "A")),
    )
    assert session_flow.selected_assignment(state) is None
    assert session_flow.selected_assignment(session_flow.select_participant(state, "B")) == Assignment("B", "C")
    assert session_flow.selected_assignment(session_flow.select_participant(state, "Z")) is None
    assert session_flow.clear_selection(session_flow.select_participant(state, "B")).selected is None


def test_select_blank_name_clears_selection():
    state = session_flow.select_participant(roster("A"), "A")
    assert session_flow.select_participant(state, "  ").selected is None


def test_share_links_point_to_confirm_page():
    state = session_flow.assign_session(roster("Ann", "Bob", "Cid"), rng=random.Random(5))
    state = session_flow.select_participant(state, "Bob")
    links = session_flow.share_links("https://santa.example/", state)

    assert [link.giver for link in links] == ["Ann", "Bob", "Cid"]
    for link in links:
        assert link.url.startswith("https://santa.example/view/confirm?")
        decoded = decode_state(link.url)
        assert decoded.selected == link.giver
        assert decoded.participants == state.participants
        assert decoded.assignments == state.assignments


def test_share_links_empty_without_assignments():
    assert session_flow.share_links("https://santa.example", roster("A", "B", "C")) == []


def test_format_assignment_message():
    message = session_flow.format_assignment_message(Assignment("Ann", "Bob"))
    assert "Ann" in message
    assert "Bob" in message
