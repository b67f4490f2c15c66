"""Unit tests for the session lifecycle and the shared transition table."""

from dataclasses import replace
from datetime import datetime, timedelta

import pytest

from src.coaching_engine.errors import InvalidTransitionError, TurnLimitExceeded
from src.coaching_engine.models import FLOWS, SESSION_STATES
from src.coaching_engine.session_state import (
    SESSION_TRANSITIONS,
    TURN_LIMITS,
    can_transition,
    create_session,
    is_inactive,
    record_turn,
    transition,
    validate_transition,
)
from src.coaching_engine.transitions import TransitionTable


@pytest.mark.unit
def test_transition_table_rejects_undeclared_targets():
    with pytest.raises(ValueError):
        TransitionTable({"a": ["b"]})


@pytest.mark.unit
def test_transition_table_unknown_state_is_not_allowed_anywhere():
    table = TransitionTable({"a": ["b"], "b": []})
    assert table.can_transition("a", "b")
    assert not table.can_transition("missing", "a")
    assert table.is_terminal("b")
    assert not table.is_terminal("missing")
    assert "a" in table


@pytest.mark.unit
@pytest.mark.parametrize("terminal", ["completed", "abandoned"])
def test_terminal_states_have_no_outgoing_transitions(terminal):
    for target in SESSION_STATES:
        assert not can_transition(terminal, target)
    assert SESSION_TRANSITIONS.is_terminal(terminal)


@pytest.mark.unit
def test_transition_table_matches_lifecycle():
    assert can_transition("created", "in_progress")
    assert can_transition("in_progress", "in_progress")
    assert can_transition("in_progress", "plan_confirmed")
    assert can_transition("in_progress", "abandoned")
    assert can_transition("plan_confirmed", "completed")
    assert not can_transition("created", "plan_confirmed")
    assert not can_transition("plan_confirmed", "in_progress")


@pytest.mark.unit
@pytest.mark.parametrize("flow", FLOWS)
def test_turn_limit_applies_only_to_self_loop(flow):
    limit = TURN_LIMITS[flow]
    session = transition(create_session("user-1", flow), "in_progress")

    below = replace(session, turn_count=limit - 1)
    validate_transition(below, "in_progress")

    at_limit = replace(session, turn_count=limit)
    with pytest.raises(TurnLimitExceeded) as excinfo:
        validate_transition(at_limit, "in_progress")
    assert excinfo.value.limit == limit
    assert excinfo.value.flow == flow

    # confirming or abandoning is still allowed at the limit
    validate_transition(at_limit, "plan_confirmed")
    validate_transition(at_limit, "abandoned")


@pytest.mark.unit
def test_invalid_transition_reports_states():
    session = create_session("user-1", "morning")
    with pytest.raises(InvalidTransitionError) as excinfo:
        validate_transition(session, "completed")
    assert excinfo.value.from_state == "created"
    assert excinfo.value.to_state == "completed"


@pytest.mark.unit
def test_create_session_rejects_unknown_flow():
    with pytest.raises(ValueError):
        create_session("user-1", "midnight")


@pytest.mark.unit
def test_transition_returns_copy_and_stamps_terminal_states():
    start = datetime(2026, 2, 1, 8, 0)
    session = create_session("user-1", "evening", now=start)
    running = transition(session, "in_progress", now=start)
    assert session.state == "created"
    assert running.state == "in_progress"
    assert running.completed_at is None

    ended = transition(running, "abandoned", now=start + timedelta(minutes=5))
    assert ended.completed_at == start + timedelta(minutes=5)


@pytest.mark.unit
def test_record_turn_is_monotonic():
    session = transition(create_session("user-1", "morning"), "in_progress")
    first = record_turn(session)
    second = record_turn(first)
    assert (session.turn_count, first.turn_count, second.turn_count) == (0, 1, 2)


@pytest.mark.unit
def test_is_inactive_after_thirty_minutes():
    start = datetime(2026, 2, 1, 8, 0)
    session = transition(create_session("user-1", "morning", now=start), "in_progress", now=start)
    assert not is_inactive(session, start + timedelta(minutes=29))
    assert is_inactive(session, start + timedelta(minutes=30))

    done = transition(session, "abandoned", now=start)
    assert not is_inactive(done, start + timedelta(hours=2))
