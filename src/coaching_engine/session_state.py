"""
Session lifecycle: created -> in_progress -> plan_confirmed -> completed,
with in_progress -> abandoned for timeouts.

The machine is purely reactive. Timeouts are applied by whoever calls
`is_inactive` and then requests the abandoned transition.
"""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timedelta
from typing import Dict, Optional

from .errors import InvalidTransitionError, TurnLimitExceeded
from .models import FLOWS, CoachingSession
from .transitions import TransitionTable


SESSION_TRANSITIONS = TransitionTable(
    {
        "created": ["in_progress"],
        # the self-loop is "one more turn before a plan is confirmed"
        "in_progress": ["in_progress", "plan_confirmed", "abandoned"],
        "plan_confirmed": ["completed"],
        "completed": [],
        "abandoned": [],
    }
)

TURN_LIMITS: Dict[str, int] = {
    "morning": 15,
    "evening": 10,
    "adhoc": 10,
    "challenge_intro": 15,
}

SESSION_TIMEOUT = timedelta(minutes=30)


def can_transition(from_state: str, to_state: str) -> bool:
    return SESSION_TRANSITIONS.can_transition(from_state, to_state)


def turn_limit_for(flow: str) -> int:
    return TURN_LIMITS[flow]


def validate_transition(session: CoachingSession, to_state: str) -> None:
    """
    Raise if `session` may not move to `to_state`.

    Raises:
        InvalidTransitionError: the table has no such edge.
        TurnLimitExceeded: the in_progress self-loop is requested at or past
            the flow's turn limit.
    """
    if not can_transition(session.state, to_state):
        raise InvalidTransitionError(session.state, to_state)

    if session.state == "in_progress" and to_state == "in_progress":
        limit = TURN_LIMITS[session.flow]
        if session.turn_count >= limit:
            raise TurnLimitExceeded(session.flow, limit)


def create_session(user_id: str, flow: str, now: Optional[datetime] = None) -> CoachingSession:
    if flow not in FLOWS:
        raise ValueError(f"Unknown flow: {flow!r}")
    started = now or datetime.now()
    return CoachingSession(user_id=user_id, flow=flow, started_at=started, last_activity_at=started)


def transition(
    session: CoachingSession,
    to_state: str,
    now: Optional[datetime] = None,
) -> CoachingSession:
    """
    Validate and apply a transition, returning the updated session.
    """
    validate_transition(session, to_state)
    stamp = now or datetime.now()
    completed_at = stamp if SESSION_TRANSITIONS.is_terminal(to_state) else session.completed_at
    return replace(session, state=to_state, completed_at=completed_at, last_activity_at=stamp)


def record_turn(session: CoachingSession, now: Optional[datetime] = None) -> CoachingSession:
    return replace(
        session,
        turn_count=session.turn_count + 1,
        last_activity_at=now or datetime.now(),
    )


def is_inactive(session: CoachingSession, now: datetime, timeout: timedelta = SESSION_TIMEOUT) -> bool:
    """True when an in-progress session has been idle for at least `timeout`."""
    if session.state != "in_progress":
        return False
    last_seen = session.last_activity_at or session.started_at
    return now - last_seen >= timeout
