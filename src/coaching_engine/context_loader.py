"""
Pulls everything the prompt builder needs out of the store and resolves it
into an immutable CoachingContext.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date, datetime, timedelta
from typing import Callable, List, Optional, Tuple, TypeVar

from .carryover import format_parked_items_for_prompt, format_yesterday_plan, get_carryover_items
from .models import CarryoverItem, CoachingContext, CoachingSession
from .parking_lot import filter_by_status, sort_by_parked_date
from .session_state import turn_limit_for
from .store import ContextStore


logger = logging.getLogger(__name__)

MAX_PARKED_IN_PROMPT = 10

T = TypeVar("T")


def safe_read(operation: str, user_id: str, read: Callable[[], T], default: T) -> T:
    try:
        return read()
    except Exception:
        logger.exception("Store read failed (user_id=%s, operation=%s)", user_id, operation)
        return default


def load_coaching_context(
    store: ContextStore,
    session: CoachingSession,
    user_name: str,
    today: Optional[date] = None,
    now: Optional[datetime] = None,
) -> Tuple[CoachingContext, List[CarryoverItem]]:
    """
    Build the context for a session and compute carryover once.

    Any slice the store fails to provide is logged and left empty; the
    conversation continues with whatever could be read.

    Returns:
        The context (turn number set from the session) and the carryover
        items it embeds.
    """
    now = now or datetime.now()
    today = today or now.date()
    user_id = session.user_id
    yesterday = (today - timedelta(days=1)).isoformat()

    yesterday_note = safe_read(
        "get_daily_note", user_id, lambda: store.get_daily_note(user_id, yesterday), None
    )
    carryover = get_carryover_items(yesterday_note, today)

    parked = safe_read("list_parked_items", user_id, lambda: store.list_parked_items(user_id), [])
    parked = sort_by_parked_date(filter_by_status(parked, "parked"))[:MAX_PARKED_IN_PROMPT]

    projects = safe_read("list_active_projects", user_id, lambda: store.list_active_projects(user_id), [])
    active_challenge = safe_read(
        "get_active_challenge", user_id, lambda: store.get_active_challenge(user_id), None
    )
    values = safe_read("get_completed_values", user_id, lambda: store.get_completed_values(user_id), None)

    context = CoachingContext(
        user_name=user_name,
        flow=session.flow,
        turn_number=session.turn_count + 1,
        max_turns=turn_limit_for(session.flow),
        yesterday_plan_summary=format_yesterday_plan(yesterday_note),
        carryover=tuple(carryover),
        parked_summary=format_parked_items_for_prompt(parked, now) if parked else None,
        active_projects=tuple(projects),
        active_challenge=active_challenge,
        completed_values=values,
    )
    return context, carryover


def for_turn(context: CoachingContext, session: CoachingSession) -> CoachingContext:
    """Copy of `context` with the turn counter matching `session`."""
    return replace(context, turn_number=session.turn_count + 1)
