"""
Parking-lot lifecycle: parked -> under_review -> reactivated | parked | deleted.
"""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from typing import List, Optional, Sequence

from .errors import InvalidTransitionError
from .models import ParkedItem
from .transitions import TransitionTable


PARKED_TRANSITIONS = TransitionTable(
    {
        "parked": ["under_review"],
        "under_review": ["reactivated", "parked", "deleted"],
        "reactivated": [],
        "deleted": [],
    }
)

PARKING_LOT_LIMIT = 50
STALE_THRESHOLD_DAYS = 30


def can_transition(from_status: str, to_status: str) -> bool:
    return PARKED_TRANSITIONS.can_transition(from_status, to_status)


def park_item(text: str, reason: Optional[str] = None, now: Optional[datetime] = None) -> ParkedItem:
    return ParkedItem(text=text, reason=reason, parked_at=now or datetime.now())


def transition_parked_item(item: ParkedItem, to_status: str, now: Optional[datetime] = None) -> ParkedItem:
    """
    Move a parked item along its lifecycle. Leaving review stamps last_reviewed_at.

    Raises:
        InvalidTransitionError: the transition is not in PARKED_TRANSITIONS.
    """
    if not can_transition(item.status, to_status):
        raise InvalidTransitionError(item.status, to_status)
    reviewed_at = item.last_reviewed_at
    if item.status == "under_review":
        reviewed_at = now or datetime.now()
    return replace(item, status=to_status, last_reviewed_at=reviewed_at)


def days_parked(item: ParkedItem, now: Optional[datetime] = None) -> int:
    return max(((now or datetime.now()) - item.parked_at).days, 0)


def is_stale(item: ParkedItem, now: Optional[datetime] = None) -> bool:
    """Not reviewed (or, failing that, parked) for more than STALE_THRESHOLD_DAYS."""
    reference = item.last_reviewed_at or item.parked_at
    return ((now or datetime.now()) - reference).days > STALE_THRESHOLD_DAYS


def format_days_parked_label(days: int) -> str:
    if days == 0:
        return "parked today"
    if days == 1:
        return "parked yesterday"
    if days < 7:
        return f"parked {days} days ago"
    if days < 14:
        return "parked 1 week ago"
    if days < 30:
        return f"parked {days // 7} weeks ago"
    months = days // 30
    return f"parked {months} month{'s' if months > 1 else ''} ago"


def sort_by_parked_date(items: Sequence[ParkedItem]) -> List[ParkedItem]:
    """Newest first."""
    return sorted(items, key=lambda item: item.parked_at, reverse=True)


def filter_by_status(items: Sequence[ParkedItem], status: str) -> List[ParkedItem]:
    return [item for item in items if item.status == status]


def get_stale_items(items: Sequence[ParkedItem], now: Optional[datetime] = None) -> List[ParkedItem]:
    return [item for item in items if is_stale(item, now)]


def is_at_capacity(current_count: int) -> bool:
    return current_count >= PARKING_LOT_LIMIT
