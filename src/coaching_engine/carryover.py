"""
Carryover of yesterday's unfinished Top 3 items, plus the prompt formatting
for carryover and parked items.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import List, Optional, Sequence, Union

from .models import CarryoverItem, DailyNote, ParkedItem
from .parking_lot import days_parked


STALE_PARKED_WARNING_DAYS = 7

DateLike = Union[str, date, datetime]


def _as_date(value: DateLike) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(value[:10])


def days_between(from_date: DateLike, to_date: DateLike) -> int:
    """Whole days from `from_date` to `to_date`, never negative."""
    return max((_as_date(to_date) - _as_date(from_date)).days, 0)


def _day_label(days: int) -> str:
    return "1 day" if days == 1 else f"{days} days"


def get_carryover_items(yesterday_note: Optional[DailyNote], today: DateLike) -> List[CarryoverItem]:
    """
    Incomplete Top 3 items from yesterday's note, in their original order.

    Example:
        >>> get_carryover_items(None, "2026-02-01")
        []
    """
    if yesterday_note is None or yesterday_note.plan is None:
        return []

    elapsed = days_between(yesterday_note.date, today)
    return [
        CarryoverItem(
            text=item.text,
            work_type=item.work_type,
            original_date=yesterday_note.date,
            days_since_original=elapsed,
        )
        for item in yesterday_note.plan.top3
        if not item.completed
    ]


def format_carryover_for_prompt(items: Sequence[CarryoverItem]) -> str:
    if not items:
        return "None"
    return "\n".join(
        f"- {item.text} ({item.work_type}) - carrying over for {_day_label(item.days_since_original)}"
        for item in items
    )


def format_parked_items_for_prompt(items: Sequence[ParkedItem], now: Optional[datetime] = None) -> str:
    """
    Render parked items as prompt bullets, flagging ones parked a week or more.

    Args:
        items: Parked items, already filtered and ordered by the caller.
        now: Reference time for the "parked N days ago" labels.
    """
    if not items:
        return "None"

    reference = now or datetime.now()
    lines: List[str] = []
    for item in items:
        elapsed = days_parked(item, reference)
        if elapsed == 0:
            label = "today"
        elif elapsed == 1:
            label = "1 day ago"
        else:
            label = f"{elapsed} days ago"
        reason = f' - "{item.reason}"' if item.reason else ""
        warning = " (stale: consider reviewing)" if elapsed >= STALE_PARKED_WARNING_DAYS else ""
        lines.append(f"- {item.text} (parked {label}){reason}{warning}")
    return "\n".join(lines)


def format_yesterday_plan(note: Optional[DailyNote]) -> Optional[str]:
    """
    Yesterday's Top 3 with done/open markers, or None when there was no plan.
    """
    if note is None or note.plan is None or not note.plan.top3:
        return None
    return "\n".join(
        f"- {item.text} {'[done]' if item.completed else '[open]'}" for item in note.plan.top3
    )
