"""
Dataclasses shared across the coaching_engine package.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional, Tuple


FLOWS = ("morning", "evening", "adhoc", "challenge_intro")
SESSION_STATES = ("created", "in_progress", "plan_confirmed", "completed", "abandoned")
MESSAGE_ROLES = ("user", "assistant", "system")
WORK_TYPES = ("deep_focus", "admin", "meeting")
PARKED_STATUSES = ("parked", "under_review", "reactivated", "deleted")


def _new_id() -> str:
    return str(uuid.uuid4())


@dataclass(frozen=True)
class Message:
    """
    A single chat message. Finalized messages are never mutated.
    """

    role: str  # "user", "assistant" or "system"
    content: str
    id: str = field(default_factory=_new_id)
    created_at: datetime = field(default_factory=datetime.now)

    def to_chat(self) -> Dict[str, str]:
        return {"role": self.role, "content": self.content}


@dataclass(frozen=True)
class CoachingSession:
    """
    One coaching session. State changes go through session_state, which
    returns updated copies instead of mutating in place.
    """

    user_id: str
    flow: str
    state: str = "created"
    turn_count: int = 0
    id: str = field(default_factory=_new_id)
    started_at: datetime = field(default_factory=datetime.now)
    completed_at: Optional[datetime] = None
    last_activity_at: Optional[datetime] = None


@dataclass
class Top3Item:
    """
    One of the day's (at most three) priorities.
    """

    text: str
    work_type: str = "deep_focus"
    completed: bool = False
    completed_at: Optional[datetime] = None

    def to_dict(self) -> Dict[str, object]:
        return {
            "text": self.text,
            "work_type": self.work_type,
            "completed": self.completed,
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
        }

    @classmethod
    def from_dict(cls, payload: Dict[str, object]) -> "Top3Item":
        completed_at = payload.get("completed_at")
        return cls(
            text=str(payload.get("text", "")),
            work_type=str(payload.get("work_type") or "deep_focus"),
            completed=bool(payload.get("completed", False)),
            completed_at=datetime.fromisoformat(completed_at) if completed_at else None,
        )


@dataclass
class FocusBlock:
    start: str  # HH:MM
    end: str  # HH:MM


@dataclass
class DailyNotePlan:
    """
    The plan portion of a daily note.
    """

    top3: List[Top3Item] = field(default_factory=list)
    admin_batch: List[str] = field(default_factory=list)
    focus_block: Optional[FocusBlock] = None

    def to_dict(self) -> Dict[str, object]:
        return {
            "top3": [item.to_dict() for item in self.top3],
            "admin_batch": list(self.admin_batch),
            "focus_block": (
                {"start": self.focus_block.start, "end": self.focus_block.end}
                if self.focus_block
                else None
            ),
        }

    @classmethod
    def from_dict(cls, payload: Dict[str, object]) -> "DailyNotePlan":
        block = payload.get("focus_block") or None
        return cls(
            top3=[Top3Item.from_dict(item) for item in payload.get("top3") or []][:3],
            admin_batch=list(payload.get("admin_batch") or []),
            focus_block=FocusBlock(start=block["start"], end=block["end"]) if block else None,
        )


@dataclass
class DailyNote:
    """
    A user's note for one calendar day (date is YYYY-MM-DD).
    """

    user_id: str
    date: str
    plan: Optional[DailyNotePlan] = None
    raw_dump: Optional[str] = None
    id: str = field(default_factory=_new_id)
    created_at: datetime = field(default_factory=datetime.now)


@dataclass(frozen=True)
class CarryoverItem:
    """
    Yesterday's incomplete Top 3 item, recomputed at every session start.
    """

    text: str
    work_type: str
    original_date: str
    days_since_original: int


@dataclass
class ParkedItem:
    """
    A task deliberately deferred out of today's plan.
    """

    text: str
    parked_at: datetime
    reason: Optional[str] = None
    status: str = "parked"
    last_reviewed_at: Optional[datetime] = None
    id: str = field(default_factory=_new_id)


@dataclass(frozen=True)
class ChallengeStep:
    content: str
    title: Optional[str] = None


@dataclass(frozen=True)
class ChallengeDefinition:
    """
    Static definition of a foundation (challenge). Supplied by the caller.
    """

    id: int
    title: str
    description: str
    part_title: str
    what_you_get: str
    time: str = ""
    energy: int = 5
    value: int = 5
    steps: Tuple[ChallengeStep, ...] = ()
    tips: Tuple[str, ...] = ()
    research_insight: Optional[str] = None
    actionable_tip: Optional[str] = None
    citation: Optional[str] = None


@dataclass(frozen=True)
class ActiveChallenge:
    challenge: ChallengeDefinition
    days_since_started: int = 0


@dataclass(frozen=True)
class ValuesData:
    """
    Output of the Values foundation: the user's named core values.
    """

    values: Tuple[str, ...] = ()
    steps_completed: Tuple[int, ...] = ()


@dataclass(frozen=True)
class CoachingContext:
    """
    Read model handed to the prompt builder. Built once per turn, never stored.
    """

    user_name: str
    flow: str
    turn_number: int
    max_turns: int
    yesterday_plan_summary: Optional[str] = None
    carryover: Tuple[CarryoverItem, ...] = ()
    parked_summary: Optional[str] = None
    active_projects: Tuple[str, ...] = ()
    active_challenge: Optional[ActiveChallenge] = None
    completed_values: Optional[ValuesData] = None


@dataclass
class MorningPrompts:
    """
    Answers to the morning check-in probes, when the transcript contains them.
    """

    weighing_on_me: Optional[str] = None
    meetings: Optional[str] = None
    follow_ups: Optional[str] = None


@dataclass
class ExtractionResult:
    """
    Structured plan parsed out of a coaching transcript.
    """

    top3: List[Top3Item] = field(default_factory=list)
    admin_batch: List[str] = field(default_factory=list)
    raw_dump: str = ""
    morning_prompts: MorningPrompts = field(default_factory=MorningPrompts)
    structured_summary: Optional[str] = None

    def to_plan(self) -> DailyNotePlan:
        return DailyNotePlan(top3=list(self.top3[:3]), admin_batch=list(self.admin_batch))


@dataclass(frozen=True)
class UsageLogEntry:
    user_id: str
    model: str
    tokens_in: int
    tokens_out: int
    cost_usd: float
    latency_ms: int
    session_id: Optional[str] = None
    created_at: datetime = field(default_factory=datetime.now)
