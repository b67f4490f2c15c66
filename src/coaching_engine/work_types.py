"""
Keyword/shape heuristics that sort a task fragment into a work type.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Pattern, Tuple


@dataclass(frozen=True)
class WorkTypeRule:
    work_type: str
    keywords: Tuple[str, ...]
    shape: Pattern[str]

    def matches(self, text: str) -> bool:
        lowered = text.lower()
        if any(keyword in lowered for keyword in self.keywords):
            return True
        return bool(self.shape.search(text))


# Evaluated top to bottom; the first matching rule wins.
WORK_TYPE_RULES: Tuple[WorkTypeRule, ...] = (
    WorkTypeRule(
        work_type="meeting",
        keywords=("meeting", "standup", "call", "sync"),
        shape=re.compile(r"\d{1,2}(:\d{2})?\s*(am|pm)", re.IGNORECASE),
    ),
    WorkTypeRule(
        work_type="admin",
        keywords=("admin", "email", "inbox", "quick", "batch", "slack"),
        shape=re.compile(r"\d+\s*min", re.IGNORECASE),
    ),
    WorkTypeRule(
        work_type="deep_focus",
        keywords=("deep focus", "focus", "write", "spec", "deck", "document"),
        shape=re.compile(r"\d+\s*hour", re.IGNORECASE),
    ),
)

# Top 3 items are the day's highest priorities, so unclassified ones are
# treated as deep work.
DEFAULT_WORK_TYPE = "deep_focus"


def classify_work_type(text: str) -> str:
    for rule in WORK_TYPE_RULES:
        if rule.matches(text):
            return rule.work_type
    return DEFAULT_WORK_TYPE
