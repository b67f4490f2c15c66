"""
Detects when the user confirms a proposed plan, which triggers the plan save.

Confirmation is an explicit allow-list, not sentiment analysis. Affirmative
phrasing that no pattern covers is treated as "not a confirmation".
"""

from __future__ import annotations

import re
from typing import Pattern, Tuple


# Longer replies ("Yes, but I also need to fit in X") are corrections, not
# confirmations, so only short replies are considered at all.
MAX_CONFIRMATION_LENGTH = 80

CONFIRMATION_PATTERNS: Tuple[Pattern[str], ...] = tuple(
    re.compile(pattern, re.IGNORECASE)
    for pattern in (
        r"^(yes|yep|yeah|yup|sure|ok|okay)[.!,]?$",
        r"^sounds? good[.!]?$",
        r"^looks? good[.!]?$",
        r"^that('?s| is)? (good|great|perfect|right|correct)[.!]?$",
        r"^(let'?s? )?do it[.!]?$",
        r"^(that'?s? )?the plan[.!]?$",
        r"^confirmed?[.!]?$",
        r"^(sounds?|looks?) right[.!]?$",
        r"^all good[.!]?$",
        r"^perfect[.!]?$",
        r"^(that )?works( for me)?[.!]?$",
        r"lock it in[.!]?$",
        r"^yes[,.]? .{0,40}(perfect|good|great|sounds|works)[.!]?$",
        r"^(yep|yeah)[,.]? .{0,40}(perfect|good|great|sounds|works)[.!]?$",
    )
)

CONFIRMATION_REQUEST_PHRASES: Tuple[str, ...] = (
    "sound right",
    "sounds right",
    "look right",
    "looks right",
    "does this",
    "does that",
    "sound good",
    "look good",
    "priority order feel right",
    "your top 3",
    "can you block",
    "ready to lock",
    "confirm your",
    "here's what i'd suggest",
    "what i suggest",
)


def is_confirmation(user_message: str) -> bool:
    """
    >>> is_confirmation("Sounds good")
    True
    >>> is_confirmation("Actually, can we change #2?")
    False
    """
    trimmed = (user_message or "").strip()
    if len(trimmed) >= MAX_CONFIRMATION_LENGTH:
        return False
    return any(pattern.search(trimmed) for pattern in CONFIRMATION_PATTERNS)


def is_asking_for_confirmation(assistant_message: str) -> bool:
    lowered = (assistant_message or "").lower()
    return any(phrase in lowered for phrase in CONFIRMATION_REQUEST_PHRASES)


def should_save_plan(last_user_message: str, last_assistant_message: str) -> bool:
    return is_confirmation(last_user_message) and is_asking_for_confirmation(last_assistant_message)
