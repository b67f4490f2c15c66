"""
Daily-plan extraction from a coaching transcript.

The coach is prompted to close a morning check-in with a "Top 3" list and,
optionally, an "Admin Batch" list. This module finds the most recent of those
sections and turns them into Top3Item records, alongside the raw brain dump
and the answers to the morning probes.
"""

from __future__ import annotations

import re
from typing import Iterable, List, Optional

from .models import ExtractionResult, Message, MorningPrompts, Top3Item
from .plan_grammar import Section, find_sections
from .work_types import classify_work_type


MAX_TOP3_ITEMS = 3

_TRAILING_ANNOTATION = re.compile(r"\s*\([^)]*\)\s*$")
_WEIGHING_PROBE = re.compile(r"what's really (?:weighing|on your mind)", re.IGNORECASE)
_SENTENCE_BREAK = re.compile(r"[.!?]")


def strip_annotation(item_text: str) -> str:
    """
    Drop one trailing parenthetical such as "(deep focus - 2 hours)".
    """
    cleaned = _TRAILING_ANNOTATION.sub("", item_text).strip()
    return cleaned or item_text


def parse_top3(sections: Iterable[Section]) -> List[Top3Item]:
    for section in sections:
        items = section.numbered_items()
        if not items:
            continue
        return [
            # work type is read from the annotated line, which carries the hints
            Top3Item(text=strip_annotation(item), work_type=classify_work_type(item))
            for item in items[:MAX_TOP3_ITEMS]
        ]
    return []


def parse_admin_batch(sections: Iterable[Section]) -> List[str]:
    for section in sections:
        items = section.bullet_items()
        if items:
            return items
    return []


def _join_section(sections: List[Section]) -> Optional[str]:
    for section in sections:
        bullets = section.bullet_items()
        if bullets:
            return ", ".join(bullets)
        body = section.body().strip()
        if body:
            return body.replace("\n", ", ")
    return None


def _first_sentences(text: str, count: int = 2) -> Optional[str]:
    pieces = [piece.strip() for piece in _SENTENCE_BREAK.split(text)]
    cleaned = ". ".join(piece for piece in pieces[:count] if piece).strip()
    if not cleaned:
        return None
    return cleaned if cleaned.endswith(".") else cleaned + "."


def extract_weighing_on_me(messages: List[Message]) -> Optional[str]:
    """
    Return the user's answer to the "what's really weighing on you" probe.
    """
    for index, message in enumerate(messages):
        if message.role != "assistant" or not _WEIGHING_PROBE.search(message.content):
            continue
        for follow_up in messages[index + 1 :]:
            if follow_up.role == "user":
                answer = _first_sentences(follow_up.content)
                if answer:
                    return answer
                break
    return None


def extract_plan(messages: List[Message]) -> ExtractionResult:
    """
    Parse a transcript into the day's plan. Never raises; missing sections
    leave the corresponding fields empty.

    Args:
        messages: Full transcript in chronological order.

    Returns:
        ExtractionResult with at most three Top 3 items.
    """
    result = ExtractionResult(
        raw_dump="\n\n".join(message.content for message in messages if message.role == "user"),
    )

    assistant_messages = [message for message in messages if message.role == "assistant"]

    for message in reversed(assistant_messages):
        if not result.top3:
            result.top3 = parse_top3(find_sections(message.content, "top3"))
        if not result.admin_batch:
            result.admin_batch = parse_admin_batch(find_sections(message.content, "admin_batch"))
        if result.top3 and result.admin_batch:
            break

    prompts = MorningPrompts()
    for message in assistant_messages:
        if result.structured_summary is None:
            summary = _join_lines(find_sections(message.content, "summary"))
            if summary:
                result.structured_summary = summary
        if prompts.meetings is None:
            prompts.meetings = _join_section(find_sections(message.content, "meetings"))
        if prompts.follow_ups is None:
            prompts.follow_ups = _join_section(find_sections(message.content, "follow_ups"))
    prompts.weighing_on_me = extract_weighing_on_me(messages)
    result.morning_prompts = prompts

    return result


def _join_lines(sections: List[Section]) -> Optional[str]:
    for section in sections:
        body = section.body().strip()
        if body:
            return body
    return None
