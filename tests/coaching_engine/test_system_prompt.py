"""Unit tests for system prompt assembly and foundation nudges."""

import pytest

from src.coaching_engine.challenge_nudges import (
    format_challenge_for_prompt,
    format_values_for_prompt,
    get_challenge_intro_greeting,
    get_challenge_nudge_instructions,
    get_nudge_for_challenge,
)
from src.coaching_engine.models import (
    ActiveChallenge,
    CarryoverItem,
    CoachingContext,
    ValuesData,
)
from src.coaching_engine.system_prompt import build_challenge_intro_prompt, build_system_prompt


def _context(**overrides) -> CoachingContext:
    values = {"user_name": "Alex", "flow": "morning", "turn_number": 2, "max_turns": 15}
    values.update(overrides)
    return CoachingContext(**values)


@pytest.mark.unit
def test_prompt_is_deterministic():
    context = _context(carryover=(CarryoverItem("Deck", "deep_focus", "2026-01-31", 1),))
    assert build_system_prompt(context) == build_system_prompt(context)


@pytest.mark.unit
def test_empty_context_sections_read_none():
    prompt = build_system_prompt(_context())
    assert "## Yesterday's Plan\nNone" in prompt
    assert "## Carryover Items\nNone" in prompt
    assert "## Parking Lot (items saved for later)\nNone" in prompt
    assert "## Active Projects\nNone" in prompt
    assert "- Turn: 2/15" in prompt
    assert "Core Values" not in prompt
    assert "Active Foundation" not in prompt


@pytest.mark.unit
def test_sections_appear_in_order(sample_challenge):
    context = _context(
        completed_values=ValuesData(values=("growth", "family")),
        active_challenge=ActiveChallenge(sample_challenge, days_since_started=4),
        active_projects=("Q1 launch",),
    )
    prompt = build_system_prompt(context, persona_name="Claru")
    headings = [
        "## Role",
        "## Persona",
        "## Response Rules",
        "## Current Context",
        "## Yesterday's Plan",
        "## Carryover Items",
        "## Parking Lot",
        "## Active Projects",
        "## User's Core Values",
        "## Active Foundation",
        "## Guardrails",
        "THIS IS A MORNING CHECK-IN",
        "## Example Good Responses",
        "## Example Bad Responses",
    ]
    positions = [prompt.index(heading) for heading in headings]
    assert positions == sorted(positions)
    assert "You are Claru" in prompt
    assert "- Q1 launch" in prompt
    assert "Growth, Family" in prompt


@pytest.mark.unit
@pytest.mark.parametrize(
    "flow, block",
    [
        ("morning", "THIS IS A MORNING CHECK-IN"),
        ("evening", "THIS IS AN EVENING REFLECTION"),
        ("adhoc", "THIS IS A MORNING CHECK-IN"),
        ("challenge_intro", "THIS IS A MORNING CHECK-IN"),
    ],
)
def test_flow_block_selection(flow, block):
    prompt = build_system_prompt(_context(flow=flow))
    assert block in prompt


@pytest.mark.unit
def test_nudges_differ_by_flow(sample_challenge):
    morning = get_nudge_for_challenge(sample_challenge, "morning")
    evening = get_nudge_for_challenge(sample_challenge, "evening")
    assert morning != evening
    assert "Rule of 3" in morning
    assert "The Rule of 3" in get_nudge_for_challenge(sample_challenge, "adhoc")


@pytest.mark.unit
def test_nudge_section_limits_mentions(sample_challenge):
    fresh = get_challenge_nudge_instructions(ActiveChallenge(sample_challenge, 0), "evening")
    assert "just started" in fresh
    assert "at most 1-2 times per session" in fresh

    ongoing = get_challenge_nudge_instructions(ActiveChallenge(sample_challenge, 4), "morning")
    assert "Day 5 of this foundation" in ongoing


@pytest.mark.unit
def test_values_and_challenge_formatting(sample_challenge):
    assert "not yet identified" in format_values_for_prompt(ValuesData())
    details = format_challenge_for_prompt(sample_challenge)
    assert "Step 2: Review them at night." in details
    assert "(Source: Bailey, The Productivity Project)" in details


@pytest.mark.unit
def test_challenge_intro_prompt(sample_challenge):
    prompt = build_challenge_intro_prompt("Alex", sample_challenge, is_first_challenge=True)
    assert "first foundation" in prompt
    assert "## Foundation Details" in prompt
    assert "first foundation" in get_challenge_intro_greeting(sample_challenge, True)
    assert "Ready to start" in get_challenge_intro_greeting(sample_challenge, False)
