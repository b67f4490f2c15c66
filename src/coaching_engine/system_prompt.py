"""
Builds the system prompt handed to the model collaborator.

`build_system_prompt` is pure: the same CoachingContext always produces the
same string. Everything it needs (carryover, parked items, challenge state)
arrives pre-resolved in the context.
"""

from __future__ import annotations

from typing import List

from .carryover import format_carryover_for_prompt
from .challenge_nudges import (
    format_challenge_for_prompt,
    format_values_for_prompt,
    get_challenge_nudge_instructions,
)
from .models import ChallengeDefinition, CoachingContext
from .prompts import (
    BAD_EXAMPLES,
    CHALLENGE_INTRO_FLOW,
    EVENING_FLOW,
    GOOD_EXAMPLES,
    GUARDRAILS,
    MORNING_FLOW,
    PERSONA,
    PROJECTS_GUIDANCE,
    RESPONSE_RULES,
)


DEFAULT_PERSONA_NAME = "Claru"


def _bullets(items) -> str:
    return "\n".join(f"- {item}" for item in items) if items else "None"


def flow_instructions(flow: str) -> str:
    # adhoc and challenge_intro sessions fall back to the morning structure
    return EVENING_FLOW if flow == "evening" else MORNING_FLOW


def build_system_prompt(context: CoachingContext, persona_name: str = DEFAULT_PERSONA_NAME) -> str:
    """
    Assemble the coaching system prompt.

    Sections, in order: role, persona, response rules, current context,
    yesterday's plan, carryover, parking lot, active projects, core values
    (optional), active foundation (optional), guardrails, flow instructions,
    good and bad example responses.
    """
    sections: List[str] = [
        f"## Role\nYou are {persona_name}, an AI productivity coach.",
        f"## Persona\n{PERSONA}",
        f"## Response Rules\n{RESPONSE_RULES}",
        (
            "## Current Context\n"
            f"- User: {context.user_name}\n"
            f"- Flow: {context.flow} check-in\n"
            f"- Turn: {context.turn_number}/{context.max_turns}"
        ),
        f"## Yesterday's Plan\n{context.yesterday_plan_summary or 'None'}",
        f"## Carryover Items\n{format_carryover_for_prompt(context.carryover)}",
        f"## Parking Lot (items saved for later)\n{context.parked_summary or 'None'}",
        f"## Active Projects\n{_bullets(context.active_projects)}\n{PROJECTS_GUIDANCE}",
    ]

    if context.completed_values is not None:
        sections.append(f"## User's Core Values\n{format_values_for_prompt(context.completed_values)}")

    if context.active_challenge is not None:
        sections.append(get_challenge_nudge_instructions(context.active_challenge, context.flow))

    sections.extend(
        [
            f"## Guardrails\n{GUARDRAILS}",
            flow_instructions(context.flow),
            f"## Example Good Responses\n{GOOD_EXAMPLES}",
            f"## Example Bad Responses (NEVER do these)\n{BAD_EXAMPLES}",
        ]
    )
    return "\n\n".join(sections)


def build_challenge_intro_prompt(
    user_name: str,
    challenge: ChallengeDefinition,
    is_first_challenge: bool,
    persona_name: str = DEFAULT_PERSONA_NAME,
) -> str:
    """
    System prompt for the challenge_intro flow, which walks the user through
    starting a foundation instead of planning their day.
    """
    if is_first_challenge:
        experience = (
            "This is the user's first foundation. Be extra welcoming and explain what foundations "
            "are: 22 evidence-based productivity practices, designed as small experiments."
        )
    else:
        experience = "The user has done foundations before. Keep the intro brief."

    sections = [
        f"## Role\nYou are {persona_name}, an AI productivity coach helping the user start a new foundation.",
        f"## Persona\n{PERSONA}",
        f"## Current Context\n- User: {user_name}\n- {experience}",
        f"## Foundation Details\n{format_challenge_for_prompt(challenge)}",
        f"## Guardrails\n{GUARDRAILS}",
        CHALLENGE_INTRO_FLOW,
    ]
    return "\n\n".join(sections)
