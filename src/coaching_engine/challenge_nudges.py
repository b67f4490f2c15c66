"""
Foundation (challenge) context woven into check-ins, plus the values summary.

Nudges keep an active foundation in view without turning every check-in into
a reminder: the prompt tells the coach to mention it at most once or twice.
"""

from __future__ import annotations

from typing import Dict, List

from .models import ActiveChallenge, ChallengeDefinition, ValuesData


# Per-foundation nudges keyed by foundation id. "{title}" is filled in later.
CHALLENGE_NUDGES: Dict[int, Dict[str, str]] = {
    1: {
        "morning": 'Ask if their Top 3 connects to the values they identified in "{title}".',
        "evening": 'When reviewing wins, ask if any connected to the values from "{title}".',
    },
    2: {
        "morning": 'When setting the Top 3, remind them of the high-impact work they named in "{title}".',
        "evening": "Ask if they spent time on their highest-impact tasks today.",
    },
    3: {
        "morning": 'They are practicing the Rule of 3. Reinforce it: "What are your Top 3 for today?"',
        "evening": "Ask whether focusing on just 3 things helped today.",
    },
    4: {
        "morning": 'If they know their prime time, ask what they will protect it for today.',
        "evening": "Ask if they tracked their energy today and what they noticed.",
    },
    5: {
        "morning": 'If they mention a dreaded task, use the "{title}" framing: what makes it aversive, and can it be flipped?',
        "evening": "Ask if they noticed any procrastination triggers today and how they handled them.",
    },
    7: {
        "morning": "Ask if they can schedule 30 minutes of offline focus time today.",
        "evening": "Ask if they had any offline focus time and how it felt.",
    },
    13: {
        "morning": "The brain dump IS this foundation. Acknowledge that getting it out of their head is the practice.",
        "evening": "Ask if anything is still lingering that needs capturing.",
    },
    17: {
        "morning": "Ask which task they will single-task on during focus time.",
        "evening": "Ask how single-tasking went and how they refocused when their mind wandered.",
    },
    18: {
        "morning": "Ask if they have done (or will do) their 5 minutes today.",
        "evening": "Check in on their meditation streak.",
    },
}

DEFAULT_NUDGES = {
    "morning": 'They are working on "{title}". If it fits their Top 3 or today\'s focus, mention it naturally.',
    "evening": 'They are working on "{title}". If it fits their reflection, ask about progress or insights.',
}

ADHOC_NUDGE = 'They are working on "{title}". Weave it in if it is relevant to the conversation.'

FLOW_GUIDANCE = {
    "morning": "When helping them set their Top 3, look for natural connections to this foundation.",
    "evening": (
        "When they reflect on their day, ask if they made progress or had insights "
        "related to this foundation."
    ),
}
DEFAULT_FLOW_GUIDANCE = "If the conversation touches on this foundation, connect the dots."


def _day_number(days_since_started: int) -> int:
    return max(days_since_started, 0) + 1


def get_nudge_for_challenge(challenge: ChallengeDefinition, flow: str) -> str:
    if flow not in ("morning", "evening"):
        return ADHOC_NUDGE.format(title=challenge.title)
    nudges = CHALLENGE_NUDGES.get(challenge.id, DEFAULT_NUDGES)
    return nudges[flow].format(title=challenge.title)


def get_challenge_nudge_instructions(active: ActiveChallenge, flow: str) -> str:
    """
    The "Active Foundation" prompt section for a user mid-foundation.
    """
    challenge = active.challenge
    if active.days_since_started <= 1:
        progress_note = "They just started this foundation. Acknowledge it warmly but don't dwell on it."
    else:
        progress_note = (
            f"Day {_day_number(active.days_since_started)} of this foundation. "
            "They've been at it for a bit."
        )

    lines = [
        "## Active Foundation",
        "",
        f'The user has an active foundation: "{challenge.title}"',
        progress_note,
        "",
        "### How to Integrate (Naturally)",
        "",
        get_nudge_for_challenge(challenge, flow),
        "",
        FLOW_GUIDANCE.get(flow, DEFAULT_FLOW_GUIDANCE),
        "",
        "### Critical Rules",
        "",
        "- DON'T force it. If it doesn't fit the conversation, leave it out.",
        "- DON'T ask about the foundation every turn. Mention it at most 1-2 times per session.",
        "- DON'T make them feel guilty if they haven't worked on it.",
        "- DO connect their daily work to the foundation when it is relevant.",
    ]
    return "\n".join(lines)


def format_values_for_prompt(values: ValuesData) -> str:
    if not values.values:
        return "The user has not yet identified their core values."
    names = ", ".join(value[:1].upper() + value[1:] for value in values.values)
    return (
        f"The user has identified these core values: {names}.\n\n"
        "When discussing their priorities or Top 3, look for connections to these values."
    )


def format_challenge_for_prompt(challenge: ChallengeDefinition) -> str:
    """
    Full foundation details for the introduction flow.
    """
    lines: List[str] = [
        f"## {challenge.title}",
        f"*{challenge.description}*",
        "",
        f"- Time required: {challenge.time}",
        f"- Energy: {challenge.energy}/10",
        f"- Value: {challenge.value}/10",
        "",
        "### What You Will Get",
        challenge.what_you_get,
        "",
        "### Steps",
    ]
    lines.extend(f"Step {index}: {step.content}" for index, step in enumerate(challenge.steps, start=1))

    if challenge.tips:
        lines.extend(["", "### Tips:"])
        lines.extend(f"- {tip}" for tip in challenge.tips)

    if challenge.research_insight:
        lines.extend(["", "### Research Insight:", challenge.research_insight])
        if challenge.citation:
            lines.append(f"(Source: {challenge.citation})")

    if challenge.actionable_tip:
        lines.extend(["", "### Pro Tip:", challenge.actionable_tip])

    return "\n".join(lines)


def get_challenge_intro_greeting(challenge: ChallengeDefinition, is_first_challenge: bool) -> str:
    if is_first_challenge:
        return (
            f'Let\'s start your first foundation: "{challenge.title}". It\'s one of 22 '
            "evidence-based practices for sustainable productivity. No pressure, just exploration."
        )
    return f'Ready to start "{challenge.title}"? Let\'s walk through it together.'
