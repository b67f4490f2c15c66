"""
Static, phase-aware replies used when the model collaborator fails.
"""

from __future__ import annotations

from typing import Dict, Optional

from .errors import CoachingEngineError


PHASES = ("greeting", "dump", "priority", "reflect", "default")

FALLBACK_RESPONSES: Dict[str, Dict[str, str]] = {
    "morning": {
        "greeting": "Good morning! I'm having a brief connection issue. What's on your mind today?",
        "dump": (
            "I'm having trouble connecting. Go ahead and type everything on your mind, "
            "and I'll help organize it when I'm back."
        ),
        "priority": "Connection issue on my end. What are your top 3 priorities for today?",
        "reflect": "Having trouble connecting. What were your wins today?",
        "default": "Good morning! I'm having a brief connection issue. What's on your mind today?",
    },
    "evening": {
        "greeting": "Evening! I'm having a brief connection issue. How did your day go?",
        "dump": (
            "I'm having trouble connecting. Go ahead and share how the day went, "
            "and I'll help you process it when I'm back."
        ),
        "priority": "Connection issue on my end. What's carrying over to tomorrow?",
        "reflect": "Having trouble connecting. What were your wins today?",
        "default": (
            "I'm having trouble connecting right now. Take a moment to jot down what got done "
            "today and what's carrying over. We'll sync up when I'm back."
        ),
    },
    "adhoc": {
        "greeting": "Hey there! I'm having a brief connection issue. What can I help with?",
        "dump": (
            "I'm having trouble connecting. Go ahead and share what's on your mind, "
            "and I'll help when I'm back."
        ),
        "priority": "Connection issue on my end. What's the most important thing you want to tackle?",
        "reflect": "Having trouble connecting. What's on your mind?",
        "default": "I'm having trouble connecting right now. Let's pick up when I'm back online.",
    },
    "challenge_intro": {
        "greeting": (
            "I'm having a brief connection issue. Let's continue exploring this foundation "
            "when I'm back."
        ),
        "dump": (
            "I'm having trouble connecting. Go ahead and share your thoughts, "
            "and I'll help when I'm back."
        ),
        "priority": "Connection issue on my end. What part of this foundation interests you most?",
        "reflect": "Having trouble connecting. What's resonating with you about this foundation?",
        "default": (
            "I'm having trouble connecting right now. Let's continue exploring this foundation "
            "when I'm back online."
        ),
    },
}


def get_fallback_response(flow: str, phase: str) -> str:
    """
    Look up the fallback for (flow, phase). Unknown phases use the flow's
    default entry and unknown flows use the morning row.
    """
    responses = FALLBACK_RESPONSES.get(flow, FALLBACK_RESPONSES["morning"])
    return responses.get(phase, responses["default"])


def infer_phase_from_context(message_count: int, flow: str) -> str:
    """
    Guess the conversation phase from how many messages have been exchanged.
    """
    if message_count == 0:
        return "greeting"
    if flow == "evening":
        return "dump" if message_count < 3 else "reflect"
    if message_count < 2:
        return "dump"
    if message_count < 5:
        return "priority"
    return "default"


class FallbackError(CoachingEngineError):
    """
    Pairs the static fallback shown to the user with the failure behind it.

    Callers display `fallback_response` and log `cause`.
    """

    def __init__(
        self,
        message: str,
        flow: str,
        phase: str,
        cause: Optional[BaseException] = None,
    ) -> None:
        super().__init__(message)
        self.flow = flow
        self.phase = phase
        self.cause = cause
        self.fallback_response = get_fallback_response(flow, phase)
