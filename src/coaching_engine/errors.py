"""
Exception types raised by the coaching engine.
"""

from __future__ import annotations


class CoachingEngineError(Exception):
    """Base class for every error raised by this package."""


# ---------------------------------------------------------------------------
# State errors: fatal to the requested operation, surfaced to the caller.
# ---------------------------------------------------------------------------


class InvalidTransitionError(CoachingEngineError):
    def __init__(self, from_state: str, to_state: str) -> None:
        super().__init__(f"Cannot transition from {from_state} to {to_state}")
        self.from_state = from_state
        self.to_state = to_state


class TurnLimitExceeded(CoachingEngineError):
    def __init__(self, flow: str, limit: int) -> None:
        super().__init__(f"Session exceeded {limit} turns for {flow} flow")
        self.flow = flow
        self.limit = limit


class TurnInProgressError(CoachingEngineError):
    """A new turn was submitted while the previous reply is still streaming."""

    def __init__(self, session_id: str) -> None:
        super().__init__(f"Session {session_id} already has a reply in flight")
        self.session_id = session_id


# ---------------------------------------------------------------------------
# Collaborator errors: recovered locally with a fallback response.
# ---------------------------------------------------------------------------


class ModelUnavailableError(CoachingEngineError):
    """The model collaborator could not be reached or is not configured."""


class EmptyReplyError(ModelUnavailableError):
    """The model stream finished without producing any text."""
