"""
Coaching conversation engine: session lifecycle, prompt assembly, plan
extraction from chat transcripts, and graceful fallbacks.

Exports the pieces a host application wires together.
"""

from .config import EngineSettings
from .confirmation import is_asking_for_confirmation, is_confirmation, should_save_plan
from .conversation import CoachingConversation
from .errors import (
    CoachingEngineError,
    EmptyReplyError,
    InvalidTransitionError,
    ModelUnavailableError,
    TurnInProgressError,
    TurnLimitExceeded,
)
from .extraction import extract_plan
from .fallbacks import FallbackError, get_fallback_response
from .llm_client import StreamingChatModel
from .store import ContextStore, InMemoryContextStore, JsonFileContextStore
from .system_prompt import build_system_prompt

__all__ = [
    "EngineSettings",
    "is_asking_for_confirmation",
    "is_confirmation",
    "should_save_plan",
    "CoachingConversation",
    "CoachingEngineError",
    "EmptyReplyError",
    "InvalidTransitionError",
    "ModelUnavailableError",
    "TurnInProgressError",
    "TurnLimitExceeded",
    "extract_plan",
    "FallbackError",
    "get_fallback_response",
    "StreamingChatModel",
    "ContextStore",
    "InMemoryContextStore",
    "JsonFileContextStore",
    "build_system_prompt",
]
