"""
One coaching session end to end: state machine, prompt, model stream,
fallback substitution, plan detection and fire-and-forget persistence.
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Callable, List, Optional, Set

from .challenge_nudges import get_challenge_intro_greeting
from .config import EngineSettings
from .confirmation import should_save_plan
from .context_loader import for_turn, load_coaching_context, safe_read
from .errors import TurnInProgressError
from .extraction import extract_plan
from .fallbacks import FallbackError, get_fallback_response, infer_phase_from_context
from .llm_client import StreamingChatModel
from .models import CarryoverItem, ChallengeDefinition, CoachingContext, ExtractionResult, Message
from .session_state import create_session, is_inactive, record_turn, transition, validate_transition
from .store import ContextStore
from .system_prompt import build_challenge_intro_prompt, build_system_prompt
from .usage import create_usage_log_entry, is_over_daily_limit


logger = logging.getLogger(__name__)

OPENING_LINES = {
    "morning": "Good morning! What's on your mind today?",
    "evening": "Evening! How did your day go?",
    "adhoc": "Hey! What can I help with?",
}


async def _wait_for(task: Optional[asyncio.Task]) -> None:
    if task is not None and not task.done():
        await asyncio.wait({task})


@dataclass
class InFlightReply:
    """
    The single assistant message that may still grow while the model streams.
    """

    chunks: List[str] = field(default_factory=list)

    @property
    def content(self) -> str:
        return "".join(self.chunks)

    def append(self, chunk: str) -> None:
        self.chunks.append(chunk)

    def replace(self, text: str) -> None:
        self.chunks = [text]

    def finalize(self) -> Message:
        return Message(role="assistant", content=self.content)


class CoachingConversation:
    """
    Drives a single session through strictly sequential turns.

    Store writes are scheduled as tasks that run in order on worker threads.
    They never block or fail a turn; `flush()` waits for the ones still pending.
    """

    def __init__(
        self,
        store: ContextStore,
        model: StreamingChatModel,
        user_id: str,
        user_name: str,
        flow: str = "morning",
        settings: Optional[EngineSettings] = None,
        challenge: Optional[ChallengeDefinition] = None,
        is_first_challenge: bool = False,
        today: Optional[date] = None,
    ) -> None:
        self.store = store
        self.model = model
        self.user_name = user_name
        self.settings = settings or model.settings
        self.challenge = challenge
        self.is_first_challenge = is_first_challenge
        self.today = today

        self.session = create_session(user_id, flow)
        self.messages: List[Message] = []
        self.context: Optional[CoachingContext] = None
        self.carryover: List[CarryoverItem] = []
        self.in_flight: Optional[InFlightReply] = None
        self.last_extraction: Optional[ExtractionResult] = None
        self._pending_writes: Set[asyncio.Task] = set()
        self._write_tail: Optional[asyncio.Task] = None
        self._last_reply_was_fallback = False

    @property
    def user_id(self) -> str:
        return self.session.user_id

    @property
    def flow(self) -> str:
        return self.session.flow

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self, now: Optional[datetime] = None) -> CoachingContext:
        """
        Move the session to in_progress and load its context. Carryover is
        computed here and nowhere else.
        """
        now = now or datetime.now()
        self.session = transition(self.session, "in_progress", now)
        self.context, self.carryover = load_coaching_context(
            self.store,
            self.session,
            self.user_name,
            today=self.today or now.date(),
            now=now,
        )
        return self.context

    def initial_greeting(self) -> str:
        if self.flow == "challenge_intro" and self.challenge is not None:
            return get_challenge_intro_greeting(self.challenge, self.is_first_challenge)
        return OPENING_LINES.get(self.flow, OPENING_LINES["morning"])

    def complete(self, now: Optional[datetime] = None) -> None:
        self.session = transition(self.session, "completed", now)

    def abandon(self, now: Optional[datetime] = None) -> None:
        self.session = transition(self.session, "abandoned", now)

    def abandon_if_inactive(self, now: Optional[datetime] = None) -> bool:
        now = now or datetime.now()
        if not is_inactive(self.session, now):
            return False
        logger.info("Abandoning inactive session %s (user_id=%s)", self.session.id, self.user_id)
        self.abandon(now)
        return True

    # ------------------------------------------------------------------
    # Turns
    # ------------------------------------------------------------------

    async def process_turn(self, user_input: str, now: Optional[datetime] = None) -> str:
        """
        Run one user turn and return the assistant reply.

        Raises:
            TurnInProgressError: a previous reply is still streaming.
            InvalidTransitionError: the session no longer accepts turns.
            TurnLimitExceeded: the flow's turn limit is reached and this turn
                does not confirm a plan.
        """
        if self.in_flight is not None:
            raise TurnInProgressError(self.session.id)

        if self.session.state == "created":
            self.start(now)
        now = now or datetime.now()

        # A static fallback may itself read like a confirmation request.
        confirming = not self._last_reply_was_fallback and should_save_plan(
            user_input, self._last_assistant_text()
        )
        validate_transition(self.session, "plan_confirmed" if confirming else "in_progress")

        self.messages.append(Message(role="user", content=user_input, created_at=now))
        self._persist(
            "append_message",
            lambda: self.store.append_message(self.user_id, "user", user_input, {"session_id": self.session.id}),
        )

        self.in_flight = InFlightReply()
        try:
            self._last_reply_was_fallback = await self._generate_reply(self.in_flight)
            reply = self.in_flight.finalize()
        finally:
            self.in_flight = None

        self.messages.append(reply)
        self._persist(
            "append_message",
            lambda: self.store.append_message(
                self.user_id, "assistant", reply.content, {"session_id": self.session.id}
            ),
        )
        self.session = record_turn(self.session, now)

        if confirming and self._save_plan(now):
            self.session = transition(self.session, "plan_confirmed", now)

        return reply.content

    async def _generate_reply(self, reply: InFlightReply) -> bool:
        """Fill `reply` from the model, or with a fallback. Returns True for a fallback."""
        if await self._over_daily_limit():
            logger.warning("Daily cost limit reached for user_id=%s; using fallback", self.user_id)
            reply.replace(get_fallback_response(self.flow, "default"))
            return True

        system_prompt = self._system_prompt()
        started = time.monotonic()
        try:
            async for chunk in self.model.stream_reply(system_prompt, self.messages):
                reply.append(chunk)
        except Exception as exc:
            phase = infer_phase_from_context(len(self.messages), self.flow)
            error = FallbackError("Model reply failed", self.flow, phase, cause=exc)
            logger.warning(
                "%s for user_id=%s (flow=%s, phase=%s): %r", error, self.user_id, self.flow, phase, exc
            )
            reply.replace(error.fallback_response)
            return True

        self._log_usage(int((time.monotonic() - started) * 1000))
        return False

    def _system_prompt(self) -> str:
        persona = self.settings.persona_name
        if self.flow == "challenge_intro" and self.challenge is not None:
            return build_challenge_intro_prompt(
                self.user_name, self.challenge, self.is_first_challenge, persona_name=persona
            )
        return build_system_prompt(for_turn(self.context, self.session), persona_name=persona)

    def _last_assistant_text(self) -> str:
        for message in reversed(self.messages):
            if message.role == "assistant":
                return message.content
        return ""

    def _today(self, now: Optional[datetime] = None) -> str:
        if self.today is not None:
            return self.today.isoformat()
        return (now or datetime.now()).date().isoformat()

    async def _over_daily_limit(self) -> bool:
        day = self._today()
        await _wait_for(self._write_tail)
        spent = await asyncio.to_thread(
            safe_read, "get_daily_cost", self.user_id, lambda: self.store.get_daily_cost(self.user_id, day), 0.0
        )
        return is_over_daily_limit(spent, self.settings.max_daily_cost_usd)

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def _save_plan(self, now: datetime) -> bool:
        result = extract_plan(self.messages)
        self.last_extraction = result
        if not result.top3:
            logger.warning("Confirmation without a Top 3 for user_id=%s; nothing saved", self.user_id)
            return False
        day = self._today(now)
        logger.info(
            "Plan confirmed for user_id=%s: %d top 3, %d admin",
            self.user_id,
            len(result.top3),
            len(result.admin_batch),
        )
        self._persist(
            "upsert_plan",
            lambda: self.store.upsert_plan(self.user_id, day, result.to_plan(), raw_dump=result.raw_dump),
        )
        return True

    def _log_usage(self, latency_ms: int) -> None:
        if self.model.last_usage is None:
            return
        tokens_in, tokens_out = self.model.last_usage
        entry = create_usage_log_entry(
            user_id=self.user_id,
            model=self.model.model,
            tokens_in=tokens_in,
            tokens_out=tokens_out,
            latency_ms=latency_ms,
            session_id=self.session.id,
            input_cost_per_million=self.settings.input_cost_per_million,
            output_cost_per_million=self.settings.output_cost_per_million,
        )
        self._persist("log_usage", lambda: self.store.log_usage(entry))

    def _persist(self, operation: str, write: Callable[[], None]) -> None:
        task = asyncio.ensure_future(self._run_write(operation, write, self._write_tail))
        self._write_tail = task
        self._pending_writes.add(task)
        task.add_done_callback(self._pending_writes.discard)

    async def _run_write(
        self, operation: str, write: Callable[[], None], previous: Optional[asyncio.Task]
    ) -> None:
        # Writes run one at a time, in order, off the event loop.
        await _wait_for(previous)
        try:
            await asyncio.to_thread(write)
        except Exception:
            logger.exception("Store write failed (user_id=%s, operation=%s)", self.user_id, operation)

    async def flush(self) -> None:
        """Wait for every scheduled store write to finish."""
        while self._pending_writes:
            await asyncio.gather(*list(self._pending_writes))
