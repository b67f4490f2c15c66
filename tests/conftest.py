"""Shared pytest fixtures for the coaching_engine test suite.

These fixtures provide:
* A streaming OpenAI-compatible client with queued, controllable replies
* Canonical transcripts, daily notes and foundation definitions
* Pre-wired store, model and conversation instances
"""

from __future__ import annotations

import asyncio
from datetime import date, datetime
from types import SimpleNamespace
from typing import Any, Dict, List, Optional

import pytest

from src.coaching_engine.config import EngineSettings
from src.coaching_engine.conversation import CoachingConversation
from src.coaching_engine.llm_client import StreamingChatModel
from src.coaching_engine.models import (
    ChallengeDefinition,
    ChallengeStep,
    DailyNote,
    DailyNotePlan,
    Message,
    ParkedItem,
    Top3Item,
)
from src.coaching_engine.store import InMemoryContextStore


TOP3_REPLY = (
    "Here's your plan:\n\n"
    "**Top 3:**\n"
    "1. Write technical spec (deep focus - needs 2 hours)\n"
    "2. Team standup at 10am (meeting)\n"
    "3. Clear email inbox (admin - 15 min batch)\n"
    "4. Review quarterly numbers\n\n"
    "**Admin Batch:**\n"
    "- Reply to Sam\n"
    "- Book dentist appointment\n\n"
    "Ready to lock it in?"
)


def _chunk(content: Optional[str] = None, usage: Optional[SimpleNamespace] = None) -> SimpleNamespace:
    choices = [SimpleNamespace(delta=SimpleNamespace(content=content))] if content is not None else []
    return SimpleNamespace(choices=choices, usage=usage)


class _ChunkStream:
    """Async iterator over pre-built chunks, optionally waiting on a gate first."""

    def __init__(self, chunks: List[SimpleNamespace], gate: Optional[asyncio.Event] = None) -> None:
        self._chunks = list(chunks)
        self._gate = gate

    def __aiter__(self) -> "_ChunkStream":
        return self

    async def __anext__(self) -> SimpleNamespace:
        if self._gate is not None:
            await self._gate.wait()
            self._gate = None
        if not self._chunks:
            raise StopAsyncIteration
        chunk = self._chunks.pop(0)
        if isinstance(chunk, Exception):
            raise chunk
        return chunk


class DummyStreamingClient:
    """Minimal AsyncOpenAI-compatible client for deterministic tests."""

    def __init__(self) -> None:
        self._queued: List[Any] = []
        self.calls: List[Dict[str, Any]] = []
        self.gate: Optional[asyncio.Event] = None
        self.chat = SimpleNamespace(completions=SimpleNamespace(create=self._create_completion))

    def queue_response(self, text: str, chunk_size: int = 12, usage: tuple = (1200, 300)) -> None:
        """Queue a reply that streams back in `chunk_size` pieces."""
        chunks = [_chunk(text[i : i + chunk_size]) for i in range(0, len(text), chunk_size)]
        chunks.append(_chunk(usage=SimpleNamespace(prompt_tokens=usage[0], completion_tokens=usage[1])))
        self._queued.append(chunks)

    def queue_error(self, exc: Exception) -> None:
        self._queued.append(exc)

    def queue_broken_stream(self, text: str, exc: Exception, chunk_size: int = 12) -> None:
        """Queue a reply that streams `text` and then fails with `exc`."""
        chunks: List[Any] = [_chunk(text[i : i + chunk_size]) for i in range(0, len(text), chunk_size)]
        chunks.append(exc)
        self._queued.append(chunks)

    async def _create_completion(self, **kwargs: Any) -> _ChunkStream:
        if not self._queued:
            raise AssertionError("DummyStreamingClient received a call with no queued responses.")
        self.calls.append(kwargs)
        queued = self._queued.pop(0)
        if isinstance(queued, Exception):
            raise queued
        return _ChunkStream(queued, gate=self.gate)


class FailingStore(InMemoryContextStore):
    """In-memory store whose reads and writes can be made to fail."""

    def __init__(self, fail_reads: bool = False, fail_writes: bool = False) -> None:
        super().__init__()
        self.fail_reads = fail_reads
        self.fail_writes = fail_writes

    def _maybe_fail(self, enabled: bool, operation: str) -> None:
        if enabled:
            raise ConnectionError(f"store unavailable during {operation}")

    def get_daily_note(self, user_id, note_date):
        self._maybe_fail(self.fail_reads, "get_daily_note")
        return super().get_daily_note(user_id, note_date)

    def list_parked_items(self, user_id):
        self._maybe_fail(self.fail_reads, "list_parked_items")
        return super().list_parked_items(user_id)

    def get_daily_cost(self, user_id, day):
        self._maybe_fail(self.fail_reads, "get_daily_cost")
        return super().get_daily_cost(user_id, day)

    def upsert_plan(self, user_id, note_date, plan, raw_dump=None):
        self._maybe_fail(self.fail_writes, "upsert_plan")
        super().upsert_plan(user_id, note_date, plan, raw_dump)

    def append_message(self, user_id, role, content, metadata=None):
        self._maybe_fail(self.fail_writes, "append_message")
        super().append_message(user_id, role, content, metadata)


@pytest.fixture
def make_failing_store():
    """Factory for stores whose reads and/or writes raise."""

    def _factory(fail_reads: bool = False, fail_writes: bool = False) -> FailingStore:
        return FailingStore(fail_reads=fail_reads, fail_writes=fail_writes)

    return _factory


# ---------------------------------------------------------------------------
# Mock LLM fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def top3_reply() -> str:
    """Assistant reply closing a morning check-in with a Top 3 and admin batch."""
    return TOP3_REPLY


@pytest.fixture
def mock_openai_client() -> DummyStreamingClient:
    """Provide a queued-response streaming client stand-in."""
    return DummyStreamingClient()


@pytest.fixture
def engine_settings(tmp_path) -> EngineSettings:
    return EngineSettings(openai_api_key="test-key", llm_model="mock-model", data_dir=tmp_path / "coach")


@pytest.fixture
def chat_model(engine_settings: EngineSettings, mock_openai_client: DummyStreamingClient) -> StreamingChatModel:
    return StreamingChatModel(engine_settings, client=mock_openai_client)


# ---------------------------------------------------------------------------
# Data + dataclass fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def today() -> date:
    return date(2026, 2, 1)


@pytest.fixture
def now() -> datetime:
    return datetime(2026, 2, 1, 8, 30)


@pytest.fixture
def sample_messages(top3_reply: str) -> List[Message]:
    """A complete morning check-in transcript ending in a plan proposal."""
    return [
        Message(role="user", content="I have a spec to write, standup at 10, and my inbox is a mess."),
        Message(
            role="assistant",
            content=(
                "Here's what I'm capturing:\n"
                "- Spec draft for the API\n"
                "- Standup at 10am\n"
                "- Inbox cleanup\n\n"
                "Meetings today:\n"
                "- Standup at 10am\n\n"
                "What's really weighing on you today?"
            ),
        ),
        Message(role="user", content="Honestly the spec. It's been slipping for a week. Also the inbox."),
        Message(role="assistant", content=top3_reply),
    ]


@pytest.fixture
def yesterday_note() -> DailyNote:
    """Note dated the day before `today`, with one of three items finished."""
    return DailyNote(
        user_id="user-1",
        date="2026-01-31",
        plan=DailyNotePlan(
            top3=[
                Top3Item(text="Finish pitch deck", work_type="deep_focus"),
                Top3Item(text="Call with design", work_type="meeting", completed=True),
                Top3Item(text="Expense report", work_type="admin"),
            ]
        ),
    )


@pytest.fixture
def sample_challenge() -> ChallengeDefinition:
    return ChallengeDefinition(
        id=3,
        title="The Rule of 3",
        description="Pick three outcomes for the day.",
        part_title="Part 1: Foundations",
        what_you_get="Clarity about what matters today. Less overwhelm.",
        time="5 minutes",
        energy=3,
        value=8,
        steps=(ChallengeStep(content="Write down three outcomes."), ChallengeStep(content="Review them at night.")),
        tips=("Keep outcomes small enough to finish.",),
        research_insight="Limiting goals improves follow-through.",
        citation="Bailey, The Productivity Project",
    )


@pytest.fixture
def sample_parked_items(now: datetime) -> List[ParkedItem]:
    return [
        ParkedItem(text="Redesign onboarding", parked_at=datetime(2026, 1, 22, 9, 0), reason="after launch"),
        ParkedItem(text="Learn Rust", parked_at=datetime(2026, 1, 31, 9, 0)),
        ParkedItem(text="Old idea", parked_at=datetime(2026, 1, 1, 9, 0), status="deleted"),
    ]


# ---------------------------------------------------------------------------
# Component fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def memory_store(yesterday_note: DailyNote, sample_parked_items: List[ParkedItem]) -> InMemoryContextStore:
    store = InMemoryContextStore()
    store.notes[("user-1", yesterday_note.date)] = yesterday_note
    store.parked["user-1"] = list(sample_parked_items)
    store.projects["user-1"] = ["Q1 launch"]
    return store


@pytest.fixture
def conversation(memory_store, chat_model, engine_settings, today) -> CoachingConversation:
    """
    Morning conversation wired to the in-memory store and the dummy client.

    Tests queue replies on `mock_openai_client` before calling `process_turn`.
    """
    return CoachingConversation(
        store=memory_store,
        model=chat_model,
        user_id="user-1",
        user_name="Alex",
        flow="morning",
        settings=engine_settings,
        today=today,
    )
