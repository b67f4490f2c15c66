"""
Streaming chat-completion collaborator backed by the OpenAI async client.
"""

from __future__ import annotations

import logging
from typing import Any, AsyncIterator, Dict, List, Optional, Sequence, Tuple

from openai import AsyncOpenAI

from .config import EngineSettings
from .errors import EmptyReplyError, ModelUnavailableError
from .models import Message


logger = logging.getLogger(__name__)


class StreamingChatModel:
    """
    Sends `{system_prompt, messages}` to the model and yields the reply as
    text chunks. Does not retry; the conversation substitutes a fallback
    when anything here raises.
    """

    def __init__(self, settings: Optional[EngineSettings] = None, client: Optional[Any] = None) -> None:
        self.settings = settings or EngineSettings.from_env()
        self.model = self.settings.llm_model
        self.last_usage: Optional[Tuple[int, int]] = None
        self.client: Optional[Any] = client
        if self.client is None:
            self._init_llm()

    def _init_llm(self) -> None:
        api_key = self.settings.openai_api_key
        try:
            if not api_key:
                raise ValueError("OPENAI_API_KEY environment variable not set")
            self.client = AsyncOpenAI(api_key=api_key)
        except Exception as exc:
            self.client = None
            logger.warning("Failed to initialize OpenAI client (%s); replies will use fallbacks", exc)

    @property
    def available(self) -> bool:
        return self.client is not None

    @staticmethod
    def build_messages(system_prompt: str, messages: Sequence[Message]) -> List[Dict[str, str]]:
        payload = [{"role": "system", "content": system_prompt}]
        payload.extend(message.to_chat() for message in messages if message.role in ("user", "assistant"))
        return payload

    async def stream_reply(self, system_prompt: str, messages: Sequence[Message]) -> AsyncIterator[str]:
        """
        Yield reply text as it arrives.

        Raises:
            ModelUnavailableError: no client, or the request failed.
            EmptyReplyError: the stream ended without any text.
        """
        if self.client is None:
            raise ModelUnavailableError("OpenAI client is not configured")

        self.last_usage = None
        try:
            stream = await self.client.chat.completions.create(
                model=self.model,
                max_tokens=self.settings.max_output_tokens,
                messages=self.build_messages(system_prompt, messages),
                stream=True,
                stream_options={"include_usage": True},
            )
        except Exception as exc:
            raise ModelUnavailableError(f"Model request failed: {exc}") from exc

        produced = False
        async for chunk in stream:
            usage = getattr(chunk, "usage", None)
            if usage is not None:
                self.last_usage = (usage.prompt_tokens, usage.completion_tokens)
            if chunk.choices and chunk.choices[0].delta.content:
                produced = True
                yield chunk.choices[0].delta.content

        if not produced:
            raise EmptyReplyError("Model returned an empty reply")
