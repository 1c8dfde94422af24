"""Service that drafts Markdown documents from meeting transcripts."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, List, Optional, TypeVar

import httpx
from pydantic import ValidationError

from minutes_export.llm_utils import (
    DecodeError,
    build_messages,
    extract_speakers,
    parse_json_response,
    truncate_text,
)
from minutes_export.schemas.documents import MomReview
from minutes_export.schemas.generation import OllamaChatResponse
from minutes_export.services.ollama_client import OllamaClient

logger = logging.getLogger(__name__)

T = TypeVar("T")

_JSON_ONLY_SUFFIX = "\n\nCRITICAL: Respond with valid JSON only. No markdown, no code blocks, no extra text."


def _require_text(reply: OllamaChatResponse) -> OllamaChatResponse:
    if not reply.message.content.strip():
        raise DecodeError("Model returned an empty reply")
    return reply


def _decode_mom(reply: OllamaChatResponse) -> MomReview:
    parsed = parse_json_response(reply.message.content)
    try:
        return MomReview.model_validate(parsed)
    except ValidationError as exc:
        raise DecodeError(f"Model reply does not describe meeting minutes: {exc.errors()[0]['msg']}") from exc


@dataclass
class GenerationResult:
    """Markdown drafted by the model together with request metadata."""

    markdown: str
    model: str
    speakers: List[str] = field(default_factory=list)


class MarkdownGenerator:
    """Turn transcripts into Markdown or structured minutes using Ollama."""

    def __init__(
        self,
        client: OllamaClient,
        *,
        system_prompt: str,
        mom_prompt: str,
        temperature: float = 0.7,
        retries: int = 2,
        backoff_seconds: float = 1.0,
        max_input_chars: int = 15000,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        self._client = client
        self._system_prompt = system_prompt
        self._mom_prompt = mom_prompt
        self._temperature = temperature
        self._retries = retries
        self._backoff_seconds = backoff_seconds
        self._max_input_chars = max_input_chars
        self._sleep = sleep

    # ------------------------------------------------------------------
    async def generate(self, transcript: str, *, system_prompt: Optional[str] = None) -> GenerationResult:
        """Draft Markdown for ``transcript``."""

        transcript = transcript.strip()
        if not transcript:
            raise ValueError("Transcript is empty")

        messages = build_messages(
            truncate_text(transcript, self._max_input_chars),
            system_prompt or self._system_prompt,
        )
        reply = await self._chat_with_retries(messages, {"temperature": self._temperature}, _require_text)
        return GenerationResult(
            markdown=reply.message.content.strip(),
            model=reply.model or self._client.model,
            speakers=extract_speakers(transcript),
        )

    async def generate_mom(self, transcript: str) -> MomReview:
        """Draft structured Minutes of Meeting, repairing and validating the JSON reply."""

        transcript = transcript.strip()
        if not transcript:
            raise ValueError("Transcript is empty")

        messages = build_messages(
            truncate_text(transcript, self._max_input_chars),
            self._mom_prompt + _JSON_ONLY_SUFFIX,
        )
        return await self._chat_with_retries(messages, {"temperature": 0.2}, _decode_mom)

    # ------------------------------------------------------------------
    async def _chat_with_retries(
        self,
        messages: List[Dict[str, str]],
        options: Dict[str, Any],
        decode: Callable[[OllamaChatResponse], T],
    ) -> T:
        """Call the model and decode its reply, retrying with a linear backoff."""

        last_error: Optional[Exception] = None
        for attempt in range(self._retries + 1):
            try:
                reply = await self._client.chat(messages, options=options)
                return decode(reply)
            except (httpx.HTTPError, DecodeError) as exc:
                last_error = exc
                logger.warning("Attempt %s/%s failed: %s", attempt + 1, self._retries + 1, exc)
            if attempt < self._retries:
                delay = self._backoff_seconds * (attempt + 1)
                logger.info("Retrying in %.1fs", delay)
                await self._sleep(delay)
        raise last_error or RuntimeError("Model was not called")
