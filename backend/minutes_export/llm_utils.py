"""Helper utilities for preparing prompts and decoding Ollama chat responses."""
from __future__ import annotations

import json
import re
from typing import Any

from pydantic import ValidationError

from .schemas.generation import OllamaChatResponse

TRUNCATION_MARKER = "\n\n[... transcript truncated because it is too long ...]"

_SPEAKER_PATTERN = re.compile(r"^([A-Za-z\s]+(?:[A-Za-z]+))\s+\d+:\d+", re.MULTILINE)
_CODE_FENCE_JSON = re.compile(r"```json\s*", re.IGNORECASE)
_CODE_FENCE = re.compile(r"```\s*")
_JSON_OBJECT = re.compile(r"\{[\s\S]*\}")
_JSON_ARRAY = re.compile(r"\[[\s\S]*\]")
_TRAILING_OBJECT_COMMA = re.compile(r",\s*}")
_TRAILING_ARRAY_COMMA = re.compile(r",\s*]")


class DecodeError(ValueError):
    """Raised when a model reply cannot be decoded into the expected shape."""


def decode_chat_response(data: Any) -> OllamaChatResponse:
    """Validate a raw ``/api/chat`` payload instead of guessing at its fields."""

    try:
        return OllamaChatResponse.model_validate(data)
    except ValidationError as exc:
        raise DecodeError(f"Unexpected Ollama chat payload: {exc.errors()[0]['msg']}") from exc


def extract_reply(data: Any) -> str:
    """Return the assistant text of an Ollama chat response."""

    return decode_chat_response(data).message.content.strip()


def truncate_text(text: str, max_chars: int = 12000) -> str:
    """Cut ``text`` to ``max_chars``, preferring a sentence or line boundary."""

    if len(text) <= max_chars:
        return text

    truncated = text[:max_chars]
    break_point = max(truncated.rfind("."), truncated.rfind("\n"))
    if break_point > max_chars * 0.8:
        return truncated[: break_point + 1] + TRUNCATION_MARKER
    return truncated + TRUNCATION_MARKER


def extract_speakers(text: str) -> list[str]:
    """Return distinct speaker names from ``Name 00:00`` transcript lines."""

    speakers: list[str] = []
    for match in _SPEAKER_PATTERN.finditer(text):
        speaker = match.group(1).strip()
        if 2 < len(speaker) < 50 and speaker not in speakers:
            speakers.append(speaker)
    return speakers


def build_messages(prompt: str, system_prompt: str | None = None) -> list[dict[str, str]]:
    messages: list[dict[str, str]] = []
    if system_prompt and system_prompt.strip():
        messages.append({"role": "system", "content": system_prompt.strip()})
    messages.append({"role": "user", "content": prompt})
    return messages


def _try_loads(candidate: str) -> Any:
    try:
        return json.loads(candidate)
    except json.JSONDecodeError:
        return None


def parse_json_response(content: str) -> Any:
    """Parse JSON out of a model reply, repairing the usual formatting slips.

    Tried in order: the whole reply without code fences, the first object,
    the first array, and the first object with trailing commas removed.
    """

    cleaned = _CODE_FENCE.sub("", _CODE_FENCE_JSON.sub("", content)).strip()

    parsed = _try_loads(cleaned)
    if parsed is not None:
        return parsed

    for pattern in (_JSON_OBJECT, _JSON_ARRAY):
        match = pattern.search(cleaned)
        if match:
            parsed = _try_loads(match.group(0))
            if parsed is not None:
                return parsed

    fixed = _TRAILING_ARRAY_COMMA.sub("]", _TRAILING_OBJECT_COMMA.sub("}", cleaned))
    match = _JSON_OBJECT.search(fixed)
    if match:
        parsed = _try_loads(match.group(0))
        if parsed is not None:
            return parsed

    raise DecodeError(f"Failed to parse JSON. Response preview: {cleaned[:500]}")


__all__ = [
    "DecodeError",
    "TRUNCATION_MARKER",
    "build_messages",
    "decode_chat_response",
    "extract_reply",
    "extract_speakers",
    "parse_json_response",
    "truncate_text",
]
