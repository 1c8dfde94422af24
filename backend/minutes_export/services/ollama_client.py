"""Asynchronous client wrapper around the Ollama REST API."""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Optional

import httpx
from pydantic import ValidationError

from minutes_export.llm_utils import DecodeError, decode_chat_response
from minutes_export.schemas.generation import OllamaChatResponse, OllamaTagsResponse

logger = logging.getLogger(__name__)


class OllamaClient:
    """Minimal client for the two Ollama endpoints the service needs."""

    def __init__(
        self,
        base_url: str = "http://localhost:11434",
        model: str = "llama3.2",
        timeout: float = 120.0,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.model = model
        self.timeout = timeout
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(base_url=self.base_url, timeout=self.timeout, transport=self._transport)

    async def chat(
        self,
        messages: Iterable[Dict[str, str]],
        *,
        model: Optional[str] = None,
        options: Optional[Dict[str, Any]] = None,
    ) -> OllamaChatResponse:
        """Send a non-streaming chat request and decode the reply."""

        payload: Dict[str, Any] = {
            "model": model or self.model,
            "messages": list(messages),
            "stream": False,
        }
        if options:
            payload["options"] = options

        async with self._client() as client:
            response = await client.post("/api/chat", json=payload)
            response.raise_for_status()
            data = response.json()
        logger.debug("Ollama chat response: %s", data)
        return decode_chat_response(data)

    async def list_models(self) -> List[str]:
        """Return the names of locally available models."""

        async with self._client() as client:
            response = await client.get("/api/tags")
            response.raise_for_status()
            data = response.json()
        try:
            tags = OllamaTagsResponse.model_validate(data)
        except ValidationError as exc:
            raise DecodeError("Unexpected Ollama tags payload") from exc
        return [item.name for item in tags.models]
