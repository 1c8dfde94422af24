"""Tests for the Ollama HTTP client against a mocked transport."""

from __future__ import annotations

import asyncio
import json

import httpx
import pytest

from minutes_export.llm_utils import DecodeError
from minutes_export.services.ollama_client import OllamaClient


def make_client(handler) -> OllamaClient:
    return OllamaClient("http://ollama.test/", model="llama3.2", transport=httpx.MockTransport(handler))


def test_chat_posts_non_streaming_request() -> None:
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        seen["body"] = json.loads(request.content)
        return httpx.Response(
            200,
            json={"model": "llama3.2", "message": {"role": "assistant", "content": "# Minutes"}, "done": True},
        )

    client = make_client(handler)
    reply = asyncio.run(client.chat([{"role": "user", "content": "hi"}], options={"temperature": 0.2}))

    assert reply.message.content == "# Minutes"
    assert seen["path"] == "/api/chat"
    assert seen["body"] == {
        "model": "llama3.2",
        "messages": [{"role": "user", "content": "hi"}],
        "stream": False,
        "options": {"temperature": 0.2},
    }


def test_chat_raises_on_http_error() -> None:
    client = make_client(lambda request: httpx.Response(500, json={"error": "boom"}))

    with pytest.raises(httpx.HTTPStatusError):
        asyncio.run(client.chat([{"role": "user", "content": "hi"}]))


def test_chat_rejects_payload_without_message() -> None:
    client = make_client(lambda request: httpx.Response(200, json={"error": "model not found"}))

    with pytest.raises(DecodeError):
        asyncio.run(client.chat([{"role": "user", "content": "hi"}]))


def test_list_models() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/api/tags"
        return httpx.Response(200, json={"models": [{"name": "llama3.2"}, {"name": "mistral"}]})

    client = make_client(handler)

    assert asyncio.run(client.list_models()) == ["llama3.2", "mistral"]
    assert client.base_url == "http://ollama.test"
