"""Pydantic schemas for LLM generation endpoints and Ollama payloads."""

from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, Field


class ChatMessage(BaseModel):
    role: Literal["user", "assistant", "system"]
    content: str


class OllamaChatResponse(BaseModel):
    """The subset of an Ollama ``/api/chat`` reply the service relies on."""

    model: str = ""
    message: ChatMessage
    done: bool = True


class OllamaModelTag(BaseModel):
    name: str


class OllamaTagsResponse(BaseModel):
    models: List[OllamaModelTag] = Field(default_factory=list)


class GenerateRequest(BaseModel):
    transcript: str = Field(..., min_length=1, description="Meeting transcript to turn into Markdown")
    system_prompt: Optional[str] = Field(
        default=None,
        description="Overrides the configured system prompt for this request.",
    )


class GenerateResponse(BaseModel):
    markdown: str = Field(..., description="Markdown drafted by the model")
    model: str = Field(..., description="Model that produced the draft")
    speakers: List[str] = Field(default_factory=list, description="Speakers detected in the transcript")
