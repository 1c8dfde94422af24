"""Common dependency functions for API routes."""

from functools import lru_cache

from fastapi import Depends

from minutes_export.core.config import Settings, get_settings
from minutes_export.services.markdown_generator import MarkdownGenerator
from minutes_export.services.ollama_client import OllamaClient


@lru_cache
def get_ollama_client() -> OllamaClient:
    settings = get_settings()
    return OllamaClient(
        base_url=settings.ollama_base_url,
        model=settings.ollama_model,
        timeout=settings.ollama_timeout,
    )


def get_markdown_generator(
    client: OllamaClient = Depends(get_ollama_client),
    settings: Settings = Depends(get_settings),
) -> MarkdownGenerator:
    return MarkdownGenerator(
        client,
        system_prompt=settings.generation_system_prompt,
        mom_prompt=settings.mom_system_prompt,
        temperature=settings.llm_temperature,
        retries=settings.llm_retries,
        backoff_seconds=settings.llm_backoff_seconds,
        max_input_chars=settings.llm_max_input_chars,
    )
