"""Health check endpoints."""

import logging

import httpx
from fastapi import APIRouter, Depends

from minutes_export.api.deps import get_ollama_client
from minutes_export.core.config import Settings, get_settings
from minutes_export.llm_utils import DecodeError
from minutes_export.services.ollama_client import OllamaClient

logger = logging.getLogger(__name__)

router = APIRouter(tags=["system"])


@router.get("/health")
def healthcheck(settings: Settings = Depends(get_settings)) -> dict[str, str]:
    """Simple readiness probe."""

    return {"status": "ok", "app": settings.app_name, "environment": settings.environment}


@router.get("/health/llm")
async def llm_health(client: OllamaClient = Depends(get_ollama_client)) -> dict[str, object]:
    """Report whether Ollama answers and has the configured model pulled."""

    try:
        models = await client.list_models()
    except (httpx.HTTPError, DecodeError) as exc:
        logger.warning("Failed to query Ollama tags: %s", exc)
        return {"status": "unavailable", "model": client.model, "ollama": client.base_url, "model_available": False}

    return {
        "status": "ok",
        "model": client.model,
        "ollama": client.base_url,
        "model_available": client.model in models,
    }
