"""Endpoints that draft documents from transcripts with the local LLM."""

from __future__ import annotations

import logging

import httpx
from fastapi import APIRouter, Depends, HTTPException

from minutes_export.api.deps import get_markdown_generator
from minutes_export.llm_utils import DecodeError
from minutes_export.schemas.documents import MomReview
from minutes_export.schemas.generation import GenerateRequest, GenerateResponse
from minutes_export.services.markdown_generator import MarkdownGenerator

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/generate", tags=["generation"])


def _translate_llm_error(exc: Exception) -> HTTPException:
    if isinstance(exc, httpx.TimeoutException):
        logger.error("Ollama timed out: %s", exc)
        return HTTPException(status_code=504, detail="The language model did not answer in time")
    if isinstance(exc, httpx.HTTPStatusError):
        logger.error("Ollama returned HTTP %s: %s", exc.response.status_code, exc.response.text)
        return HTTPException(status_code=502, detail="Ollama returned an error")
    if isinstance(exc, httpx.HTTPError):
        logger.error("Error talking to Ollama: %s", exc)
        return HTTPException(status_code=502, detail="Could not connect to Ollama")
    logger.error("Undecodable model reply: %s", exc)
    return HTTPException(status_code=500, detail=str(exc))


@router.post("", response_model=GenerateResponse)
async def generate_markdown(
    payload: GenerateRequest,
    generator: MarkdownGenerator = Depends(get_markdown_generator),
) -> GenerateResponse:
    try:
        result = await generator.generate(payload.transcript, system_prompt=payload.system_prompt)
    except DecodeError as exc:
        raise _translate_llm_error(exc) from exc
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except httpx.HTTPError as exc:
        raise _translate_llm_error(exc) from exc
    return GenerateResponse(markdown=result.markdown, model=result.model, speakers=result.speakers)


@router.post("/mom", response_model=MomReview, response_model_by_alias=True)
async def generate_mom(
    payload: GenerateRequest,
    generator: MarkdownGenerator = Depends(get_markdown_generator),
) -> MomReview:
    try:
        return await generator.generate_mom(payload.transcript)
    except DecodeError as exc:
        raise _translate_llm_error(exc) from exc
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except httpx.HTTPError as exc:
        raise _translate_llm_error(exc) from exc
