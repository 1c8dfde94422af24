"""Endpoint that turns uploaded DOCX/PDF/text files into Markdown."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile

from minutes_export.core.config import Settings, get_settings
from minutes_export.document_processing import UnsupportedDocumentError, convert_to_markdown
from minutes_export.schemas.export import ConvertToMarkdownResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["conversion"])


@router.post("/convert-to-markdown", response_model=ConvertToMarkdownResponse)
async def convert_file_to_markdown(
    file: UploadFile = File(...),
    settings: Settings = Depends(get_settings),
) -> ConvertToMarkdownResponse:
    payload = await file.read()
    if not payload:
        raise HTTPException(status_code=400, detail="No file provided")

    filename = file.filename or ""
    try:
        markdown = convert_to_markdown(
            filename,
            payload,
            content_type=file.content_type,
            quiet_loggers=settings.quiet_pdf_loggers,
        )
    except UnsupportedDocumentError as exc:
        raise HTTPException(status_code=415, detail=str(exc)) from exc
    except Exception as exc:
        logger.exception("Failed to convert document '%s'", filename)
        raise HTTPException(status_code=400, detail="Failed to convert file to markdown") from exc

    return ConvertToMarkdownResponse(markdown=markdown, filename=filename)
