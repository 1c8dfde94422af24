"""Endpoints that render Markdown and structured records into DOCX/PDF downloads."""

from __future__ import annotations

import logging
import re
from typing import Callable, Optional

from fastapi import APIRouter, Depends, HTTPException, Response

from minutes_export.core.config import Settings, get_settings
from minutes_export.document_builders import mom_to_markdown, spec_to_markdown
from minutes_export.document_models import Block
from minutes_export.docx_renderer import DOCX_MEDIA_TYPE, render_docx_bytes
from minutes_export.markdown import parse_to_blocks
from minutes_export.pdf_renderer import PDF_MEDIA_TYPE, render_pdf
from minutes_export.schemas.export import MarkdownExportRequest, MomExportRequest, SpecExportRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/download", tags=["download"])

Renderer = Callable[[list[Block]], bytes]

_FORMATS: dict[str, tuple[str, str, Renderer]] = {
    "docx": (".docx", DOCX_MEDIA_TYPE, render_docx_bytes),
    "pdf": (".pdf", PDF_MEDIA_TYPE, render_pdf),
}


def _sanitize_stem(value: str) -> str:
    """Return a header-safe stem for the generated document."""

    return re.sub(r"[^0-9A-Za-z_.-]+", "_", value).strip("._")


def attachment_filename(filename: Optional[str], suffix: str, default_stem: str) -> str:
    name = (filename or "").strip()
    if name.lower().endswith(suffix):
        name = name[: -len(suffix)]
    stem = _sanitize_stem(name) or _sanitize_stem(default_stem) or "document"
    return f"{stem}{suffix}"


def _render_download(markdown: str, fmt: str, filename: Optional[str], default_stem: str) -> Response:
    suffix, media_type, renderer = _FORMATS[fmt]
    blocks = parse_to_blocks(markdown)
    try:
        payload = renderer(blocks)
    except Exception as exc:
        logger.exception("Failed to render %s document", fmt)
        raise HTTPException(status_code=500, detail=f"Failed to render {fmt.upper()} document") from exc

    output_name = attachment_filename(filename, suffix, default_stem)
    logger.info("Rendered %s with %s block(s) into %s bytes", output_name, len(blocks), len(payload))
    return Response(
        content=payload,
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="{output_name}"'},
    )


@router.post("/{fmt}")
def download_markdown(
    fmt: str,
    payload: MarkdownExportRequest,
    settings: Settings = Depends(get_settings),
) -> Response:
    if fmt not in _FORMATS:
        raise HTTPException(status_code=404, detail=f"Unsupported format '{fmt}'")
    if not payload.markdown or not payload.markdown.strip():
        raise HTTPException(status_code=400, detail="Missing markdown content")
    return _render_download(payload.markdown, fmt, payload.filename, settings.default_export_stem)


@router.post("/mom/{fmt}")
def download_mom(
    fmt: str,
    payload: MomExportRequest,
    settings: Settings = Depends(get_settings),
) -> Response:
    if fmt not in _FORMATS:
        raise HTTPException(status_code=404, detail=f"Unsupported format '{fmt}'")
    markdown = mom_to_markdown(payload.review)
    return _render_download(markdown, fmt, payload.filename, settings.default_export_stem)


@router.post("/spec/{fmt}")
def download_spec(fmt: str, payload: SpecExportRequest) -> Response:
    if fmt not in _FORMATS:
        raise HTTPException(status_code=404, detail=f"Unsupported format '{fmt}'")
    if payload.spec is None:
        raise HTTPException(status_code=400, detail="Missing spec")
    markdown = spec_to_markdown(payload.spec, payload.summary)
    return _render_download(markdown, fmt, None, "product-spec")
