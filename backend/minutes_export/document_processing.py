"""Utility helpers for turning uploaded documents back into Markdown."""
from __future__ import annotations

import logging
import re
from io import BytesIO
from pathlib import Path
from typing import Iterable

import pdfplumber
from docx import Document
from docx.document import Document as _Document
from docx.oxml.table import CT_Tbl
from docx.oxml.text.paragraph import CT_P
from docx.table import Table
from docx.text.paragraph import Paragraph

from .core.logging import suppress_loggers
from .docx_renderer import DOCX_MEDIA_TYPE
from .pdf_renderer import PDF_MEDIA_TYPE

logger = logging.getLogger(__name__)

SUPPORTED_SUFFIXES = {".docx", ".pdf", ".txt", ".md"}

_HEADING_STYLE = re.compile(r"^Heading\s+(\d)")
_ALL_CAPS_LINE = re.compile(r"^[A-Z\s]+$")
_NUMBERED_LINE = re.compile(r"^(\d+)[.)]\s*")
_BULLET_LINE = re.compile(r"^[\u2022\-*]\s*")


class UnsupportedDocumentError(RuntimeError):
    """Raised when a document cannot be converted."""


def _clean_text_noise(text: str) -> str:
    """Collapse runs of whitespace the way Word paragraphs often carry them."""

    text = re.sub(r"[ \t\u00a0]{2,}", " ", text)
    return text.strip()


def _iter_docx_blocks(document: _Document) -> Iterable[Paragraph | Table]:
    """Yield paragraphs and tables in their original body order."""

    body = document.element.body
    for element in body.iterchildren():
        if isinstance(element, CT_P):
            yield Paragraph(element, document)
        elif isinstance(element, CT_Tbl):
            yield Table(element, document)


def _table_to_rows(table: Table) -> list[list[str]]:
    rows: list[list[str]] = []
    for row in table.rows:
        cells: list[str] = []
        for cell in row.cells:
            fragments = [
                paragraph.text.strip()
                for paragraph in cell.paragraphs
                if paragraph.text.strip()
            ]
            cells.append(" ".join(fragments).replace("|", "\\|"))
        if any(cell for cell in cells):
            rows.append(cells)
    return rows


def _rows_to_markdown(rows: list[list[str]]) -> str:
    """Render rows as a pipe table; the first row becomes the header."""

    width = max(len(row) for row in rows)
    padded = [row + [""] * (width - len(row)) for row in rows]
    lines = ["| " + " | ".join(padded[0]) + " |", "|" + "---|" * width]
    lines.extend("| " + " | ".join(row) + " |" for row in padded[1:])
    return "\n".join(lines)


def _runs_to_markdown(paragraph: Paragraph) -> str:
    parts: list[str] = []
    for run in paragraph.runs:
        text = run.text
        if not text.strip():
            parts.append(text)
            continue
        if run.bold:
            text = f"**{text.strip()}**"
        elif run.italic:
            text = f"*{text.strip()}*"
        parts.append(text)
    return _clean_text_noise("".join(parts))


def _paragraph_to_markdown(paragraph: Paragraph) -> str:
    style_name = paragraph.style.name if paragraph.style is not None else ""
    text = _runs_to_markdown(paragraph)
    if not text:
        return ""

    if style_name == "Title":
        return f"# {_clean_text_noise(paragraph.text)}"
    heading = _HEADING_STYLE.match(style_name)
    if heading:
        level = min(max(int(heading.group(1)), 1), 6)
        return f"{'#' * level} {_clean_text_noise(paragraph.text)}"
    if style_name.startswith("List Number"):
        return f"1. {text}"
    if style_name.startswith("List"):
        return f"- {text}"
    return text


def docx_to_markdown(payload: bytes) -> str:
    """Convert a DOCX payload into Markdown, keeping headings, lists and tables."""

    document = Document(BytesIO(payload))
    chunks: list[str] = []
    previous_was_list = False
    for item in _iter_docx_blocks(document):
        if isinstance(item, Paragraph):
            line = _paragraph_to_markdown(item)
            if not line:
                continue
            is_list = line.startswith(("- ", "1. "))
            if is_list and previous_was_list:
                chunks[-1] = f"{chunks[-1]}\n{line}"
            else:
                chunks.append(line)
            previous_was_list = is_list
        elif isinstance(item, Table):
            rows = _table_to_rows(item)
            if rows:
                chunks.append(_rows_to_markdown(rows))
            previous_was_list = False
    markdown = "\n\n".join(chunks)
    return re.sub(r"\n{3,}", "\n\n", markdown).strip()


def text_to_markdown(text: str) -> str:
    """Guess Markdown structure for plain text extracted from a PDF."""

    output: list[str] = []
    in_list = False

    for raw in text.split("\n"):
        line = raw.strip()

        if not line:
            in_list = False
            output.append("\n")
            continue

        if line == line.upper() and len(line) < 100 and _ALL_CAPS_LINE.match(line):
            output.append(f"## {line}\n\n")
            in_list = False
            continue

        numbered = _NUMBERED_LINE.match(line)
        if numbered:
            output.append(f"{numbered.group(1)}. {line[numbered.end():]}\n")
            in_list = True
            continue

        bullet = _BULLET_LINE.match(line)
        if bullet:
            output.append(f"- {line[bullet.end():]}\n")
            in_list = True
            continue

        if in_list:
            output.append("\n")
            in_list = False
        output.append(f"{line}\n\n")

    return "".join(output).strip()


def pdf_to_markdown(payload: bytes, *, quiet_loggers: Iterable[str] = ("pdfminer", "pdfplumber")) -> str:
    """Extract text from every PDF page and convert it with :func:`text_to_markdown`.

    The PDF parser reports recoverable font and structure problems through
    ``logging``; ``quiet_loggers`` are silenced only while the file is read.
    """

    with suppress_loggers(quiet_loggers):
        with pdfplumber.open(BytesIO(payload)) as pdf:
            pages = [page.extract_text() or "" for page in pdf.pages]
    logger.debug("Extracted %s PDF page(s)", len(pages))
    return text_to_markdown("\n\n".join(pages))


def _resolve_kind(filename: str, content_type: str | None) -> str:
    if content_type == PDF_MEDIA_TYPE:
        return ".pdf"
    if content_type == DOCX_MEDIA_TYPE:
        return ".docx"
    return Path(filename or "").suffix.lower()


def convert_to_markdown(
    filename: str,
    payload: bytes,
    *,
    content_type: str | None = None,
    quiet_loggers: Iterable[str] = ("pdfminer", "pdfplumber"),
) -> str:
    """Convert an uploaded document into Markdown based on its type."""

    kind = _resolve_kind(filename, content_type)
    if kind not in SUPPORTED_SUFFIXES:
        raise UnsupportedDocumentError("Invalid file type. Only PDF, DOCX and plain text are supported.")

    if kind == ".docx":
        return docx_to_markdown(payload)
    if kind == ".pdf":
        return pdf_to_markdown(payload, quiet_loggers=quiet_loggers)
    return payload.decode("utf-8", "ignore").strip()


__all__ = [
    "SUPPORTED_SUFFIXES",
    "UnsupportedDocumentError",
    "convert_to_markdown",
    "docx_to_markdown",
    "pdf_to_markdown",
    "text_to_markdown",
]
