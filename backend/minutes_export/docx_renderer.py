"""Render parsed Markdown blocks into a python-docx document."""
from __future__ import annotations

import re
from io import BytesIO
from typing import Iterable

from docx import Document
from docx.document import Document as _Document
from docx.oxml import OxmlElement
from docx.oxml.ns import qn
from docx.shared import Inches, Pt, Twips
from docx.table import _Cell
from docx.text.paragraph import Paragraph

from .document_models import Block, CodeBlock, HeadingBlock, ListBlock, ParagraphBlock, TableBlock

DOCX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"

_MAX_HEADING_LEVEL = 6
_HEADER_FILL = "E7E6E6"
_CODE_FILL = "F5F5F5"
_CODE_FONT = "Courier New"
_LINE_SPACING = 1.15
# Characters lxml refuses to put into XML text nodes.
_XML_UNSAFE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\ufffe\uffff]")
_CELL_MARGINS = {
    "top": Inches(0.05),
    "bottom": Inches(0.05),
    "left": Inches(0.1),
    "right": Inches(0.1),
}


def _xml_text(text: str | None) -> str:
    return _XML_UNSAFE.sub("", text or "")


def _remove_placeholder_paragraph(document: _Document) -> None:
    """Remove the placeholder paragraph that python-docx creates by default."""

    if document.paragraphs:
        paragraph = document.paragraphs[0]
        element = paragraph._element  # type: ignore[attr-defined]
        parent = element.getparent()
        if parent is not None:
            parent.remove(element)


def _set_page_margins(document: _Document) -> None:
    for section in document.sections:
        section.top_margin = Inches(1)
        section.bottom_margin = Inches(1)
        section.left_margin = Inches(1)
        section.right_margin = Inches(1)


def _shading(fill: str):
    shd = OxmlElement("w:shd")
    shd.set(qn("w:val"), "clear")
    shd.set(qn("w:color"), "auto")
    shd.set(qn("w:fill"), fill)
    return shd


def _shade_paragraph(paragraph: Paragraph, fill: str) -> None:
    paragraph._p.get_or_add_pPr().append(_shading(fill))  # type: ignore[attr-defined]


def _format_cell(cell: _Cell, *, fill: str | None = None) -> None:
    tc_pr = cell._tc.get_or_add_tcPr()
    if fill:
        tc_pr.append(_shading(fill))
    margins = OxmlElement("w:tcMar")
    for side, length in _CELL_MARGINS.items():
        node = OxmlElement(f"w:{side}")
        node.set(qn("w:w"), str(length.twips))
        node.set(qn("w:type"), "dxa")
        margins.append(node)
    tc_pr.append(margins)


def _mark_header_row(row) -> None:
    tr_pr = row._tr.get_or_add_trPr()
    header = OxmlElement("w:tblHeader")
    header.set(qn("w:val"), "true")
    tr_pr.append(header)


def _add_spacer(document: _Document, *, before: int = 0, after: int = 0) -> None:
    paragraph = document.add_paragraph()
    paragraph.paragraph_format.space_before = Twips(before)
    paragraph.paragraph_format.space_after = Twips(after)


def _append_heading(document: _Document, block: HeadingBlock, *, first: bool) -> None:
    if not first:
        _add_spacer(document, before=240)
    level = min(max(block.level, 1), _MAX_HEADING_LEVEL)
    heading = document.add_heading(_xml_text(block.text), level=level)
    heading.paragraph_format.space_after = Twips(120)


def _append_paragraph(document: _Document, block: ParagraphBlock) -> None:
    text = _xml_text(block.text)
    if not text.strip():
        return
    paragraph = document.add_paragraph(text)
    paragraph_format = paragraph.paragraph_format
    paragraph_format.space_before = Pt(6)
    paragraph_format.space_after = Pt(6)
    paragraph_format.line_spacing = _LINE_SPACING


def _append_list(document: _Document, block: ListBlock) -> None:
    last = len(block.items) - 1
    for index, item in enumerate(block.items):
        paragraph = document.add_paragraph(_xml_text(item), style="List Bullet")
        paragraph.paragraph_format.space_before = Pt(6 if index == 0 else 2)
        paragraph.paragraph_format.space_after = Pt(6 if index == last else 2)


def _table_column_count(headers: list[str], rows: Iterable[list[str]]) -> int:
    return max([len(headers), *(len(row) for row in rows)], default=0)


def _fill_row(row, values: list[str], column_count: int, *, header: bool) -> None:
    for column_index in range(column_count):
        cell = row.cells[column_index]
        value = values[column_index] if column_index < len(values) else ""
        paragraph = cell.paragraphs[0]
        run = paragraph.add_run(_xml_text(value))
        if header:
            run.bold = True
        _format_cell(cell, fill=_HEADER_FILL if header else None)


def _append_table(document: _Document, block: TableBlock) -> None:
    column_count = _table_column_count(block.headers, block.rows)
    if column_count == 0:
        return

    _add_spacer(document, before=120)
    docx_table = document.add_table(rows=0, cols=column_count)
    docx_table.style = "Table Grid"

    if block.headers:
        header_row = docx_table.add_row()
        _mark_header_row(header_row)
        _fill_row(header_row, block.headers, column_count, header=True)

    for values in block.rows:
        _fill_row(docx_table.add_row(), values, column_count, header=False)

    _add_spacer(document, after=120)


def _append_code(document: _Document, block: CodeBlock) -> None:
    _add_spacer(document, before=80)
    for line in block.text.split("\n"):
        paragraph = document.add_paragraph()
        run = paragraph.add_run(_xml_text(line) or " ")
        run.font.name = _CODE_FONT
        run.font.size = Pt(10)
        _shade_paragraph(paragraph, _CODE_FILL)
        paragraph_format = paragraph.paragraph_format
        paragraph_format.space_before = Pt(0)
        paragraph_format.space_after = Pt(0)
        paragraph_format.line_spacing = _LINE_SPACING
    _add_spacer(document, after=80)


def render_docx(blocks: Iterable[Block]) -> _Document:
    """Build a DOCX document tree for the given blocks."""

    document = Document()
    _remove_placeholder_paragraph(document)
    _set_page_margins(document)

    for index, block in enumerate(blocks):
        if isinstance(block, HeadingBlock):
            _append_heading(document, block, first=index == 0)
        elif isinstance(block, ListBlock):
            _append_list(document, block)
        elif isinstance(block, TableBlock):
            _append_table(document, block)
        elif isinstance(block, CodeBlock):
            _append_code(document, block)
        elif isinstance(block, ParagraphBlock):
            _append_paragraph(document, block)

    return document


def render_docx_bytes(blocks: Iterable[Block]) -> bytes:
    """Return the serialized DOCX payload for the given blocks."""

    buffer = BytesIO()
    render_docx(blocks).save(buffer)
    return buffer.getvalue()


def document_text(document: _Document) -> list[str]:
    """Return paragraph and table cell texts in body order."""

    texts = [paragraph.text for paragraph in document.paragraphs]
    for table in document.tables:
        for row in table.rows:
            texts.extend(cell.text for cell in row.cells)
    return texts


__all__ = ["DOCX_MEDIA_TYPE", "document_text", "render_docx", "render_docx_bytes"]
