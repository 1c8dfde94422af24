"""Lay out parsed Markdown blocks onto PDF pages with a ReportLab canvas.

The renderer keeps a single vertical cursor. Every primitive first checks
that it fits above the bottom margin and starts a new page otherwise.
Only the built-in Type 1 fonts are used, so text is reduced to the
single-byte range before it is measured or drawn.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from io import BytesIO
from typing import Callable, Iterable

from reportlab.lib.pagesizes import letter
from reportlab.pdfbase.pdfmetrics import stringWidth
from reportlab.pdfgen import canvas

from .document_models import Block, CodeBlock, HeadingBlock, ListBlock, ParagraphBlock, TableBlock

logger = logging.getLogger(__name__)

PDF_MEDIA_TYPE = "application/pdf"

Measure = Callable[[str, float], float]
Color = tuple[float, float, float]

_UNSUPPORTED_CHARS = re.compile(
    "["
    "\U0001F300-\U0001F9FF"  # pictographs, emoticons, transport
    "\U0001F1E0-\U0001F1FF"  # regional indicators
    "\u2600-\u26FF"  # misc symbols
    "\u2700-\u27BF"  # dingbats
    "\u200D"  # zero width joiner
    "\uFE0F"  # variation selector 16
    "\u0300-\u036F"  # combining marks
    "]"
)
_ABOVE_SINGLE_BYTE = re.compile(r"[^\x00-\xFF]")
_WHITESPACE = re.compile(r"\s+")

FONT_REGULAR = "Helvetica"
FONT_BOLD = "Helvetica-Bold"
FONT_MONO = "Courier"

TEXT_COLOR: Color = (0.0, 0.0, 0.0)
HEADING_COLOR: Color = (0.1, 0.1, 0.1)
CODE_COLOR: Color = (0.2, 0.2, 0.2)
RULE_COLOR: Color = (0.8, 0.8, 0.8)
HEADER_FILL: Color = (0.92, 0.92, 0.92)
CODE_FILL: Color = (0.96, 0.96, 0.96)


def sanitize_text(text: str | None, *, strip: bool = True) -> str:
    """Drop every character the standard PDF fonts cannot encode."""

    if not text:
        return ""
    text = _ABOVE_SINGLE_BYTE.sub("", _UNSUPPORTED_CHARS.sub("", text))
    return text.strip() if strip else text


def wrap_text(text: str | None, max_width: float, measure: Measure, size: float) -> list[str]:
    """Greedily break ``text`` into lines no wider than ``max_width``.

    The whole candidate line is measured, not the single word, so kerning
    and spaces are accounted for. A word that is wider than ``max_width`` on
    its own is kept intact on a line of its own.
    """

    sanitized = sanitize_text(text)
    if not sanitized:
        return []

    lines: list[str] = []
    line = ""
    for word in _WHITESPACE.split(sanitized):
        candidate = f"{line} {word}" if line else word
        if line and measure(candidate, size) > max_width:
            lines.append(line)
            line = word
        else:
            line = candidate
    if line:
        lines.append(line)
    return lines


def _split_to_width(line: str, max_width: float, measure: Measure, size: float) -> list[str]:
    """Hard-break ``line`` by characters so no chunk is wider than ``max_width``."""

    chunks: list[str] = []
    while line and measure(line, size) > max_width:
        cut = max(1, len(line) - 1)
        while cut > 1 and measure(line[:cut], size) > max_width:
            cut -= 1
        chunks.append(line[:cut])
        line = line[cut:]
    if line or not chunks:
        chunks.append(line)
    return chunks


def font_measure(font_name: str) -> Measure:
    """Return a width function for one of the built-in fonts."""

    def measure(text: str, size: float) -> float:
        return stringWidth(text, font_name, size)

    return measure


@dataclass(slots=True)
class _TableLayout:
    column_width: float
    padding: float
    font_size: float
    line_height: float


class PdfRenderer:
    """Stateful page writer; one instance renders one document."""

    def __init__(
        self,
        *,
        page_size: tuple[float, float] = letter,
        margin: float = 56,
        font_size: float = 11,
        line_height: float = 16,
    ) -> None:
        self.page_width, self.page_height = page_size
        self.margin = margin
        self.content_width = self.page_width - margin * 2
        self.font_size = font_size
        self.line_height = line_height

        self._buffer = BytesIO()
        self._canvas = canvas.Canvas(self._buffer, pagesize=page_size)
        self.page_count = 1
        self.y = self.page_height - margin
        self.drawn_text: list[str] = []

    # ------------------------------------------------------------------
    # Cursor and page management
    # ------------------------------------------------------------------
    def new_page(self) -> None:
        self._canvas.showPage()
        self.page_count += 1
        self.y = self.page_height - self.margin

    def ensure_space(self, height: float) -> bool:
        """Start a new page when ``height`` does not fit; report whether it did."""

        if self.y - height < self.margin:
            self.new_page()
            return True
        return False

    def add_spacing(self, space: float) -> None:
        self.y -= space
        if self.y < self.margin:
            self.new_page()

    # ------------------------------------------------------------------
    # Drawing primitives
    # ------------------------------------------------------------------
    def _draw_string(
        self,
        text: str,
        x: float,
        y: float,
        *,
        font: str = FONT_REGULAR,
        size: float | None = None,
        color: Color = TEXT_COLOR,
    ) -> None:
        self._canvas.setFont(font, size or self.font_size)
        self._canvas.setFillColorRGB(*color)
        self._canvas.drawString(x, y, text)
        self.drawn_text.append(text)

    def _fill_rect(self, x: float, y: float, width: float, height: float, color: Color) -> None:
        self._canvas.setFillColorRGB(*color)
        self._canvas.rect(x, y, width, height, stroke=0, fill=1)

    def _rule(self, x1: float, y1: float, x2: float, y2: float, *, thickness: float = 0.5) -> None:
        self._canvas.setStrokeColorRGB(*RULE_COLOR)
        self._canvas.setLineWidth(thickness)
        self._canvas.line(x1, y1, x2, y2)

    def draw_text(
        self,
        text: str,
        *,
        x: float | None = None,
        size: float | None = None,
        font: str = FONT_REGULAR,
        color: Color = TEXT_COLOR,
        max_width: float | None = None,
    ) -> None:
        """Draw wrapped text at the cursor, advancing ``size + 4`` per line."""

        size = size or self.font_size
        x = self.margin if x is None else x
        lines = wrap_text(text, max_width or self.content_width, font_measure(font), size)
        current_line_height = size + 4
        for line in lines:
            self.ensure_space(current_line_height)
            self._draw_string(line, x, self.y, font=font, size=size, color=color)
            self.y -= current_line_height

    # ------------------------------------------------------------------
    # Blocks
    # ------------------------------------------------------------------
    def draw_heading(self, text: str, level: int) -> None:
        size = 18 if level <= 1 else 14 if level == 2 else 12
        spacing = 16 if level <= 1 else 12 if level == 2 else 8

        self.add_spacing(spacing)
        self.ensure_space(size + 8)
        self.draw_text(text, size=size, font=FONT_BOLD, color=HEADING_COLOR)
        self.add_spacing(spacing / 2)

    def draw_paragraph(self, text: str) -> None:
        if not text.strip():
            return
        self.add_spacing(4)
        self.draw_text(text)
        self.add_spacing(8)

    def draw_list(self, items: list[str], ordered: bool = False) -> None:
        self.add_spacing(6)
        measure = font_measure(FONT_REGULAR)
        for index, item in enumerate(items):
            prefix = f"{index + 1}. " if ordered else "• "
            prefix_width = measure(prefix, self.font_size)
            max_width = self.content_width - prefix_width - 10
            lines = wrap_text(item, max_width, measure, self.font_size)
            for line_index, line in enumerate(lines):
                self.ensure_space(self.line_height)
                if line_index == 0:
                    self._draw_string(prefix, self.margin, self.y)
                self._draw_string(line, self.margin + prefix_width, self.y)
                self.y -= self.line_height
        self.add_spacing(6)

    def draw_table(self, headers: list[str], rows: list[list[str]]) -> None:
        column_count = len(headers) or max((len(row) for row in rows), default=0)
        if column_count == 0:
            return

        self.add_spacing(10)
        layout = _TableLayout(
            column_width=self.content_width / column_count,
            padding=6,
            font_size=9,
            line_height=12,
        )
        if headers:
            self._draw_table_row(headers, layout, header=True)
        for row in rows:
            self._draw_table_row(row, layout, header=False)
        self.add_spacing(10)

    def _draw_table_row(self, cells: list[str], layout: _TableLayout, *, header: bool) -> None:
        font = FONT_BOLD if header else FONT_REGULAR
        measure = font_measure(font)
        wrapped = [
            wrap_text(cell, layout.column_width - layout.padding * 2, measure, layout.font_size)
            for cell in cells
        ]
        # A row taller than a whole page is split into page-sized segments.
        usable = self.page_height - self.margin * 2 - layout.padding * 2
        per_page = max(1, int(usable // layout.line_height))
        max_lines = max([1, *(len(lines) for lines in wrapped)])
        for start in range(0, max_lines, per_page):
            segment = [lines[start:start + per_page] for lines in wrapped]
            self._draw_row_segment(segment, layout, font=font, header=header and start == 0)

    def _draw_row_segment(
        self,
        wrapped: list[list[str]],
        layout: _TableLayout,
        *,
        font: str,
        header: bool,
    ) -> None:
        max_lines = max([1, *(len(lines) for lines in wrapped)])
        row_height = max_lines * layout.line_height + layout.padding * 2

        started_page = self.ensure_space(row_height)
        top = self.y
        bottom = top - row_height
        left = self.margin
        right = self.margin + self.content_width

        if header:
            self._fill_rect(left, bottom, self.content_width, row_height, HEADER_FILL)
        if header or started_page:
            self._rule(left, top, right, top, thickness=1 if header else 0.5)

        for column_index, lines in enumerate(wrapped):
            x = left + column_index * layout.column_width
            cell_y = top - layout.padding - layout.font_size
            for line in lines:
                self._draw_string(line, x + layout.padding, cell_y, font=font, size=layout.font_size)
                cell_y -= layout.line_height
            if column_index > 0:
                self._rule(x, top, x, bottom)

        self._rule(left, top, left, bottom)
        self._rule(right, top, right, bottom)
        self.y = bottom
        self._rule(left, bottom, right, bottom, thickness=1 if header else 0.5)

    def draw_code(self, text: str) -> None:
        """Draw fenced code line by line on a shaded band, keeping indentation."""

        self.add_spacing(8)
        code_size = 9
        code_line_height = 12
        pad = 6
        measure = font_measure(FONT_MONO)
        max_width = self.content_width - 16
        lines = [
            chunk
            for line in sanitize_text(text, strip=False).split("\n")
            for chunk in _split_to_width(line.expandtabs(4).rstrip(), max_width, measure, code_size)
        ]

        self.ensure_space(code_line_height + pad * 2)
        self._fill_rect(self.margin, self.y - pad, self.content_width, pad, CODE_FILL)
        self.y -= pad
        for line in lines:
            self.ensure_space(code_line_height)
            band_bottom = self.y - code_line_height
            self._fill_rect(self.margin, band_bottom, self.content_width, code_line_height, CODE_FILL)
            if line:
                self._draw_string(
                    line,
                    self.margin + 8,
                    band_bottom + 3,
                    font=FONT_MONO,
                    size=code_size,
                    color=CODE_COLOR,
                )
            self.y = band_bottom
        if self.y - pad >= self.margin:
            self._fill_rect(self.margin, self.y - pad, self.content_width, pad, CODE_FILL)
        self.add_spacing(pad + 8)

    # ------------------------------------------------------------------
    def render(self, blocks: Iterable[Block]) -> bytes:
        for index, block in enumerate(blocks):
            if isinstance(block, HeadingBlock):
                if index > 0:
                    self.add_spacing(8)
                self.draw_heading(block.text, block.level)
            elif isinstance(block, ListBlock):
                self.draw_list(block.items, block.ordered)
            elif isinstance(block, TableBlock):
                self.draw_table(block.headers, block.rows)
            elif isinstance(block, CodeBlock):
                self.draw_code(block.text)
            elif isinstance(block, ParagraphBlock):
                self.draw_paragraph(block.text)

        self._canvas.showPage()
        self._canvas.save()
        logger.debug("Rendered PDF with %s page(s)", self.page_count)
        return self._buffer.getvalue()


def render_pdf(blocks: Iterable[Block]) -> bytes:
    """Render ``blocks`` into a Letter-sized PDF and return its bytes."""

    return PdfRenderer().render(blocks)


__all__ = [
    "PDF_MEDIA_TYPE",
    "PdfRenderer",
    "font_measure",
    "render_pdf",
    "sanitize_text",
    "wrap_text",
]
