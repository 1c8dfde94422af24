"""Markdown tokenizer producing the flat block list consumed by the renderers."""
from __future__ import annotations

import re

from .document_models import (
    Block,
    CodeBlock,
    HeadingBlock,
    ListBlock,
    ParagraphBlock,
    TableBlock,
)

_IMAGE_PATTERN = re.compile(r"!\[(.*?)\]\((.*?)\)")
_LINK_PATTERN = re.compile(r"\[(.*?)\]\((.*?)\)")
_CODE_SPAN_PATTERN = re.compile(r"`{1,3}(.*?)`{1,3}")
_STRIKE_PATTERN = re.compile(r"~~(.*?)~~")
_BOLD_STAR_PATTERN = re.compile(r"\*\*(.*?)\*\*")
_BOLD_UNDERSCORE_PATTERN = re.compile(r"__(.*?)__")
_INLINE_TOKENS = re.compile(r"[*_`~]")

_LINE_SPLIT = re.compile(r"\r?\n")
_FENCE = "```"
_HEADING_PATTERN = re.compile(r"^(#{1,6})\s+")
_BULLET_PATTERN = re.compile(r"^[-*+]\s+")
_ORDERED_PATTERN = re.compile(r"^\d+\.\s+")
_TABLE_ROW_PATTERN = re.compile(r"^\|(.+)\|$")
_TABLE_SEPARATOR_PATTERN = re.compile(r"^\|[-:\s|]+\|$")
_CELL_SPLIT = re.compile(r"(?<!\\)\|")


def _strip_once(text: str) -> str:
    text = _IMAGE_PATTERN.sub(r"\1", text)
    text = _LINK_PATTERN.sub(r"\1", text)
    text = _CODE_SPAN_PATTERN.sub(r"\1", text)
    text = _STRIKE_PATTERN.sub(r"\1", text)
    text = _BOLD_STAR_PATTERN.sub(r"\1", text)
    text = _BOLD_UNDERSCORE_PATTERN.sub(r"\1", text)
    text = _INLINE_TOKENS.sub("", text)
    return text.strip()


def strip_inline(text: str | None) -> str:
    """Remove inline Markdown markup and return plain text.

    Deleting stray markers can expose a new link (``[a]*(b)`` becomes
    ``[a](b)``), so the substitutions are repeated until the text stops
    changing. Every pass that changes the text makes it shorter.
    """

    if not text:
        return ""
    current = text
    while True:
        stripped = _strip_once(current)
        if stripped == current:
            return stripped
        current = stripped


def _split_table_row(line: str) -> list[str]:
    match = _TABLE_ROW_PATTERN.match(line)
    inner = match.group(1) if match else line
    return [strip_inline(cell.replace("\\|", "|").strip()) for cell in _CELL_SPLIT.split(inner)]


class _BlockCollector:
    """Mutable buffers of the single-pass parser."""

    def __init__(self) -> None:
        self.blocks: list[Block] = []
        self.paragraph: list[str] = []
        self.list_items: list[str] | None = None
        self.list_ordered = False
        self.code_lines: list[str] | None = None
        self.table_headers: list[str] | None = None
        self.table_rows: list[list[str]] = []

    @property
    def in_code(self) -> bool:
        return self.code_lines is not None

    @property
    def in_table(self) -> bool:
        return self.table_headers is not None

    def flush_paragraph(self) -> None:
        if not self.paragraph:
            return
        text = strip_inline(" ".join(self.paragraph))
        if text:
            self.blocks.append(ParagraphBlock(text=text))
        self.paragraph = []

    def flush_list(self) -> None:
        if self.list_items:
            items = [strip_inline(item) for item in self.list_items]
            self.blocks.append(ListBlock(items=items, ordered=self.list_ordered))
        self.list_items = None
        self.list_ordered = False

    def flush_code(self) -> None:
        if self.code_lines is None:
            return
        self.blocks.append(CodeBlock(text="\n".join(self.code_lines)))
        self.code_lines = None

    def flush_table(self) -> None:
        if self.table_headers is None:
            return
        self.blocks.append(TableBlock(headers=self.table_headers, rows=self.table_rows))
        self.table_headers = None
        self.table_rows = []

    def flush_text(self) -> None:
        self.flush_paragraph()
        self.flush_list()
        self.flush_table()

    def finish(self) -> list[Block]:
        self.flush_paragraph()
        self.flush_list()
        self.flush_code()
        self.flush_table()
        return self.blocks


def parse_to_blocks(markdown: str | None) -> list[Block]:
    """Tokenize ``markdown`` into heading/paragraph/list/code/table blocks.

    The parser never raises: anything it does not recognise ends up in a
    paragraph.
    """

    if not markdown:
        return []

    lines = _LINE_SPLIT.split(markdown)
    state = _BlockCollector()
    index = 0

    while index < len(lines):
        raw = lines[index]
        line = raw.strip()
        index += 1

        if state.in_code:
            if line.startswith(_FENCE):
                state.flush_code()
            else:
                state.code_lines.append(raw)
            continue

        if line.startswith(_FENCE):
            state.flush_text()
            state.code_lines = []
            continue

        if state.in_table:
            if _TABLE_ROW_PATTERN.match(line):
                state.table_rows.append(_split_table_row(line))
                continue
            state.flush_table()

        if not line:
            state.flush_text()
            continue

        if _TABLE_ROW_PATTERN.match(line) and index < len(lines):
            if _TABLE_SEPARATOR_PATTERN.match(lines[index].strip()):
                state.flush_paragraph()
                state.flush_list()
                state.table_headers = _split_table_row(line)
                index += 1
                continue

        heading = _HEADING_PATTERN.match(line)
        if heading:
            state.flush_text()
            text = strip_inline(line[heading.end():])
            if text:
                state.blocks.append(HeadingBlock(level=len(heading.group(1)), text=text))
            continue

        bullet = _BULLET_PATTERN.match(line)
        ordered = None if bullet else _ORDERED_PATTERN.match(line)
        if bullet or ordered:
            marker = bullet or ordered
            state.flush_paragraph()
            if state.list_items is None:
                state.list_items = []
                state.list_ordered = ordered is not None
            state.list_items.append(line[marker.end():])
            continue

        state.flush_list()
        state.paragraph.append(line)

    return state.finish()


__all__ = ["parse_to_blocks", "strip_inline"]
