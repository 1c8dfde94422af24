"""Common document model definitions used by the parser and renderers."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, Union

BlockType = Literal["heading", "paragraph", "list", "code", "table"]


@dataclass(slots=True)
class HeadingBlock:
    """A Markdown heading; ``level`` is the number of leading hashes (1-6)."""

    level: int
    text: str
    type: Literal["heading"] = field(default="heading", init=False)


@dataclass(slots=True)
class ParagraphBlock:
    text: str
    type: Literal["paragraph"] = field(default="paragraph", init=False)


@dataclass(slots=True)
class ListBlock:
    """A run of list items.

    Parameters
    ----------
    items:
        Item texts with the marker removed and inline markup stripped.
    ordered:
        Fixed by the marker of the first item in the run.
    """

    items: list[str]
    ordered: bool = False
    type: Literal["list"] = field(default="list", init=False)


@dataclass(slots=True)
class CodeBlock:
    """Raw lines found between two fences, joined with ``\\n``."""

    text: str
    type: Literal["code"] = field(default="code", init=False)


@dataclass(slots=True)
class TableBlock:
    """A pipe table. Rows may be ragged; renderers draw them as-is."""

    headers: list[str]
    rows: list[list[str]] = field(default_factory=list)
    type: Literal["table"] = field(default="table", init=False)


Block = Union[HeadingBlock, ParagraphBlock, ListBlock, CodeBlock, TableBlock]


__all__ = [
    "Block",
    "BlockType",
    "CodeBlock",
    "HeadingBlock",
    "ListBlock",
    "ParagraphBlock",
    "TableBlock",
]
