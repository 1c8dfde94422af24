"""Unit tests for the Markdown block parser and inline stripper."""

from __future__ import annotations

import pytest

from minutes_export.document_models import (
    CodeBlock,
    HeadingBlock,
    ListBlock,
    ParagraphBlock,
    TableBlock,
)
from minutes_export.markdown import parse_to_blocks, strip_inline

SAMPLE = (
    "# Title\n"
    "Some **bold** text.\n"
    "- item one\n"
    "- item two\n"
    "| A | B |\n"
    "|---|---|\n"
    "| 1 | 2 |\n"
)


def test_empty_input_yields_no_blocks() -> None:
    assert parse_to_blocks("") == []
    assert parse_to_blocks(None) == []


@pytest.mark.parametrize("level", range(1, 7))
def test_heading_level_matches_hash_count(level: int) -> None:
    blocks = parse_to_blocks("#" * level + " **Bold** `x` [title](http://example.com)")

    assert blocks == [HeadingBlock(level=level, text="Bold x title")]


def test_seven_hashes_is_not_a_heading() -> None:
    assert parse_to_blocks("####### too deep") == [ParagraphBlock(text="####### too deep")]


def test_sample_document_parses_into_expected_blocks() -> None:
    assert parse_to_blocks(SAMPLE) == [
        HeadingBlock(level=1, text="Title"),
        ParagraphBlock(text="Some bold text."),
        ListBlock(items=["item one", "item two"], ordered=False),
        TableBlock(headers=["A", "B"], rows=[["1", "2"]]),
    ]


def test_table_rows_keep_order_and_close_on_other_line() -> None:
    markdown = (
        "| Name | Role |\n"
        "| :--- | ---: |\n"
        "| Ann | **PM** |\n"
        "| Bob | Dev |\n"
        "after the table"
    )

    blocks = parse_to_blocks(markdown)

    assert blocks == [
        TableBlock(headers=["Name", "Role"], rows=[["Ann", "PM"], ["Bob", "Dev"]]),
        ParagraphBlock(text="after the table"),
    ]


def test_escaped_pipe_stays_inside_cell() -> None:
    blocks = parse_to_blocks("| Expr |\n|---|\n| a \\| b |")

    assert blocks == [TableBlock(headers=["Expr"], rows=[["a | b"]])]


def test_pipe_line_without_separator_is_a_paragraph() -> None:
    blocks = parse_to_blocks("| not | a table |\nnext line")

    assert blocks == [ParagraphBlock(text="| not | a table | next line")]


def test_blank_line_closes_table() -> None:
    blocks = parse_to_blocks("| A |\n|---|\n| 1 |\n\n| 2 |")

    assert blocks == [
        TableBlock(headers=["A"], rows=[["1"]]),
        ParagraphBlock(text="| 2 |"),
    ]


def test_code_block_content_is_verbatim() -> None:
    body = "  indented line\n\n**not bold** and `ticks`\n\ttabbed"
    markdown = f"Intro\n```python\n{body}\n```\nOutro"

    blocks = parse_to_blocks(markdown)

    assert blocks == [
        ParagraphBlock(text="Intro"),
        CodeBlock(text=body),
        ParagraphBlock(text="Outro"),
    ]


def test_unterminated_fence_is_flushed_at_end() -> None:
    assert parse_to_blocks("```\nprint('hi')") == [CodeBlock(text="print('hi')")]


def test_ordered_flag_is_fixed_by_first_item() -> None:
    assert parse_to_blocks("1. one\n2. two") == [ListBlock(items=["one", "two"], ordered=True)]
    assert parse_to_blocks("- one\n2. two") == [ListBlock(items=["one", "two"], ordered=False)]


def test_paragraph_lines_join_with_single_space() -> None:
    blocks = parse_to_blocks("line one\n   line two  \n\nnext")

    assert blocks == [ParagraphBlock(text="line one line two"), ParagraphBlock(text="next")]


def test_list_and_paragraph_keep_source_order() -> None:
    blocks = parse_to_blocks("before\n* a\n+ b\nafter")

    assert blocks == [
        ParagraphBlock(text="before"),
        ListBlock(items=["a", "b"]),
        ParagraphBlock(text="after"),
    ]


def test_windows_line_endings() -> None:
    blocks = parse_to_blocks("## Notes\r\n- first\r\n- second\r\n")

    assert blocks == [HeadingBlock(level=2, text="Notes"), ListBlock(items=["first", "second"])]


@pytest.mark.parametrize(
    ("source", "expected"),
    [
        ("![diagram](img.png) here", "diagram here"),
        ("see [docs](http://x.y/z)", "see docs"),
        ("~~old~~ new", "old new"),
        ("__strong__ and *soft*", "strong and soft"),
        ("`code` span", "code span"),
        ("**unclosed", "unclosed"),
        ("snake_case", "snakecase"),
        ("  padded  ", "padded"),
    ],
)
def test_strip_inline(source: str, expected: str) -> None:
    assert strip_inline(source) == expected


@pytest.mark.parametrize(
    "source",
    [
        "[a]*(b)",
        "**[x](y)**",
        "![![i](j)](k)",
        "~*~text~*~",
        "plain",
        "",
        "`[link](u)`",
    ],
)
def test_strip_inline_is_idempotent(source: str) -> None:
    once = strip_inline(source)

    assert strip_inline(once) == once
