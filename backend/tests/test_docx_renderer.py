"""Tests for the python-docx renderer."""

from __future__ import annotations

from io import BytesIO

import pytest
from docx import Document

from minutes_export.document_models import (
    CodeBlock,
    HeadingBlock,
    ListBlock,
    ParagraphBlock,
    TableBlock,
)
from minutes_export.docx_renderer import document_text, render_docx, render_docx_bytes
from minutes_export.markdown import parse_to_blocks

SAMPLE = (
    "# Title\n"
    "Some **bold** text.\n"
    "- item one\n"
    "- item two\n"
    "| A | B |\n"
    "|---|---|\n"
    "| 1 | 2 |\n"
)


def test_sample_document_contains_every_text() -> None:
    texts = document_text(render_docx(parse_to_blocks(SAMPLE)))

    for expected in ("Title", "Some bold text.", "item one", "item two", "A", "B", "1", "2"):
        assert expected in texts


def test_first_heading_opens_the_document() -> None:
    document = render_docx([HeadingBlock(level=1, text="Title"), ParagraphBlock(text="Body")])

    first = document.paragraphs[0]
    assert first.text == "Title"
    assert first.style.name == "Heading 1"


@pytest.mark.parametrize(("level", "style"), [(1, "Heading 1"), (3, "Heading 3"), (5, "Heading 5"), (6, "Heading 6")])
def test_heading_style_follows_level(level: int, style: str) -> None:
    document = render_docx([HeadingBlock(level=level, text="Section")])

    headings = [paragraph for paragraph in document.paragraphs if paragraph.text == "Section"]
    assert [paragraph.style.name for paragraph in headings] == [style]


def test_list_items_use_bullet_style() -> None:
    document = render_docx([ListBlock(items=["first", "second"], ordered=True)])

    items = [paragraph for paragraph in document.paragraphs if paragraph.text]
    assert [paragraph.text for paragraph in items] == ["first", "second"]
    assert {paragraph.style.name for paragraph in items} == {"List Bullet"}


def test_table_header_is_bold_and_shaded() -> None:
    document = render_docx([TableBlock(headers=["Owner", "Task"], rows=[["Ann", "Deploy"]])])

    table = document.tables[0]
    header_cell = table.rows[0].cells[0]
    assert table.style.name == "Table Grid"
    assert header_cell.paragraphs[0].runs[0].bold is True
    assert 'w:fill="E7E6E6"' in header_cell._tc.tcPr.xml
    assert table.rows[1].cells[1].text == "Deploy"


def test_ragged_rows_widen_the_table() -> None:
    document = render_docx([TableBlock(headers=["A", "B"], rows=[["1"], ["1", "2", "3"]])])

    table = document.tables[0]
    assert len(table.columns) == 3
    assert [cell.text for cell in table.rows[1].cells] == ["1", "", ""]


def test_empty_table_is_skipped() -> None:
    document = render_docx([TableBlock(headers=[], rows=[])])

    assert document.tables == []


def test_code_lines_are_monospaced_and_keep_blank_lines() -> None:
    document = render_docx([CodeBlock(text="x = 1\n\n    y = 2")])

    code = [paragraph for paragraph in document.paragraphs if paragraph.runs]
    assert [paragraph.text for paragraph in code] == ["x = 1", " ", "    y = 2"]
    assert {paragraph.runs[0].font.name for paragraph in code} == {"Courier New"}


def test_render_docx_bytes_round_trips_through_python_docx() -> None:
    payload = render_docx_bytes(parse_to_blocks(SAMPLE))

    assert payload.startswith(b"PK")
    reopened = Document(BytesIO(payload))
    assert "Title" in document_text(reopened)


def test_empty_block_list_renders() -> None:
    payload = render_docx_bytes([])

    assert payload.startswith(b"PK")


def test_deep_headings_keep_their_level() -> None:
    document = render_docx(parse_to_blocks("##### five\n###### six"))

    assert [paragraph.style.name for paragraph in document.paragraphs if paragraph.text] == [
        "Heading 5",
        "Heading 6",
    ]


def test_control_characters_are_dropped_instead_of_failing() -> None:
    blocks = parse_to_blocks(
        "# Agenda\x0c\nPage one\x0bcontinues here\x00\n- item\x01\n| A\x02 |\n|---|\n| b\x1f |\n```\ncode\x07\n```"
    )

    payload = render_docx_bytes(blocks)

    texts = document_text(Document(BytesIO(payload)))
    assert "Agenda" in texts
    assert "Page onecontinues here" in texts
    assert "item" in texts
    assert "A" in texts
    assert "b" in texts
    assert "code" in texts
