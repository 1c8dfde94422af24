"""Tests for the Markdown builders of structured minutes and product specs."""

from __future__ import annotations

import pytest

from minutes_export.document_builders import mom_to_markdown, spec_to_markdown
from minutes_export.document_models import HeadingBlock, ListBlock, ParagraphBlock, TableBlock
from minutes_export.markdown import parse_to_blocks
from minutes_export.schemas.documents import MomReview, ProductSpec


@pytest.fixture
def review() -> MomReview:
    return MomReview.model_validate(
        {
            "projectName": "Atlas",
            "meetingTitle": "Sprint Review",
            "meetingDate": "2024-04-24",
            "attendees": [{"name": "Ann", "role": "PM"}, {"name": "Bob"}],
            "topics": [{"topic": "Release", "keyPoints": "Scope frozen", "decision": "Ship Friday"}],
            "actionItems": [{"action": "Deploy | verify", "pic": "Ann", "dueDate": "2024-05-01"}],
            "openIssues": [{"question": "Budget?"}],
            "nextMeeting": {"date": "2024-05-08", "agenda": ""},
        }
    )


def test_mom_markdown_renders_as_blocks(review: MomReview) -> None:
    blocks = parse_to_blocks(mom_to_markdown(review))

    assert blocks[0] == HeadingBlock(level=1, text="Sprint Review")
    assert blocks[1] == TableBlock(
        headers=["Item", "Detail"],
        rows=[["Project", "Atlas"], ["Date", "2024-04-24"]],
    )
    assert TableBlock(headers=["No", "Name", "Role"], rows=[["1", "Ann", "PM"], ["2", "Bob", "-"]]) in blocks
    assert TableBlock(
        headers=["No", "Action", "PIC", "Due Date"],
        rows=[["1", "Deploy | verify", "Ann", "2024-05-01"]],
    ) in blocks
    assert blocks[-2:] == [HeadingBlock(level=2, text="Next Meeting"), ListBlock(items=["Date: 2024-05-08"])]


def test_mom_markdown_skips_empty_sections(review: MomReview) -> None:
    markdown = mom_to_markdown(review)

    assert "## Risks" not in markdown
    assert "## Open Issues" in markdown


def test_empty_review_gets_default_title() -> None:
    assert mom_to_markdown(MomReview()) == "# Minutes of Meeting\n"


def test_spec_markdown_with_summary() -> None:
    spec = ProductSpec(
        product_overview="A tool that drafts minutes.",
        objectives=["Save time", "  "],
        key_features=["Export to PDF"],
    )

    blocks = parse_to_blocks(spec_to_markdown(spec, "Kick-off **summary**"))

    assert blocks == [
        HeadingBlock(level=1, text="Summary"),
        ParagraphBlock(text="Kick-off summary"),
        HeadingBlock(level=1, text="Product Specification"),
        HeadingBlock(level=2, text="Product Overview"),
        ParagraphBlock(text="A tool that drafts minutes."),
        HeadingBlock(level=2, text="Objectives"),
        ListBlock(items=["Save time"]),
        HeadingBlock(level=2, text="Key Features"),
        ListBlock(items=["Export to PDF"]),
    ]
