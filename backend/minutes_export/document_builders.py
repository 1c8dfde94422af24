"""Build Markdown documents from structured meeting and specification records."""
from __future__ import annotations

from typing import Iterable, Sequence

from .schemas.documents import MomReview, ProductSpec


def _cell(value: str) -> str:
    return " ".join((value or "").split()).replace("|", "\\|") or "-"


def _table(headers: Sequence[str], rows: Iterable[Sequence[str]]) -> list[str]:
    lines = [
        "| " + " | ".join(headers) + " |",
        "|" + "---|" * len(headers),
    ]
    lines.extend("| " + " | ".join(_cell(value) for value in row) + " |" for row in rows)
    return lines


def _section(lines: list[str], title: str, body: list[str]) -> None:
    lines.extend([f"## {title}", "", *body, ""])


def mom_to_markdown(review: MomReview) -> str:
    """Render a reviewed Minutes of Meeting as Markdown."""

    lines: list[str] = [f"# {review.meeting_title.strip() or 'Minutes of Meeting'}", ""]

    details = [
        ("Project", review.project_name),
        ("Objective", review.meeting_objective),
        ("Date", review.meeting_date),
        ("Time", review.meeting_time),
        ("Location", review.meeting_location),
    ]
    filled = [(label, value) for label, value in details if value.strip()]
    if filled:
        lines.extend(_table(["Item", "Detail"], filled))
        lines.append("")

    if review.attendees:
        _section(lines, "Attendees", _table(
            ["No", "Name", "Role"],
            ([str(index), item.name, item.role] for index, item in enumerate(review.attendees, 1)),
        ))
    if review.topics:
        _section(lines, "Discussion", _table(
            ["Topic", "Key Points", "Decision"],
            ([item.topic, item.key_points, item.decision] for item in review.topics),
        ))
    if review.action_items:
        _section(lines, "Action Items", _table(
            ["No", "Action", "PIC", "Due Date"],
            (
                [str(index), item.action, item.pic, item.due_date]
                for index, item in enumerate(review.action_items, 1)
            ),
        ))
    if review.risks:
        _section(lines, "Risks", _table(
            ["Risk", "Impact", "Mitigation"],
            ([item.risk, item.impact, item.mitigation] for item in review.risks),
        ))
    if review.open_issues:
        _section(lines, "Open Issues", _table(
            ["Question", "Owner"],
            ([item.question, item.owner] for item in review.open_issues),
        ))

    upcoming = review.next_meeting
    agenda = [
        f"**{label}:** {value.strip()}"
        for label, value in (
            ("Date", upcoming.date),
            ("Agenda", upcoming.agenda),
            ("Expected Outcome", upcoming.expected_outcome),
        )
        if value.strip()
    ]
    if agenda:
        _section(lines, "Next Meeting", [f"- {item}" for item in agenda])

    return "\n".join(lines).strip() + "\n"


def spec_to_markdown(spec: ProductSpec, summary: str | None = None) -> str:
    """Render a product specification, optionally preceded by a summary."""

    lines: list[str] = []
    if summary and summary.strip():
        lines.extend(["# Summary", "", summary.strip(), ""])

    lines.extend(["# Product Specification", ""])
    if spec.product_overview.strip():
        _section(lines, "Product Overview", [spec.product_overview.strip()])

    sections = (
        ("Objectives", spec.objectives),
        ("Key Features", spec.key_features),
        ("Functional Requirements", spec.functional_requirements),
        ("Non-functional Requirements", spec.non_functional_requirements),
        ("User Stories", spec.user_stories),
        ("Constraints / Risks", spec.constraints_risks),
        ("Open Questions", spec.open_questions),
        ("UI/UX Requirements", spec.ui_ux_requirements),
    )
    for title, items in sections:
        cleaned = [item.strip() for item in items if item and item.strip()]
        if cleaned:
            _section(lines, title, [f"- {item}" for item in cleaned])

    return "\n".join(lines).strip() + "\n"


__all__ = ["mom_to_markdown", "spec_to_markdown"]
