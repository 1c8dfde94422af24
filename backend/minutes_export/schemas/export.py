"""Schemas for download and conversion endpoints."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

from .documents import MomReview, ProductSpec


class MarkdownExportRequest(BaseModel):
    markdown: Optional[str] = Field(default=None, description="Markdown to render")
    filename: Optional[str] = Field(
        default=None,
        description="Name of the downloaded file; the extension is added when missing.",
    )


class MomExportRequest(BaseModel):
    review: MomReview = Field(..., description="Reviewed Minutes of Meeting")
    filename: Optional[str] = Field(default=None, description="Name of the downloaded file")


class SpecExportRequest(BaseModel):
    spec: Optional[ProductSpec] = Field(default=None, description="Product specification to export")
    summary: Optional[str] = Field(default=None, description="Optional Markdown summary placed first")


class ConvertToMarkdownResponse(BaseModel):
    markdown: str = Field(..., description="Markdown produced from the uploaded document")
    filename: str = Field(..., description="Original uploaded file name")
