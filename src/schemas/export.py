"""Pydantic schemas for export pipeline results.

A result is either a success carrying its payload or a failure carrying
an ExportErrorKind; the caller decides how to present it.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from src.models.enums import ExportErrorKind
from src.schemas.pages import PageDescriptor


class ExportResult(BaseModel):
    """Outcome of a PDF export."""

    ok: bool
    quote_id: str
    quote_number: str | None = None
    filename: str | None = None
    pdf: bytes | None = None
    page_count: int = 0
    error: ExportErrorKind | None = None
    message: str | None = None


class PagesResult(BaseModel):
    """Outcome of a page-descriptor preview."""

    ok: bool
    quote_id: str
    quote_number: str | None = None
    pages: list[PageDescriptor] = Field(default_factory=list)
    error: ExportErrorKind | None = None
    message: str | None = None
