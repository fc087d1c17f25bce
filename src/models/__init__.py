"""Domain enums shared by schemas, pricing and the document pipeline."""

from __future__ import annotations

from src.models.enums import ExportErrorKind, PageKind, SeasonTag, TravelerTier

__all__ = [
    "SeasonTag",
    "TravelerTier",
    "PageKind",
    "ExportErrorKind",
]
