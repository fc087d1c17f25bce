"""Domain enums used across Pydantic schemas, pricing and document building.

All enums use str mixin so they serialize as their raw value in JSON.
"""

from __future__ import annotations

from enum import Enum


class SeasonTag(str, Enum):
    """Pricing season — values match the keys of a tour's ``pricing.manual`` table."""

    HIGH = "highSeason"
    MID = "midSeason"
    LOW = "lowSeason"

    @property
    def label(self) -> str:
        return {
            SeasonTag.HIGH: "High Season",
            SeasonTag.MID: "Mid Season",
            SeasonTag.LOW: "Low Season",
        }[self]


class TravelerTier(str, Enum):
    """Group-size tier used for the discount ladder."""

    TWO = "2 persons"
    FOUR = "4 persons"
    SIX_PLUS = "6+ persons"


class PageKind(str, Enum):
    """Kind of page produced by the document builder, in document order."""

    COVER = "cover"
    DESCRIPTION = "description"
    SUMMARY = "summary"
    DAY = "day"
    COST_BREAKDOWN = "cost_breakdown"
    CLOSING = "closing"


class ExportErrorKind(str, Enum):
    """Why a quote export failed — mapped to a user-facing message by the caller."""

    NOT_FOUND = "not_found"
    STORE_UNAVAILABLE = "store_unavailable"
    MALFORMED_QUOTE = "malformed_quote"
    RENDER_FAILED = "render_failed"
