"""Pydantic schemas for renderer-agnostic page descriptors.

A quote document is an ordered list of these pages. Text is already
formatted for display (dates, "N/A" fallbacks); money stays numeric so the
renderer chooses the currency format.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Annotated, Literal

from pydantic import BaseModel, Field

from src.models.enums import PageKind


class TableBlock(BaseModel):
    """A simple table: header row plus body rows of display strings.

    A single-cell row spans the full width (used for "no data" rows).
    """

    header: list[str]
    rows: list[list[str]] = Field(default_factory=list)


class CostLine(BaseModel):
    """``count × unit_price = amount`` for one traveler type."""

    label: str
    count: int
    unit_price: Decimal
    amount: Decimal


class Footer(BaseModel):
    """Footer block; ``page_label`` placeholders are resolved by the renderer."""

    quote_reference: str
    site_url: str
    page_label: str = "Page {page} of {pages}"


# ── Pages ─────────────────────────────────────────────────────────────


class CoverPage(BaseModel):
    kind: Literal[PageKind.COVER] = PageKind.COVER
    quote_number: str
    client_name: str
    tour_title: str
    tour_length: str
    travelers: str
    number_of_adults: int
    number_of_children: int
    start_date: str
    end_date: str
    overview: list[str]
    greeting: list[str]
    contact: list[str] = Field(default_factory=list)
    background_image: str | None = None


class DescriptionPage(BaseModel):
    kind: Literal[PageKind.DESCRIPTION] = PageKind.DESCRIPTION
    title: str = "Tour Description"
    description: str


class SummaryPage(BaseModel):
    kind: Literal[PageKind.SUMMARY] = PageKind.SUMMARY
    tour_title: str
    start_date: str
    end_date: str
    total_days: int
    starting_from: str
    ending_from: str
    table: TableBlock
    image: str | None = None


class DayPage(BaseModel):
    kind: Literal[PageKind.DAY] = PageKind.DAY
    day_number: int
    date_label: str
    destination: str
    title: str
    description: str
    activities: list[str]
    meals: list[str]
    accommodation: str
    destination_image: str | None = None
    accommodation_image: str | None = None
    time: str | None = None
    distance: str | None = None
    max_altitude: str | None = None


class CostBreakdownPage(BaseModel):
    kind: Literal[PageKind.COST_BREAKDOWN] = PageKind.COST_BREAKDOWN
    lines: list[CostLine]
    total: Decimal
    includes: list[str]
    excludes: list[str]
    payment_terms_title: str
    payment_terms: str


class ClosingPage(BaseModel):
    kind: Literal[PageKind.CLOSING] = PageKind.CLOSING
    heading: str
    message: str
    footer: Footer
    background_image: str | None = None


PageDescriptor = Annotated[
    CoverPage | DescriptionPage | SummaryPage | DayPage | CostBreakdownPage | ClosingPage,
    Field(discriminator="kind"),
]


def image_urls(pages: list[PageDescriptor]) -> list[str]:
    """Every distinct image URL referenced by the pages, in first-use order."""
    urls: list[str] = []
    for page in pages:
        candidates: list[str | None] = []
        if isinstance(page, (CoverPage, ClosingPage)):
            candidates.append(page.background_image)
        elif isinstance(page, SummaryPage):
            candidates.append(page.image)
        elif isinstance(page, DayPage):
            candidates.extend((page.destination_image, page.accommodation_image))
        for url in candidates:
            if url and url not in urls:
                urls.append(url)
    return urls
