"""Quote document builder — turns a Quote into an ordered list of page descriptors.

Page order is fixed:
- Cover (reference, client, dates, travelers, day overview, greeting)
- Tour description
- Travel summary with the day-by-day table
- One page per itinerary day, in itinerary order
- Cost breakdown with inclusions / exclusions
- Closing page with footer

Pure transformation: the input quote is never mutated and no I/O happens
here. Missing fields render as "N/A" (or an empty list / no image) so the
document always builds to completion.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import timedelta
from typing import Any

from src.config import settings
from src.document.formatters import NOT_AVAILABLE, format_long_date, or_na
from src.pricing.discounts import to_money
from src.quotes.normalize import parse_quote
from src.schemas.pages import (
    ClosingPage,
    CostBreakdownPage,
    CostLine,
    CoverPage,
    DayPage,
    DescriptionPage,
    Footer,
    PageDescriptor,
    SummaryPage,
    TableBlock,
)
from src.schemas.quote import ItineraryDay, Quote

logger = logging.getLogger(__name__)

NO_ITINERARY = "No itinerary details available"
SUMMARY_HEADER = ["Day", "Main Destination", "Accommodation", "Meal Plan"]


def build_pages(quote: Quote | Mapping[str, Any]) -> list[PageDescriptor]:
    """Build the full page sequence for a quote.

    Accepts a normalized Quote or the raw stored mapping (normalized here).
    A quote with N itinerary days always yields N + 5 pages.
    """
    if not isinstance(quote, Quote):
        quote = parse_quote(quote)

    pages: list[PageDescriptor] = [
        _build_cover(quote),
        _build_description(quote),
        _build_summary(quote),
    ]
    pages.extend(_build_day(quote, day, index) for index, day in enumerate(quote.itinerary))
    pages.append(_build_cost_breakdown(quote))
    pages.append(_build_closing(quote))

    logger.debug("Built %d pages for quote %s", len(pages), quote.quote_number)
    return pages


# ── Shared helpers ────────────────────────────────────────────────────


def _meal_plan(day: ItineraryDay) -> str:
    return ", ".join(day.meals) or NOT_AVAILABLE


def _travelers(adults: int, children: int) -> str:
    text = f"{adults} Adult(s)"
    if children:
        text += f", {children} Child(ren)"
    return text


def _first_image(quote: Quote) -> str | None:
    """Day 1 destination image, used as the cover/closing background."""
    if quote.itinerary:
        return quote.itinerary[0].destination_image
    return None


# ── Pages ─────────────────────────────────────────────────────────────


def _build_cover(quote: Quote) -> CoverPage:
    client = quote.client_info
    tour = quote.tour_info
    pricing = quote.pricing
    brand = settings.branding

    client_name = or_na(client.client_name)
    tour_title = or_na(tour.tour_title)
    start = format_long_date(client.starting_day)
    end = format_long_date(client.ending_day)

    overview = [
        f"Day {day.day_number}: {or_na(day.destination_label)} - "
        f"{or_na(day.accommodation_name)} ({_meal_plan(day)})"
        for day in quote.itinerary
    ] or [NO_ITINERARY]

    greeting = [
        f"Dear {client_name},",
        f"We are delighted to present this custom-made quote for your {tour_title}. "
        f"Your tour starts on {start} in {or_na(tour.starting_from)} and runs for "
        f"{quote.total_days} days, ending on {end} in {or_na(tour.ending_from)}.",
        "Please review all details and let us know if you have any questions.",
        "Best regards,",
        brand.company_name,
    ]

    return CoverPage(
        quote_number=quote.quote_number,
        client_name=client_name,
        tour_title=tour_title,
        tour_length=f"{quote.total_days} Days",
        travelers=_travelers(pricing.number_of_adults, pricing.number_of_children),
        number_of_adults=pricing.number_of_adults,
        number_of_children=pricing.number_of_children,
        start_date=start,
        end_date=end,
        overview=overview,
        greeting=greeting,
        contact=[brand.phone, brand.info_email, brand.site_url, brand.address],
        background_image=_first_image(quote),
    )


def _build_description(quote: Quote) -> DescriptionPage:
    return DescriptionPage(description=quote.tour_info.description)


def _build_summary(quote: Quote) -> SummaryPage:
    rows = [
        [
            f"Day {day.day_number}",
            or_na(day.destination_label),
            or_na(day.accommodation_name),
            _meal_plan(day),
        ]
        for day in quote.itinerary
    ] or [[NO_ITINERARY]]

    return SummaryPage(
        tour_title=or_na(quote.tour_info.tour_title),
        start_date=format_long_date(quote.client_info.starting_day),
        end_date=format_long_date(quote.client_info.ending_day),
        total_days=quote.total_days,
        starting_from=or_na(quote.tour_info.starting_from),
        ending_from=or_na(quote.tour_info.ending_from),
        table=TableBlock(header=list(SUMMARY_HEADER), rows=rows),
        image=_first_image(quote),
    )


def _build_day(quote: Quote, day: ItineraryDay, index: int) -> DayPage:
    """Day page; the banner date is the start date plus the day's index."""
    day_number = index + 1
    start = quote.client_info.starting_day
    day_date = None
    if start is not None:
        try:
            day_date = start + timedelta(days=index)
        except OverflowError:
            logger.debug("Day %d date past the calendar range (start %s)", day_number, start)

    return DayPage(
        day_number=day_number,
        date_label=format_long_date(day_date),
        destination=or_na(day.destination_label),
        title=day.title or f"Day {day_number}",
        description=day.description,
        activities=list(day.activities),
        meals=list(day.meals),
        accommodation=or_na(day.accommodation_name),
        destination_image=day.destination_image,
        accommodation_image=day.accommodation_image,
        time=day.time,
        distance=day.distance,
        max_altitude=day.max_altitude,
    )


def _build_cost_breakdown(quote: Quote) -> CostBreakdownPage:
    pricing = quote.pricing
    lines = [
        CostLine(
            label="Adults",
            count=pricing.number_of_adults,
            unit_price=pricing.adult_price,
            amount=to_money(pricing.number_of_adults * pricing.adult_price),
        ),
    ]
    if pricing.number_of_children > 0:
        lines.append(CostLine(
            label="Children",
            count=pricing.number_of_children,
            unit_price=pricing.child_price,
            amount=to_money(pricing.number_of_children * pricing.child_price),
        ))

    return CostBreakdownPage(
        lines=lines,
        total=to_money(
            pricing.number_of_adults * pricing.adult_price
            + pricing.number_of_children * pricing.child_price
        ),
        includes=list(pricing.include),
        excludes=list(pricing.exclude),
        payment_terms_title=quote.payment_terms.title,
        payment_terms=quote.payment_terms.description,
    )


def _build_closing(quote: Quote) -> ClosingPage:
    brand = settings.branding
    return ClosingPage(
        heading=brand.closing_heading,
        message=f"Thank you for choosing {brand.company_name}.",
        footer=Footer(quote_reference=quote.quote_number, site_url=brand.site_url),
        background_image=_first_image(quote),
    )
