"""Quote normalization — turns a raw stored quote into a fully-defaulted Quote.

The admin editor stores quotes as loosely-typed documents: nested sections
may be missing, dates arrive as strings, accommodation is sometimes a plain
name and sometimes a catalogue object, meals may be strings or ``{label}``
objects. Everything is resolved here, once, so the document builder and the
pricing code never deal with absent or oddly-shaped fields.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any

from src.config import settings
from src.schemas.pricing import PricingTable
from src.schemas.quote import (
    AccommodationRef,
    ClientInfo,
    DetailedAccommodation,
    Destination,
    ItineraryDay,
    NamedAccommodation,
    PaymentTerms,
    Quote,
    QuotePricing,
    Tour,
    TourInfo,
)

logger = logging.getLogger(__name__)


class MalformedQuoteError(ValueError):
    """Raised when the stored record is not a mapping at all."""


def parse_quote(raw: Mapping[str, Any], quote_id: str | None = None) -> Quote:
    """Normalize a stored quote document.

    Args:
        raw: The document as stored (camelCase keys).
        quote_id: Document id, used to derive the reference number when
            the record has none.

    Raises:
        MalformedQuoteError: If ``raw`` is not a mapping.
    """
    if not isinstance(raw, Mapping):
        msg = f"Quote record must be a mapping, got {type(raw).__name__}"
        raise MalformedQuoteError(msg)

    client_info = _parse_client(_section(raw, "clientInfo"))
    itinerary = [
        _parse_day(entry if isinstance(entry, Mapping) else {}, position)
        for position, entry in enumerate(_list(raw.get("itinerary")), start=1)
    ]

    return Quote(
        quote_number=derive_quote_number(raw.get("quoteNumber"), quote_id),
        total_days=derive_total_days(
            raw.get("totalDays"), client_info.starting_day, client_info.ending_day,
        ),
        client_info=client_info,
        tour_info=_parse_tour_info(_section(raw, "tourInfo")),
        itinerary=itinerary,
        pricing=_parse_pricing(_section(raw, "pricing")),
        payment_terms=_parse_payment_terms(_section(raw, "paymentTerms")),
    )


def parse_tour(raw: Mapping[str, Any]) -> Tour:
    """Extract title, duration and the seasonal pricing table from a tour package."""
    if not isinstance(raw, Mapping):
        msg = f"Tour record must be a mapping, got {type(raw).__name__}"
        raise MalformedQuoteError(msg)

    basic = _section(raw, "basicInfo")
    pricing = _section(raw, "pricing")
    return Tour(
        title=_text(basic.get("tourTitle")),
        duration_days=max(_safe_int(basic.get("durationValue")) or 0, 0),
        pricing=_parse_table(pricing.get("manual")),
    )


def derive_total_days(stored: Any, start: date | None, end: date | None) -> int:
    """Stored day count when positive, else the inclusive span between dates."""
    days = _safe_int(stored)
    if days is not None and days > 0:
        return days
    if start is None or end is None:
        return 0
    span = (end - start).days + 1
    return span if span > 0 else 0


def derive_quote_number(stored: Any, quote_id: str | None) -> str:
    """Stored reference, else prefix + first 8 chars of the document id."""
    number = _text(stored)
    if number:
        return number
    if quote_id:
        return f"{settings.branding.quote_prefix}{quote_id[:8]}"
    return "N/A"


# ── Section parsers ───────────────────────────────────────────────────


def _parse_client(data: Mapping[str, Any]) -> ClientInfo:
    return ClientInfo(
        client_name=_text(data.get("clientName")),
        email=_text(data.get("email")),
        starting_day=_safe_date(data.get("startingDay")),
        ending_day=_safe_date(data.get("endingDay")),
    )


def _parse_tour_info(data: Mapping[str, Any]) -> TourInfo:
    return TourInfo(
        tour_title=_text(data.get("tourTitle")),
        description=_text(data.get("description")) or "",
        starting_from=_text(data.get("startingFrom")),
        ending_from=_text(data.get("endingFrom")),
        logo_url=_text(data.get("logoUrl")),
        destinations_images=_images(data.get("destinationsImages")),
    )


def _parse_pricing(data: Mapping[str, Any]) -> QuotePricing:
    return QuotePricing(
        number_of_adults=max(_safe_int(data.get("numberOfAdults")) or 0, 0),
        number_of_children=max(_safe_int(data.get("numberOfChildren")) or 0, 0),
        adult_price=_safe_decimal(data.get("adultPrice")) or Decimal("0"),
        child_price=_safe_decimal(data.get("childPrice")) or Decimal("0"),
        include=_item_values(data.get("include")),
        exclude=_item_values(data.get("exclude")),
        manual=_parse_table(data.get("manual")),
    )


def _parse_payment_terms(data: Mapping[str, Any]) -> PaymentTerms:
    return PaymentTerms(
        title=_text(data.get("title")) or "Payment Terms",
        description=_text(data.get("description")) or "",
    )


def _parse_table(value: Any) -> PricingTable:
    if not isinstance(value, Mapping):
        return PricingTable()
    return PricingTable.model_validate(dict(value))


def _parse_day(data: Mapping[str, Any], position: int) -> ItineraryDay:
    return ItineraryDay(
        day_number=position,
        title=_text(data.get("title")),
        description=_text(data.get("description")) or "",
        destination=_parse_destination(data.get("destination")),
        accommodation=_parse_accommodation(data.get("accommodation"), data.get("accommodationName")),
        meals=_labels(data.get("meals"), "label"),
        activities=_labels(data.get("activities"), "activityName", "label", "name"),
        time=_text(data.get("time")),
        distance=_text(data.get("distance")),
        max_altitude=_text(data.get("maxAltitude")),
    )


def _parse_destination(value: Any) -> Destination | None:
    """Single reference, list of references, or a bare label."""
    if isinstance(value, str):
        label = _text(value)
        return Destination(label=label) if label else None
    if isinstance(value, Mapping):
        return Destination(label=_text(value.get("label")), images=_images(value.get("images")))
    if isinstance(value, list):
        refs = [_parse_destination(v) for v in value]
        refs = [r for r in refs if r is not None]
        if not refs:
            return None
        labels = [r.label for r in refs if r.label]
        return Destination(
            label=", ".join(labels) or None,
            images=[url for r in refs for url in r.images],
        )
    return None


def _parse_accommodation(value: Any, legacy_name: Any) -> AccommodationRef | None:
    """Resolve the accommodation variant; ``accommodationName`` wins for the name."""
    name = _text(legacy_name)
    if isinstance(value, Mapping):
        return DetailedAccommodation(
            name=name or _text(value.get("name")) or _text(value.get("label")),
            images=_images(value.get("images")),
        )
    if isinstance(value, str):
        name = name or _text(value)
    return NamedAccommodation(name=name) if name else None


# ── Value helpers ─────────────────────────────────────────────────────


def _section(raw: Mapping[str, Any], key: str) -> Mapping[str, Any]:
    value = raw.get(key)
    return value if isinstance(value, Mapping) else {}


def _list(value: Any) -> list:
    return value if isinstance(value, list) else []


def _text(value: Any) -> str | None:
    """Stripped string, or None for missing/blank values."""
    if value is None or isinstance(value, (Mapping, list)):
        return None
    text = str(value).strip()
    return text or None


def _images(value: Any) -> list[str]:
    """Image URLs from ``[{url}, ...]`` or ``[str, ...]``; entries without a URL are dropped."""
    urls: list[str] = []
    for item in _list(value):
        url = _text(item.get("url")) if isinstance(item, Mapping) else _text(item)
        if url:
            urls.append(url)
    return urls


def _labels(value: Any, *keys: str) -> list[str]:
    """Display strings from objects (first matching key) or bare strings."""
    labels: list[str] = []
    for item in _list(value):
        if isinstance(item, Mapping):
            label = next((_text(item.get(k)) for k in keys if _text(item.get(k))), None)
        else:
            label = _text(item)
        if label:
            labels.append(label)
    return labels


def _item_values(value: Any) -> list[str]:
    """Include/exclude items are stored as ``{value, label}`` option objects."""
    return _labels(value, "value", "label")


def _safe_int(value: Any) -> int | None:
    """Safely convert to int, returning None on failure."""
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(float(value))
    except (ValueError, TypeError, OverflowError):
        return None


def _safe_decimal(value: Any) -> Decimal | None:
    """Safely convert to Decimal, returning None on failure."""
    if value is None or isinstance(value, bool):
        return None
    try:
        d = Decimal(str(value).strip())
    except (InvalidOperation, ValueError, TypeError):
        return None
    return d if d.is_finite() else None


def _safe_date(value: Any) -> date | None:
    """Parse a stored date; unparseable values become None."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str) and value.strip():
        try:
            return datetime.fromisoformat(value.strip()).date()
        except ValueError:
            logger.debug("Unparseable date %r", value)
    return None
