"""Season resolution and base-rate lookup.

Pure functions, no I/O. Implements:
- Point-in-time season for a calendar date (month + day thresholds)
- Month-only season used by the rate calendar
- Price lookup for a traveler category within a season

Point-in-time thresholds:
  Jul, Aug, Dec 20–31, Jan 1–10  → HIGH
  Apr 1–30, May 1–19             → LOW
  everything else                → MID
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import date
from decimal import Decimal
from typing import Any

from src.config import settings
from src.models.enums import SeasonTag
from src.schemas.pricing import PricingTable

logger = logging.getLogger(__name__)


def current_season(on: date | None = None) -> SeasonTag:
    """Return the pricing season in effect on ``on`` (default: today)."""
    if on is None:
        on = date.today()
    month, day = on.month, on.day

    if month in (7, 8) or (month == 12 and day >= 20) or (month == 1 and day <= 10):
        return SeasonTag.HIGH
    if (month == 4 and day >= 1) or (month == 5 and day <= 19):
        return SeasonTag.LOW
    return SeasonTag.MID


def season_for_month(month: int) -> SeasonTag:
    """Month-only season rule used when laying out the rate calendar."""
    if month in (4, 5):
        return SeasonTag.LOW
    if month in (7, 8):
        return SeasonTag.HIGH
    return SeasonTag.MID


def as_pricing_table(table: PricingTable | Mapping[str, Any] | None) -> PricingTable:
    """Accept either a parsed table or the raw ``pricing.manual`` mapping."""
    if isinstance(table, PricingTable):
        return table
    if not isinstance(table, Mapping):
        return PricingTable()
    return PricingTable.model_validate(dict(table))


def resolve_price(
    table: PricingTable | Mapping[str, Any] | None,
    season: SeasonTag | str,
    category: str,
) -> Decimal | None:
    """Resolve the price of ``category`` in ``season``.

    Returns None (not available) when the season is missing or has no costs.
    An exact category match wins; otherwise the first cost entry is used.
    """
    pricing = as_pricing_table(table).for_season(SeasonTag(season))
    if pricing is None or not pricing.costs:
        return None

    for entry in pricing.costs:
        if entry.category == category:
            return entry.cost

    fallback = pricing.costs[0]
    logger.debug(
        "Category %r not priced in %s, falling back to %r",
        category,
        SeasonTag(season).value,
        fallback.category,
    )
    return fallback.cost


def current_price(
    table: PricingTable | Mapping[str, Any] | None,
    on: date | None = None,
) -> Decimal | None:
    """Headline base-rate price for the season in effect on ``on``."""
    return resolve_price(table, current_season(on), settings.render.base_category)
