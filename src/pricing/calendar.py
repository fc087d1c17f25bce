"""Rate calendar — one year of bookable date windows with their prices.

Windows are laid end to end: each window spans ``duration_days`` and the
next one starts the day after it ends. A window fans out into one row per
cost entry of its season, so every traveler category gets its own row.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping
from datetime import date, timedelta
from typing import Any

from src.pricing.seasons import as_pricing_table, season_for_month
from src.schemas.pricing import PricingTable, RatePage, RateRow

logger = logging.getLogger(__name__)


def _one_year_after(start: date) -> date:
    try:
        return start.replace(year=start.year + 1)
    except ValueError:
        # Feb 29 → Feb 28
        return start.replace(year=start.year + 1, day=28)


def generate_rate_calendar(
    table: PricingTable | Mapping[str, Any] | None,
    duration_days: int,
    window_start: date | None = None,
    window_end: date | None = None,
) -> list[RateRow]:
    """Materialize the rate calendar between ``window_start`` and ``window_end``.

    Args:
        table: The tour's ``pricing.manual`` table (parsed or raw).
        duration_days: Tour length; each window is [start, start + duration_days].
        window_start: First window start (default: today).
        window_end: Exclusive bound on window starts (default: one year after start).

    Returns:
        Rows in chronological order. Seasons without costs contribute no rows.
    """
    if duration_days < 0:
        msg = f"duration_days must be >= 0, got {duration_days}"
        raise ValueError(msg)

    pricing = as_pricing_table(table)
    start = window_start or date.today()
    end = window_end or _one_year_after(start)
    step = timedelta(days=duration_days + 1)
    length = timedelta(days=duration_days)

    rows: list[RateRow] = []
    current = start
    while current < end:
        season = season_for_month(current.month)
        season_pricing = pricing.for_season(season)
        if season_pricing is not None:
            rows.extend(
                RateRow(
                    start=current,
                    end=current + length,
                    season=season,
                    category=entry.category,
                    price=entry.cost,
                )
                for entry in season_pricing.costs
            )
        current += step

    logger.debug("Rate calendar: %d rows from %s to %s", len(rows), start, end)
    return rows


def paginate_rates(rates: list[RateRow], page: int = 1, per_page: int = 5) -> RatePage:
    """Slice the calendar for display. Pages are 1-based."""
    if per_page < 1:
        msg = f"per_page must be >= 1, got {per_page}"
        raise ValueError(msg)
    page = max(page, 1)
    offset = (page - 1) * per_page
    return RatePage(
        items=rates[offset:offset + per_page],
        page=page,
        per_page=per_page,
        total=len(rates),
        total_pages=math.ceil(len(rates) / per_page),
    )
