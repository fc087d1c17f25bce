"""Group-size discount ladder.

Pure Python, Decimal arithmetic. The ladder is derived from the season's
2-person base rate with fixed multipliers:

  2 persons   → base
  4 persons   → base × 0.92  (8% off)
  6+ persons  → base × 0.90  (10% off)
"""

from __future__ import annotations

from collections.abc import Mapping
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from src.config import settings
from src.models.enums import SeasonTag, TravelerTier
from src.pricing.seasons import resolve_price
from src.schemas.pricing import PricingTable, SeasonPriceSummary

TIER_MULTIPLIERS: dict[TravelerTier, Decimal] = {
    TravelerTier.TWO: Decimal("1"),
    TravelerTier.FOUR: Decimal("0.92"),
    TravelerTier.SIX_PLUS: Decimal("0.90"),
}

# Display order on the public price table
SEASON_ORDER: tuple[SeasonTag, ...] = (SeasonTag.LOW, SeasonTag.MID, SeasonTag.HIGH)


def to_money(value: Decimal) -> Decimal:
    """Round to 2 decimal places."""
    return value.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


def _parse_tier(tier: TravelerTier | str) -> TravelerTier:
    if isinstance(tier, TravelerTier):
        return tier
    try:
        return TravelerTier(str(tier).strip().lower())
    except ValueError:
        msg = f"Unknown traveler tier: {tier!r}"
        raise ValueError(msg) from None


def discounted_price(base_price: Decimal | int | str, tier: TravelerTier | str) -> Decimal:
    """Apply the tier multiplier to a base price, rounded half-up to cents.

    Raises ValueError for a tier label outside the ladder.
    """
    multiplier = TIER_MULTIPLIERS[_parse_tier(tier)]
    return to_money(Decimal(str(base_price)) * multiplier)


def tier_prices(base_price: Decimal) -> dict[TravelerTier, Decimal]:
    """Build the full 2 / 4 / 6+ ladder from a base price."""
    return {tier: discounted_price(base_price, tier) for tier in TravelerTier}


def season_price_summary(
    table: PricingTable | Mapping[str, Any] | None,
) -> list[SeasonPriceSummary]:
    """Per-season display prices, Low → Mid → High.

    A season without costs is reported as unavailable with no tier prices.
    """
    summaries: list[SeasonPriceSummary] = []
    for season in SEASON_ORDER:
        base = resolve_price(table, season, settings.render.base_category)
        if base is None:
            summaries.append(SeasonPriceSummary(season=season, label=season.label, available=False))
            continue
        summaries.append(SeasonPriceSummary(
            season=season,
            label=season.label,
            available=True,
            base_price=to_money(base),
            tiers=tier_prices(base),
        ))
    return summaries
