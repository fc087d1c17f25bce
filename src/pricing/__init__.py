"""Tour pricing — seasons, base-rate lookup, group discounts, rate calendar."""

from src.pricing.calendar import generate_rate_calendar, paginate_rates
from src.pricing.discounts import discounted_price, season_price_summary, tier_prices
from src.pricing.seasons import current_price, current_season, resolve_price, season_for_month

__all__ = [
    "current_season",
    "season_for_month",
    "resolve_price",
    "current_price",
    "discounted_price",
    "tier_prices",
    "season_price_summary",
    "generate_rate_calendar",
    "paginate_rates",
]
