"""Display formatting for quote documents.

Every formatter is total: a missing or unusable value renders as "N/A".
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal, InvalidOperation

from src.config import settings

NOT_AVAILABLE = "N/A"


def format_long_date(value: date | datetime | None) -> str:
    """Format as "Monday, July 1, 2024"."""
    if value is None:
        return NOT_AVAILABLE
    try:
        return f"{value:%A}, {value:%B} {value.day}, {value.year}"
    except (AttributeError, TypeError, ValueError):
        return NOT_AVAILABLE


def format_currency(value: Decimal | float | int | None, symbol: str | None = None) -> str:
    """Format as symbol-prefixed currency: 1234.5 -> "$1,234.50"."""
    if value is None:
        return NOT_AVAILABLE
    if symbol is None:
        symbol = settings.render.currency_symbol
    try:
        d = Decimal(str(value))
    except InvalidOperation:
        return NOT_AVAILABLE
    if not d.is_finite():
        return NOT_AVAILABLE
    sign = "-" if d < 0 else ""
    return f"{sign}{symbol}{abs(d):,.2f}"


def or_na(value: str | None) -> str:
    """The value itself, or "N/A" when missing or blank."""
    return value if value else NOT_AVAILABLE
