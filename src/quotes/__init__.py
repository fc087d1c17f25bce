"""Quote records — normalization from the stored document shape."""

from src.quotes.normalize import (
    MalformedQuoteError,
    derive_quote_number,
    derive_total_days,
    parse_quote,
    parse_tour,
)

__all__ = [
    "MalformedQuoteError",
    "parse_quote",
    "parse_tour",
    "derive_total_days",
    "derive_quote_number",
]
