"""Pydantic schemas for seasonal tour pricing and the rate calendar.

Pure data classes — no business logic. The input models accept the
camelCase keys the admin editor stores; outputs use snake_case.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from src.models.enums import SeasonTag, TravelerTier


def _coerce_amount(value: Any) -> Decimal | None:
    """Accept numbers or numeric strings; blanks and junk become None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        return value
    try:
        text = str(value).strip()
        return Decimal(text) if text else None
    except InvalidOperation:
        return None


# ── Input tables ──────────────────────────────────────────────────────


class CostEntry(BaseModel):
    """One traveler-category price in a season, e.g. ("2 Persons", 1000)."""

    model_config = ConfigDict(extra="ignore")

    category: str = ""
    cost: Decimal | None = None
    discount: Decimal = Decimal("0")

    @field_validator("category", mode="before")
    @classmethod
    def _category_text(cls, v: Any) -> str:
        return "" if v is None else str(v)

    @field_validator("cost", mode="before")
    @classmethod
    def _cost_amount(cls, v: Any) -> Decimal | None:
        return _coerce_amount(v)

    @field_validator("discount", mode="before")
    @classmethod
    def _discount_amount(cls, v: Any) -> Decimal:
        return _coerce_amount(v) or Decimal("0")


class SeasonPricing(BaseModel):
    """Ordered cost entries for a single season."""

    model_config = ConfigDict(extra="ignore")

    costs: list[CostEntry] = Field(default_factory=list)

    @field_validator("costs", mode="before")
    @classmethod
    def _costs_list(cls, v: Any) -> list:
        """Entries that are not objects (null, bare strings) are dropped."""
        if not isinstance(v, list):
            return []
        return [item for item in v if isinstance(item, (Mapping, CostEntry))]


class PricingTable(BaseModel):
    """The ``pricing.manual`` table: one optional entry per season."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    high_season: SeasonPricing | None = Field(default=None, alias="highSeason")
    mid_season: SeasonPricing | None = Field(default=None, alias="midSeason")
    low_season: SeasonPricing | None = Field(default=None, alias="lowSeason")

    @field_validator("high_season", "mid_season", "low_season", mode="before")
    @classmethod
    def _season_entry(cls, v: Any) -> Any:
        # A season stored as anything but an object counts as absent
        return v if isinstance(v, (Mapping, SeasonPricing)) else None

    def for_season(self, season: SeasonTag) -> SeasonPricing | None:
        """Return the season's pricing, or None when the season is absent."""
        return {
            SeasonTag.HIGH: self.high_season,
            SeasonTag.MID: self.mid_season,
            SeasonTag.LOW: self.low_season,
        }[season]


# ── Outputs ───────────────────────────────────────────────────────────


class RateRow(BaseModel):
    """A bookable date window and the price of one traveler category.

    Serializes ``start``/``end`` as ``from``/``to``.
    """

    start: date = Field(serialization_alias="from")
    end: date = Field(serialization_alias="to")
    season: SeasonTag
    category: str
    price: Decimal | None = None


class RatePage(BaseModel):
    """One page of the rate calendar."""

    items: list[RateRow]
    page: int
    per_page: int
    total: int
    total_pages: int


class SeasonPriceSummary(BaseModel):
    """Displayable prices for one season: the base rate and its tier ladder."""

    season: SeasonTag
    label: str
    available: bool
    base_price: Decimal | None = None
    tiers: dict[TravelerTier, Decimal] = Field(default_factory=dict)
