"""Pydantic schemas for normalized quote and tour records.

These are the fully-defaulted internal shapes produced by
``src.quotes.normalize``. Downstream code (document builder, pricing)
reads them directly without re-checking for missing fields.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Annotated, Literal

from pydantic import BaseModel, Field

from src.schemas.pricing import PricingTable


# ── Itinerary references ──────────────────────────────────────────────


class Destination(BaseModel):
    """Destination reference: display label plus image URLs."""

    label: str | None = None
    images: list[str] = Field(default_factory=list)


class NamedAccommodation(BaseModel):
    """Accommodation known only by name."""

    kind: Literal["named"] = "named"
    name: str


class DetailedAccommodation(BaseModel):
    """Accommodation reference from the accommodations catalogue."""

    kind: Literal["detailed"] = "detailed"
    name: str | None = None
    images: list[str] = Field(default_factory=list)


AccommodationRef = Annotated[
    NamedAccommodation | DetailedAccommodation,
    Field(discriminator="kind"),
]


class ItineraryDay(BaseModel):
    """One day of the itinerary. ``day_number`` is the 1-based position."""

    day_number: int
    title: str | None = None
    description: str = ""
    destination: Destination | None = None
    accommodation: AccommodationRef | None = None
    meals: list[str] = Field(default_factory=list)
    activities: list[str] = Field(default_factory=list)
    time: str | None = None
    distance: str | None = None
    max_altitude: str | None = None

    @property
    def destination_label(self) -> str | None:
        return self.destination.label if self.destination else None

    @property
    def accommodation_name(self) -> str | None:
        return self.accommodation.name if self.accommodation else None

    @property
    def destination_image(self) -> str | None:
        if self.destination and self.destination.images:
            return self.destination.images[0]
        return None

    @property
    def accommodation_image(self) -> str | None:
        if isinstance(self.accommodation, DetailedAccommodation) and self.accommodation.images:
            return self.accommodation.images[0]
        return None


# ── Quote sections ────────────────────────────────────────────────────


class ClientInfo(BaseModel):
    client_name: str | None = None
    email: str | None = None
    starting_day: date | None = None
    ending_day: date | None = None


class TourInfo(BaseModel):
    tour_title: str | None = None
    description: str = ""
    starting_from: str | None = None
    ending_from: str | None = None
    logo_url: str | None = None
    destinations_images: list[str] = Field(default_factory=list)


class QuotePricing(BaseModel):
    """Traveler counts, unit prices, inclusions and the seasonal table."""

    number_of_adults: int = 0
    number_of_children: int = 0
    adult_price: Decimal = Decimal("0")
    child_price: Decimal = Decimal("0")
    include: list[str] = Field(default_factory=list)
    exclude: list[str] = Field(default_factory=list)
    manual: PricingTable = Field(default_factory=PricingTable)


class PaymentTerms(BaseModel):
    title: str = "Payment Terms"
    description: str = ""


class Quote(BaseModel):
    """A client-specific itinerary and price quote."""

    quote_number: str
    total_days: int = 0
    client_info: ClientInfo = Field(default_factory=ClientInfo)
    tour_info: TourInfo = Field(default_factory=TourInfo)
    itinerary: list[ItineraryDay] = Field(default_factory=list)
    pricing: QuotePricing = Field(default_factory=QuotePricing)
    payment_terms: PaymentTerms = Field(default_factory=PaymentTerms)


class Tour(BaseModel):
    """The slice of a tour package needed for public pricing."""

    title: str | None = None
    duration_days: int = 0
    pricing: PricingTable = Field(default_factory=PricingTable)
