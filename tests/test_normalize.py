"""Tests for quote and tour normalization.

Covers:
- Full stored quote → Quote with every section resolved
- Accommodation variants (legacy name, catalogue object, bare string)
- Destination shapes (object, list, bare label)
- Date parsing, total-day derivation, quote-number derivation
- Non-mapping records rejected; missing sections defaulted
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

import pytest

from src.quotes.normalize import (
    MalformedQuoteError,
    derive_quote_number,
    derive_total_days,
    parse_quote,
    parse_tour,
)
from src.schemas.quote import DetailedAccommodation, NamedAccommodation
from tests.factories import make_raw_quote, make_raw_tour


class TestParseQuote:
    def test_header_fields(self, raw_quote) -> None:
        quote = parse_quote(raw_quote)
        assert quote.quote_number == "SN-2024-001"
        assert quote.total_days == 3
        assert quote.client_info.client_name == "Jane Doe"
        assert quote.client_info.starting_day == date(2024, 7, 1)
        assert quote.client_info.ending_day == date(2024, 7, 3)
        assert quote.tour_info.tour_title == "Serengeti Explorer"
        assert quote.tour_info.destinations_images == ["https://img.test/cover.jpg"]

    def test_day_positions_are_one_based(self, raw_quote) -> None:
        quote = parse_quote(raw_quote)
        assert [d.day_number for d in quote.itinerary] == [1, 2, 3]

    def test_day_labels(self, raw_quote) -> None:
        day1, day2, _ = parse_quote(raw_quote).itinerary
        assert day1.meals == ["Dinner"]
        assert day1.activities == ["Airport pickup"]
        assert day2.meals == ["Breakfast", "Lunch", "Dinner"]
        assert day2.time == "8 hours"

    def test_pricing(self, raw_quote) -> None:
        pricing = parse_quote(raw_quote).pricing
        assert pricing.number_of_adults == 2
        assert pricing.number_of_children == 1
        assert pricing.adult_price == Decimal("1500")
        assert pricing.child_price == Decimal("750.50")
        assert pricing.include == ["Park fees", "Bottled water"]
        assert pricing.exclude == ["International flights"]

    def test_payment_terms(self, raw_quote) -> None:
        terms = parse_quote(raw_quote).payment_terms
        assert terms.title == "Payment Terms"
        assert terms.description == "30% deposit on booking."

    def test_empty_record_defaults(self) -> None:
        quote = parse_quote({})
        assert quote.quote_number == "N/A"
        assert quote.total_days == 0
        assert quote.itinerary == []
        assert quote.client_info.client_name is None
        assert quote.pricing.number_of_adults == 0
        assert quote.payment_terms.title == "Payment Terms"

    def test_non_mapping_day_becomes_empty_day(self) -> None:
        quote = parse_quote(make_raw_quote(itinerary=["junk"]))
        assert len(quote.itinerary) == 1
        assert quote.itinerary[0].day_number == 1
        assert quote.itinerary[0].destination is None

    @pytest.mark.parametrize("raw", [None, "quote", ["a", "b"], 42])
    def test_non_mapping_rejected(self, raw) -> None:
        with pytest.raises(MalformedQuoteError):
            parse_quote(raw)

    def test_malformed_is_value_error(self) -> None:
        assert issubclass(MalformedQuoteError, ValueError)

    def test_input_not_mutated(self, raw_quote) -> None:
        snapshot = make_raw_quote()
        parse_quote(raw_quote)
        assert raw_quote == snapshot


class TestAccommodation:
    def test_legacy_name(self, raw_quote) -> None:
        day = parse_quote(raw_quote).itinerary[0]
        assert isinstance(day.accommodation, NamedAccommodation)
        assert day.accommodation_name == "Mount Meru Hotel"
        assert day.accommodation_image is None

    def test_catalogue_object(self, raw_quote) -> None:
        day = parse_quote(raw_quote).itinerary[1]
        assert isinstance(day.accommodation, DetailedAccommodation)
        assert day.accommodation_name == "Four Seasons Lodge"
        assert day.accommodation_image == "https://img.test/lodge.jpg"

    def test_bare_string(self, raw_quote) -> None:
        day = parse_quote(raw_quote).itinerary[2]
        assert isinstance(day.accommodation, NamedAccommodation)
        assert day.accommodation_name == "Rhino Lodge"

    def test_legacy_name_wins_over_object_name(self) -> None:
        raw = make_raw_quote(itinerary=[{
            "accommodation": {"name": "Catalogue Name", "images": ["https://img.test/a.jpg"]},
            "accommodationName": "Edited Name",
        }])
        day = parse_quote(raw).itinerary[0]
        assert day.accommodation_name == "Edited Name"
        assert day.accommodation_image == "https://img.test/a.jpg"

    def test_absent(self) -> None:
        day = parse_quote(make_raw_quote(itinerary=[{}])).itinerary[0]
        assert day.accommodation is None
        assert day.accommodation_name is None


class TestDestination:
    def test_only_first_image_used(self, raw_quote) -> None:
        day = parse_quote(raw_quote).itinerary[0]
        assert len(day.destination.images) == 2
        assert day.destination_image == "https://img.test/arusha-1.jpg"

    def test_bare_label(self, raw_quote) -> None:
        day = parse_quote(raw_quote).itinerary[2]
        assert day.destination_label == "Ngorongoro"
        assert day.destination_image is None

    def test_list_of_references(self) -> None:
        raw = make_raw_quote(itinerary=[{"destination": [
            {"label": "Tarangire", "images": [{"url": "https://img.test/t.jpg"}]},
            {"label": "Manyara", "images": ["https://img.test/m.jpg"]},
        ]}])
        day = parse_quote(raw).itinerary[0]
        assert day.destination_label == "Tarangire, Manyara"
        assert day.destination.images == ["https://img.test/t.jpg", "https://img.test/m.jpg"]


class TestDates:
    def test_datetime_value(self) -> None:
        raw = make_raw_quote(clientInfo={"startingDay": datetime(2024, 7, 1, 9, 30)})
        assert parse_quote(raw).client_info.starting_day == date(2024, 7, 1)

    def test_iso_timestamp_string(self) -> None:
        raw = make_raw_quote(clientInfo={"startingDay": "2024-07-01T00:00:00"})
        assert parse_quote(raw).client_info.starting_day == date(2024, 7, 1)

    def test_unparseable(self) -> None:
        raw = make_raw_quote(clientInfo={"startingDay": "next tuesday"})
        assert parse_quote(raw).client_info.starting_day is None


class TestDeriveTotalDays:
    def test_stored_value_wins(self) -> None:
        assert derive_total_days("4", date(2024, 7, 1), date(2024, 7, 3)) == 4

    def test_inclusive_span(self) -> None:
        assert derive_total_days(None, date(2024, 7, 1), date(2024, 7, 3)) == 3

    def test_same_day(self) -> None:
        assert derive_total_days(0, date(2024, 7, 1), date(2024, 7, 1)) == 1

    def test_end_before_start(self) -> None:
        assert derive_total_days(None, date(2024, 7, 3), date(2024, 7, 1)) == 0

    def test_missing_dates(self) -> None:
        assert derive_total_days(None, None, date(2024, 7, 1)) == 0

    def test_zero_stored_falls_back_in_quote(self) -> None:
        assert parse_quote(make_raw_quote(totalDays=0)).total_days == 3


class TestDeriveQuoteNumber:
    def test_stored(self) -> None:
        assert derive_quote_number("SN-42", "abcdefgh1234") == "SN-42"

    def test_from_document_id(self) -> None:
        assert derive_quote_number(None, "abcdefgh1234") == "SN-abcdefgh"

    def test_blank_stored(self) -> None:
        assert derive_quote_number("   ", "abcdefgh1234") == "SN-abcdefgh"

    def test_nothing_available(self) -> None:
        assert derive_quote_number(None, None) == "N/A"

    def test_in_parse_quote(self) -> None:
        raw = make_raw_quote()
        del raw["quoteNumber"]
        assert parse_quote(raw, quote_id="k3J9xQ2mZpL0").quote_number == "SN-k3J9xQ2m"


class TestParseTour:
    def test_fields(self, raw_tour) -> None:
        tour = parse_tour(raw_tour)
        assert tour.title == "Northern Circuit"
        assert tour.duration_days == 7
        assert tour.pricing.high_season is not None
        assert len(tour.pricing.high_season.costs) == 3

    def test_negative_duration_clamped(self) -> None:
        tour = parse_tour(make_raw_tour(basicInfo={"durationValue": -3}))
        assert tour.duration_days == 0

    def test_missing_pricing(self) -> None:
        tour = parse_tour({"basicInfo": {"tourTitle": "X"}})
        assert tour.pricing.high_season is None

    def test_non_mapping(self) -> None:
        with pytest.raises(MalformedQuoteError):
            parse_tour([])

    def test_junk_cost_entries_dropped(self) -> None:
        tour = parse_tour({"pricing": {"manual": {"midSeason": {"costs": ["x"]}}}})
        assert tour.pricing.mid_season is not None
        assert tour.pricing.mid_season.costs == []

    def test_non_object_season(self) -> None:
        tour = parse_tour(make_raw_tour(pricing={"manual": {"highSeason": "tbd", "lowSeason": []}}))
        assert tour.pricing.high_season is None
        assert tour.pricing.low_season is None


class TestQuoteManualPricing:
    def test_junk_seasons_and_costs(self) -> None:
        raw = make_raw_quote(pricing={
            "numberOfAdults": 2,
            "manual": {
                "highSeason": {"costs": [None, {"category": "2 Persons", "cost": 1000}]},
                "lowSeason": [],
            },
        })
        manual = parse_quote(raw).pricing.manual
        assert manual.low_season is None
        assert [entry.category for entry in manual.high_season.costs] == ["2 Persons"]
