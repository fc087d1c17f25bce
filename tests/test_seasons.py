"""Tests for season resolution and base-rate lookup.

Covers:
- Point-in-time season thresholds (month + day boundaries)
- Month-only rule used by the rate calendar
- Exact category match, first-entry fallback, missing/empty seasons
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from src.models.enums import SeasonTag
from src.pricing.seasons import (
    as_pricing_table,
    current_price,
    current_season,
    resolve_price,
    season_for_month,
)
from tests.factories import make_pricing_table


class TestCurrentSeason:
    @pytest.mark.parametrize(
        ("on", "expected"),
        [
            (date(2024, 1, 1), SeasonTag.HIGH),
            (date(2024, 1, 10), SeasonTag.HIGH),
            (date(2024, 1, 11), SeasonTag.MID),
            (date(2024, 3, 31), SeasonTag.MID),
            (date(2024, 4, 1), SeasonTag.LOW),
            (date(2024, 5, 19), SeasonTag.LOW),
            (date(2024, 5, 20), SeasonTag.MID),
            (date(2024, 6, 30), SeasonTag.MID),
            (date(2024, 7, 1), SeasonTag.HIGH),
            (date(2024, 8, 31), SeasonTag.HIGH),
            (date(2024, 9, 1), SeasonTag.MID),
            (date(2024, 12, 19), SeasonTag.MID),
            (date(2024, 12, 20), SeasonTag.HIGH),
            (date(2024, 12, 31), SeasonTag.HIGH),
        ],
    )
    def test_thresholds(self, on: date, expected: SeasonTag) -> None:
        assert current_season(on) is expected

    def test_defaults_to_today(self) -> None:
        assert current_season() is current_season(date.today())


class TestSeasonForMonth:
    def test_low_months(self) -> None:
        assert season_for_month(4) is SeasonTag.LOW
        assert season_for_month(5) is SeasonTag.LOW

    def test_high_months(self) -> None:
        assert season_for_month(7) is SeasonTag.HIGH
        assert season_for_month(8) is SeasonTag.HIGH

    def test_december_is_mid_in_calendar_rule(self) -> None:
        # Differs from current_season on Dec 20–31
        assert season_for_month(12) is SeasonTag.MID
        assert current_season(date(2024, 12, 25)) is SeasonTag.HIGH


class TestResolvePrice:
    def test_exact_category(self) -> None:
        assert resolve_price(make_pricing_table(), SeasonTag.HIGH, "4 Persons") == Decimal("920")

    def test_falls_back_to_first_entry(self) -> None:
        assert resolve_price(make_pricing_table(), SeasonTag.MID, "Family") == Decimal("1500")

    def test_accepts_raw_season_value(self) -> None:
        assert resolve_price(make_pricing_table(), "midSeason", "2 Persons") == Decimal("800")

    def test_numeric_string_cost(self) -> None:
        assert resolve_price(make_pricing_table(), SeasonTag.LOW, "2 Persons") == Decimal("650")

    def test_missing_season_is_not_available(self) -> None:
        table = make_pricing_table()
        del table["highSeason"]
        assert resolve_price(table, SeasonTag.HIGH, "2 Persons") is None

    def test_empty_costs_is_not_available(self) -> None:
        table = make_pricing_table()
        table["lowSeason"] = {"costs": []}
        assert resolve_price(table, SeasonTag.LOW, "2 Persons") is None

    def test_no_table(self) -> None:
        assert resolve_price(None, SeasonTag.HIGH, "2 Persons") is None

    def test_parsed_table_accepted(self) -> None:
        table = as_pricing_table(make_pricing_table())
        assert resolve_price(table, SeasonTag.HIGH, "2 Persons") == Decimal("1000")


class TestCurrentPrice:
    def test_high_season_base_rate(self) -> None:
        assert current_price(make_pricing_table(), date(2024, 7, 15)) == Decimal("1000")

    def test_low_season_base_rate(self) -> None:
        assert current_price(make_pricing_table(), date(2024, 4, 15)) == Decimal("650")

    def test_unpriced_season(self) -> None:
        table = make_pricing_table()
        del table["midSeason"]
        assert current_price(table, date(2024, 10, 1)) is None


class TestMalformedTables:
    @pytest.mark.parametrize("value", ["tbd", [], 0, None])
    def test_non_object_season_is_not_available(self, value) -> None:
        table = make_pricing_table()
        table["highSeason"] = value
        assert resolve_price(table, SeasonTag.HIGH, "2 Persons") is None
        assert as_pricing_table(table).high_season is None

    def test_other_seasons_still_priced(self) -> None:
        table = make_pricing_table()
        table["lowSeason"] = []
        assert resolve_price(table, SeasonTag.MID, "2 Persons") == Decimal("800")

    def test_non_object_cost_entries_dropped(self) -> None:
        table = {"highSeason": {"costs": [None, "x", {"category": "2 Persons", "cost": 1000}]}}
        assert len(as_pricing_table(table).high_season.costs) == 1
        assert resolve_price(table, SeasonTag.HIGH, "2 Persons") == Decimal("1000")

    def test_only_junk_cost_entries(self) -> None:
        table = {"midSeason": {"costs": ["x", 3]}}
        assert resolve_price(table, SeasonTag.MID, "2 Persons") is None

    def test_costs_not_a_list(self) -> None:
        assert resolve_price({"lowSeason": {"costs": "650"}}, SeasonTag.LOW, "2 Persons") is None
