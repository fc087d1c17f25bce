"""Shared fixtures for the quote and pricing tests."""

from __future__ import annotations

from typing import Any

import pytest

from tests.factories import make_raw_quote, make_raw_tour


@pytest.fixture
def raw_quote() -> dict[str, Any]:
    return make_raw_quote()


@pytest.fixture
def raw_tour() -> dict[str, Any]:
    return make_raw_tour()
