"""Tests for formatting utilities."""

from datetime import date
from decimal import Decimal

import pytest

from expense_tracker.config import get_settings
from expense_tracker.utils import (
    current_month_year,
    format_currency,
    format_date,
    month_name,
    short_month_label,
)


class TestFormatCurrency:
    """Tests for format_currency."""

    @pytest.mark.parametrize("amount,expected", [
        (Decimal("264.38"), "$264.38"),
        (Decimal("1234.5"), "$1,234.50"),
        (0, "$0.00"),
        (25.5, "$25.50"),
        (Decimal("-1"), "-$1.00"),
        (Decimal("1000000"), "$1,000,000.00"),
        (Decimal("0.005"), "$0.01"),
    ])
    def test_format_currency(self, amount, expected):
        assert format_currency(amount) == expected

    def test_explicit_symbol(self):
        assert format_currency(Decimal("5"), symbol="€") == "€5.00"

    def test_configured_symbol(self, monkeypatch):
        monkeypatch.setenv("CURRENCY_SYMBOL", "£")
        get_settings.cache_clear()
        assert format_currency(Decimal("5")) == "£5.00"


class TestDates:
    """Tests for date helpers."""

    def test_format_date(self):
        assert format_date(date(2025, 5, 1)) == "May 1, 2025"
        assert format_date(date(2024, 12, 31)) == "Dec 31, 2024"

    @pytest.mark.parametrize("index,expected", [
        (0, "January"),
        (4, "May"),
        (11, "December"),
    ])
    def test_month_name(self, index, expected):
        assert month_name(index) == expected

    @pytest.mark.parametrize("index", [-1, 12])
    def test_month_name_out_of_range(self, index):
        with pytest.raises(ValueError):
            month_name(index)

    def test_short_month_label(self):
        assert short_month_label(8, 2024) == "Sep 2024"

    def test_current_month_year(self):
        assert current_month_year(date(2025, 1, 15)) == (0, 2025)
        assert current_month_year(date(2025, 12, 1)) == (11, 2025)
