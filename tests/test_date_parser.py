"""Tests for date and amount parsing utilities."""

import pytest
from datetime import date
from decimal import Decimal

from docnum.utils.date_parser import parse_date
from docnum.utils.amount_parser import parse_amount, to_decimal


TODAY = date(2025, 12, 31)


class TestParseDate:
    """Tests for parse_date."""

    def test_absolute_date(self):
        assert parse_date("2025-01-15") == date(2025, 1, 15)

    def test_written_date(self):
        assert parse_date("January 15, 2025") == date(2025, 1, 15)

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("today", date(2025, 12, 31)),
            ("Yesterday", date(2025, 12, 30)),
            ("tomorrow", date(2026, 1, 1)),
            ("this month", date(2025, 12, 1)),
            ("next month", date(2026, 1, 1)),
            ("this year", date(2025, 1, 1)),
            ("next year", date(2026, 1, 1)),
        ],
    )
    def test_relative_dates(self, text, expected):
        assert parse_date(text, today=TODAY) == expected

    def test_invalid_date(self):
        with pytest.raises(ValueError, match="Could not parse date"):
            parse_date("not a date")


class TestParseAmount:
    """Tests for parse_amount."""

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("123.45", Decimal("123.45")),
            ("฿1,234.50", Decimal("1234.50")),
            ("(50)", Decimal("-50")),
            ("-7", Decimal("-7")),
            ("7%", Decimal("7")),
        ],
    )
    def test_formats(self, text, expected):
        assert parse_amount(text) == expected

    @pytest.mark.parametrize("text", ["", "   ", "abc", "Infinity"])
    def test_invalid(self, text):
        with pytest.raises(ValueError):
            parse_amount(text)


class TestToDecimal:
    """Tests for to_decimal."""

    def test_float_goes_through_str(self):
        assert to_decimal(0.1) == Decimal("0.1")

    @pytest.mark.parametrize("value", [None, True, -1, "-3", "x", Decimal("NaN"), float("inf")])
    def test_clamps_to_zero(self, value):
        assert to_decimal(value) == 0

    def test_passes_valid_values(self):
        assert to_decimal("1,000") == Decimal("1000")
        assert to_decimal(Decimal("2.5")) == Decimal("2.5")
        assert to_decimal(3) == Decimal("3")
