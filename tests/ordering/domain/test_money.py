"""Tests for minor-unit conversion and display formatting."""

from decimal import Decimal

import pytest

from ordering.shared.money import format_price, format_total, to_major, to_minor


class TestConversion:
    @pytest.mark.parametrize(
        "major, minor",
        [("50.00", 5000), ("0.01", 1), ("180", 18000), ("12.345", 1235), (Decimal("9.99"), 999)],
    )
    def test_to_minor(self, major, minor):
        assert to_minor(major) == minor

    def test_to_major(self):
        assert to_major(50600) == Decimal("506.00")


class TestFormatting:
    def test_format_price_uses_comma_decimal_separator(self):
        assert format_price(5000) == "50,00 L"

    def test_format_price_small_amounts(self):
        assert format_price(5) == "0,05 L"

    def test_format_total_prefixes_currency(self):
        assert format_total(50600) == "MDL 506,00 L"
