# tests/test_converters.py
"""
Converter Tests

Unit tests for the locale and unit helpers in finfeed.shared.converters.

Files that USE this module:
- pytest (test runner executes these tests)

Files that this module USES:
- finfeed.shared.converters
"""
from datetime import date
from decimal import Decimal

import pytest

from finfeed.shared.converters import (
    atomic_to_coin,
    format_display_date,
    format_request_date,
    ms_to_date,
    parse_comma_decimal,
    parse_ru_date,
    seconds_to_date,
    to_decimal,
    to_int,
)


class TestCommaDecimal:
    @pytest.mark.parametrize("raw,expected", [
        ("91,5125", Decimal("91.5125")),
        ("16,00", Decimal("16.00")),
        ("1 234,5", Decimal("1234.5")),
        ("42", Decimal("42")),
    ])
    def test_parses(self, raw, expected):
        assert parse_comma_decimal(raw) == expected

    def test_rejects_garbage(self):
        with pytest.raises(ValueError):
            parse_comma_decimal("n/a")


class TestDates:
    def test_ru_date(self):
        assert parse_ru_date("15.01.2024") == date(2024, 1, 15)

    def test_ru_date_rejects_iso(self):
        with pytest.raises(ValueError):
            parse_ru_date("2024-01-15")

    def test_request_and_display_formats(self):
        assert format_request_date(date(2024, 1, 5)) == "05/01/2024"
        assert format_display_date(date(2024, 1, 5)) == "05.01.2024"

    def test_epochs_are_utc(self):
        # 23:30 UTC is already the next day in Moscow; UTC day must win
        assert seconds_to_date(1705361400) == date(2024, 1, 15)
        assert ms_to_date(1704067200000) == date(2024, 1, 1)


class TestNumbers:
    def test_float_keeps_short_repr(self):
        assert to_decimal(0.1) == Decimal("0.1")

    @pytest.mark.parametrize("raw", [None, "", "  ", "abc", True, "NaN", "Infinity"])
    def test_default_for_non_numbers(self, raw):
        assert to_decimal(raw) is None
        assert to_decimal(raw, Decimal(0)) == Decimal(0)

    def test_to_int_truncates(self):
        assert to_int("1700000000000.9") == 1700000000000
        assert to_int(None, 7) == 7

    def test_atomic_to_coin(self):
        assert atomic_to_coin(500000000000) == Decimal("0.5")
        assert atomic_to_coin("1000000000000") == Decimal("1")
        assert atomic_to_coin(None) == Decimal(0)
