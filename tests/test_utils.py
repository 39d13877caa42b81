from datetime import date
from decimal import Decimal

import pytest

from amort_calc.formatter import format_currency
from amort_calc.utils import add_months, decimal_from_str, parse_date


class TestAddMonths:
    def test_simple(self):
        assert add_months(date(2025, 1, 15), 1) == date(2025, 2, 15)

    def test_year_rollover(self):
        assert add_months(date(2025, 11, 30), 3) == date(2026, 2, 28)

    def test_leap_year(self):
        assert add_months(date(2024, 1, 31), 1) == date(2024, 2, 29)

    def test_zero(self):
        assert add_months(date(2025, 5, 31), 0) == date(2025, 5, 31)


class TestParseDate:
    def test_full_date(self):
        assert parse_date("2025-07-04") == date(2025, 7, 4)

    def test_year_month(self):
        assert parse_date("2025-07") == date(2025, 7, 1)

    @pytest.mark.parametrize("value", ["2025", "2025-13-01", "july"])
    def test_invalid(self, value):
        with pytest.raises(ValueError):
            parse_date(value)


class TestDecimalFromStr:
    def test_strips_currency(self):
        assert decimal_from_str("$1,234.56") == Decimal("1234.56")

    @pytest.mark.parametrize("value", ["", "abc", "NaN", "Infinity"])
    def test_invalid(self, value):
        with pytest.raises(ValueError):
            decimal_from_str(value)


class TestFormatCurrency:
    def test_thousands(self):
        assert format_currency(Decimal("1028.6125969")) == "$1,028.61"

    def test_negative(self):
        assert format_currency(Decimal("-5")) == "-$5.00"
