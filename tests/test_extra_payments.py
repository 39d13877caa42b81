from decimal import Decimal

import pytest

from amort_calc.extra_payments import (
    add_extra_payment,
    add_periodic_extra_payments,
    parse_extra_payment,
)


class TestAddExtraPayment:
    def test_adds_without_mutating(self):
        original = {1: Decimal("100")}
        updated = add_extra_payment(original, 5, Decimal("250"), 360)
        assert updated == {1: Decimal("100"), 5: Decimal("250")}
        assert original == {1: Decimal("100")}

    def test_conflict(self):
        with pytest.raises(ValueError, match="Period 5 already"):
            add_extra_payment({5: Decimal("1")}, 5, Decimal("250"), 360)

    @pytest.mark.parametrize("period", [0, 361])
    def test_out_of_range(self, period):
        with pytest.raises(ValueError, match="between 1 and 360"):
            add_extra_payment({}, period, Decimal("250"), 360)

    def test_amount_must_be_positive(self):
        with pytest.raises(ValueError, match="greater than 0"):
            add_extra_payment({}, 1, Decimal("0"), 360)

    def test_amount_too_large(self):
        with pytest.raises(ValueError, match="too large"):
            add_extra_payment({}, 1, Decimal("1e999999"), 360)


class TestAddPeriodicExtraPayments:
    def test_range(self):
        updated = add_periodic_extra_payments({}, 3, 6, Decimal("50"), 12)
        assert updated == {p: Decimal("50") for p in range(3, 7)}

    def test_conflicts_reject_whole_range(self):
        extras = {4: Decimal("10"), 6: Decimal("10")}
        with pytest.raises(ValueError, match="4, 6"):
            add_periodic_extra_payments(extras, 3, 8, Decimal("50"), 12)
        assert extras == {4: Decimal("10"), 6: Decimal("10")}

    def test_reversed_range(self):
        with pytest.raises(ValueError, match="not be after"):
            add_periodic_extra_payments({}, 8, 3, Decimal("50"), 12)


class TestParseExtraPayment:
    def test_single(self):
        assert parse_extra_payment("12:5000") == ([12], Decimal("5000"))

    def test_range(self):
        assert parse_extra_payment("1-3:200.50") == ([1, 2, 3], Decimal("200.50"))

    @pytest.mark.parametrize("value", ["12", "a:100", "1-b:100", "12:abc"])
    def test_invalid(self, value):
        with pytest.raises(ValueError):
            parse_extra_payment(value)
