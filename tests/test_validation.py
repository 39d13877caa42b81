from datetime import date
from decimal import Decimal

import pytest

from amort_calc.data_models import CalculatedPayment, FixedPayment
from amort_calc.validation import (
    build_loan_terms,
    validate_amount,
    validate_date,
    validate_principal,
    validate_rate,
    validate_term_months,
)


class TestValidatePrincipal:
    def test_valid(self):
        assert validate_principal("250,000.50") == Decimal("250000.50")

    @pytest.mark.parametrize("value", ["", "   ", None])
    def test_required(self, value):
        with pytest.raises(ValueError, match="required"):
            validate_principal(value)

    def test_must_be_positive(self):
        with pytest.raises(ValueError, match="greater than 0"):
            validate_principal("0")

    def test_too_large(self):
        with pytest.raises(ValueError, match="too large"):
            validate_principal("1000000001")

    def test_not_a_number(self):
        with pytest.raises(ValueError, match="invalid number"):
            validate_principal("abc")


class TestValidateRate:
    def test_zero_allowed(self):
        assert validate_rate("0") == Decimal("0")

    def test_negative(self):
        with pytest.raises(ValueError, match="negative"):
            validate_rate("-0.5")

    def test_unusually_high(self):
        with pytest.raises(ValueError, match="unusually high"):
            validate_rate("1000.01")


class TestValidateTermMonths:
    @pytest.mark.parametrize("value", [360, "360", "360.0"])
    def test_valid(self, value):
        assert validate_term_months(value) == 360

    @pytest.mark.parametrize("value", [0, -12, "0"])
    def test_must_be_positive(self, value):
        with pytest.raises(ValueError, match="greater than 0"):
            validate_term_months(value)

    @pytest.mark.parametrize("value", ["12.5", "twelve"])
    def test_must_be_whole(self, value):
        with pytest.raises(ValueError, match="whole number"):
            validate_term_months(value)

    def test_fifty_year_limit(self):
        assert validate_term_months(600) == 600
        with pytest.raises(ValueError, match="600"):
            validate_term_months(601)


class TestValidateDate:
    def test_iso_date(self):
        assert validate_date("2025-03-31") == date(2025, 3, 31)

    def test_year_month(self):
        assert validate_date("2025-03") == date(2025, 3, 1)

    def test_required(self):
        with pytest.raises(ValueError, match="required"):
            validate_date("")

    def test_invalid(self):
        with pytest.raises(ValueError, match="Invalid date"):
            validate_date("2025-02-30")


class TestValidateAmount:
    def test_zero_allowed_by_default(self):
        assert validate_amount("0") == Decimal("0")

    def test_zero_rejected(self):
        with pytest.raises(ValueError, match="greater than 0"):
            validate_amount("0", allow_zero=False)

    def test_negative(self):
        with pytest.raises(ValueError, match="Insurance cannot be negative"):
            validate_amount("-1", label="Insurance")

    @pytest.mark.parametrize("value", ["1e999999", "1000000000.01"])
    def test_too_large(self, value):
        with pytest.raises(ValueError, match="Insurance is too large"):
            validate_amount(value, label="Insurance")

    def test_upper_bound_inclusive(self):
        assert validate_amount("1000000000") == Decimal("1000000000")


class TestBuildLoanTerms:
    def test_calculated_mode_by_default(self):
        terms = build_loan_terms("100000", "12", 360, "2025-01-01")
        assert terms.principal == Decimal("100000")
        assert terms.insurance == Decimal("0")
        assert terms.fees == Decimal("0")
        assert terms.payment_mode == CalculatedPayment()

    def test_fixed_mode(self):
        terms = build_loan_terms("100000", "12", 360, "2025-01-01", "20", "5", "1500")
        assert terms.payment_mode == FixedPayment(Decimal("1500"))
        assert terms.insurance == Decimal("20")
        assert terms.fees == Decimal("5")

    def test_blank_fixed_payment_means_calculated(self):
        terms = build_loan_terms("100000", "12", 360, "2025-01-01", fixed_payment="  ")
        assert isinstance(terms.payment_mode, CalculatedPayment)

    def test_zero_fixed_payment_rejected(self):
        with pytest.raises(ValueError, match="Fixed payment must be greater than 0"):
            build_loan_terms("100000", "12", 360, "2025-01-01", fixed_payment="0")

    def test_huge_insurance_rejected_before_engine(self):
        with pytest.raises(ValueError, match="Insurance is too large"):
            build_loan_terms("10000", "12", 12, "2025-01-01", insurance="1e999999")
