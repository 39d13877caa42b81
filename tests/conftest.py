"""Shared loan fixtures.

Standard: $100K, 12% annual (1% monthly), 30 years.
Zero rate: $12K, 0%, 12 months, which pays exactly $1,000 a month.
"""

from datetime import date
from decimal import Decimal

import pytest

from amort_calc.data_models import FixedPayment, LoanTerms


@pytest.fixture
def standard_terms() -> LoanTerms:
    return LoanTerms(
        principal=Decimal("100000"),
        annual_rate=Decimal("12"),
        term_months=360,
        start_date=date(2025, 1, 1),
    )


@pytest.fixture
def zero_rate_terms() -> LoanTerms:
    return LoanTerms(
        principal=Decimal("12000"),
        annual_rate=Decimal("0"),
        term_months=12,
        start_date=date(2025, 1, 15),
    )


@pytest.fixture
def underpaid_terms() -> LoanTerms:
    """Fixed payment below the first month's $200 interest charge."""
    return LoanTerms(
        principal=Decimal("10000"),
        annual_rate=Decimal("24"),
        term_months=24,
        start_date=date(2025, 1, 1),
        payment_mode=FixedPayment(Decimal("150")),
    )
