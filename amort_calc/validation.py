"""Input validation for loan parameters.

The engine expects exact decimals and never validates. These functions sit in
front of it: each one parses a raw value, checks it and returns the parsed
value, raising ``ValueError`` with a user-facing message otherwise.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Optional

from .data_models import CalculatedPayment, FixedPayment, LoanTerms
from .utils import decimal_from_str, parse_date

MAX_PRINCIPAL = Decimal("1000000000")
MAX_RATE = Decimal("1000")
MAX_TERM_MONTHS = 600  # 50 years


def _required_decimal(value: Optional[str], label: str) -> Decimal:
    if value is None or str(value).strip() == "":
        raise ValueError(f"{label} is required")
    try:
        return decimal_from_str(str(value))
    except ValueError:
        raise ValueError(f"{label}: invalid number format") from None


def validate_principal(value: Optional[str]) -> Decimal:
    amount = _required_decimal(value, "Principal")
    if amount <= 0:
        raise ValueError("Principal must be greater than 0")
    if amount > MAX_PRINCIPAL:
        raise ValueError("Principal is too large")
    return amount


def validate_rate(value: Optional[str]) -> Decimal:
    rate = _required_decimal(value, "Annual rate")
    if rate < 0:
        raise ValueError("Annual rate cannot be negative")
    if rate > MAX_RATE:
        raise ValueError("Annual rate looks unusually high, please check it")
    return rate


def validate_term_months(value) -> int:
    """Accept an int or an integral string; reject fractional terms."""
    try:
        term = Decimal(str(value).strip())
    except ArithmeticError:
        raise ValueError("Term must be a whole number of months") from None
    if not term.is_finite() or term <= 0:
        raise ValueError("Term must be greater than 0")
    if term != term.to_integral_value():
        raise ValueError("Term must be a whole number of months")
    if term > MAX_TERM_MONTHS:
        raise ValueError(f"Term cannot exceed {MAX_TERM_MONTHS} months (50 years)")
    return int(term)


def validate_date(value: Optional[str]) -> date:
    if value is None or str(value).strip() == "":
        raise ValueError("Start date is required")
    return parse_date(str(value))


def validate_amount(value: Optional[str], allow_zero: bool = True, label: str = "Amount") -> Decimal:
    amount = _required_decimal(value, label)
    if amount < 0:
        raise ValueError(f"{label} cannot be negative")
    if not allow_zero and amount == 0:
        raise ValueError(f"{label} must be greater than 0")
    if amount > MAX_PRINCIPAL:
        raise ValueError(f"{label} is too large")
    return amount


def build_loan_terms(
    principal: Optional[str],
    rate: Optional[str],
    term,
    start_date: Optional[str],
    insurance: Optional[str] = None,
    fees: Optional[str] = None,
    fixed_payment: Optional[str] = None,
    name: str = "Default Scenario",
) -> LoanTerms:
    """Validate raw loan fields and assemble a ``LoanTerms``.

    Blank insurance and fees default to zero. A blank fixed payment selects
    the calculated annuity payment.
    """
    if fixed_payment is not None and str(fixed_payment).strip():
        payment_mode = FixedPayment(validate_amount(fixed_payment, allow_zero=False, label="Fixed payment"))
    else:
        payment_mode = CalculatedPayment()
    return LoanTerms(
        principal=validate_principal(principal),
        annual_rate=validate_rate(rate),
        term_months=validate_term_months(term),
        start_date=validate_date(start_date),
        insurance=validate_amount(insurance or "0", label="Insurance"),
        fees=validate_amount(fees or "0", label="Fees"),
        payment_mode=payment_mode,
        name=name,
    )
