"""Data models for the amortization calculator.

This module defines dataclasses representing the entities used by the
calculator: the loan terms supplied by the caller, the payment mode (a
calculated annuity payment or a caller-fixed payment), the rows of the
amortization schedule and the aggregate summary. All of them are frozen so
that downstream consumers (formatters, exporters, the web API) cannot mutate
engine output.
"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Mapping, Union


@dataclass(frozen=True)
class CalculatedPayment:
    """Pay the annuity installment derived from principal, rate and term."""


@dataclass(frozen=True)
class FixedPayment:
    """Pay a caller-chosen total amount every month.

    Attributes
    ----------
    amount: Decimal
        The total monthly outflow. Insurance, interest and fees are covered
        first; whatever is left reduces the principal.
    """

    amount: Decimal

    def __post_init__(self) -> None:
        if self.amount <= 0:
            raise ValueError("Fixed payment must be greater than 0")


PaymentMode = Union[CalculatedPayment, FixedPayment]

# Period (1-based) -> extra principal amount. Absent periods mean no extra.
ExtraPayments = Mapping[int, Decimal]


@dataclass(frozen=True)
class LoanTerms:
    """Terms of a loan.

    The principal is the financed amount. ``annual_rate`` is a percentage
    (``Decimal("12.5")`` means 12.5 %). ``term_months`` is the nominal term:
    it drives the annuity payment and the safety cap, while the real number
    of periods depends on extra payments and the payment mode.
    """

    principal: Decimal
    annual_rate: Decimal  # annual nominal interest rate in percent
    term_months: int
    start_date: date  # date of the first payment
    insurance: Decimal = Decimal("0")  # constant charge per period
    fees: Decimal = Decimal("0")  # constant charge per period
    payment_mode: PaymentMode = field(default_factory=CalculatedPayment)
    name: str = "Default Scenario"

    @property
    def monthly_rate(self) -> Decimal:
        return self.annual_rate / Decimal(100) / Decimal(12)


@dataclass(frozen=True)
class AmortizationRow:
    """One month of the amortization schedule.

    ``total_payment`` is what is disbursed in the period, charges and extra
    included. ``principal`` excludes the extra payment, which is reported
    separately in ``extra``. ``sunk_cost`` is the running total of interest,
    insurance and fees.
    """

    period: int
    payment_date: date
    total_payment: Decimal
    interest: Decimal
    principal: Decimal
    extra: Decimal
    balance: Decimal
    sunk_cost: Decimal


@dataclass(frozen=True)
class LoanSummary:
    total_paid: Decimal
    total_interest: Decimal
    total_principal: Decimal
    total_sunk_cost: Decimal
    actual_term_months: int
