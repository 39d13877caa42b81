"""Core calculation engine for the amortization calculator.

This module implements the financial logic required to build amortization
schedules for annuity loans. It supports a calculated (annuity) payment or a
caller-fixed monthly payment, recurring insurance and fees, and extra
principal payments keyed by period. Results are returned as a list of
``AmortizationRow`` objects which ``summarize`` reduces to a ``LoanSummary``.

Everything here is a pure function of its arguments: no I/O, no state kept
between calls, and no exceptions for numeric edge cases. Degenerate input
yields an empty schedule; a fixed payment too small to ever cover the
interest yields a schedule cut at twice the nominal term.
"""

from __future__ import annotations

from decimal import Decimal, getcontext
from typing import Dict, List, Optional, Sequence

from .data_models import (
    AmortizationRow,
    ExtraPayments,
    FixedPayment,
    LoanSummary,
    LoanTerms,
)
from .utils import add_months

getcontext().prec = 28  # increase precision for financial calculations

ZERO = Decimal("0")

# A remaining balance at or below this amount after a payment is treated as
# paid off, so the schedule never ends on a fraction-of-a-cent residual.
PAYOFF_TOLERANCE = Decimal("0.01")

# Upper bound on the number of periods, as a multiple of the nominal term.
SAFETY_CAP_FACTOR = 2


def compute_monthly_payment(principal: Decimal, annual_rate: Decimal, term_months: int) -> Decimal:
    """Return the annuity (equal installment) monthly payment for a loan.

    The formula is:

        payment = P * (r * (1 + r)^n) / ((1 + r)^n - 1)

    where ``P`` is the principal, ``r`` is the monthly interest rate
    (``annual_rate / 100 / 12``) and ``n`` is the number of payments. When the
    interest rate is zero, the payment simplifies to ``P / n``. A
    non-positive term returns zero.
    """
    if term_months <= 0:
        return ZERO
    rate_per_month = Decimal(annual_rate) / Decimal(100) / Decimal(12)
    if rate_per_month == 0:
        return Decimal(principal) / Decimal(term_months)
    factor = (1 + rate_per_month) ** term_months
    return Decimal(principal) * (rate_per_month * factor) / (factor - 1)


def build_schedule(terms: LoanTerms, extra_payments: Optional[ExtraPayments] = None) -> List[AmortizationRow]:
    """Compute the amortization schedule for a loan.

    Parameters
    ----------
    terms: LoanTerms
        The loan terms. With ``CalculatedPayment`` the annuity payment covers
        interest and principal while insurance and fees are charged on top.
        With ``FixedPayment`` the fixed amount must cover insurance, interest
        and fees before anything reduces the principal.
    extra_payments: Mapping[int, Decimal], optional
        Extra principal payments keyed by 1-based period.

    Returns
    -------
    List[AmortizationRow]
        One row per month until the balance reaches zero, or until
        ``2 * term_months`` rows when the balance never does. Empty when the
        principal is not positive, the rate is negative or the term is not
        positive.
    """
    if terms.principal <= 0 or terms.annual_rate < 0 or terms.term_months <= 0:
        return []

    extras = extra_payments or {}
    rate_per_month = terms.monthly_rate
    insurance = terms.insurance
    fees = terms.fees
    fixed = isinstance(terms.payment_mode, FixedPayment)
    if fixed:
        regular_payment = terms.payment_mode.amount
    else:
        annuity_payment = compute_monthly_payment(terms.principal, terms.annual_rate, terms.term_months)
        regular_payment = annuity_payment + insurance + fees

    schedule: List[AmortizationRow] = []
    balance = terms.principal
    sunk_cost = ZERO
    period = 1
    max_periods = terms.term_months * SAFETY_CAP_FACTOR

    while balance > 0 and period <= max_periods:
        interest = balance * rate_per_month
        extra = Decimal(extras.get(period, ZERO))

        if fixed:
            base_principal = max(ZERO, regular_payment - insurance - interest - fees)
        else:
            base_principal = max(ZERO, annuity_payment - interest)

        # Never reduce the balance below zero
        reduction = min(base_principal + extra, balance)
        applied_extra = max(ZERO, reduction - base_principal)

        if balance - reduction <= PAYOFF_TOLERANCE:
            # Final payment: settle the whole balance. An extra payment
            # scheduled for this period is absorbed into the payoff.
            principal_payment = balance
            applied_extra = ZERO
            total_payment = balance + interest + insurance + fees
        else:
            principal_payment = reduction - applied_extra
            total_payment = regular_payment + applied_extra

        balance -= principal_payment + applied_extra
        sunk_cost += interest + insurance + fees

        schedule.append(
            AmortizationRow(
                period=period,
                payment_date=add_months(terms.start_date, period - 1),
                total_payment=total_payment,
                interest=interest,
                principal=principal_payment,
                extra=applied_extra,
                balance=balance,
                sunk_cost=sunk_cost,
            )
        )
        period += 1

    return schedule


def summarize(rows: Sequence[AmortizationRow]) -> LoanSummary:
    """Reduce a schedule to its aggregate totals.

    ``total_sunk_cost`` is taken from the last row rather than re-summed so it
    always matches the running values shown in the schedule.
    """
    if not rows:
        return LoanSummary(
            total_paid=ZERO,
            total_interest=ZERO,
            total_principal=ZERO,
            total_sunk_cost=ZERO,
            actual_term_months=0,
        )
    return LoanSummary(
        total_paid=sum((r.total_payment for r in rows), ZERO),
        total_interest=sum((r.interest for r in rows), ZERO),
        total_principal=sum((r.principal for r in rows), ZERO),
        total_sunk_cost=rows[-1].sunk_cost,
        actual_term_months=len(rows),
    )


def is_capped(terms: LoanTerms, rows: Sequence[AmortizationRow]) -> bool:
    """Return True when the schedule hit the safety cap without paying off.

    This happens when a fixed payment does not cover the monthly interest and
    charges. Callers should surface it as a warning, not as a result.
    """
    if not rows:
        return False
    return len(rows) >= terms.term_months * SAFETY_CAP_FACTOR and rows[-1].balance > 0


def compare_with_baseline(terms: LoanTerms, extra_payments: Optional[ExtraPayments] = None) -> Dict[str, object]:
    """Compare the schedule with extra payments against the one without.

    Returns both summaries and the savings produced by the extra payments.
    Positive savings mean the extra payments made the loan cheaper or
    shorter.
    """
    baseline = summarize(build_schedule(terms, {}))
    with_extras = summarize(build_schedule(terms, extra_payments))
    return {
        "baseline": baseline,
        "with_extras": with_extras,
        "interest_saved": baseline.total_interest - with_extras.total_interest,
        "total_paid_saved": baseline.total_paid - with_extras.total_paid,
        "sunk_cost_saved": baseline.total_sunk_cost - with_extras.total_sunk_cost,
        "months_saved": baseline.actual_term_months - with_extras.actual_term_months,
    }


def check_payment_capacity(
    rows: Sequence[AmortizationRow],
    extra_payments: Optional[ExtraPayments],
    capacity: Decimal,
) -> Dict[str, object]:
    """Estimate the monthly outflow and compare it against a payment capacity.

    The estimate is the first period's total payment plus the average of the
    scheduled extra amounts. A capacity of zero or less means it is unknown,
    in which case the result never exceeds it.
    """
    if not rows:
        return {"exceeds": False, "monthly_payment": ZERO, "average_extras": ZERO, "total_monthly": ZERO}
    monthly_payment = rows[0].total_payment
    amounts = [Decimal(a) for a in (extra_payments or {}).values()]
    average_extras = sum(amounts, ZERO) / len(amounts) if amounts else ZERO
    total_monthly = monthly_payment + average_extras
    return {
        "exceeds": capacity > 0 and total_monthly > capacity,
        "monthly_payment": monthly_payment,
        "average_extras": average_extras,
        "total_monthly": total_monthly,
    }
