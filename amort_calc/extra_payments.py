"""Helpers for planning extra principal payments.

Extra payments are kept as a plain ``{period: amount}`` mapping. The helpers
below never mutate their input; they return a new dict so callers can hand
the same mapping to several schedule runs.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Dict, List, Tuple

from .data_models import ExtraPayments
from .utils import decimal_from_str
from .validation import MAX_PRINCIPAL


def _check_period(period: int, max_period: int) -> None:
    if period < 1 or period > max_period:
        raise ValueError(f"Period must be between 1 and {max_period}; got {period}")


def _check_amount(amount: Decimal) -> None:
    if amount <= 0:
        raise ValueError("Extra payment amount must be greater than 0")
    if amount > MAX_PRINCIPAL:
        raise ValueError("Extra payment amount is too large")


def add_extra_payment(
    extras: ExtraPayments, period: int, amount: Decimal, max_period: int
) -> Dict[int, Decimal]:
    """Return a copy of ``extras`` with a single extra payment added."""
    _check_amount(amount)
    _check_period(period, max_period)
    if period in extras:
        raise ValueError(f"Period {period} already has an extra payment")
    updated = dict(extras)
    updated[period] = amount
    return updated


def add_periodic_extra_payments(
    extras: ExtraPayments, start: int, end: int, amount: Decimal, max_period: int
) -> Dict[int, Decimal]:
    """Return a copy of ``extras`` with ``amount`` added for every period in ``start..end``.

    The range is all or nothing: if any period in it already holds an extra
    payment, nothing is added.
    """
    _check_amount(amount)
    _check_period(start, max_period)
    _check_period(end, max_period)
    if start > end:
        raise ValueError("Start period must not be after end period")
    conflicts = [p for p in range(start, end + 1) if p in extras]
    if conflicts:
        listed = ", ".join(str(p) for p in conflicts)
        raise ValueError(f"Periods already have extra payments: {listed}")
    updated = dict(extras)
    for period in range(start, end + 1):
        updated[period] = amount
    return updated


def parse_extra_payment(value: str) -> Tuple[List[int], Decimal]:
    """Parse ``PERIOD:AMOUNT`` or ``START-END:AMOUNT``.

    Returns the list of periods covered and the amount.
    """
    parts = value.split(":")
    if len(parts) != 2:
        raise ValueError(f"Extra payment must be in PERIOD:AMOUNT or START-END:AMOUNT format; got {value}")
    span, amount_str = parts
    amount = decimal_from_str(amount_str)
    try:
        if "-" in span:
            start_str, end_str = span.split("-", 1)
            start, end = int(start_str), int(end_str)
        else:
            start = end = int(span)
    except ValueError as exc:
        raise ValueError(f"Invalid extra payment period: {span}") from exc
    if start > end:
        raise ValueError("Start period must not be after end period")
    return list(range(start, end + 1)), amount
