"""Command-line interface for the amortization calculator.

This module uses the ``click`` library to implement a multi-command interface.
Users can compute the monthly payment, full amortization schedules, summaries,
or compare a schedule with extra payments against the same loan without them.
Results can be printed to the terminal or exported to JSON/CSV files.
"""

from __future__ import annotations

import csv
import json
import logging
import os
from decimal import Decimal
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple

import click

from .data_models import AmortizationRow, LoanTerms
from .engine import (
    build_schedule,
    check_payment_capacity,
    compare_with_baseline,
    compute_monthly_payment,
    is_capped,
    summarize,
)
from .extra_payments import add_extra_payment, add_periodic_extra_payments, parse_extra_payment
from .formatter import (
    format_currency,
    print_comparison,
    print_schedule,
    print_summary,
    schedule_to_records,
    summary_to_record,
)
from .validation import (
    build_loan_terms,
    validate_amount,
    validate_principal,
    validate_rate,
    validate_term_months,
)

logger = logging.getLogger(__name__)

LOG_LEVEL = os.environ.get("AMORT_CALC_LOG_LEVEL", "WARNING")
MAX_PRINTED_ROWS = 120


def build_terms_from_options(
    principal: str,
    rate: str,
    term: str,
    start_date: str,
    insurance: Optional[str] = None,
    fees: Optional[str] = None,
    fixed_payment: Optional[str] = None,
) -> LoanTerms:
    try:
        return build_loan_terms(principal, rate, term, start_date, insurance, fees, fixed_payment)
    except ValueError as exc:
        raise click.BadParameter(str(exc))


def build_extras_from_options(values: Sequence[str], term_months: int) -> Dict[int, Decimal]:
    """Turn repeated ``--extra`` options into an extra payment mapping.

    Extra payments may be scheduled up to the safety cap (twice the term), so
    a slow fixed-payment schedule can still receive them.
    """
    extras: Dict[int, Decimal] = {}
    for item in values:
        try:
            periods, amount = parse_extra_payment(item)
            if len(periods) > 1:
                extras = add_periodic_extra_payments(extras, periods[0], periods[-1], amount, term_months * 2)
            else:
                extras = add_extra_payment(extras, periods[0], amount, term_months * 2)
        except ValueError as exc:
            raise click.BadParameter(str(exc))
    return extras


def export_to_json(path: Path, schedule: List[AmortizationRow], summary: Dict[str, Any]) -> None:
    """Export schedule and summary to a JSON file."""
    data = {"summary": summary, "schedule": schedule_to_records(schedule)}
    with path.open("w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)


def export_to_csv(path: Path, schedule: List[AmortizationRow]) -> None:
    """Export schedule to a CSV file."""
    header = [
        "Period",
        "Payment_Date",
        "Total_Payment",
        "Interest",
        "Principal",
        "Extra",
        "Balance",
        "Sunk_Cost",
    ]
    with path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(header)
        for record in schedule_to_records(schedule):
            writer.writerow(list(record.values()))


def _warn_if_capped(terms: LoanTerms, schedule: List[AmortizationRow]) -> None:
    if is_capped(terms, schedule):
        logger.warning(
            "Schedule for %s stopped after %d periods with balance %s",
            terms.name,
            len(schedule),
            schedule[-1].balance,
        )
        click.echo(
            f"Warning: the loan is not paid off after {len(schedule)} periods; "
            "the fixed payment does not cover interest and charges.",
            err=True,
        )


def loan_options(func):
    """Attach the loan options shared by the schedule, summary and compare commands."""
    options = [
        click.option("--principal", "-p", "principal", required=True, help="Loan amount"),
        click.option("--rate", "-r", "rate", required=True, help="Annual interest rate (percent)"),
        click.option("--term", "-t", "term", required=True, help="Loan term in months"),
        click.option("--start-date", "-s", "start_date", required=True, help="First payment date (YYYY-MM-DD)"),
        click.option("--insurance", "insurance", default="0", help="Insurance charged every month"),
        click.option("--fees", "fees", default="0", help="Other fees charged every month"),
        click.option(
            "--fixed-payment",
            "fixed_payment",
            help="Pay this total amount every month instead of the calculated installment.",
        ),
        click.option(
            "--extra",
            "extra",
            multiple=True,
            help="Extra principal payment in PERIOD:AMOUNT or START-END:AMOUNT format",
        ),
    ]
    for option in reversed(options):
        func = option(func)
    return func


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def cli(verbose: bool) -> None:
    """A command-line loan amortization calculator."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@cli.command()
@click.option("--principal", "-p", "principal", required=True, help="Loan amount")
@click.option("--rate", "-r", "rate", required=True, help="Annual interest rate (percent)")
@click.option("--term", "-t", "term", required=True, help="Loan term in months")
def payment(principal: str, rate: str, term: str) -> None:
    """Print the monthly installment for a loan."""
    try:
        amount = compute_monthly_payment(
            validate_principal(principal), validate_rate(rate), validate_term_months(term)
        )
    except ValueError as exc:
        raise click.BadParameter(str(exc))
    click.echo(format_currency(amount))


@cli.command()
@loan_options
@click.option("--capacity", "capacity", help="Monthly payment capacity to check the schedule against")
@click.option("--output", "output", type=str, help="Output file path (.json or .csv)")
def schedule(
    principal: str,
    rate: str,
    term: str,
    start_date: str,
    insurance: str,
    fees: str,
    fixed_payment: Optional[str],
    extra: Tuple[str, ...],
    capacity: Optional[str],
    output: Optional[str],
) -> None:
    """Compute and print the full amortization schedule."""
    terms = build_terms_from_options(principal, rate, term, start_date, insurance, fees, fixed_payment)
    extras = build_extras_from_options(extra, terms.term_months)
    rows = build_schedule(terms, extras)
    logger.debug("Built %d rows for %s", len(rows), terms.name)
    summary = summarize(rows)
    _warn_if_capped(terms, rows)
    if capacity:
        try:
            limit = validate_amount(capacity, label="Capacity")
        except ValueError as exc:
            raise click.BadParameter(str(exc))
        check = check_payment_capacity(rows, extras, limit)
        if check["exceeds"]:
            click.echo(
                f"Warning: estimated monthly outflow {format_currency(check['total_monthly'])} "
                f"exceeds the payment capacity of {format_currency(limit)}.",
                err=True,
            )
    if output:
        path = Path(output)
        if path.suffix.lower() == ".json":
            export_to_json(path, rows, summary_to_record(summary))
            click.echo(f"Schedule exported to {path}")
        elif path.suffix.lower() == ".csv":
            export_to_csv(path, rows)
            click.echo(f"Schedule exported to {path}")
        else:
            raise click.BadParameter("Unsupported output format; use .json or .csv")
    else:
        print_summary(summary, terms.term_months)
        # Limit schedule length printed to avoid flooding the terminal
        if len(rows) > MAX_PRINTED_ROWS:
            click.echo(f"Schedule has {len(rows)} rows; showing first {MAX_PRINTED_ROWS} rows.")
            print_schedule(rows[:MAX_PRINTED_ROWS])
        else:
            print_schedule(rows)


@cli.command()
@loan_options
@click.option("--output", "output", type=str, help="Output file path (.json)")
def summary(
    principal: str,
    rate: str,
    term: str,
    start_date: str,
    insurance: str,
    fees: str,
    fixed_payment: Optional[str],
    extra: Tuple[str, ...],
    output: Optional[str],
) -> None:
    """Compute and print only the summary metrics for a loan."""
    terms = build_terms_from_options(principal, rate, term, start_date, insurance, fees, fixed_payment)
    extras = build_extras_from_options(extra, terms.term_months)
    rows = build_schedule(terms, extras)
    summary_data = summarize(rows)
    _warn_if_capped(terms, rows)
    if output:
        path = Path(output)
        if path.suffix.lower() != ".json":
            raise click.BadParameter("Summary export must use .json extension")
        with path.open("w", encoding="utf-8") as f:
            json.dump({"summary": summary_to_record(summary_data)}, f, indent=2)
        click.echo(f"Summary exported to {path}")
    else:
        print_summary(summary_data, terms.term_months)


@cli.command()
@loan_options
def compare(
    principal: str,
    rate: str,
    term: str,
    start_date: str,
    insurance: str,
    fees: str,
    fixed_payment: Optional[str],
    extra: Tuple[str, ...],
) -> None:
    """Compare the loan with its extra payments against the loan without them.

    For example:

        amort-calc compare -p 100000 -r 12 -t 360 -s 2025-01-01 --extra 1-12:200
    """
    terms = build_terms_from_options(principal, rate, term, start_date, insurance, fees, fixed_payment)
    extras = build_extras_from_options(extra, terms.term_months)
    comparison = compare_with_baseline(terms, extras)
    print_comparison(comparison)
    click.echo(f"Interest saved     : {format_currency(comparison['interest_saved'])}")
    if comparison["months_saved"]:
        click.echo(f"Term reduction     : {comparison['months_saved']} months")


if __name__ == "__main__":
    cli()
