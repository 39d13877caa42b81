"""Output helpers for the amortization calculator.

This module provides simple functions to render amortization schedules and
summaries in a tabular text format, and to turn engine output into plain
records for JSON/CSV export. Decimals are converted to floats only here, at
the display boundary.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Dict, Iterable, List, Optional

import click

from .data_models import AmortizationRow, LoanSummary


def format_currency(amount) -> str:
    """Format an amount as US dollars, e.g. ``$1,028.61`` or ``-$5.00``."""
    value = Decimal(amount).quantize(Decimal("0.01"))
    sign = "-" if value < 0 else ""
    return f"{sign}${abs(value):,.2f}"


def summary_to_record(summary: LoanSummary) -> Dict[str, object]:
    return {
        "total_paid": float(summary.total_paid),
        "total_interest": float(summary.total_interest),
        "total_principal": float(summary.total_principal),
        "total_sunk_cost": float(summary.total_sunk_cost),
        "actual_term_months": summary.actual_term_months,
    }


def schedule_to_records(schedule: Iterable[AmortizationRow]) -> List[Dict[str, object]]:
    """Convert schedule rows into JSON-serialisable dictionaries."""
    records = []
    for row in schedule:
        records.append(
            {
                "period": row.period,
                "payment_date": row.payment_date.isoformat(),
                "total_payment": float(row.total_payment),
                "interest": float(row.interest),
                "principal": float(row.principal),
                "extra": float(row.extra),
                "balance": float(row.balance),
                "sunk_cost": float(row.sunk_cost),
            }
        )
    return records


def print_summary(summary: LoanSummary, term_months: Optional[int] = None) -> None:
    """Print a summary of loan metrics in a human-readable format."""
    click.echo("Summary")
    click.echo("-" * 72)
    click.echo(f"Total paid         : {format_currency(summary.total_paid)}")
    click.echo(f"Total interest     : {format_currency(summary.total_interest)}")
    click.echo(f"Total principal    : {format_currency(summary.total_principal)}")
    click.echo(f"Total sunk cost    : {format_currency(summary.total_sunk_cost)}")
    click.echo(f"Actual term        : {summary.actual_term_months} months")
    if term_months and summary.actual_term_months and summary.actual_term_months < term_months:
        click.echo(f"Paid off early     : {term_months - summary.actual_term_months} months")
    click.echo("-" * 72)


def print_schedule(schedule: Iterable[AmortizationRow]) -> None:
    """Print the amortization schedule as a simple table."""
    headers = [
        "Period",
        "Date",
        "Payment",
        "Interest",
        "Principal",
        "Extra",
        "Balance",
        "SunkCost",
    ]
    click.echo("\t".join(headers))
    for row in schedule:
        click.echo(
            "\t".join(
                [
                    str(row.period),
                    row.payment_date.isoformat(),
                    f"{row.total_payment:.2f}",
                    f"{row.interest:.2f}",
                    f"{row.principal:.2f}",
                    f"{row.extra:.2f}",
                    f"{row.balance:.2f}",
                    f"{row.sunk_cost:.2f}",
                ]
            )
        )


def print_comparison(comparison: Dict[str, object]) -> None:
    """Print the schedule without extras next to the one with extras.

    The difference column is (with extras - baseline); a negative difference
    means the extra payments made the loan cheaper or shorter.
    """
    baseline: LoanSummary = comparison["baseline"]
    with_extras: LoanSummary = comparison["with_extras"]
    click.echo("Comparison")
    click.echo("=" * 72)
    click.echo(f"{'Metric':20s} {'Baseline':>15s} {'With extras':>15s} {'Difference':>15s}")
    for key in ("total_paid", "total_interest", "total_sunk_cost"):
        v1 = getattr(baseline, key)
        v2 = getattr(with_extras, key)
        click.echo(f"{key:20s} {v1:15.2f} {v2:15.2f} {v2 - v1:15.2f}")
    m1 = baseline.actual_term_months
    m2 = with_extras.actual_term_months
    click.echo(f"{'actual_term_months':20s} {m1:15d} {m2:15d} {m2 - m1:15d}")
    click.echo("=" * 72)
