import logging
import os

from flask import Flask, jsonify, request

from amort_calc.engine import (
    build_schedule,
    check_payment_capacity,
    compare_with_baseline,
    compute_monthly_payment,
    is_capped,
    summarize,
)
from amort_calc.extra_payments import add_extra_payment
from amort_calc.formatter import schedule_to_records, summary_to_record
from amort_calc.validation import (
    build_loan_terms,
    validate_amount,
    validate_principal,
    validate_rate,
    validate_term_months,
)

logger = logging.getLogger(__name__)

app = Flask(__name__)
app.config["MAX_ROWS"] = int(os.environ.get("AMORT_CALC_MAX_ROWS", "1200"))


@app.errorhandler(ValueError)
def handle_value_error(exc):
    return jsonify({"error": str(exc)}), 400


def _payload_to_extras(raw, term_months: int) -> dict:
    """Parse the ``extra_payments`` object (period -> amount) of a request.

    Keys arrive as strings in JSON, so they are converted to ints here.
    """
    if not raw:
        return {}
    if not isinstance(raw, dict):
        raise ValueError("extra_payments must be an object mapping period to amount")
    extras = {}
    for period, amount in raw.items():
        try:
            period_num = int(period)
        except (TypeError, ValueError):
            raise ValueError(f"Invalid extra payment period: {period}") from None
        value = validate_amount(str(amount), allow_zero=False, label=f"Extra payment for period {period_num}")
        extras = add_extra_payment(extras, period_num, value, term_months * 2)
    return extras


def _capacity_to_record(check: dict) -> dict:
    return {
        "exceeds": check["exceeds"],
        "monthly_payment": float(check["monthly_payment"]),
        "average_extras": float(check["average_extras"]),
        "total_monthly": float(check["total_monthly"]),
    }


@app.get("/api/payment")
def payment():
    args = request.args
    amount = compute_monthly_payment(
        validate_principal(args.get("principal")),
        validate_rate(args.get("rate")),
        validate_term_months(args.get("term", "")),
    )
    return jsonify({"monthly_payment": float(amount)})


@app.post("/api/schedule")
def schedule():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValueError("Request body must be a JSON object")
    terms = build_loan_terms(
        data.get("principal") and str(data["principal"]),
        data.get("annual_rate") and str(data["annual_rate"]),
        data.get("term_months", ""),
        data.get("start_date"),
        data.get("insurance") and str(data["insurance"]),
        data.get("fees") and str(data["fees"]),
        data.get("fixed_payment") and str(data["fixed_payment"]),
        name=data.get("name") or "Default Scenario",
    )
    extras = _payload_to_extras(data.get("extra_payments"), terms.term_months)
    rows = build_schedule(terms, extras)
    capped = is_capped(terms, rows)
    if capped:
        logger.warning("Schedule for %s did not converge after %d periods", terms.name, len(rows))

    comparison = compare_with_baseline(terms, extras)
    response = {
        "name": terms.name,
        "summary": summary_to_record(summarize(rows)),
        "schedule": schedule_to_records(rows[: app.config["MAX_ROWS"]]),
        "truncated": max(0, len(rows) - app.config["MAX_ROWS"]),
        "capped": capped,
        "comparison": {
            "baseline": summary_to_record(comparison["baseline"]),
            "interest_saved": float(comparison["interest_saved"]),
            "total_paid_saved": float(comparison["total_paid_saved"]),
            "sunk_cost_saved": float(comparison["sunk_cost_saved"]),
            "months_saved": comparison["months_saved"],
        },
    }
    capacity = data.get("capacity")
    if capacity not in (None, ""):
        limit = validate_amount(str(capacity), label="Capacity")
        response["capacity"] = _capacity_to_record(check_payment_capacity(rows, extras, limit))
    return jsonify(response)


if __name__ == "__main__":
    logging.basicConfig(level=os.environ.get("AMORT_CALC_LOG_LEVEL", "INFO"))
    logger.info("Starting amortization API...")
    app.run(host="0.0.0.0", port=8710, debug=True)
