# Overview: Flask API routes for ledger derivations; every figure is recomputed per request.

from flask import Blueprint, current_app, jsonify, request

from ..services import ledger_service, reporting_service, snapshot_service
from ..services.reporting_service import ReportError
from ..time_utils import local_date, parse_iso_date, resolve_timezone, utcnow
from ..validation import ValidationError, parse_cents


ledger_bp = Blueprint("ledger", __name__, url_prefix="/api/ledger")


@ledger_bp.get("/cash-in-hand")
def cash_in_hand_route():
    state = snapshot_service.get_state()
    return jsonify({"cash_in_hand_cents": ledger_service.cash_in_hand(state.sales, state.payouts)}), 200


@ledger_bp.get("/vendors")
def vendor_ledger_route():
    """Owed / paid / balance for every vendor with sales or payouts."""
    state = snapshot_service.get_state()
    rows = ledger_service.vendor_ledger(state.sales, state.payouts)
    return jsonify({"items": rows, "count": len(rows)}), 200


@ledger_bp.get("/reconciliation")
def reconciliation_route():
    """
    Daily cash drawer check.

    Query parameters:
    - date: YYYY-MM-DD (default: today on the till's clock)
    - counted: counted cash in ringgit, e.g. 48.50 (optional)
    """
    tz = resolve_timezone(current_app.config["STALL_TIMEZONE"])
    try:
        day = parse_iso_date(request.args.get("date")) or local_date(utcnow(), tz)
    except ValueError:
        return jsonify({"error": "date must be YYYY-MM-DD"}), 400

    counted = request.args.get("counted")
    try:
        counted_cents = parse_cents(counted, field="counted") if counted not in (None, "") else None
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400

    state = snapshot_service.get_state()
    report = ledger_service.daily_cash_reconciliation(state.sales, day, counted_cents, tz=tz)
    return jsonify(report), 200


@ledger_bp.get("/summary")
def sales_summary_route():
    scope = request.args.get("scope", reporting_service.SCOPE_ALL)
    state = snapshot_service.get_state()
    try:
        summary = reporting_service.sales_summary(state.sales, scope)
    except ReportError as exc:
        return jsonify({"error": str(exc)}), 400
    return jsonify(summary), 200
