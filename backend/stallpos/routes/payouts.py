# Overview: Flask API routes for vendor payouts.

from flask import Blueprint, current_app, jsonify, request

from ..services import payout_service, snapshot_service
from ..services.payout_service import PayoutError
from ..services.snapshot_service import KEY_PAYOUTS


payouts_bp = Blueprint("payouts", __name__, url_prefix="/api/payouts")


@payouts_bp.post("")
def record_payout_route():
    """
    Record cash paid to a vendor.

    Request body:
    {
        "vendor_name": "Mee Tarik",   // required
        "amount": "12.50",            // or "amount_cents": 1250
        "note": "..."                 // optional
    }
    """
    data = request.get_json(silent=True) or {}
    if not isinstance(data, dict):
        return jsonify({"error": "Request body must be a JSON object"}), 400
    if data.get("amount_cents") is not None:
        amount = data["amount_cents"]
    elif data.get("amount") not in (None, ""):
        # "amount" is ringgit even when sent as a JSON number
        amount = str(data["amount"])
    else:
        return jsonify({"error": "amount is required"}), 400
    for field in ("vendor_name", "note"):
        if data.get(field) is not None and not isinstance(data[field], str):
            return jsonify({"error": f"{field} must be a string"}), 400

    state = snapshot_service.get_state()
    try:
        payout = payout_service.record_payout(
            state.payouts,
            data.get("vendor_name") or "",
            amount,
            data.get("note"),
            ids=state.ids,
        )
    except PayoutError as e:
        return jsonify({"error": str(e), "details": e.details}), 400

    snapshot_service.commit_state(state, [KEY_PAYOUTS])
    current_app.logger.info("Payout %s: %s amount_cents=%d", payout.id, payout.vendor_name, payout.amount_cents)
    return jsonify({"payout": payout.to_dict()}), 201


@payouts_bp.get("")
def list_payouts_route():
    """List payouts, newest first; ?vendor_name= filters to one vendor."""
    state = snapshot_service.get_state()
    vendor_name = request.args.get("vendor_name")
    payouts = state.payouts.for_vendor(vendor_name) if vendor_name else state.payouts.records()
    payouts.reverse()
    return jsonify({"items": [p.to_dict() for p in payouts], "count": len(payouts)}), 200
