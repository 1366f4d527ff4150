# Overview: Flask API routes for sales operations; parses input and returns JSON responses.

"""
Sales Routes

Request body for preview and commit:
{
    "origin": "Vendor",                 // POS mode: Internal or Vendor
    "payment_method": "Cash",           // Cash or EWallet
    "amount_received_cents": 2000,      // required for Cash
    "lines": [
        {"item_id": "item-1", "quantity": 2},
        {"item_id": "zz-1", "quantity": 1, "unit_price_cents": 300},
        {"name": "Special", "quantity": 1, "unit_price_cents": 500}
    ]
}
"""

from flask import Blueprint, Response, current_app, jsonify, request

from ..services import export_service, receipt_service, sales_service, snapshot_service
from ..services.receipt_service import Committed, Preview
from ..services.sales_service import CartLineRequest, SaleError
from ..services.snapshot_service import KEY_CATALOG, KEY_SALES
from ..time_utils import resolve_timezone


sales_bp = Blueprint("sales", __name__, url_prefix="/api/sales")


def _optional_int(value, field: str) -> int | None:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        raise SaleError(f"{field} must be an integer")
    return value


def _optional_str(value, field: str, position: int) -> str | None:
    if value is None or isinstance(value, str):
        return value
    raise SaleError(f"{field} must be a string", details={"line": position})


def _parse_cart(data: dict) -> tuple[list[CartLineRequest], dict]:
    if not isinstance(data, dict):
        raise SaleError("Request body must be a JSON object")
    lines = data.get("lines")
    if not isinstance(lines, list):
        raise SaleError("lines must be a list")

    cart = []
    for position, line in enumerate(lines, start=1):
        if not isinstance(line, dict):
            raise SaleError("Each line must be an object", details={"line": position})
        cart.append(CartLineRequest(
            item_id=_optional_str(line.get("item_id"), "item_id", position),
            quantity=_optional_int(line.get("quantity", 1), "quantity"),
            unit_price_cents=_optional_int(line.get("unit_price_cents"), "unit_price_cents"),
            name=_optional_str(line.get("name"), "name", position),
            category=_optional_str(line.get("category"), "category", position) or "",
        ))

    options = {
        "payment_method": data.get("payment_method"),
        "origin": data.get("origin"),
        "amount_received_cents": _optional_int(data.get("amount_received_cents"), "amount_received_cents"),
        "allow_oversell": current_app.config["ALLOW_OVERSELL"],
        "strict_origin": current_app.config["STRICT_SALE_ORIGIN"],
    }
    return cart, options


@sales_bp.post("/preview")
def preview_sale_route():
    """Price and validate a cart and return the would-be receipt. Nothing is saved."""
    try:
        cart, options = _parse_cart(request.get_json(silent=True) or {})
        state = snapshot_service.get_state()
        draft = sales_service.preview_sale(state.catalog, cart, **options)
        return jsonify({"receipt": receipt_service.render_receipt(Preview(draft))}), 200

    except SaleError as e:
        return jsonify({"error": str(e), "details": e.details}), 400
    except Exception:
        current_app.logger.exception("Failed to preview sale")
        return jsonify({"error": "Internal server error"}), 500


@sales_bp.post("")
def commit_sale_route():
    """Commit a cart: records the sale and decrements vendor stock."""
    try:
        cart, options = _parse_cart(request.get_json(silent=True) or {})
        state = snapshot_service.get_state()
        sale = sales_service.commit_sale(state.catalog, state.sales, cart, ids=state.ids, **options)
        snapshot_service.commit_state(state, [KEY_SALES, KEY_CATALOG])
        current_app.logger.info(
            "Sale %s committed: %s %s, total_cents=%d",
            sale.id, sale.origin, sale.payment_method, sale.total_cents,
        )
        return jsonify({
            "sale": sale.to_dict(),
            "receipt": receipt_service.render_receipt(Committed(sale)),
        }), 201

    except SaleError as e:
        return jsonify({"error": str(e), "details": e.details}), 400
    except Exception:
        current_app.logger.exception("Failed to commit sale")
        return jsonify({"error": "Internal server error"}), 500


@sales_bp.get("")
def list_sales_route():
    """
    List sales, newest first.

    Query parameters:
    - origin: Internal or Vendor (optional filter)
    - limit: Maximum results (default: 100)
    - offset: Pagination offset (default: 0)
    """
    origin = request.args.get("origin")
    limit = request.args.get("limit", 100, type=int)
    offset = request.args.get("offset", 0, type=int)

    # Clamp limit
    if limit < 1:
        limit = 1
    if limit > 500:
        limit = 500
    if offset < 0:
        offset = 0

    state = snapshot_service.get_state()
    sales = [sale for sale in reversed(state.sales.records()) if not origin or sale.origin == origin]
    page = sales[offset:offset + limit]
    return jsonify({
        "items": [sale.to_dict() for sale in page],
        "count": len(sales),
        "limit": limit,
        "offset": offset,
    }), 200


@sales_bp.get("/export")
def export_sales_route():
    state = snapshot_service.get_state()
    tz = resolve_timezone(current_app.config["STALL_TIMEZONE"])
    return Response(
        export_service.sales_history_csv(state.sales, tz=tz),
        mimetype="text/csv",
        headers={"Content-Disposition": "attachment; filename=sales_export.csv"},
    )


@sales_bp.get("/<sale_id>")
def get_sale_route(sale_id: str):
    sale = snapshot_service.get_state().sales.get(sale_id)
    if not sale:
        return jsonify({"error": "Sale not found"}), 404
    return jsonify({"sale": sale.to_dict()}), 200


@sales_bp.get("/<sale_id>/receipt")
def sale_receipt_route(sale_id: str):
    """Receipt for a past sale; ?format=text returns the printable version."""
    sale = snapshot_service.get_state().sales.get(sale_id)
    if not sale:
        return jsonify({"error": "Sale not found"}), 404

    receipt = receipt_service.render_receipt(Committed(sale))
    if request.args.get("format") == "text":
        text = receipt_service.format_receipt_text(receipt, stall_name=current_app.config["STALL_NAME"])
        return Response(text, mimetype="text/plain")
    return jsonify({"receipt": receipt}), 200
