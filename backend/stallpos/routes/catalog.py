# Overview: Flask API routes for the catalog; parses input and returns JSON responses.

"""
Catalog Routes

Items are added one at a time or bulk-imported from CSV (multipart "file")
or JSON ({"rows": [...]}). Deleting an item never alters past sales.
"""

from flask import Blueprint, Response, current_app, jsonify, request

from ..services import export_service, import_service, snapshot_service
from ..services.catalog_service import (
    CatalogValidationError,
    IMPORT_STATUS_EMPTY,
    IMPORT_STATUS_NO_VALID_ROWS,
)
from ..services.snapshot_service import KEY_CATALOG
from ..validation import ValidationError, parse_cents, parse_int


catalog_bp = Blueprint("catalog", __name__, url_prefix="/api/catalog")


@catalog_bp.get("")
def list_items_route():
    """
    List catalog items.

    Query parameters:
    - origin: Internal or Vendor (optional filter)
    """
    state = snapshot_service.get_state()
    origin = request.args.get("origin")
    items = [item for item in state.catalog if not origin or item.origin == origin]
    return jsonify({"items": [item.to_dict() for item in items], "count": len(items)}), 200


@catalog_bp.post("")
def add_item_route():
    """
    Add an item.

    Request body:
    {
        "name": "Mee Sup",              // required
        "vendor_name": "Mee Tarik",     // required for vendor items
        "selling_price": "8.00",        // required; 0 for internal items
        "cost_price": "4.50",           // optional, default 0
        "stock": 20,                    // required
        "category": "Makanan",          // optional
        "origin": "Vendor"              // optional, inferred from vendor_name
    }
    """
    data = request.get_json(silent=True) or {}
    if not isinstance(data, dict):
        return jsonify({"error": "Request body must be a JSON object"}), 400
    if not data.get("name"):
        return jsonify({"error": "name is required"}), 400
    if data.get("selling_price") in (None, ""):
        return jsonify({"error": "selling_price is required"}), 400
    if data.get("stock") in (None, ""):
        return jsonify({"error": "stock is required"}), 400
    for field in ("name", "vendor_name", "category", "origin"):
        if data.get(field) is not None and not isinstance(data[field], str):
            return jsonify({"error": f"{field} must be a string"}), 400

    try:
        selling_price_cents = parse_cents(str(data["selling_price"]), field="selling_price")
        cost_price = data.get("cost_price")
        cost_price_cents = parse_cents(str(cost_price), field="cost_price") if cost_price not in (None, "") else 0
        stock_count = parse_int(data["stock"], field="stock")
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400

    state = snapshot_service.get_state()
    try:
        item = state.catalog.add_item(
            vendor_name=data.get("vendor_name") or "",
            name=data["name"],
            selling_price_cents=selling_price_cents,
            cost_price_cents=cost_price_cents,
            stock_count=stock_count,
            category=data.get("category") or "",
            origin=data.get("origin"),
        )
    except CatalogValidationError as e:
        return jsonify({"error": str(e), "details": e.details}), 400

    snapshot_service.commit_state(state, [KEY_CATALOG])
    current_app.logger.info("Catalog item added: %s (%s)", item.name, item.id)
    return jsonify({"item": item.to_dict()}), 201


@catalog_bp.delete("/<item_id>")
def delete_item_route(item_id: str):
    """Delete an item. Deleting an unknown id is a no-op (deleted=false)."""
    state = snapshot_service.get_state()
    deleted = state.catalog.delete_item(item_id)
    if deleted:
        snapshot_service.commit_state(state, [KEY_CATALOG])
        current_app.logger.info("Catalog item deleted: %s", item_id)
    return jsonify({"deleted": deleted, "item_id": item_id}), 200


@catalog_bp.post("/import")
def import_items_route():
    """
    Bulk import items.

    Accepts a multipart "file" in the catalog CSV format, or JSON
    {"rows": [{"vendor", "name", "selling_price", "cost_price", "stock", "category"}]}.
    Invalid rows are skipped; 422 when no row was valid.
    """
    if "file" in request.files:
        raw = request.files["file"].read()
        try:
            text = raw.decode("utf-8")
        except UnicodeDecodeError:
            return jsonify({"error": "file must be UTF-8 text"}), 400
        rows = import_service.parse_catalog_csv(text)
    else:
        data = request.get_json(silent=True) or {}
        rows = data.get("rows")
        if rows is None:
            return jsonify({"error": "file or rows is required"}), 400
        if not isinstance(rows, list) or not all(isinstance(row, dict) for row in rows):
            return jsonify({"error": "rows must be a list of objects"}), 400

    state = snapshot_service.get_state()
    result = state.catalog.import_items(rows)

    if result.status == IMPORT_STATUS_EMPTY:
        return jsonify({"error": "No rows submitted", **result.to_dict()}), 400
    if result.status == IMPORT_STATUS_NO_VALID_ROWS:
        return jsonify({
            "error": "No valid rows found. Expected: vendor,name,sellingPrice,costPrice,stock[,category]",
            **result.to_dict(),
        }), 422

    snapshot_service.commit_state(state, [KEY_CATALOG])
    current_app.logger.info("Catalog import: %d of %d rows accepted", result.accepted, result.submitted)
    return jsonify(result.to_dict()), 201


@catalog_bp.get("/export")
def export_catalog_route():
    state = snapshot_service.get_state()
    return Response(
        export_service.catalog_csv(state.catalog),
        mimetype="text/csv",
        headers={"Content-Disposition": "attachment; filename=catalog.csv"},
    )


@catalog_bp.get("/template")
def catalog_template_route():
    return Response(
        import_service.catalog_template_csv(current_app.config["INTERNAL_VENDOR_TAG"]),
        mimetype="text/csv",
        headers={"Content-Disposition": "attachment; filename=catalog_template.csv"},
    )
