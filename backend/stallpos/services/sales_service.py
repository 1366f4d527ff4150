"""
Sales Service - cart validation and sale commit

WHY: A sale is recorded once and never edited. Everything that can reject a
cart (empty cart, unknown item, missing internal price, short cash) is
checked before the first mutation, so a rejected cart leaves the catalog and
history exactly as they were.

PRICE RESOLUTION:
- Vendor lines: catalog selling price
- Internal lines: price entered by the cashier at sale time (portion or
  negotiated price); the catalog price is only a placeholder of 0
- Ad-hoc lines (no item_id): always Internal, need a name and a price

STOCK:
- Only Vendor-origin catalog items are decremented
- Overselling is allowed by default; stock is informational
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Iterator

from ..models import (
    DraftSale,
    SaleLine,
    SaleRecord,
    ORIGIN_INTERNAL,
    ORIGIN_VENDOR,
    ORIGINS,
    PAYMENT_CASH,
    PAYMENT_METHODS,
)
from ..time_utils import utcnow
from .catalog_service import CatalogStore
from .identifier_service import IdGenerator


class SaleError(Exception):
    """Raised for sale operation errors."""
    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.details = details or {}


@dataclass(frozen=True)
class CartLineRequest:
    """One line of a cart as submitted by the POS screen."""
    item_id: str | None
    quantity: int = 1
    unit_price_cents: int | None = None
    name: str | None = None
    category: str = ""


class SaleHistory:
    """Append-only log of committed sales."""

    def __init__(self, records: Iterable[SaleRecord] = ()):
        self._records: list[SaleRecord] = list(records)

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[SaleRecord]:
        return iter(list(self._records))

    def records(self) -> list[SaleRecord]:
        return list(self._records)

    def get(self, sale_id: str) -> SaleRecord | None:
        for record in self._records:
            if record.id == sale_id:
                return record
        return None

    def append(self, record: SaleRecord) -> None:
        if self.get(record.id) is not None:
            raise SaleError("Duplicate sale id", details={"sale_id": record.id})
        self._records.append(record)


def _resolve_line(
    catalog: CatalogStore,
    request: CartLineRequest,
    position: int,
) -> SaleLine:
    if request.quantity is None or request.quantity < 1:
        raise SaleError("Quantity must be at least 1", details={"line": position})

    if request.item_id is None:
        name = (request.name or "").strip()
        if not name:
            raise SaleError("Custom items need a name", details={"line": position})
        if not request.unit_price_cents or request.unit_price_cents <= 0:
            raise SaleError("Enter a valid price for custom items", details={"line": position})
        return SaleLine(
            item_id=None,
            vendor_name=catalog.internal_vendor_tag,
            name=name,
            category=request.category or "",
            origin=ORIGIN_INTERNAL,
            unit_price_cents=request.unit_price_cents,
            cost_price_cents=0,
            quantity=request.quantity,
        )

    item = catalog.get(request.item_id)
    if item is None:
        raise SaleError("Item not found", details={"line": position, "item_id": request.item_id})

    if item.origin == ORIGIN_INTERNAL:
        if not request.unit_price_cents or request.unit_price_cents <= 0:
            raise SaleError(
                "Enter a valid price for internal items",
                details={"line": position, "item_id": item.id},
            )
        unit_price_cents = request.unit_price_cents
    else:
        unit_price_cents = item.selling_price_cents

    return SaleLine(
        item_id=item.id,
        vendor_name=item.vendor_name,
        name=item.name,
        category=item.category,
        origin=item.origin,
        unit_price_cents=unit_price_cents,
        cost_price_cents=item.cost_price_cents,
        quantity=request.quantity,
    )


def _check_stock(catalog: CatalogStore, lines: list[SaleLine]) -> None:
    requested: dict[str, int] = {}
    for line in lines:
        if line.item_id is not None and line.is_vendor:
            requested[line.item_id] = requested.get(line.item_id, 0) + line.quantity

    insufficient = []
    for item_id, quantity in requested.items():
        item = catalog.get(item_id)
        if item is not None and item.stock_count < quantity:
            insufficient.append({
                "item_id": item_id,
                "requested_quantity": quantity,
                "stock_count": item.stock_count,
            })

    if insufficient:
        raise SaleError("Insufficient stock", details={"items": insufficient})


def preview_sale(
    catalog: CatalogStore,
    cart: Iterable[CartLineRequest],
    *,
    payment_method: str,
    origin: str,
    amount_received_cents: int | None = None,
    allow_oversell: bool = True,
    strict_origin: bool = False,
) -> DraftSale:
    """
    Validate a cart and price it without committing anything.

    Raises:
        SaleError: empty cart, unknown item, missing internal price,
            bad payment method/origin, or cash that does not cover the total.
    """
    if payment_method not in PAYMENT_METHODS:
        raise SaleError(f"Unknown payment method: {payment_method}")
    if origin not in ORIGINS:
        raise SaleError(f"Unknown sale origin: {origin}")

    requests = list(cart)
    if not requests:
        raise SaleError("Cannot process sale with an empty cart")

    lines = [_resolve_line(catalog, request, position) for position, request in enumerate(requests, start=1)]

    if strict_origin:
        mismatched = [position for position, line in enumerate(lines, start=1) if line.origin != origin]
        if mismatched:
            raise SaleError(
                f"All items must be {origin} items in this POS mode",
                details={"lines": mismatched},
            )

    if not allow_oversell:
        _check_stock(catalog, lines)

    total_cents = sum(line.line_total_cents for line in lines)

    if payment_method == PAYMENT_CASH:
        received = amount_received_cents or 0
        if received < total_cents:
            raise SaleError(
                "Insufficient payment",
                details={"total_cents": total_cents, "amount_received_cents": received},
            )
    else:
        # E-wallet settles the exact total through the wallet provider
        received = total_cents if amount_received_cents is None else amount_received_cents

    return DraftSale(
        lines=tuple(lines),
        total_cents=total_cents,
        payment_method=payment_method,
        amount_received_cents=received,
        change_cents=max(0, received - total_cents),
        origin=origin,
    )


def commit_sale(
    catalog: CatalogStore,
    history: SaleHistory,
    cart: Iterable[CartLineRequest],
    *,
    payment_method: str,
    origin: str,
    ids: IdGenerator,
    amount_received_cents: int | None = None,
    allow_oversell: bool = True,
    strict_origin: bool = False,
    now: datetime | None = None,
) -> SaleRecord:
    """
    Commit a cart: append the SaleRecord and decrement Vendor stock.

    Validation is the same as preview_sale and runs to completion before
    the history or catalog is touched.
    """
    draft = preview_sale(
        catalog,
        cart,
        payment_method=payment_method,
        origin=origin,
        amount_received_cents=amount_received_cents,
        allow_oversell=allow_oversell,
        strict_origin=strict_origin,
    )

    sale = SaleRecord(
        id=ids.next_id("sale"),
        timestamp=now or utcnow(),
        lines=draft.lines,
        total_cents=draft.total_cents,
        payment_method=draft.payment_method,
        amount_received_cents=draft.amount_received_cents,
        change_cents=draft.change_cents,
        origin=draft.origin,
    )

    decrements = [
        (line.item_id, line.quantity)
        for line in sale.lines
        if line.item_id is not None and line.origin == ORIGIN_VENDOR
    ]

    history.append(sale)
    for item_id, quantity in decrements:
        catalog.decrement_stock(item_id, quantity)

    return sale
