# Overview: Catalog Store - inventory items for internal and vendor goods.

"""
Catalog Service

WHY: The catalog is the only mutable collection in the stall. Sales and
payouts are append-only histories; items can be added, bulk-imported,
deleted, and have their stock decremented by a committed sale.

DESIGN:
- CatalogStore owns the items; nothing else holds a reference to the list.
- Sale lines snapshot item fields, so deleting an item never touches history.
- Import rows failing validation are skipped, not raised; the ImportResult
  reports counts so the caller can warn when nothing was accepted.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, Iterator, Mapping

from ..models import InventoryItem, ORIGIN_INTERNAL, ORIGIN_VENDOR, ORIGINS
from ..time_utils import utcnow
from ..validation import ValidationError, parse_cents, parse_int
from .identifier_service import IdGenerator


logger = logging.getLogger(__name__)

DEFAULT_INTERNAL_VENDOR_TAG = "ZZ"

IMPORT_STATUS_IMPORTED = "imported"
IMPORT_STATUS_NO_VALID_ROWS = "no_valid_rows"
IMPORT_STATUS_EMPTY = "empty"


class CatalogValidationError(Exception):
    """Raised when item data fails validation."""
    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.details = details or {}


@dataclass
class ImportResult:
    submitted: int
    accepted: int
    items: list[InventoryItem] = field(default_factory=list)

    @property
    def skipped(self) -> int:
        return self.submitted - self.accepted

    @property
    def status(self) -> str:
        if self.submitted == 0:
            return IMPORT_STATUS_EMPTY
        if self.accepted == 0:
            return IMPORT_STATUS_NO_VALID_ROWS
        return IMPORT_STATUS_IMPORTED

    def to_dict(self) -> dict:
        return {
            "status": self.status,
            "submitted": self.submitted,
            "accepted": self.accepted,
            "skipped": self.skipped,
            "items": [item.to_dict() for item in self.items],
        }


def _as_text(value: Any) -> str | None:
    """Import rows carry ringgit amounts; numbers from JSON are read as text, not cents."""
    if value is None or isinstance(value, str):
        return value
    return str(value)


def infer_origin(vendor_name: str, internal_vendor_tag: str = DEFAULT_INTERNAL_VENDOR_TAG) -> str:
    """The internal vendor tag (any case) marks the stall's own goods."""
    if vendor_name.strip().upper() == internal_vendor_tag.upper():
        return ORIGIN_INTERNAL
    return ORIGIN_VENDOR


class CatalogStore:
    """In-memory catalog of InventoryItem, kept in insertion order."""

    def __init__(
        self,
        items: Iterable[InventoryItem] = (),
        *,
        ids: IdGenerator | None = None,
        internal_vendor_tag: str = DEFAULT_INTERNAL_VENDOR_TAG,
    ):
        self._items: list[InventoryItem] = list(items)
        self.ids = ids or IdGenerator()
        self.internal_vendor_tag = internal_vendor_tag

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[InventoryItem]:
        return iter(list(self._items))

    def items(self) -> list[InventoryItem]:
        return list(self._items)

    def get(self, item_id: str) -> InventoryItem | None:
        for item in self._items:
            if item.id == item_id:
                return item
        return None

    def add_item(
        self,
        *,
        vendor_name: str,
        name: str,
        selling_price_cents: int,
        stock_count: int,
        cost_price_cents: int = 0,
        category: str = "",
        origin: str | None = None,
    ) -> InventoryItem:
        """
        Add one item with a fresh id and creation timestamp.

        Raises:
            CatalogValidationError: missing name, negative amounts, or a
                Vendor item without a vendor name or positive price.
        """
        name = (name or "").strip()
        vendor_name = (vendor_name or "").strip()
        if not name:
            raise CatalogValidationError("Item name is required")

        if origin is None:
            origin = infer_origin(vendor_name, self.internal_vendor_tag) if vendor_name else ORIGIN_VENDOR
        if origin not in ORIGINS:
            raise CatalogValidationError(f"Unknown origin: {origin}")
        if origin == ORIGIN_INTERNAL:
            vendor_name = self.internal_vendor_tag
        elif not vendor_name:
            raise CatalogValidationError("Vendor name is required for vendor items")

        if selling_price_cents is None or selling_price_cents < 0:
            raise CatalogValidationError("Selling price must be zero or more")
        if origin == ORIGIN_VENDOR and selling_price_cents == 0:
            raise CatalogValidationError("Vendor items need a positive selling price")
        if cost_price_cents < 0:
            raise CatalogValidationError("Cost price must be zero or more")
        if stock_count is None or stock_count < 0:
            raise CatalogValidationError("Stock must be zero or more")

        item = InventoryItem(
            id=self.ids.next_id("item"),
            vendor_name=vendor_name,
            name=name,
            selling_price_cents=selling_price_cents,
            cost_price_cents=cost_price_cents,
            stock_count=stock_count,
            category=(category or "").strip(),
            origin=origin,
            date_added=utcnow(),
        )
        self._items.append(item)
        return item

    def _validate_import_row(self, row: Mapping[str, Any]) -> dict | None:
        vendor_name = str(row.get("vendor") or "").strip()
        name = str(row.get("name") or "").strip()
        if not vendor_name or not name:
            return None
        try:
            selling_price_cents = parse_cents(_as_text(row.get("selling_price")), field="selling_price")
            stock_count = parse_int(row.get("stock"), field="stock")
        except ValidationError:
            return None
        if selling_price_cents < 0:
            return None

        try:
            cost_price_cents = parse_cents(_as_text(row.get("cost_price")), field="cost_price")
        except ValidationError:
            cost_price_cents = 0
        if cost_price_cents < 0:
            cost_price_cents = 0

        return {
            "vendor_name": vendor_name,
            "name": name,
            "selling_price_cents": selling_price_cents,
            "cost_price_cents": cost_price_cents,
            "stock_count": stock_count,
            "category": str(row.get("category") or "").strip(),
            "origin": infer_origin(vendor_name, self.internal_vendor_tag),
        }

    def import_items(self, rows: Iterable[Mapping[str, Any]]) -> ImportResult:
        """
        Bulk-add rows of {vendor, name, selling_price, cost_price, stock, category}.

        Rows missing vendor/name, with an unparseable or negative selling
        price, or a non-integer stock are skipped. Cost price falls back to 0.
        Nothing is appended unless at least one row validates.
        """
        rows = list(rows)
        valid = []
        for index, row in enumerate(rows, start=1):
            fields = self._validate_import_row(row)
            if fields is None:
                logger.debug("Skipping catalog import row %d: %r", index, dict(row))
                continue
            valid.append(fields)

        if not valid:
            return ImportResult(submitted=len(rows), accepted=0)

        added_at = utcnow()
        new_ids = self.ids.next_ids("import", len(valid))
        items = [
            InventoryItem(id=item_id, date_added=added_at, **fields)
            for item_id, fields in zip(new_ids, valid)
        ]
        self._items.extend(items)
        return ImportResult(submitted=len(rows), accepted=len(items), items=items)

    def delete_item(self, item_id: str) -> bool:
        """Remove an item. Unknown ids are a no-op; returns whether anything was removed."""
        for index, item in enumerate(self._items):
            if item.id == item_id:
                del self._items[index]
                return True
        return False

    def decrement_stock(self, item_id: str, quantity: int) -> None:
        item = self.get(item_id)
        if item is not None:
            item.stock_count -= quantity
