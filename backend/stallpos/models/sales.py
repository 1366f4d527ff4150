from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from stallpos.time_utils import parse_iso_datetime, to_utc_z
from .catalog import ORIGIN_VENDOR


PAYMENT_CASH = "Cash"
PAYMENT_EWALLET = "EWallet"
PAYMENT_METHODS = (PAYMENT_CASH, PAYMENT_EWALLET)


@dataclass(frozen=True)
class SaleLine:
    """
    Snapshot of one cart line as it was sold.

    Price, cost and vendor are copied at sale time, so later catalog edits
    or deletes never change a recorded sale. item_id is None for ad-hoc
    lines that were never in the catalog.
    """
    item_id: str | None
    vendor_name: str
    name: str
    origin: str
    unit_price_cents: int
    cost_price_cents: int
    quantity: int
    category: str = ""

    @property
    def line_total_cents(self) -> int:
        return self.unit_price_cents * self.quantity

    @property
    def line_cost_cents(self) -> int:
        return self.cost_price_cents * self.quantity

    @property
    def is_vendor(self) -> bool:
        return self.origin == ORIGIN_VENDOR

    def to_dict(self) -> dict:
        return {
            "item_id": self.item_id,
            "vendor_name": self.vendor_name,
            "name": self.name,
            "category": self.category,
            "origin": self.origin,
            "unit_price_cents": self.unit_price_cents,
            "cost_price_cents": self.cost_price_cents,
            "quantity": self.quantity,
            "line_total_cents": self.line_total_cents,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "SaleLine":
        return cls(
            item_id=data.get("item_id"),
            vendor_name=data.get("vendor_name") or "",
            name=data["name"],
            category=data.get("category") or "",
            origin=data["origin"],
            unit_price_cents=int(data["unit_price_cents"]),
            cost_price_cents=int(data.get("cost_price_cents") or 0),
            quantity=int(data["quantity"]),
        )


@dataclass(frozen=True)
class DraftSale:
    """A validated cart that has not been committed (receipt preview)."""
    lines: tuple[SaleLine, ...]
    total_cents: int
    payment_method: str
    amount_received_cents: int
    change_cents: int
    origin: str

    def to_dict(self) -> dict:
        return {
            "lines": [line.to_dict() for line in self.lines],
            "total_cents": self.total_cents,
            "payment_method": self.payment_method,
            "amount_received_cents": self.amount_received_cents,
            "change_cents": self.change_cents,
            "origin": self.origin,
        }


@dataclass(frozen=True)
class SaleRecord(DraftSale):
    """
    Committed sale. Append-only: created once, never mutated or deleted.

    origin is the POS mode that produced the sale, not a summary of its
    lines (a Vendor-mode sale may still carry an Internal line).
    """
    id: str = ""
    timestamp: datetime | None = None

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["id"] = self.id
        data["timestamp"] = to_utc_z(self.timestamp)
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "SaleRecord":
        return cls(
            id=str(data["id"]),
            timestamp=parse_iso_datetime(data["timestamp"]),
            lines=tuple(SaleLine.from_dict(line) for line in data.get("lines", [])),
            total_cents=int(data["total_cents"]),
            payment_method=data["payment_method"],
            amount_received_cents=int(data.get("amount_received_cents") or 0),
            change_cents=int(data.get("change_cents") or 0),
            origin=data["origin"],
        )
