from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from stallpos.time_utils import parse_iso_datetime, to_utc_z, utcnow


ORIGIN_INTERNAL = "Internal"
ORIGIN_VENDOR = "Vendor"
ORIGINS = (ORIGIN_INTERNAL, ORIGIN_VENDOR)


@dataclass
class InventoryItem:
    """
    Catalog entry for something the stall sells.

    Internal items are the stall's own goods; their selling price is a
    placeholder of 0 and the cashier enters the price at sale time.
    Vendor items are consigned goods priced from the catalog.

    stock_count is informational and may go negative when a sale oversells.
    """
    id: str
    vendor_name: str
    name: str
    selling_price_cents: int
    cost_price_cents: int
    stock_count: int
    origin: str
    category: str = ""
    date_added: datetime = field(default_factory=utcnow)

    @property
    def is_vendor(self) -> bool:
        return self.origin == ORIGIN_VENDOR

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "vendor_name": self.vendor_name,
            "name": self.name,
            "selling_price_cents": self.selling_price_cents,
            "cost_price_cents": self.cost_price_cents,
            "stock_count": self.stock_count,
            "category": self.category,
            "origin": self.origin,
            "date_added": to_utc_z(self.date_added),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "InventoryItem":
        return cls(
            id=str(data["id"]),
            vendor_name=data.get("vendor_name") or "",
            name=data["name"],
            selling_price_cents=int(data.get("selling_price_cents") or 0),
            cost_price_cents=int(data.get("cost_price_cents") or 0),
            stock_count=int(data.get("stock_count") or 0),
            category=data.get("category") or "",
            origin=data.get("origin") or ORIGIN_VENDOR,
            date_added=parse_iso_datetime(data.get("date_added")) or utcnow(),
        )
