from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from stallpos.time_utils import parse_iso_datetime, to_utc_z


@dataclass(frozen=True)
class PayoutRecord:
    """
    Cash paid out of the till to a vendor.

    Not linked to the sales it settles; it only lowers the vendor's derived
    balance and the cash in hand.
    """
    id: str
    vendor_name: str
    amount_cents: int
    timestamp: datetime
    note: str = ""

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "vendor_name": self.vendor_name,
            "amount_cents": self.amount_cents,
            "note": self.note,
            "timestamp": to_utc_z(self.timestamp),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "PayoutRecord":
        return cls(
            id=str(data["id"]),
            vendor_name=data["vendor_name"],
            amount_cents=int(data["amount_cents"]),
            note=data.get("note") or "",
            timestamp=parse_iso_datetime(data["timestamp"]),
        )
