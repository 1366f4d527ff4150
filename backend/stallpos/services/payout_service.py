# Overview: Service-layer operations for vendor payouts; append-only cash paid out of the till.

from __future__ import annotations

from datetime import datetime
from typing import Any, Iterable, Iterator

from ..models import PayoutRecord
from ..time_utils import utcnow
from ..validation import ValidationError, parse_cents
from .identifier_service import IdGenerator


class PayoutError(Exception):
    """Raised when a payout fails validation."""
    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.details = details or {}


class PayoutHistory:
    """Append-only log of payouts to vendors."""

    def __init__(self, records: Iterable[PayoutRecord] = ()):
        self._records: list[PayoutRecord] = list(records)

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[PayoutRecord]:
        return iter(list(self._records))

    def records(self) -> list[PayoutRecord]:
        return list(self._records)

    def for_vendor(self, vendor_name: str) -> list[PayoutRecord]:
        return [p for p in self._records if p.vendor_name == vendor_name]

    def append(self, record: PayoutRecord) -> None:
        self._records.append(record)


def record_payout(
    history: PayoutHistory,
    vendor_name: str,
    amount: Any,
    note: str | None = "",
    *,
    ids: IdGenerator,
    now: datetime | None = None,
) -> PayoutRecord:
    """
    Record cash paid to a vendor.

    amount is int cents, a Decimal, or decimal text ("12.50").

    Raises:
        PayoutError: blank vendor name, or an amount that is not a
            positive number.
    """
    vendor_name = (vendor_name or "").strip()
    if not vendor_name:
        raise PayoutError("Vendor name is required")

    try:
        amount_cents = parse_cents(amount, field="amount")
    except ValidationError as exc:
        raise PayoutError(str(exc), details={"amount": str(amount)}) from exc
    if amount_cents <= 0:
        raise PayoutError("Payout amount must be positive", details={"amount_cents": amount_cents})

    payout = PayoutRecord(
        id=ids.next_id("payout"),
        vendor_name=vendor_name,
        amount_cents=amount_cents,
        note=(note or "").strip(),
        timestamp=now or utcnow(),
    )
    history.append(payout)
    return payout
