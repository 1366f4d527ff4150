# Overview: Ledger derivations - cash in hand, vendor balances, daily cash drawer reconciliation.

from __future__ import annotations

"""
Stall Ledger Invariants (authoritative)

- Nothing here is stored. Every figure is recomputed from the full sale and
  payout histories on each call, so a figure can never drift from history.
- Cash in hand = Cash-method sale totals - all payouts.
- Vendor balance = cost x quantity of the vendor's Vendor-origin sold lines
  - payouts to that vendor.
- Daily reconciliation uses the till's local calendar day, not UTC.
"""

from datetime import date, tzinfo
from typing import Iterable

from ..models import (
    PayoutRecord,
    SaleRecord,
    ORIGIN_INTERNAL,
    ORIGIN_VENDOR,
    PAYMENT_CASH,
    PAYMENT_EWALLET,
)
from ..time_utils import local_date


UNKNOWN_VENDOR = "Unknown"

STATUS_BALANCED = "balanced"
STATUS_SHORTAGE = "shortage"
STATUS_SURPLUS = "surplus"


def cash_in_hand(sales: Iterable[SaleRecord], payouts: Iterable[PayoutRecord]) -> int:
    cash_sales = sum(sale.total_cents for sale in sales if sale.payment_method == PAYMENT_CASH)
    paid_out = sum(payout.amount_cents for payout in payouts)
    return cash_sales - paid_out


def vendor_ledger(sales: Iterable[SaleRecord], payouts: Iterable[PayoutRecord]) -> list[dict]:
    """
    Owed / paid / balance per vendor.

    Vendors appear in first-seen order: sale lines are scanned first, then
    payouts, so a vendor paid before anything of theirs sold still gets a
    row with owed=0.
    """
    ledger: dict[str, dict[str, int]] = {}

    for sale in sales:
        for line in sale.lines:
            if not line.is_vendor:
                continue
            name = line.vendor_name or UNKNOWN_VENDOR
            entry = ledger.setdefault(name, {"owed": 0, "paid": 0})
            entry["owed"] += line.line_cost_cents

    for payout in payouts:
        entry = ledger.setdefault(payout.vendor_name, {"owed": 0, "paid": 0})
        entry["paid"] += payout.amount_cents

    return [
        {
            "name": name,
            "owed_cents": entry["owed"],
            "paid_cents": entry["paid"],
            "balance_cents": entry["owed"] - entry["paid"],
        }
        for name, entry in ledger.items()
    ]


def variance_status(variance_cents: int) -> str:
    if variance_cents == 0:
        return STATUS_BALANCED
    if variance_cents < 0:
        return STATUS_SHORTAGE
    return STATUS_SURPLUS


def daily_cash_reconciliation(
    sales: Iterable[SaleRecord],
    day: date,
    counted_cash_cents: int | None = None,
    *,
    tz: tzinfo | None = None,
) -> dict:
    """
    Compare the cash the drawer should hold for ``day`` with what was counted.

    variance = counted - expected; status is None when nothing was counted.
    Also splits the day's takings by payment method and by sale origin.
    """
    day_sales = [sale for sale in sales if local_date(sale.timestamp, tz) == day]

    by_method = {PAYMENT_CASH: 0, PAYMENT_EWALLET: 0}
    by_origin = {
        origin: {"cash_cents": 0, "ewallet_cents": 0, "total_cents": 0}
        for origin in (ORIGIN_INTERNAL, ORIGIN_VENDOR)
    }
    total_revenue_cents = 0

    for sale in day_sales:
        amount = sale.total_cents
        total_revenue_cents += amount
        is_cash = sale.payment_method == PAYMENT_CASH
        by_method[PAYMENT_CASH if is_cash else PAYMENT_EWALLET] += amount

        bucket = by_origin[ORIGIN_INTERNAL if sale.origin == ORIGIN_INTERNAL else ORIGIN_VENDOR]
        bucket["total_cents"] += amount
        bucket["cash_cents" if is_cash else "ewallet_cents"] += amount

    expected_cash_cents = by_method[PAYMENT_CASH]
    if counted_cash_cents is None:
        variance_cents = None
        status = None
    else:
        variance_cents = counted_cash_cents - expected_cash_cents
        status = variance_status(variance_cents)

    return {
        "date": day.isoformat(),
        "transaction_count": len(day_sales),
        "total_revenue_cents": total_revenue_cents,
        "expected_cash_cents": expected_cash_cents,
        "counted_cash_cents": counted_cash_cents,
        "variance_cents": variance_cents,
        "status": status,
        "by_payment_method": by_method,
        "by_origin": by_origin,
    }
