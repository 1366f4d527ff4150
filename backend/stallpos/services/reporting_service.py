# Overview: Period reports over sale history - monthly vendor payables and sales summaries.

from __future__ import annotations

import re
from typing import Iterable

from ..models import SaleRecord, ORIGIN_INTERNAL, ORIGIN_VENDOR
from ..time_utils import to_utc_z
from .ledger_service import UNKNOWN_VENDOR


SCOPE_ALL = "all"
SCOPE_INTERNAL = "internal"
SCOPE_VENDOR = "vendor"
SCOPES = (SCOPE_ALL, SCOPE_INTERNAL, SCOPE_VENDOR)

_PERIOD_RE = re.compile(r"^\d{4}-(0[1-9]|1[0-2])$")


class ReportError(Exception):
    """Raised when report generation fails."""
    pass


def _in_period(sale: SaleRecord, period_key: str) -> bool:
    # Matched on the stored ISO timestamp prefix ("2026-10-...Z")
    return (to_utc_z(sale.timestamp) or "").startswith(period_key)


def period_vendor_report(sales: Iterable[SaleRecord], period_key: str) -> dict:
    """
    Units, gross sales and payable per vendor for one calendar month.

    Only Vendor-origin lines count; the stall's own goods are not payable.
    """
    period_key = (period_key or "").strip()
    if not _PERIOD_RE.match(period_key):
        raise ReportError("period must be YYYY-MM")

    stats: dict[str, dict[str, int]] = {}
    for sale in sales:
        if not _in_period(sale, period_key):
            continue
        for line in sale.lines:
            if not line.is_vendor:
                continue
            entry = stats.setdefault(
                line.vendor_name or UNKNOWN_VENDOR,
                {"units": 0, "gross_sales_cents": 0, "payable_cents": 0},
            )
            entry["units"] += line.quantity
            entry["gross_sales_cents"] += line.line_total_cents
            entry["payable_cents"] += line.line_cost_cents

    rows = [{"vendor": name, **entry} for name, entry in stats.items()]
    return {
        "period": period_key,
        "rows": rows,
        "total_units": sum(row["units"] for row in rows),
        "total_gross_sales_cents": sum(row["gross_sales_cents"] for row in rows),
        "total_payable_cents": sum(row["payable_cents"] for row in rows),
    }


def _filter_scope(sales: Iterable[SaleRecord], scope: str) -> list[SaleRecord]:
    if scope == SCOPE_ALL:
        return list(sales)
    if scope == SCOPE_INTERNAL:
        return [sale for sale in sales if sale.origin == ORIGIN_INTERNAL]
    if scope == SCOPE_VENDOR:
        return [sale for sale in sales if sale.origin == ORIGIN_VENDOR]
    raise ReportError("scope must be all, internal, or vendor")


def sales_summary(sales: Iterable[SaleRecord], scope: str = SCOPE_ALL) -> dict:
    """
    Transaction count, revenue and per-item quantities for a POS scope.

    top_item is the name with the highest summed quantity; ties go to the
    name seen first.
    """
    scoped = _filter_scope(sales, scope)

    items_sold: dict[str, int] = {}
    for sale in scoped:
        for line in sale.lines:
            items_sold[line.name] = items_sold.get(line.name, 0) + line.quantity

    top_item = None
    top_quantity = 0
    for name, quantity in items_sold.items():
        if quantity > top_quantity:
            top_item, top_quantity = name, quantity

    return {
        "scope": scope,
        "transaction_count": len(scoped),
        "total_revenue_cents": sum(sale.total_cents for sale in scoped),
        "items_sold": items_sold,
        "top_item": top_item,
    }
