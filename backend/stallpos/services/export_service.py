# Overview: Read-only CSV projections of sale history, vendor reports and the catalog.

from __future__ import annotations

import csv
import io
from datetime import tzinfo
from typing import Iterable

from ..models import InventoryItem, SaleRecord
from ..time_utils import local_date
from ..validation import format_cents
from .import_service import TEMPLATE_HEADER


SALES_HEADERS = ["ID", "Origin", "Items", "Total", "Method", "Date"]
VENDOR_REPORT_HEADERS = ["Vendor", "Units Sold", "Gross Sales", "Payable"]


def _write(rows: Iterable[list]) -> str:
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerows(rows)
    return buf.getvalue()


def item_summary(sale: SaleRecord) -> str:
    return "; ".join(f"{line.name} ({line.quantity})" for line in sale.lines)


def sales_history_csv(sales: Iterable[SaleRecord], *, tz: tzinfo | None = None) -> str:
    rows = [SALES_HEADERS]
    for sale in sales:
        rows.append([
            sale.id,
            sale.origin,
            item_summary(sale),
            format_cents(sale.total_cents),
            sale.payment_method,
            local_date(sale.timestamp, tz).isoformat(),
        ])
    return _write(rows)


def vendor_report_csv(report: dict) -> str:
    rows = [VENDOR_REPORT_HEADERS]
    for row in report["rows"]:
        rows.append([
            row["vendor"],
            row["units"],
            format_cents(row["gross_sales_cents"]),
            format_cents(row["payable_cents"]),
        ])
    return _write(rows)


def catalog_csv(items: Iterable[InventoryItem]) -> str:
    """Catalog in the import format, so an export re-imports to the same fields."""
    rows = [TEMPLATE_HEADER.split(",")]
    for item in items:
        rows.append([
            item.vendor_name,
            item.name,
            format_cents(item.selling_price_cents),
            format_cents(item.cost_price_cents),
            item.stock_count,
            item.category,
        ])
    return _write(rows)
