# Overview: Receipt rendering for committed sales and uncommitted previews.

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from ..models import DraftSale, SaleRecord
from ..time_utils import to_utc_z
from ..validation import format_cents


RECEIPT_COMMITTED = "committed"
RECEIPT_PREVIEW = "preview"

RECEIPT_WIDTH = 32


@dataclass(frozen=True)
class Committed:
    sale: SaleRecord


@dataclass(frozen=True)
class Preview:
    draft: DraftSale


ReceiptSource = Union[Committed, Preview]


def render_receipt(source: ReceiptSource) -> dict:
    """
    Receipt data for either kind of sale.

    Always present: kind, lines, total_cents, payment_method,
    amount_received_cents, change_cents, origin.
    sale_id and timestamp are set for committed sales and None for previews.
    """
    if isinstance(source, Committed):
        sale = source.sale
        kind, sale_id, timestamp = RECEIPT_COMMITTED, sale.id, to_utc_z(sale.timestamp)
    elif isinstance(source, Preview):
        sale = source.draft
        kind, sale_id, timestamp = RECEIPT_PREVIEW, None, None
    else:
        raise TypeError(f"Unsupported receipt source: {type(source).__name__}")

    return {
        "kind": kind,
        "sale_id": sale_id,
        "timestamp": timestamp,
        "origin": sale.origin,
        "payment_method": sale.payment_method,
        "lines": [
            {
                "name": line.name,
                "quantity": line.quantity,
                "unit_price_cents": line.unit_price_cents,
                "line_total_cents": line.line_total_cents,
            }
            for line in sale.lines
        ],
        "total_cents": sale.total_cents,
        "amount_received_cents": sale.amount_received_cents,
        "change_cents": sale.change_cents,
    }


def _row(left: str, right: str) -> str:
    gap = max(1, RECEIPT_WIDTH - len(left) - len(right))
    return f"{left}{' ' * gap}{right}"


def format_receipt_text(receipt: dict, *, stall_name: str = "Pisang Goreng ZZ") -> str:
    """Plain-text receipt for a thermal printer or a text download."""
    rule = "-" * RECEIPT_WIDTH
    out = [stall_name.center(RECEIPT_WIDTH)]
    if receipt["kind"] == RECEIPT_PREVIEW:
        out.append("*** PREVIEW ***".center(RECEIPT_WIDTH))
    else:
        out.append(f"No: {receipt['sale_id']}")
        out.append(f"Date: {receipt['timestamp']}")
    out.append(rule)

    for line in receipt["lines"]:
        out.append(line["name"][:RECEIPT_WIDTH])
        out.append(_row(
            f"  {line['quantity']} x {format_cents(line['unit_price_cents'])}",
            format_cents(line["line_total_cents"]),
        ))

    out.append(rule)
    out.append(_row("TOTAL (RM)", format_cents(receipt["total_cents"])))
    out.append(_row(receipt["payment_method"], format_cents(receipt["amount_received_cents"])))
    out.append(_row("Change", format_cents(receipt["change_cents"])))
    out.append(rule)
    out.append("Thank you!".center(RECEIPT_WIDTH))
    return "\n".join(out) + "\n"
