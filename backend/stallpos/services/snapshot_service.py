# Overview: Persistence collaborator - loads and saves whole-collection snapshots.

"""
Snapshot Service

WHY: The core works on in-memory collections. Durability is a snapshot of
each collection under a fixed key, written right after every mutating call
so that a read that follows a commit always sees it.

KEYS:
- catalog: inventory items
- sales: sale history
- payouts: payout history

A key with no saved row falls back to its default: the seeded catalog, or
an empty history.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from flask import current_app

from ..extensions import db
from ..models import InventoryItem, PayoutRecord, SaleRecord, Snapshot, ORIGIN_INTERNAL
from ..time_utils import utcnow
from .catalog_service import CatalogStore, DEFAULT_INTERNAL_VENDOR_TAG
from .identifier_service import IdGenerator
from .payout_service import PayoutHistory
from .sales_service import SaleHistory


KEY_CATALOG = "catalog"
KEY_SALES = "sales"
KEY_PAYOUTS = "payouts"
SNAPSHOT_KEYS = (KEY_CATALOG, KEY_SALES, KEY_PAYOUTS)

STATE_EXTENSION = "stallpos.state"

# (id, name, stock, category) for the stall's own goods; prices are entered at sale time
DEFAULT_INTERNAL_ITEMS = (
    ("zz-1", "Pisang Goreng", 100, "Gorengan"),
    ("zz-2", "Keropok Lekor", 100, "Gorengan"),
    ("zz-3", "Keledek", 100, "Gorengan"),
    ("zz-4", "Air Balang", 100, "Minuman"),
    ("zz-5", "Keropok Keping", 50, "Gorengan"),
)


@dataclass
class StallState:
    """Everything the core reads and mutates, passed explicitly to services."""
    catalog: CatalogStore
    sales: SaleHistory = field(default_factory=SaleHistory)
    payouts: PayoutHistory = field(default_factory=PayoutHistory)

    @property
    def ids(self) -> IdGenerator:
        return self.catalog.ids


def default_catalog_items(internal_vendor_tag: str = DEFAULT_INTERNAL_VENDOR_TAG) -> list[InventoryItem]:
    added_at = utcnow()
    return [
        InventoryItem(
            id=item_id,
            vendor_name=internal_vendor_tag,
            name=name,
            selling_price_cents=0,
            cost_price_cents=0,
            stock_count=stock,
            category=category,
            origin=ORIGIN_INTERNAL,
            date_added=added_at,
        )
        for item_id, name, stock, category in DEFAULT_INTERNAL_ITEMS
    ]


def new_state(
    *,
    items: Iterable[InventoryItem] | None = None,
    sales: Iterable[SaleRecord] = (),
    payouts: Iterable[PayoutRecord] = (),
    internal_vendor_tag: str = DEFAULT_INTERNAL_VENDOR_TAG,
    ids: IdGenerator | None = None,
) -> StallState:
    if items is None:
        items = default_catalog_items(internal_vendor_tag)
    catalog = CatalogStore(items, ids=ids or IdGenerator(), internal_vendor_tag=internal_vendor_tag)
    return StallState(catalog=catalog, sales=SaleHistory(sales), payouts=PayoutHistory(payouts))


def _payload(key: str) -> list | None:
    row = db.session.get(Snapshot, key)
    return None if row is None else row.payload


def load_state(
    *,
    internal_vendor_tag: str = DEFAULT_INTERNAL_VENDOR_TAG,
    ids: IdGenerator | None = None,
) -> StallState:
    """Rebuild state from snapshots; the id generator resumes after the largest saved id."""
    catalog_payload = _payload(KEY_CATALOG)
    sales_payload = _payload(KEY_SALES) or []
    payouts_payload = _payload(KEY_PAYOUTS) or []

    items = None
    if catalog_payload is not None:
        items = [InventoryItem.from_dict(data) for data in catalog_payload]

    state = new_state(
        items=items,
        sales=[SaleRecord.from_dict(data) for data in sales_payload],
        payouts=[PayoutRecord.from_dict(data) for data in payouts_payload],
        internal_vendor_tag=internal_vendor_tag,
        ids=ids,
    )
    state.ids.observe(
        [item.id for item in state.catalog]
        + [sale.id for sale in state.sales]
        + [payout.id for payout in state.payouts]
    )
    return state


def _serialize(state: StallState, key: str) -> list[dict]:
    if key == KEY_CATALOG:
        return [item.to_dict() for item in state.catalog]
    if key == KEY_SALES:
        return [sale.to_dict() for sale in state.sales]
    if key == KEY_PAYOUTS:
        return [payout.to_dict() for payout in state.payouts]
    raise ValueError(f"Unknown snapshot key: {key}")


def save_state(state: StallState, keys: Iterable[str] = SNAPSHOT_KEYS) -> None:
    """
    Write the given collections in one DB transaction.

    A sale touches both catalog and sales; saving them together means the
    stored sale and its stock effect are never out of step.
    """
    for key in keys:
        payload = _serialize(state, key)
        row = db.session.get(Snapshot, key)
        if row is None:
            row = Snapshot(key=key, payload=payload, record_count=len(payload))
            db.session.add(row)
        else:
            row.payload = payload
            row.record_count = len(payload)
            row.updated_at = utcnow()
    db.session.commit()


def reset_state() -> int:
    """Delete every snapshot. Returns how many rows were removed."""
    removed = db.session.query(Snapshot).delete()
    db.session.commit()
    return removed


def snapshot_status() -> list[dict]:
    rows = {row.key: row for row in db.session.query(Snapshot).all()}
    return [
        rows[key].to_dict() if key in rows else {"key": key, "record_count": None, "updated_at": None}
        for key in SNAPSHOT_KEYS
    ]


def get_state() -> StallState:
    """
    The app's loaded state, read from snapshots on first use.

    Call inside an application context.
    """
    state = current_app.extensions.get(STATE_EXTENSION)
    if state is None:
        state = load_state(internal_vendor_tag=current_app.config["INTERNAL_VENDOR_TAG"])
        current_app.extensions[STATE_EXTENSION] = state
    return state


def forget_state() -> None:
    """Drop the in-memory state so the next get_state() reloads from snapshots."""
    current_app.extensions.pop(STATE_EXTENSION, None)


def commit_state(state: StallState, keys: Iterable[str]) -> None:
    """
    Persist after a mutating call. If the save fails the in-memory state is
    dropped, so the app falls back to the last saved snapshots instead of
    serving a change that was never stored.
    """
    try:
        save_state(state, keys)
    except Exception:
        db.session.rollback()
        forget_state()
        raise
