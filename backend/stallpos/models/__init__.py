from .catalog import InventoryItem, ORIGIN_INTERNAL, ORIGIN_VENDOR, ORIGINS
from .sales import (
    SaleLine,
    DraftSale,
    SaleRecord,
    PAYMENT_CASH,
    PAYMENT_EWALLET,
    PAYMENT_METHODS,
)
from .payouts import PayoutRecord
from .snapshots import Snapshot

__all__ = [
    'InventoryItem', 'ORIGIN_INTERNAL', 'ORIGIN_VENDOR', 'ORIGINS',
    'SaleLine', 'DraftSale', 'SaleRecord',
    'PAYMENT_CASH', 'PAYMENT_EWALLET', 'PAYMENT_METHODS',
    'PayoutRecord',
    'Snapshot',
]
