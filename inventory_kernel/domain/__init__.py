"""Pure domain values for the inventory kernel."""

from inventory_kernel.domain.stock_events import (
    StockChangeReason,
    StockEvent,
    normalize_supplier_id,
)

__all__ = [
    "StockChangeReason",
    "StockEvent",
    "normalize_supplier_id",
]
