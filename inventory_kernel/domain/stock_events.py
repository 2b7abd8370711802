"""
Stock events -- immutable input records for inventory valuation.

Responsibility:
    Define the reason taxonomy for stock movements and the frozen
    ``StockEvent`` value that the replay engine consumes.  One event is one
    historical movement of one item.

Architecture position:
    Kernel > Domain -- pure value objects, zero I/O.
    Imported by engines, selectors and services.

Invariants enforced:
    - Frozen dataclass: events are never mutated after construction.
    - ``quantity`` is always the absolute value of ``quantity_change``.

Failure modes:
    - None.  Zero deltas and unknown reasons are representable; the engine
      decides what they mean (ignored and COGS respectively).
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum


class StockChangeReason(str, Enum):
    """Reason recorded on a stock movement."""

    INITIAL_STOCK = "INITIAL_STOCK"
    MANUAL_UPDATE = "MANUAL_UPDATE"
    PRICE_CHANGE = "PRICE_CHANGE"
    SOLD = "SOLD"
    SCRAPPED = "SCRAPPED"
    DESTROYED = "DESTROYED"
    DAMAGED = "DAMAGED"
    EXPIRED = "EXPIRED"
    LOST = "LOST"
    RETURNED_TO_SUPPLIER = "RETURNED_TO_SUPPLIER"
    RETURNED_BY_CUSTOMER = "RETURNED_BY_CUSTOMER"

    @classmethod
    def parse(cls, value: "StockChangeReason | str") -> "StockChangeReason | str":
        """Return the matching member, or the raw string for unknown reasons."""
        if isinstance(value, cls):
            return value
        normalized = value.strip().upper()
        try:
            return cls(normalized)
        except ValueError:
            return value


@dataclass(frozen=True, slots=True)
class StockEvent:
    """
    One stock movement for one item.

    Contract:
        Positive ``quantity_change`` adds stock, negative removes it.
        ``unit_cost`` is present for events that establish a price
        (purchases, initial stock) and ``None`` otherwise (e.g. a sale).
    Non-goals:
        - Does not validate ordering; the event source guarantees
          non-decreasing ``occurred_at``.
        - ``supplier_id`` is only used for filtering at the source.
    """

    item_id: str
    quantity_change: int
    reason: StockChangeReason | str
    occurred_at: datetime
    unit_cost: Decimal | None = None
    supplier_id: str | None = None

    @property
    def is_inbound(self) -> bool:
        return self.quantity_change > 0

    @property
    def is_outbound(self) -> bool:
        return self.quantity_change < 0

    @property
    def quantity(self) -> int:
        """Absolute size of the movement."""
        return abs(self.quantity_change)

    @property
    def has_unit_cost(self) -> bool:
        return self.unit_cost is not None


def normalize_supplier_id(supplier_id: str | None) -> str | None:
    """Blank means no supplier; anything else is trimmed and lowercased."""
    if supplier_id is None:
        return None
    normalized = supplier_id.strip().lower()
    return normalized or None
