"""
Module: inventory_kernel.models.stock_history
Responsibility: ORM persistence for the stock movement audit trail.  Each row
    records one signed quantity change for one item, with the reason, the
    price at the time of the change (when one was given) and the moment it
    happened.
Architecture position: Kernel > Models.  May import from db/ and domain/ only.
    MUST NOT import from selectors/ or outer layers.

Invariants enforced:
    - Append-only audit trail: rows are written by the item lifecycle and
      never updated by the valuation path.
    - (created_at, seq) is a total order; seq breaks ties between movements
      recorded at the same timestamp.

Audit relevance:
    The valuation engine derives every balance from these rows.  There are
    NO stored balances; opening and ending inventory are replayed.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import BigInteger, DateTime, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from inventory_kernel.db.base import Base
from inventory_kernel.db.types import ShortCode, UnitPrice
from inventory_kernel.domain.stock_events import StockChangeReason, StockEvent


class StockHistoryModel(Base):
    """
    Persistent storage for stock movements.

    Contract:
        One row per movement.  ``change`` is signed; ``price_at_change`` is
        NULL for movements without an explicit price (sales, write-offs).
    Non-goals:
        - Does not enforce that ``change`` is non-zero; zero rows are ignored
          by valuation.
        - Does not hold a foreign key to items or suppliers; those tables
          belong to the CRUD side of the application.
    """

    __tablename__ = "stock_history"

    __table_args__ = (
        Index("ix_sh_item_ts", "item_id", "created_at"),
        Index("ix_sh_ts", "created_at", "seq"),
        Index("ix_sh_supplier_ts", "supplier_id", "created_at"),
    )

    item_id: Mapped[str] = mapped_column(String(100), nullable=False)

    supplier_id: Mapped[str | None] = mapped_column(String(100), nullable=True)

    change: Mapped[int] = mapped_column(Integer, nullable=False)

    reason: Mapped[ShortCode] = mapped_column(nullable=False)

    created_by: Mapped[str | None] = mapped_column(String(255), nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(), nullable=False)

    # Insertion order, tie-break for identical created_at
    seq: Mapped[int] = mapped_column(BigInteger, nullable=False)

    price_at_change: Mapped[UnitPrice | None] = mapped_column(nullable=True)

    def to_stock_event(self) -> StockEvent:
        """Convert this row into the engine's input value."""
        return StockEvent(
            item_id=self.item_id,
            quantity_change=self.change,
            reason=StockChangeReason.parse(self.reason),
            occurred_at=self.created_at,
            unit_cost=self.price_at_change,
            supplier_id=self.supplier_id,
        )

    def __repr__(self) -> str:
        return (
            f"<StockHistoryModel {self.item_id} {self.change:+d} "
            f"{self.reason} @ {self.created_at}>"
        )
