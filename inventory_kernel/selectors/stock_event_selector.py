"""
Module: inventory_kernel.selectors.stock_event_selector
Responsibility: Stream stock movements to the valuation engine.  This is the
    database-backed event source: every movement up to a window end, in
    time order, optionally restricted to one supplier.
Architecture position: Kernel > Selectors.  Read-only.

Invariants enforced:
    - Bound: every yielded event has occurred_at <= window_end.
    - Order: events are yielded by (created_at, seq) ascending, so movements
      sharing a timestamp keep their insertion order.
    - Streaming: rows are fetched in batches (yield_per) and converted one at
      a time; the full history is never materialized.

Audit relevance:
    The ordering guarantee is what makes weighted-average replay
    deterministic.  Changing the ORDER BY changes valuations.
"""

from __future__ import annotations

from collections.abc import Iterator
from datetime import datetime

from sqlalchemy import func, select

from inventory_kernel.domain.stock_events import StockEvent, normalize_supplier_id
from inventory_kernel.logging_config import get_logger
from inventory_kernel.models.stock_history import StockHistoryModel
from inventory_kernel.selectors.base import BaseSelector

logger = get_logger("selectors.stock_event")

DEFAULT_BATCH_SIZE = 1000


class StockEventSelector(BaseSelector[StockHistoryModel]):
    """
    Read-only event source over the stock_history table.

    Contract:
        ``events_up_to`` returns a one-shot iterator.  The caller must
        consume it while the session is open.
    Non-goals:
        - No caching and no snapshots; each call re-reads history.
    """

    def __init__(self, session, batch_size: int = DEFAULT_BATCH_SIZE):
        super().__init__(session)
        self.batch_size = batch_size

    def events_up_to(
        self,
        window_end: datetime,
        supplier_id: str | None = None,
        since: datetime | None = None,
    ) -> Iterator[StockEvent]:
        """
        Stream every movement with created_at <= window_end.

        Args:
            window_end: Inclusive upper time bound.
            supplier_id: Optional supplier filter, compared
                case-insensitively.  Blank means no filter.
            since: Optional inclusive lower time bound, used when replay
                resumes from a checkpoint.

        Yields:
            StockEvent values in (created_at, seq) order.
        """
        stmt = select(StockHistoryModel).where(
            StockHistoryModel.created_at <= window_end,
        )
        if since is not None:
            stmt = stmt.where(StockHistoryModel.created_at >= since)
        supplier_norm = normalize_supplier_id(supplier_id)
        if supplier_norm is not None:
            stmt = stmt.where(func.lower(StockHistoryModel.supplier_id) == supplier_norm)
        stmt = stmt.order_by(StockHistoryModel.created_at, StockHistoryModel.seq)

        logger.debug(
            "stock_events_query",
            extra={
                "window_end": window_end.isoformat(),
                "since": since.isoformat() if since is not None else None,
                "supplier_id": supplier_norm,
                "batch_size": self.batch_size,
            },
        )

        rows = self.session.scalars(stmt.execution_options(yield_per=self.batch_size))
        for row in rows:
            yield row.to_stock_event()
