"""
inventory_services.financial_analytics_service -- WAC financial summary for a date range.

Responsibility:
    Validate a summary request, turn calendar dates into inclusive
    timestamp bounds, stream the relevant stock history from an event
    source, run the weighted-average replay engine and package the result.

Architecture position:
    Services -- orchestration over engines + kernel.
    Composes an EventSource (constructor injection), the WacReplayEngine
    built from the active ValuationConfig, and an optional CheckpointCache.

Invariants enforced:
    - Range validation happens BEFORE any event is read.
    - Bounds are [from 00:00:00, to 23:59:59.999999]; both days inclusive.
    - The supplier id is normalized (trimmed, lowercased, blank = none)
      once, and that value is used for both filtering and caching.
    - With a cache, resuming from a checkpoint gives the same totals as a
      full replay.  A checkpoint is only stored when the source already
      holds a movement at or after its ``as_of``.

Failure modes:
    - MissingDateRangeError if ``from_date`` or ``to_date`` is None.
    - InvalidDateRangeError if ``from_date`` > ``to_date``.
    - Errors raised by the event source (e.g. database errors) propagate.

Audit relevance:
    Every request logs ``wac_summary_requested`` and
    ``wac_summary_completed`` with the normalized supplier bound into
    LogContext, and the engine emits an INVENTORY_ENGINE_TRACE record.

Usage:
    from inventory_kernel.selectors import StockEventSelector
    from inventory_services import FinancialAnalyticsService

    service = FinancialAnalyticsService(StockEventSelector(session))
    summary = service.get_financial_summary_wac(date(2024, 1, 1), date(2024, 1, 31))
"""

from __future__ import annotations

import time
from datetime import date, datetime
from datetime import time as dt_time

from inventory_config import ValuationConfig, get_active_config
from inventory_config.bridges import build_replay_engine
from inventory_engines.wac.replay import ReplayOutcome
from inventory_engines.wac.summary import FinancialSummary, build_financial_summary
from inventory_kernel.domain.stock_events import normalize_supplier_id
from inventory_kernel.exceptions import InvalidDateRangeError, MissingDateRangeError
from inventory_kernel.logging_config import LogContext, get_logger
from inventory_services.checkpoint_cache import CheckpointCache
from inventory_services.event_source import EventSource

logger = get_logger("services.financial_analytics")


class FinancialAnalyticsService:
    """
    Financial summaries over stock history.

    Contract:
        Receives an EventSource via constructor injection.  When ``config``
        is None the active configuration is loaded once, at construction.
    Guarantees:
        - Stateless per request apart from the optional checkpoint cache.
        - Never mutates stock history.
    Non-goals:
        - Persisting summaries or snapshots.
        - Methods other than weighted-average cost.
    """

    def __init__(
        self,
        event_source: EventSource,
        config: ValuationConfig | None = None,
        checkpoint_cache: CheckpointCache | None = None,
    ):
        self.event_source = event_source
        self.config = config if config is not None else get_active_config()
        self.engine = build_replay_engine(self.config)
        self.checkpoint_cache = checkpoint_cache

    @staticmethod
    def validate_date_range(from_date: date | None, to_date: date | None) -> None:
        """
        Reject incomplete or inverted ranges.

        Raises:
            MissingDateRangeError: If either bound is None.
            InvalidDateRangeError: If from_date is after to_date.
        """
        if from_date is None or to_date is None:
            raise MissingDateRangeError()
        if from_date > to_date:
            raise InvalidDateRangeError(from_date, to_date)

    @staticmethod
    def window_bounds(from_date: date, to_date: date) -> tuple[datetime, datetime]:
        """Inclusive timestamp bounds covering both calendar days in full."""
        return (
            datetime.combine(from_date, dt_time.min),
            datetime.combine(to_date, dt_time.max),
        )

    def _remember_opening(
        self,
        supplier_norm: str | None,
        start: datetime,
        outcome: ReplayOutcome,
    ) -> None:
        """Cache the opening positions unless history may still grow before ``start``.

        A movement appended later is dated at or after the latest one read.
        Only when that latest movement is at or after ``start`` can nothing
        new land before the checkpoint.
        """
        if outcome.last_event_at is None or outcome.last_event_at < start:
            logger.debug("checkpoint_not_cached", extra={
                "as_of": start.isoformat(),
                "last_event_at": (
                    outcome.last_event_at.isoformat() if outcome.last_event_at else None
                ),
            })
            return
        self.checkpoint_cache.put(supplier_norm, outcome.opening)

    def get_financial_summary_wac(
        self,
        from_date: date | None,
        to_date: date | None,
        supplier_id: str | None = None,
    ) -> FinancialSummary:
        """
        Weighted-average cost summary for [from_date, to_date].

        Args:
            from_date: First day of the window (inclusive).
            to_date: Last day of the window (inclusive).
            supplier_id: Optional supplier filter; blank means all suppliers.

        Returns:
            FinancialSummary with opening, purchases, returns in, COGS,
            write-offs, ending and uncategorized inbound figures.

        Raises:
            MissingDateRangeError: If either date is missing.
            InvalidDateRangeError: If from_date is after to_date.
        """
        self.validate_date_range(from_date, to_date)
        start, end = self.window_bounds(from_date, to_date)
        supplier_norm = normalize_supplier_id(supplier_id)

        with LogContext.bind(supplier_id=supplier_norm):
            t0 = time.monotonic()
            checkpoint = None
            if self.checkpoint_cache is not None:
                checkpoint = self.checkpoint_cache.get_latest_at_or_before(supplier_norm, start)

            logger.info("wac_summary_requested", extra={
                "from_date": from_date.isoformat(),
                "to_date": to_date.isoformat(),
                "checkpoint_as_of": checkpoint.as_of.isoformat() if checkpoint else None,
            })

            events = self.event_source.events_up_to(
                end,
                supplier_id=supplier_norm,
                since=checkpoint.as_of if checkpoint is not None else None,
            )
            outcome = self.engine.run(events, start, end, checkpoint=checkpoint)

            if self.checkpoint_cache is not None:
                self._remember_opening(supplier_norm, start, outcome)

            summary = build_financial_summary(
                outcome.totals,
                from_date,
                to_date,
                method=self.config.method,
                decimal_places=self.config.cost_scale,
            )

            logger.info("wac_summary_completed", extra={
                "from_date": summary.from_date,
                "to_date": summary.to_date,
                "events_read": outcome.events_read,
                "events_in_window": outcome.events_in_window,
                "ending_qty": summary.ending_qty,
                "ending_value": summary.ending_value,
                "duration_ms": round((time.monotonic() - t0) * 1000, 2),
            })
            return summary
