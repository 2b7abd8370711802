"""
inventory_engines.wac.replay -- Weighted-average cost replay over stock history.

Responsibility:
    Fold a time-ordered stream of stock events into a financial summary for
    a window [start, end]: opening inventory, purchases (net of returns to
    supplier), customer returns, cost of goods sold, write-offs, ending
    inventory, and the explicitly named "uncategorized inbound" bucket.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import inventory_kernel and sibling engine modules.

Computation model:
    1. Events before ``start`` rebuild each item's cost basis (opening).
    2. Events in the window update the cost basis AND are booked into a
       bucket chosen by direction and reason.
    3. The final cost basis of every item is the ending inventory.
    All three phases run in ONE forward pass.  An item's opening position
    is captured the first time an in-window event for it is seen; items
    never touched in the window open at their final position.  Memory is
    bounded by the number of distinct items, not by the number of events.

Invariants enforced:
    - Every item's quantity stays >= 0 (issues clamp, see ledger.issue_at).
    - Identity (checked by tests, not at runtime):
          opening + purchases + returns_in + uncategorized_inbound
              - cogs - write_off == ending
      up to average-cost rounding, whenever no in-window issue exceeds the
      quantity on hand.
    - Determinism: identical inputs give identical totals.  The engine
      holds no state between invocations.

Failure modes:
    - None for data conditions: a missing price falls back to the running
      average (zero for a never-priced item), over-issues clamp, unknown
      reasons are booked as COGS.
    - CheckpointAfterWindowError when handed a checkpoint that does not
      precede the window (caller bug).
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from types import MappingProxyType

from inventory_engines.tracer import traced_engine
from inventory_engines.wac.ledger import LedgerState, apply_inbound, issue_at
from inventory_kernel.db.types import COST_DECIMAL_PLACES
from inventory_kernel.domain.stock_events import StockChangeReason, StockEvent
from inventory_kernel.exceptions import CheckpointAfterWindowError
from inventory_kernel.logging_config import get_logger

logger = get_logger("engines.wac.replay")

_ZERO = Decimal("0")


class FinancialBucket(str, Enum):
    """Where an in-window movement is booked."""

    PURCHASES = "purchases"
    RETURNS_IN = "returns_in"
    COGS = "cogs"
    WRITE_OFF = "write_off"
    RETURN_TO_SUPPLIER = "return_to_supplier"  # nets against purchases
    UNCATEGORIZED_INBOUND = "uncategorized_inbound"


@dataclass(frozen=True)
class ReasonCategories:
    """
    Reason sets that route movements to buckets.

    Contract:
        Sets are matched by equality, so plain strings equal to a
        StockChangeReason value match that member.
    Guarantees:
        - Inbound: returns-in, else purchase when priced or initial stock,
          else uncategorized.
        - Outbound: return-to-supplier, else write-off, else COGS.
    """

    returns_in: frozenset[StockChangeReason | str]
    write_off: frozenset[StockChangeReason | str]
    return_to_supplier: frozenset[StockChangeReason | str]
    initial_stock: frozenset[StockChangeReason | str]

    def classify_inbound(self, event: StockEvent) -> FinancialBucket:
        if event.reason in self.returns_in:
            return FinancialBucket.RETURNS_IN
        if event.has_unit_cost or event.reason in self.initial_stock:
            return FinancialBucket.PURCHASES
        return FinancialBucket.UNCATEGORIZED_INBOUND

    def classify_outbound(self, event: StockEvent) -> FinancialBucket:
        if event.reason in self.return_to_supplier:
            return FinancialBucket.RETURN_TO_SUPPLIER
        if event.reason in self.write_off:
            return FinancialBucket.WRITE_OFF
        return FinancialBucket.COGS


DEFAULT_REASON_CATEGORIES = ReasonCategories(
    returns_in=frozenset({StockChangeReason.RETURNED_BY_CUSTOMER}),
    write_off=frozenset({
        StockChangeReason.DAMAGED,
        StockChangeReason.DESTROYED,
        StockChangeReason.SCRAPPED,
        StockChangeReason.EXPIRED,
        StockChangeReason.LOST,
    }),
    return_to_supplier=frozenset({StockChangeReason.RETURNED_TO_SUPPLIER}),
    initial_stock=frozenset({StockChangeReason.INITIAL_STOCK}),
)


@dataclass
class SummaryTotals:
    """Running (quantity, cost) totals for one replay."""

    opening_qty: int = 0
    opening_value: Decimal = _ZERO
    purchases_qty: int = 0
    purchases_cost: Decimal = _ZERO
    returns_in_qty: int = 0
    returns_in_cost: Decimal = _ZERO
    cogs_qty: int = 0
    cogs_cost: Decimal = _ZERO
    write_off_qty: int = 0
    write_off_cost: Decimal = _ZERO
    uncategorized_inbound_qty: int = 0
    uncategorized_inbound_cost: Decimal = _ZERO
    ending_qty: int = 0
    ending_value: Decimal = _ZERO

    def book(self, bucket: FinancialBucket, quantity: int, cost: Decimal) -> None:
        """Add one in-window movement to its bucket."""
        if bucket is FinancialBucket.PURCHASES:
            self.purchases_qty += quantity
            self.purchases_cost += cost
        elif bucket is FinancialBucket.RETURN_TO_SUPPLIER:
            # Negative purchase, not a bucket of its own
            self.purchases_qty -= quantity
            self.purchases_cost -= cost
        elif bucket is FinancialBucket.RETURNS_IN:
            self.returns_in_qty += quantity
            self.returns_in_cost += cost
        elif bucket is FinancialBucket.WRITE_OFF:
            self.write_off_qty += quantity
            self.write_off_cost += cost
        elif bucket is FinancialBucket.UNCATEGORIZED_INBOUND:
            self.uncategorized_inbound_qty += quantity
            self.uncategorized_inbound_cost += cost
        else:
            self.cogs_qty += quantity
            self.cogs_cost += cost

    def conservation_gap(self) -> Decimal:
        """Opening + inflows - outflows - ending.  Zero up to rounding."""
        return (
            self.opening_value
            + self.purchases_cost
            + self.returns_in_cost
            + self.uncategorized_inbound_cost
            - self.cogs_cost
            - self.write_off_cost
            - self.ending_value
        )


@dataclass(frozen=True)
class ReplayCheckpoint:
    """
    Per-item cost basis after every event strictly before ``as_of``.

    Replaying from a checkpoint gives the same totals as replaying the whole
    history, for any window starting at or after ``as_of``.
    """

    as_of: datetime
    positions: Mapping[str, LedgerState] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "positions", MappingProxyType(dict(self.positions)))

    @property
    def total_quantity(self) -> int:
        return sum(state.quantity for state in self.positions.values())

    @property
    def total_value(self) -> Decimal:
        return sum((state.value for state in self.positions.values()), _ZERO)


@dataclass(frozen=True)
class ReplayOutcome:
    """
    Totals for the window plus the ledger at its start and end.

    ``last_event_at`` is the latest ``occurred_at`` the source yielded,
    None when it yielded nothing.
    """

    totals: SummaryTotals
    opening: ReplayCheckpoint
    closing_positions: Mapping[str, LedgerState]
    events_read: int
    events_in_window: int
    last_event_at: datetime | None = None


class WacReplayEngine:
    """
    Weighted-average cost replay engine.

    Contract:
        ``events`` is consumed exactly once, in order.  The source promises
        non-decreasing ``occurred_at`` and ``occurred_at <= end``.
    Guarantees:
        - A fresh ledger per invocation; instances are safe to share.
        - Never raises on data conditions.
    Non-goals:
        - Does not validate the date range; callers reject start > end.
        - Does not filter by supplier; the source does.
    """

    def __init__(
        self,
        categories: ReasonCategories = DEFAULT_REASON_CATEGORIES,
        cost_places: int = COST_DECIMAL_PLACES,
    ):
        self.categories = categories
        self.cost_places = cost_places

    def replay(
        self,
        events: Iterable[StockEvent],
        start: datetime,
        end: datetime,
        checkpoint: ReplayCheckpoint | None = None,
    ) -> SummaryTotals:
        """Replay ``events`` and return the window totals."""
        return self.run(events, start, end, checkpoint=checkpoint).totals

    @traced_engine("wac_replay", "1.0", fingerprint_fields=("start", "end"))
    def run(
        self,
        events: Iterable[StockEvent],
        start: datetime,
        end: datetime,
        checkpoint: ReplayCheckpoint | None = None,
    ) -> ReplayOutcome:
        """Replay ``events`` and return totals with opening/closing ledgers.

        Preconditions:
            start <= end; checkpoint.as_of <= start when given.

        Raises:
            CheckpointAfterWindowError: If checkpoint.as_of > start.
        """
        if checkpoint is not None and checkpoint.as_of > start:
            raise CheckpointAfterWindowError(
                checkpoint_as_of=checkpoint.as_of.isoformat(),
                window_start=start.isoformat(),
            )

        ledger: dict[str, LedgerState] = dict(checkpoint.positions) if checkpoint else {}
        opening: dict[str, LedgerState] = {}
        totals = SummaryTotals()
        events_read = 0
        in_window = 0
        last_event_at: datetime | None = None

        for event in events:
            events_read += 1
            if last_event_at is None or event.occurred_at > last_event_at:
                last_event_at = event.occurred_at
            if checkpoint is not None and event.occurred_at < checkpoint.as_of:
                continue
            if event.occurred_at > end:
                logger.warning("wac_event_after_window_skipped", extra={
                    "item_id": event.item_id,
                    "occurred_at": event.occurred_at.isoformat(),
                    "window_end": end.isoformat(),
                })
                continue
            if not (event.is_inbound or event.is_outbound):
                continue

            if event.occurred_at < start:
                if event.item_id in opening:
                    logger.warning("wac_event_out_of_order", extra={
                        "item_id": event.item_id,
                        "occurred_at": event.occurred_at.isoformat(),
                    })
                self._fold(ledger, event)
                continue

            in_window += 1
            if event.item_id not in opening:
                opening[event.item_id] = ledger.get(event.item_id, LedgerState.EMPTY)
            bucket, cost = self._fold(ledger, event)
            if bucket is FinancialBucket.UNCATEGORIZED_INBOUND:
                logger.info("wac_inbound_uncategorized", extra={
                    "item_id": event.item_id,
                    "quantity": event.quantity,
                    "reason": str(getattr(event.reason, "value", event.reason)),
                    "occurred_at": event.occurred_at.isoformat(),
                })
            totals.book(bucket, event.quantity, cost)

        opening_positions: dict[str, LedgerState] = {}
        for item_id, state in ledger.items():
            opened = opening.get(item_id, state)
            opening_positions[item_id] = opened
            totals.opening_qty += opened.quantity
            totals.opening_value += opened.value
            totals.ending_qty += state.quantity
            totals.ending_value += state.value

        logger.info("wac_replay_completed", extra={
            "window_start": start.isoformat(),
            "window_end": end.isoformat(),
            "events_read": events_read,
            "events_in_window": in_window,
            "items": len(ledger),
            "from_checkpoint": checkpoint is not None,
        })

        return ReplayOutcome(
            totals=totals,
            opening=ReplayCheckpoint(as_of=start, positions=opening_positions),
            closing_positions=MappingProxyType(ledger),
            events_read=events_read,
            events_in_window=in_window,
            last_event_at=last_event_at,
        )

    def capture_checkpoint(
        self,
        events: Iterable[StockEvent],
        as_of: datetime,
        base: ReplayCheckpoint | None = None,
    ) -> ReplayCheckpoint:
        """Fold every event strictly before ``as_of`` into a checkpoint.

        Events at or after ``as_of`` are read and ignored.  When ``base`` is
        given, events before ``base.as_of`` are skipped and the ledger is
        seeded from it.
        """
        if base is not None and base.as_of > as_of:
            raise CheckpointAfterWindowError(
                checkpoint_as_of=base.as_of.isoformat(),
                window_start=as_of.isoformat(),
            )
        ledger: dict[str, LedgerState] = dict(base.positions) if base else {}
        for event in events:
            if base is not None and event.occurred_at < base.as_of:
                continue
            if event.occurred_at >= as_of or not (event.is_inbound or event.is_outbound):
                continue
            self._fold(ledger, event)
        return ReplayCheckpoint(as_of=as_of, positions=ledger)

    def _unit_cost(self, event: StockEvent, state: LedgerState | None) -> Decimal:
        """Explicit price, else the item's running average (zero if unpriced)."""
        if event.unit_cost is not None:
            return event.unit_cost
        return state.average_unit_cost if state is not None else _ZERO

    def _fold(
        self,
        ledger: dict[str, LedgerState],
        event: StockEvent,
    ) -> tuple[FinancialBucket, Decimal]:
        """Apply one non-zero event to the ledger; return its bucket and cost."""
        state = ledger.get(event.item_id)
        qty = event.quantity

        if event.is_inbound:
            unit = self._unit_cost(event, state)
            ledger[event.item_id] = apply_inbound(state, qty, unit, self.cost_places)
            return self.categories.classify_inbound(event), unit * qty

        on_hand = state.quantity if state is not None else 0
        if qty > on_hand:
            logger.warning("wac_issue_clamped", extra={
                "item_id": event.item_id,
                "on_hand": on_hand,
                "requested": qty,
                "occurred_at": event.occurred_at.isoformat(),
            })
        issued = issue_at(state, qty)
        ledger[event.item_id] = issued.state
        return self.categories.classify_outbound(event), issued.cost
