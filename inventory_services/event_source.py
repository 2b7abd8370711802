"""
inventory_services.event_source -- Where the replay engine gets its events.

Responsibility:
    Define the ``EventSource`` protocol the analytics service reads from,
    and an in-memory implementation for tests, fixtures and callers that
    already hold the history.  The database-backed implementation is
    ``inventory_kernel.selectors.StockEventSelector``.

Invariants enforced:
    - Bound: only events with ``occurred_at <= window_end`` are yielded.
    - Order: non-decreasing ``occurred_at``; events sharing a timestamp
      keep the order they were added in.
    - Supplier filter: case-insensitive on the normalized supplier id.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from datetime import datetime
from typing import Protocol

from inventory_kernel.domain.stock_events import StockEvent, normalize_supplier_id


class EventSource(Protocol):
    """Anything that can stream stock events up to a bound."""

    def events_up_to(
        self,
        window_end: datetime,
        supplier_id: str | None = None,
        since: datetime | None = None,
    ) -> Iterable[StockEvent]: ...


class InMemoryEventSource:
    """
    Event source over a list held in memory.

    Contract:
        Events may be added in any order; they are served sorted by
        ``occurred_at`` with a stable insertion-order tie-break.
    """

    def __init__(self, events: Iterable[StockEvent] = ()):
        self._events: list[StockEvent] = []
        self.extend(events)

    def add(self, event: StockEvent) -> None:
        self._events.append(event)
        # list.sort is stable, so same-timestamp events keep insertion order
        self._events.sort(key=lambda e: e.occurred_at)

    def extend(self, events: Iterable[StockEvent]) -> None:
        self._events.extend(events)
        self._events.sort(key=lambda e: e.occurred_at)

    def __len__(self) -> int:
        return len(self._events)

    def events_up_to(
        self,
        window_end: datetime,
        supplier_id: str | None = None,
        since: datetime | None = None,
    ) -> Iterator[StockEvent]:
        supplier_norm = normalize_supplier_id(supplier_id)
        for event in self._events:
            if event.occurred_at > window_end:
                break
            if since is not None and event.occurred_at < since:
                continue
            if (
                supplier_norm is not None
                and normalize_supplier_id(event.supplier_id) != supplier_norm
            ):
                continue
            yield event


__all__ = [
    "EventSource",
    "InMemoryEventSource",
    "normalize_supplier_id",
]
