"""
inventory_services.checkpoint_cache -- In-process cache of replay checkpoints.

Responsibility:
    Remember the per-item cost basis at window starts so that later
    summaries can resume replay from there instead of from the beginning
    of history.

Invariants enforced:
    - Keys are ``(normalized supplier or None, as_of)``; a checkpoint is
      never shared across suppliers.
    - Bounded: at most ``max_entries`` checkpoints, least recently used
      evicted first.
    - Every cached key appears exactly once in its supplier's sorted
      ``as_of`` index; lookups bisect that index instead of scanning.

Failure modes:
    - None.  A miss simply means a full replay.

Non-goals:
    - Invalidation.  Only valid while history before each cached
      ``as_of`` is append-only; backdated movements require ``clear()``.
"""

from __future__ import annotations

import threading
from bisect import bisect_right, insort
from collections import OrderedDict, defaultdict
from datetime import datetime

from inventory_engines.wac.replay import ReplayCheckpoint
from inventory_kernel.logging_config import get_logger

logger = get_logger("services.checkpoint_cache")

DEFAULT_MAX_ENTRIES = 128

_Key = tuple[str | None, datetime]


class CheckpointCache:
    """
    Thread-safe LRU of ReplayCheckpoint values.

    Besides the LRU order, each supplier keeps a sorted list of its cached
    ``as_of`` values, so the nearest checkpoint is found by bisection.
    """

    def __init__(self, max_entries: int = DEFAULT_MAX_ENTRIES):
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self.max_entries = max_entries
        self._entries: OrderedDict[_Key, ReplayCheckpoint] = OrderedDict()
        self._as_of_index: defaultdict[str | None, list[datetime]] = defaultdict(list)
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, supplier_id: str | None, as_of: datetime) -> ReplayCheckpoint | None:
        """Exact lookup."""
        key = (supplier_id, as_of)
        with self._lock:
            checkpoint = self._entries.get(key)
            if checkpoint is not None:
                self._entries.move_to_end(key)
            return checkpoint

    def get_latest_at_or_before(
        self,
        supplier_id: str | None,
        as_of: datetime,
    ) -> ReplayCheckpoint | None:
        """The checkpoint for ``supplier_id`` closest to, and not after, ``as_of``."""
        with self._lock:
            stamps = self._as_of_index.get(supplier_id)
            if not stamps:
                return None
            position = bisect_right(stamps, as_of)
            if position == 0:
                return None
            key = (supplier_id, stamps[position - 1])
            self._entries.move_to_end(key)
            return self._entries[key]

    def put(self, supplier_id: str | None, checkpoint: ReplayCheckpoint) -> None:
        key = (supplier_id, checkpoint.as_of)
        with self._lock:
            if key not in self._entries:
                insort(self._as_of_index[supplier_id], checkpoint.as_of)
            self._entries[key] = checkpoint
            self._entries.move_to_end(key)
            while len(self._entries) > self.max_entries:
                evicted, _ = self._entries.popitem(last=False)
                self._unindex(evicted)
                logger.debug("checkpoint_evicted", extra={
                    "supplier_id": evicted[0],
                    "as_of": evicted[1].isoformat(),
                })

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self._as_of_index.clear()

    def _unindex(self, key: _Key) -> None:
        supplier_id, as_of = key
        stamps = self._as_of_index[supplier_id]
        del stamps[bisect_right(stamps, as_of) - 1]
        if not stamps:
            del self._as_of_index[supplier_id]
