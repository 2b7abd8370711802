"""
inventory_engines.wac.ledger -- Per-item weighted-average cost basis.

Responsibility:
    Hold the running quantity on hand and weighted-average unit cost for one
    item, and define the two transitions that move it: receiving stock at a
    price and issuing stock at the current average.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import inventory_kernel (domain values, db.types rounding).

Invariants enforced:
    - quantity >= 0 after every transition; an issue larger than the
      quantity on hand clamps to zero instead of failing.
    - average_unit_cost is re-rounded to the cost scale (ROUND_HALF_UP)
      after every receipt and never changes on an issue.
    - Frozen values: transitions return new states.

Failure modes:
    - None at runtime.  Non-positive quantities are a caller contract
      violation; the replay engine only passes absolute values of non-zero
      deltas.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import ClassVar

from inventory_kernel.db.types import COST_DECIMAL_PLACES, round_cost

_ZERO = Decimal("0")


@dataclass(frozen=True, slots=True)
class LedgerState:
    """Quantity on hand and weighted-average unit cost for one item."""

    quantity: int = 0
    average_unit_cost: Decimal = _ZERO

    EMPTY: ClassVar["LedgerState"]

    @property
    def value(self) -> Decimal:
        """Inventory value at the current average."""
        return self.average_unit_cost * self.quantity


LedgerState.EMPTY = LedgerState()


@dataclass(frozen=True, slots=True)
class IssueResult:
    """New state after an issue plus the cost removed at the prior average."""

    state: LedgerState
    cost: Decimal


def apply_inbound(
    state: LedgerState | None,
    qty_in: int,
    unit_cost: Decimal,
    decimal_places: int = COST_DECIMAL_PLACES,
) -> LedgerState:
    """Receive ``qty_in`` units at ``unit_cost`` and re-average.

    newAvg = (q0 * c0 + qty_in * unit_cost) / (q0 + qty_in), rounded half-up
    to ``decimal_places``.  Used identically for purchases and customer
    returns.

    Preconditions:
        qty_in > 0.
    """
    prior = state or LedgerState.EMPTY
    q1 = prior.quantity + qty_in
    if q1 == 0:
        return LedgerState(quantity=0, average_unit_cost=_ZERO)
    total = prior.average_unit_cost * prior.quantity + unit_cost * qty_in
    return LedgerState(
        quantity=q1,
        average_unit_cost=round_cost(total / q1, decimal_places),
    )


def issue_at(state: LedgerState | None, qty_out: int) -> IssueResult:
    """Issue ``qty_out`` units at the current average.

    The removed cost is ``average * qty_out`` even when the issue exceeds
    the quantity on hand; the quantity itself is clamped at zero.

    Preconditions:
        qty_out > 0.
    """
    prior = state or LedgerState.EMPTY
    cost = prior.average_unit_cost * qty_out
    return IssueResult(
        state=LedgerState(
            quantity=max(0, prior.quantity - qty_out),
            average_unit_cost=prior.average_unit_cost,
        ),
        cost=cost,
    )
