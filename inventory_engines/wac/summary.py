"""
inventory_engines.wac.summary -- Financial summary value built from replay totals.

Responsibility:
    Package the replay totals with the method label and the echoed date
    range into an immutable result.  Costs are re-scaled to the internal
    cost scale so that equal inputs always serialize identically.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Any

from inventory_engines.wac.replay import SummaryTotals
from inventory_kernel.db.types import COST_DECIMAL_PLACES, round_cost

WAC_METHOD = "WAC"


@dataclass(frozen=True, slots=True)
class FinancialSummary:
    """Weighted-average cost summary for one date window."""

    method: str
    from_date: str
    to_date: str
    opening_qty: int
    opening_value: Decimal
    purchases_qty: int
    purchases_cost: Decimal
    returns_in_qty: int
    returns_in_cost: Decimal
    cogs_qty: int
    cogs_cost: Decimal
    write_off_qty: int
    write_off_cost: Decimal
    ending_qty: int
    ending_value: Decimal
    uncategorized_inbound_qty: int = 0
    uncategorized_inbound_cost: Decimal = Decimal("0")

    def to_dict(self) -> dict[str, Any]:
        """Wire shape of the summary (camelCase keys, costs as strings)."""
        return {
            "method": self.method,
            "fromDate": self.from_date,
            "toDate": self.to_date,
            "openingQty": self.opening_qty,
            "openingValue": str(self.opening_value),
            "purchasesQty": self.purchases_qty,
            "purchasesCost": str(self.purchases_cost),
            "returnsInQty": self.returns_in_qty,
            "returnsInCost": str(self.returns_in_cost),
            "cogsQty": self.cogs_qty,
            "cogsCost": str(self.cogs_cost),
            "writeOffQty": self.write_off_qty,
            "writeOffCost": str(self.write_off_cost),
            "endingQty": self.ending_qty,
            "endingValue": str(self.ending_value),
            "uncategorizedInboundQty": self.uncategorized_inbound_qty,
            "uncategorizedInboundCost": str(self.uncategorized_inbound_cost),
        }


def build_financial_summary(
    totals: SummaryTotals,
    from_date: date,
    to_date: date,
    method: str = WAC_METHOD,
    decimal_places: int = COST_DECIMAL_PLACES,
) -> FinancialSummary:
    """Build the summary value; costs are rounded to ``decimal_places``."""

    def _scaled(value: Decimal) -> Decimal:
        return round_cost(value, decimal_places)

    return FinancialSummary(
        method=method,
        from_date=from_date.isoformat(),
        to_date=to_date.isoformat(),
        opening_qty=totals.opening_qty,
        opening_value=_scaled(totals.opening_value),
        purchases_qty=totals.purchases_qty,
        purchases_cost=_scaled(totals.purchases_cost),
        returns_in_qty=totals.returns_in_qty,
        returns_in_cost=_scaled(totals.returns_in_cost),
        cogs_qty=totals.cogs_qty,
        cogs_cost=_scaled(totals.cogs_cost),
        write_off_qty=totals.write_off_qty,
        write_off_cost=_scaled(totals.write_off_cost),
        ending_qty=totals.ending_qty,
        ending_value=_scaled(totals.ending_value),
        uncategorized_inbound_qty=totals.uncategorized_inbound_qty,
        uncategorized_inbound_cost=_scaled(totals.uncategorized_inbound_cost),
    )
