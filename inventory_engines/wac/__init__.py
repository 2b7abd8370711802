"""
WAC - Weighted-average cost basis, replay engine and summary value.

Pure domain types and calculations only; the event source and request
validation live in inventory_services.
"""

from inventory_engines.wac.ledger import IssueResult, LedgerState, apply_inbound, issue_at
from inventory_engines.wac.replay import (
    DEFAULT_REASON_CATEGORIES,
    FinancialBucket,
    ReasonCategories,
    ReplayCheckpoint,
    ReplayOutcome,
    SummaryTotals,
    WacReplayEngine,
)
from inventory_engines.wac.summary import (
    WAC_METHOD,
    FinancialSummary,
    build_financial_summary,
)

__all__ = [
    "LedgerState",
    "IssueResult",
    "apply_inbound",
    "issue_at",
    "FinancialBucket",
    "ReasonCategories",
    "DEFAULT_REASON_CATEGORIES",
    "SummaryTotals",
    "ReplayCheckpoint",
    "ReplayOutcome",
    "WacReplayEngine",
    "FinancialSummary",
    "build_financial_summary",
    "WAC_METHOD",
]
