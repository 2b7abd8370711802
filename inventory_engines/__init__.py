"""
Module: inventory_engines
Responsibility:
    Package entrypoint that re-exports the public symbols of the pure
    calculation engines.  This is the canonical import surface for
    inventory_services and inventory_config.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import inventory_kernel (and sibling engine modules).
    MUST NOT import inventory_services or inventory_config.

Invariants enforced:
    - Purity: engines NEVER call ``datetime.now()`` or ``date.today()``.
      Window bounds are explicit parameters.
    - Decimal-only arithmetic for all costs; floats are forbidden.
    - Determinism: identical inputs always produce identical outputs.

Audit relevance:
    Every replay is traced via ``@traced_engine`` (see
    ``inventory_engines.tracer``), emitting INVENTORY_ENGINE_TRACE records
    with engine name, version, input fingerprint and duration.

Usage:
    from inventory_engines import WacReplayEngine, build_financial_summary
"""

from inventory_engines.wac import (
    DEFAULT_REASON_CATEGORIES,
    FinancialBucket,
    FinancialSummary,
    IssueResult,
    LedgerState,
    ReasonCategories,
    ReplayCheckpoint,
    ReplayOutcome,
    SummaryTotals,
    WAC_METHOD,
    WacReplayEngine,
    apply_inbound,
    build_financial_summary,
    issue_at,
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
