"""
Configuration Validator (``inventory_config.validator``).

Responsibility
--------------
Validates a ``ValuationConfig`` before it is activated.

Invariants enforced
-------------------
* Method -- only ``WAC`` is supported.
* Scale -- ``cost_scale`` between 0 and 9.
* Reason names -- every name is a ``StockChangeReason`` member.
* Disjoint categories -- a reason routes to at most one bucket.

Failure modes
-------------
* Errors (``ConfigValidationResult.errors``)  -> configuration MUST NOT
  be activated.
* Warnings  -> configuration is usable but should be reviewed.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from itertools import combinations

from inventory_config.schema import ValuationConfig
from inventory_kernel.domain.stock_events import StockChangeReason

SUPPORTED_METHODS = frozenset({"WAC"})
MAX_COST_SCALE = 9

_KNOWN_REASONS = frozenset(r.value for r in StockChangeReason)


@dataclass
class ConfigValidationResult:
    """
    Result of configuration validation.

    ``is_valid`` is ``True`` only when ``errors`` is empty.
    """

    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors


def validate_valuation_config(config: ValuationConfig) -> ConfigValidationResult:
    """Run every check and collect all findings."""
    result = ConfigValidationResult()

    if config.method not in SUPPORTED_METHODS:
        result.errors.append(
            f"Unsupported valuation method '{config.method}' "
            f"(supported: {', '.join(sorted(SUPPORTED_METHODS))})"
        )

    if not 0 <= config.cost_scale <= MAX_COST_SCALE:
        result.errors.append(
            f"cost_scale must be between 0 and {MAX_COST_SCALE}, got {config.cost_scale}"
        )

    categories = config.reason_categories.as_dict()
    for name, reasons in categories.items():
        for reason in reasons:
            if reason not in _KNOWN_REASONS:
                result.errors.append(f"Unknown reason '{reason}' in {name}")
        if len(set(reasons)) != len(reasons):
            result.warnings.append(f"Duplicate reasons in {name}")

    for (left, left_reasons), (right, right_reasons) in combinations(categories.items(), 2):
        overlap = sorted(set(left_reasons) & set(right_reasons))
        if overlap:
            result.errors.append(
                f"Reasons {overlap} appear in both {left} and {right}"
            )

    if not config.reason_categories.initial_stock:
        result.warnings.append(
            "No initial_stock reasons: unpriced inbound movements will be uncategorized"
        )

    return result
