"""
Valuation configuration schema.

Defines the human-authored, reviewable configuration for inventory
valuation.  YAML files are parsed into these types by the loader,
validated by the validator, and translated into engine inputs by the
bridges.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class ReasonCategoryDef:
    """Reason names (as written in YAML) routed to each bucket."""

    returns_in: tuple[str, ...] = ()
    write_off: tuple[str, ...] = ()
    return_to_supplier: tuple[str, ...] = ()
    initial_stock: tuple[str, ...] = ()

    def as_dict(self) -> dict[str, tuple[str, ...]]:
        return {
            "returns_in": self.returns_in,
            "write_off": self.write_off,
            "return_to_supplier": self.return_to_supplier,
            "initial_stock": self.initial_stock,
        }


@dataclass(frozen=True)
class ValuationConfig:
    """A complete valuation configuration set."""

    config_id: str
    version: int
    method: str
    cost_scale: int
    reason_categories: ReasonCategoryDef
    checksum: str = ""
    source: str | None = field(default=None, compare=False)
