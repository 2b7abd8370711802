"""
Config -> Engine Bridges.

Functions that convert a validated ``ValuationConfig`` into engine inputs.
These live in inventory_config (the producer) because engines and the
kernel must NEVER import inventory_config.

Usage:
    from inventory_config import get_active_config
    from inventory_config.bridges import build_replay_engine

    engine = build_replay_engine(get_active_config())
"""

from __future__ import annotations

from inventory_config.schema import ValuationConfig
from inventory_engines.wac.replay import ReasonCategories, WacReplayEngine
from inventory_kernel.domain.stock_events import StockChangeReason


def _reasons(names: tuple[str, ...]) -> frozenset[StockChangeReason | str]:
    return frozenset(StockChangeReason.parse(name) for name in names)


def build_reason_categories(config: ValuationConfig) -> ReasonCategories:
    """Translate configured reason names into the engine's category sets."""
    defs = config.reason_categories
    return ReasonCategories(
        returns_in=_reasons(defs.returns_in),
        write_off=_reasons(defs.write_off),
        return_to_supplier=_reasons(defs.return_to_supplier),
        initial_stock=_reasons(defs.initial_stock),
    )


def build_replay_engine(config: ValuationConfig) -> WacReplayEngine:
    """Build a replay engine using the configured categories and scale."""
    return WacReplayEngine(
        categories=build_reason_categories(config),
        cost_places=config.cost_scale,
    )
