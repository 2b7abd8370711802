"""
Configuration Loader (``inventory_config.loader``).

Responsibility
--------------
Loads a YAML configuration file and parses it into the typed
``inventory_config.schema`` dataclasses.  The single public entry point
for runtime config is ``inventory_config.get_active_config()``.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Missing required keys  -> ``KeyError`` propagates.

Audit relevance
---------------
``compute_checksum`` gives every loaded configuration a deterministic
identity, logged with each activation.
"""

from __future__ import annotations

import hashlib
import json
from pathlib import Path
from typing import Any

import yaml

from inventory_config.schema import ReasonCategoryDef, ValuationConfig


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
    """
    with open(path) as f:
        return yaml.safe_load(f) or {}


def _names(values: Any) -> tuple[str, ...]:
    if values is None:
        return ()
    if isinstance(values, str):
        values = [values]
    return tuple(str(v).strip().upper() for v in values)


def parse_reason_categories(data: dict[str, Any]) -> ReasonCategoryDef:
    """Parse the ``reason_categories`` block.  Absent categories are empty."""
    return ReasonCategoryDef(
        returns_in=_names(data.get("returns_in")),
        write_off=_names(data.get("write_off")),
        return_to_supplier=_names(data.get("return_to_supplier")),
        initial_stock=_names(data.get("initial_stock")),
    )


def parse_valuation_config(
    data: dict[str, Any],
    source: str | None = None,
) -> ValuationConfig:
    """
    Parse a ``ValuationConfig`` from a dict.

    Preconditions:
        - ``data`` contains ``config_id``, ``valuation`` and
          ``reason_categories``.
    Raises:
        KeyError: if required keys are missing.
        ValueError: if ``version`` or ``cost_scale`` are not integers.
    """
    valuation = data["valuation"]
    return ValuationConfig(
        config_id=data["config_id"],
        version=int(data.get("version", 1)),
        method=str(valuation.get("method", "WAC")).strip().upper(),
        cost_scale=int(valuation.get("cost_scale", 4)),
        reason_categories=parse_reason_categories(data["reason_categories"]),
        checksum=compute_checksum(data),
        source=source,
    )


def load_valuation_config(path: Path) -> ValuationConfig:
    """Load and parse a configuration file (no validation)."""
    return parse_valuation_config(load_yaml_file(path), source=str(path))


def compute_checksum(data: dict[str, Any]) -> str:
    """
    Compute SHA-256 checksum of canonical JSON serialization.

    Identical ``data`` always produces identical checksums.
    """
    canonical = json.dumps(data, sort_keys=True, default=str)
    return hashlib.sha256(canonical.encode()).hexdigest()
