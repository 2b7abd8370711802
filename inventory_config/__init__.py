"""
inventory_config -- single public entrypoint for valuation configuration.

Responsibility:
    Provides the ONLY way to obtain configuration at runtime through
    ``get_active_config()``.  YAML loading and validation are internal.

Architecture position:
    Configuration -- sits above ``inventory_kernel`` and
    ``inventory_engines`` and below ``inventory_services``.  The kernel and
    the engines MUST NEVER import from ``inventory_config``; bridges in this
    package translate configuration into engine inputs.

Failure modes:
    - ``FileNotFoundError`` -- the configuration file does not exist.
    - ``InvalidConfigurationError`` -- validation reported errors.

Audit relevance:
    Every successful ``get_active_config()`` call emits an
    ``INVENTORY_CONFIG_TRACE`` log entry with config id, version, method,
    scale and checksum.
"""

from __future__ import annotations

import logging
from pathlib import Path

from inventory_config.loader import load_valuation_config
from inventory_config.schema import ReasonCategoryDef, ValuationConfig
from inventory_config.validator import validate_valuation_config
from inventory_kernel.exceptions import InvalidConfigurationError

_logger = logging.getLogger("inventory_kernel.config")

DEFAULT_CONFIG_PATH = Path(__file__).parent / "sets" / "default.yaml"


def get_active_config(config_path: Path | None = None) -> ValuationConfig:
    """The ONLY public configuration entrypoint.

    Args:
        config_path: Override path to a configuration file.  Defaults to
            inventory_config/sets/default.yaml.

    Raises:
        FileNotFoundError: If the file does not exist.
        InvalidConfigurationError: If validation fails.
    """
    path = config_path or DEFAULT_CONFIG_PATH
    config = load_valuation_config(path)

    validation = validate_valuation_config(config)
    for warning in validation.warnings:
        _logger.warning("config_validation_warning", extra={
            "config_id": config.config_id,
            "warning": warning,
        })
    if not validation.is_valid:
        raise InvalidConfigurationError(validation.errors, source=str(path))

    _logger.info(
        "INVENTORY_CONFIG_TRACE",
        extra={
            "trace_type": "INVENTORY_CONFIG_TRACE",
            "config_id": config.config_id,
            "config_version": config.version,
            "method": config.method,
            "cost_scale": config.cost_scale,
            "checksum": config.checksum,
        },
    )
    return config


__all__ = [
    "DEFAULT_CONFIG_PATH",
    "ReasonCategoryDef",
    "ValuationConfig",
    "get_active_config",
]
