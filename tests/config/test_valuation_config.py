"""
Tests for valuation configuration loading, validation and bridges.

Covers:
- The bundled default set
- Checksum determinism
- Validation errors raised as InvalidConfigurationError
- Translation to engine reason categories
- INVENTORY_CONFIG_TRACE logging
"""

from pathlib import Path

import pytest
import yaml

from inventory_config import DEFAULT_CONFIG_PATH, get_active_config
from inventory_config.bridges import build_reason_categories, build_replay_engine
from inventory_config.loader import compute_checksum, load_yaml_file, parse_valuation_config
from inventory_config.validator import validate_valuation_config
from inventory_engines.wac.replay import DEFAULT_REASON_CATEGORIES
from inventory_kernel.domain.stock_events import StockChangeReason
from inventory_kernel.exceptions import ConfigurationError, InvalidConfigurationError


def _data(**overrides) -> dict:
    data = load_yaml_file(DEFAULT_CONFIG_PATH)
    data.update(overrides)
    return data


def _write(tmp_path: Path, data: dict) -> Path:
    path = tmp_path / "valuation.yaml"
    path.write_text(yaml.safe_dump(data))
    return path


class TestDefaultConfig:
    """Tests for the bundled configuration set."""

    def test_loads(self):
        config = get_active_config()

        assert config.config_id == "inventory-valuation-default"
        assert config.method == "WAC"
        assert config.cost_scale == 4
        assert config.source == str(DEFAULT_CONFIG_PATH)

    def test_default_set_is_valid(self):
        result = validate_valuation_config(get_active_config())

        assert result.is_valid
        assert result.warnings == []

    def test_bridge_matches_engine_defaults(self):
        assert build_reason_categories(get_active_config()) == DEFAULT_REASON_CATEGORIES

    def test_trace_logged(self, captured_logs):
        config = get_active_config()

        traces = [r for r in captured_logs() if r["message"] == "INVENTORY_CONFIG_TRACE"]
        assert len(traces) == 1
        assert traces[0]["checksum"] == config.checksum
        assert traces[0]["cost_scale"] == 4


class TestChecksum:
    """Tests for configuration identity."""

    def test_deterministic(self):
        assert compute_checksum(_data()) == compute_checksum(_data())

    def test_key_order_irrelevant(self):
        assert compute_checksum({"a": 1, "b": 2}) == compute_checksum({"b": 2, "a": 1})

    def test_changes_with_content(self):
        changed = _data(valuation={"method": "WAC", "cost_scale": 2})

        assert compute_checksum(changed) != compute_checksum(_data())


class TestParsing:
    """Tests for YAML to schema parsing."""

    def test_reason_names_normalized(self):
        config = parse_valuation_config(_data(
            reason_categories={"write_off": [" damaged ", "Lost"]},
        ))

        assert config.reason_categories.write_off == ("DAMAGED", "LOST")
        assert config.reason_categories.returns_in == ()

    def test_single_reason_string(self):
        config = parse_valuation_config(_data(
            reason_categories={"returns_in": "RETURNED_BY_CUSTOMER"},
        ))

        assert config.reason_categories.returns_in == ("RETURNED_BY_CUSTOMER",)

    def test_missing_section_raises(self):
        data = _data()
        del data["reason_categories"]

        with pytest.raises(KeyError):
            parse_valuation_config(data)

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            get_active_config(tmp_path / "absent.yaml")


class TestValidation:
    """Tests for rejected configurations."""

    def test_unknown_reason(self, tmp_path):
        path = _write(tmp_path, _data(reason_categories={"write_off": ["MELTED"]}))

        with pytest.raises(InvalidConfigurationError) as exc_info:
            get_active_config(path)

        assert exc_info.value.code == "INVALID_CONFIGURATION"
        assert any("MELTED" in e for e in exc_info.value.errors)
        assert exc_info.value.source == str(path)

    def test_overlapping_categories(self):
        config = parse_valuation_config(_data(reason_categories={
            "write_off": ["DAMAGED"],
            "return_to_supplier": ["DAMAGED"],
        }))

        result = validate_valuation_config(config)

        assert not result.is_valid
        assert any("write_off" in e and "return_to_supplier" in e for e in result.errors)

    @pytest.mark.parametrize("scale", [-1, 10])
    def test_scale_out_of_range(self, scale):
        config = parse_valuation_config(_data(valuation={"method": "WAC", "cost_scale": scale}))

        assert not validate_valuation_config(config).is_valid

    def test_unsupported_method(self):
        config = parse_valuation_config(_data(valuation={"method": "fifo", "cost_scale": 4}))

        result = validate_valuation_config(config)

        assert any("FIFO" in e for e in result.errors)

    def test_missing_initial_stock_is_warning(self, tmp_path, captured_logs):
        path = _write(tmp_path, _data(reason_categories={"write_off": ["LOST"]}))

        config = get_active_config(path)

        assert config.reason_categories.initial_stock == ()
        assert any(r["message"] == "config_validation_warning" for r in captured_logs())

    def test_error_is_configuration_error(self):
        assert issubclass(InvalidConfigurationError, ConfigurationError)


class TestBridges:
    """Tests for config to engine translation."""

    def test_custom_categories(self):
        config = parse_valuation_config(_data(
            valuation={"method": "WAC", "cost_scale": 2},
            reason_categories={"write_off": ["SOLD"], "initial_stock": ["MANUAL_UPDATE"]},
        ))

        categories = build_reason_categories(config)
        engine = build_replay_engine(config)

        assert categories.write_off == {StockChangeReason.SOLD}
        assert categories.initial_stock == {StockChangeReason.MANUAL_UPDATE}
        assert categories.returns_in == frozenset()
        assert engine.cost_places == 2
        assert engine.categories == categories
