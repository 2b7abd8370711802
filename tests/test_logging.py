"""Tests for the structured logging system (inventory_kernel/logging_config.py)."""

import json
import logging
from datetime import date, datetime
from decimal import Decimal
from io import StringIO
from uuid import uuid4

import pytest

from inventory_kernel.exceptions import InvalidDateRangeError
from inventory_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    get_logger,
    reset_logging,
)


@pytest.fixture(autouse=True)
def _clean_logging():
    """Reset logging state between tests, then restore the suite default."""
    reset_logging()
    LogContext.clear()
    yield
    LogContext.clear()
    reset_logging()
    configure_logging(level=logging.DEBUG)


def _make_handler() -> tuple[logging.Handler, StringIO]:
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    return handler, stream


def _parse_log(stream: StringIO) -> dict:
    """Parse the first JSON log line from a stream."""
    line = stream.getvalue().strip().split("\n")[0]
    return json.loads(line)


def _parse_all_logs(stream: StringIO) -> list[dict]:
    """Parse all JSON log lines from a stream."""
    lines = stream.getvalue().strip().split("\n")
    return [json.loads(line) for line in lines if line]


# ---------------------------------------------------------------------------
# StructuredFormatter tests
# ---------------------------------------------------------------------------


class TestStructuredFormatter:
    """Tests for JSON log output format."""

    def test_basic_json_output(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        logger = get_logger("test")
        logger.info("hello")

        record = _parse_log(stream)
        assert record["level"] == "INFO"
        assert record["message"] == "hello"
        assert record["logger"] == "inventory_kernel.test"
        assert "ts" in record

    def test_extra_fields_included(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        logger = get_logger("test")
        logger.info("replayed", extra={"events_read": 42, "item_id": "A"})

        record = _parse_log(stream)
        assert record["events_read"] == 42
        assert record["item_id"] == "A"

    def test_context_fields_included(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        logger = get_logger("test")
        LogContext.set(correlation_id="abc-123", supplier_id="acme")
        logger.info("test_msg")

        record = _parse_log(stream)
        assert record["correlation_id"] == "abc-123"
        assert record["supplier_id"] == "acme"

    def test_decimal_and_dates_serialized(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        logger = get_logger("test")
        logger.info("values", extra={
            "cost": Decimal("18.6664"),
            "day": date(2024, 1, 31),
            "at": datetime(2024, 1, 31, 23, 59),
        })

        record = _parse_log(stream)
        assert record["cost"] == "18.6664"
        assert record["day"] == "2024-01-31"
        assert record["at"] == "2024-01-31T23:59:00"

    def test_uuid_serialized(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        logger = get_logger("test")
        uid = uuid4()
        logger.info("with_uuid", extra={"row_id": uid})

        record = _parse_log(stream)
        assert record["row_id"] == str(uid)

    def test_exception_fields(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        logger = get_logger("test")
        try:
            raise ValueError("boom")
        except ValueError:
            logger.error("failed", exc_info=True)

        record = _parse_log(stream)
        assert record["exc_type"] == "ValueError"
        assert record["exc_message"] == "boom"
        assert "traceback" in record

    def test_kernel_exception_code_extracted(self):
        """Inventory kernel exceptions carry .code and structured attributes."""
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        logger = get_logger("test")

        try:
            raise InvalidDateRangeError(date(2024, 2, 1), date(2024, 1, 1))
        except InvalidDateRangeError:
            logger.error("range_error", exc_info=True)

        record = _parse_log(stream)
        assert record["exc_code"] == "INVALID_DATE_RANGE"
        assert record["exc_type"] == "InvalidDateRangeError"
        assert record["exc_start"] == "2024-02-01"
        assert record["exc_end"] == "2024-01-01"

    def test_no_context_fields_when_empty(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        logger = get_logger("test")
        logger.info("bare_message")

        record = _parse_log(stream)
        assert "correlation_id" not in record
        assert "supplier_id" not in record

    def test_valid_json_every_line(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        logger = get_logger("test")
        logger.info("first")
        logger.warning("second", extra={"k": "v"})
        logger.debug("third")

        logs = _parse_all_logs(stream)
        # Default level is INFO, so the debug record is dropped
        assert len(logs) == 2
        for record in logs:
            assert {"ts", "level", "logger", "message"} <= record.keys()


# ---------------------------------------------------------------------------
# LogContext tests
# ---------------------------------------------------------------------------


class TestLogContext:
    """Tests for context propagation."""

    def test_set_and_get(self):
        LogContext.set(correlation_id="x", supplier_id="y")
        assert LogContext.get_all() == {"correlation_id": "x", "supplier_id": "y"}

    def test_clear(self):
        LogContext.set(correlation_id="x")
        LogContext.clear()
        assert LogContext.get_all() == {}

    def test_bind_context_manager(self):
        LogContext.set(supplier_id="outer")
        with LogContext.bind(supplier_id="inner"):
            assert LogContext.get_all()["supplier_id"] == "inner"
        assert LogContext.get_all()["supplier_id"] == "outer"

    def test_bind_restores_none(self):
        """bind() restores to None if there was no previous value."""
        assert "supplier_id" not in LogContext.get_all()
        with LogContext.bind(supplier_id="temp"):
            assert LogContext.get_all()["supplier_id"] == "temp"
        assert "supplier_id" not in LogContext.get_all()

    def test_bind_ignores_none_values(self):
        with LogContext.bind(supplier_id=None):
            assert LogContext.get_all() == {}

    def test_all_fields(self):
        LogContext.set(
            correlation_id="c",
            request_id="r",
            actor_id="a",
            supplier_id="s",
            trace_id="t",
        )
        assert LogContext.get_all() == {
            "correlation_id": "c",
            "request_id": "r",
            "actor_id": "a",
            "supplier_id": "s",
            "trace_id": "t",
        }


# ---------------------------------------------------------------------------
# configure_logging tests
# ---------------------------------------------------------------------------


class TestConfigureLogging:
    """Tests for idempotent configuration."""

    def test_idempotent(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        configure_logging(handler=handler)

        root = logging.getLogger("inventory_kernel")
        assert len(root.handlers) == 1

    def test_level_respected(self):
        handler, stream = _make_handler()
        configure_logging(level=logging.WARNING, handler=handler)
        logger = get_logger("test")
        logger.info("dropped")
        logger.warning("kept")

        logs = _parse_all_logs(stream)
        assert [r["message"] for r in logs] == ["kept"]

    def test_reset_allows_reconfigure(self):
        first, _ = _make_handler()
        configure_logging(handler=first)
        reset_logging()
        second, stream = _make_handler()
        configure_logging(handler=second)

        get_logger("test").info("after_reset")
        assert _parse_log(stream)["message"] == "after_reset"
