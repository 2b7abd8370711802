"""
Pytest fixtures for the inventory valuation test suite.

Provides:
- Structured logging for every test, plus a log capture fixture
- In-memory SQLite sessions with the stock_history table created
- A stock event factory and a stock history row writer
"""

import json
import logging
from datetime import datetime
from decimal import Decimal
from io import StringIO
from itertools import count

import pytest

from inventory_kernel.db.engine import (
    create_tables,
    drop_tables,
    get_session,
    init_engine_from_url,
    reset_engine,
)
from inventory_kernel.domain.stock_events import StockChangeReason, StockEvent
from inventory_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)
from inventory_kernel.models.stock_history import StockHistoryModel


# =============================================================================
# Logging fixtures
# =============================================================================


@pytest.fixture(autouse=True, scope="session")
def _configure_test_logging():
    """Configure structured logging for the test suite."""
    reset_logging()
    configure_logging(level=logging.DEBUG)
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Clear LogContext between tests to prevent cross-test contamination."""
    LogContext.clear()
    yield
    LogContext.clear()


@pytest.fixture
def captured_logs():
    """
    Capture inventory_kernel logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs):
            service.get_financial_summary_wac(...)
            logs = captured_logs()
            assert any(r["message"] == "wac_summary_completed" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("inventory_kernel")
    previous_level = root.level
    root.setLevel(logging.DEBUG)
    root.addHandler(handler)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records

    root.removeHandler(handler)
    root.setLevel(previous_level)


# =============================================================================
# Database fixtures
# =============================================================================


@pytest.fixture
def session():
    """A session on a fresh in-memory SQLite database."""
    init_engine_from_url("sqlite://")
    create_tables()
    s = get_session()
    yield s
    s.close()
    drop_tables()
    reset_engine()


@pytest.fixture
def write_history(session):
    """
    Write stock_history rows, assigning seq in call order.

    Usage::

        write_history("A", 10, "INITIAL_STOCK", datetime(2024, 1, 1), price="5.00")
    """
    seq = count(1)

    def _write(
        item_id: str,
        change: int,
        reason: str,
        created_at: datetime,
        price: str | None = None,
        supplier_id: str | None = None,
    ) -> StockHistoryModel:
        row = StockHistoryModel(
            item_id=item_id,
            supplier_id=supplier_id,
            change=change,
            reason=reason,
            created_at=created_at,
            seq=next(seq),
            price_at_change=Decimal(price) if price is not None else None,
        )
        session.add(row)
        session.flush()
        return row

    return _write


# =============================================================================
# Event helpers
# =============================================================================


def make_event(
    item_id: str,
    change: int,
    reason: StockChangeReason | str,
    occurred_at: datetime,
    unit_cost: str | None = None,
    supplier_id: str | None = None,
) -> StockEvent:
    """Build a StockEvent with the cost given as a string."""
    return StockEvent(
        item_id=item_id,
        quantity_change=change,
        reason=reason,
        occurred_at=occurred_at,
        unit_cost=Decimal(unit_cost) if unit_cost is not None else None,
        supplier_id=supplier_id,
    )


@pytest.fixture
def event():
    """Factory fixture for StockEvent values."""
    return make_event
