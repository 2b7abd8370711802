"""Tests for the in-memory event source and supplier normalization."""

from datetime import datetime

import pytest

from inventory_kernel.domain.stock_events import StockChangeReason as R
from inventory_services.event_source import InMemoryEventSource, normalize_supplier_id
from tests.conftest import make_event as ev


class TestNormalizeSupplierId:
    """Tests for supplier id normalization."""

    @pytest.mark.parametrize("raw", [None, "", "   ", "\t\n"])
    def test_blank_is_none(self, raw):
        assert normalize_supplier_id(raw) is None

    @pytest.mark.parametrize("raw", ["acme", "ACME", "  Acme  "])
    def test_trimmed_and_lowercased(self, raw):
        assert normalize_supplier_id(raw) == "acme"


class TestInMemoryEventSource:
    """Tests for ordering, bounds and filtering."""

    def test_sorted_by_time(self):
        late = ev("A", 1, R.SOLD, datetime(2024, 2, 2))
        early = ev("A", 1, R.SOLD, datetime(2024, 2, 1))
        source = InMemoryEventSource([late, early])

        assert list(source.events_up_to(datetime(2024, 12, 31))) == [early, late]

    def test_same_timestamp_keeps_insertion_order(self):
        t = datetime(2024, 2, 1)
        first = ev("A", 5, R.INITIAL_STOCK, t, "1.00")
        second = ev("A", -2, R.SOLD, t)
        third = ev("B", 1, R.INITIAL_STOCK, t, "2.00")
        source = InMemoryEventSource([first, second])
        source.add(third)

        assert list(source.events_up_to(t)) == [first, second, third]

    def test_upper_bound_inclusive(self):
        t = datetime(2024, 2, 1, 12)
        inside = ev("A", 1, R.SOLD, t)
        outside = ev("A", 1, R.SOLD, datetime(2024, 2, 1, 12, 0, 1))
        source = InMemoryEventSource([inside, outside])

        assert list(source.events_up_to(t)) == [inside]

    def test_since_lower_bound_inclusive(self):
        before = ev("A", 1, R.SOLD, datetime(2024, 1, 31))
        at_bound = ev("A", 1, R.SOLD, datetime(2024, 2, 1))
        source = InMemoryEventSource([before, at_bound])

        events = list(source.events_up_to(datetime(2024, 3, 1), since=datetime(2024, 2, 1)))

        assert events == [at_bound]

    def test_supplier_filter_case_insensitive(self):
        mine = ev("A", 1, R.SOLD, datetime(2024, 2, 1), supplier_id="ACME")
        theirs = ev("B", 1, R.SOLD, datetime(2024, 2, 1), supplier_id="other")
        unknown = ev("C", 1, R.SOLD, datetime(2024, 2, 1))
        source = InMemoryEventSource([mine, theirs, unknown])

        assert list(source.events_up_to(datetime(2024, 3, 1), supplier_id=" acme ")) == [mine]
        assert len(list(source.events_up_to(datetime(2024, 3, 1), supplier_id=""))) == 3

    def test_len(self):
        source = InMemoryEventSource()
        source.extend([ev("A", 1, R.SOLD, datetime(2024, 2, 1))])

        assert len(source) == 1
