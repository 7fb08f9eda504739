"""Tests for loadgraph.history."""

from __future__ import annotations

import pytest

from loadgraph.history import HistoryBuffer


class TestNewBuffer:
    def test_starts_all_zero(self) -> None:
        h = HistoryBuffer(5)
        assert h.ordered_view() == [0.0] * 5
        assert len(h) == 5
        assert h.cursor == 0

    def test_latest_before_push(self) -> None:
        assert HistoryBuffer(3).latest == 0.0

    @pytest.mark.parametrize("capacity", [0, -1])
    def test_rejects_non_positive_capacity(self, capacity: int) -> None:
        with pytest.raises(ValueError):
            HistoryBuffer(capacity)


class TestPush:
    def test_full_buffer_in_push_order(self) -> None:
        h = HistoryBuffer(4)
        for v in (1.0, 2.0, 3.0, 4.0):
            h.push(v)
        assert h.ordered_view() == [1.0, 2.0, 3.0, 4.0]
        assert h.cursor == 0

    def test_partial_fill_keeps_leading_zeros(self) -> None:
        h = HistoryBuffer(4)
        h.push(7.0)
        h.push(8.0)
        assert h.ordered_view() == [0.0, 0.0, 7.0, 8.0]

    def test_wraparound_drops_oldest(self) -> None:
        h = HistoryBuffer(4)
        for v in range(7):
            h.push(float(v))
        assert h.ordered_view() == [3.0, 4.0, 5.0, 6.0]
        assert h.latest == 6.0

    def test_length_never_changes(self) -> None:
        h = HistoryBuffer(3)
        for v in range(10):
            h.push(float(v))
            assert len(h.ordered_view()) == 3

    def test_ordered_view_does_not_mutate(self) -> None:
        h = HistoryBuffer(3)
        h.push(1.0)
        first = h.ordered_view()
        first[0] = 99.0
        assert h.ordered_view() == [0.0, 0.0, 1.0]
        assert h.cursor == 1

    def test_capacity_one(self) -> None:
        h = HistoryBuffer(1)
        h.push(5.0)
        h.push(6.0)
        assert h.ordered_view() == [6.0]
