"""Tests for the rolling history buffer."""

from datetime import datetime, timedelta, timezone

import pytest

from src.core.history import HISTORY_CAPACITY, RollingHistory
from src.ports.snapshot import HistoryPoint, MetricsSnapshot

__all__ = []

T0 = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


def make_point(i: int, at: datetime | None = None) -> HistoryPoint:
    """Create point i, captured i seconds after T0 unless at is given."""
    return HistoryPoint(
        snapshot=MetricsSnapshot(availability="UP", status_code=200, db_query_execution_time=i),
        captured_at=at or T0 + timedelta(seconds=i),
    )


def test_history_starts_empty() -> None:
    """A fresh history should hold no points."""
    history = RollingHistory()

    assert len(history) == 0
    assert history.points == ()
    assert history.latest is None
    assert history.capacity == HISTORY_CAPACITY == 60


def test_history_keeps_all_points_up_to_capacity() -> None:
    """Appending exactly 60 points should evict nothing."""
    history = RollingHistory()

    for i in range(60):
        history.append(make_point(i))

    assert len(history) == 60
    assert [p.snapshot.db_query_execution_time for p in history] == list(range(60))


def test_history_evicts_oldest_first() -> None:
    """Appending 100 points should keep the last 60 in original order."""
    history = RollingHistory()

    for i in range(100):
        result = history.append(make_point(i))
        assert len(result) <= 60

    assert [p.snapshot.db_query_execution_time for p in history] == list(range(40, 100))
    assert history.latest is not None
    assert history.latest.snapshot.db_query_execution_time == 99


def test_history_append_returns_snapshot_of_buffer() -> None:
    """append() should return the buffer contents after insertion."""
    history = RollingHistory(capacity=2)

    first = history.append(make_point(1))
    second = history.append(make_point(2))
    third = history.append(make_point(3))

    assert len(first) == 1
    assert len(second) == 2
    assert [p.snapshot.db_query_execution_time for p in third] == [2, 3]


def test_history_does_not_deduplicate() -> None:
    """Identical points should all be kept."""
    history = RollingHistory()
    point = make_point(1)

    history.append(point)
    history.append(point)

    assert history.points == (point, point)


def test_history_clamps_backwards_timestamps() -> None:
    """A point stamped before the newest one should take the newest timestamp."""
    history = RollingHistory()
    history.append(make_point(10))

    history.append(make_point(11, at=T0))

    stamps = [p.captured_at for p in history]
    assert stamps == [T0 + timedelta(seconds=10)] * 2
    assert history.latest.snapshot.db_query_execution_time == 11


def test_history_series_extracts_field() -> None:
    """series() should pair capture times with one field's values."""
    history = RollingHistory()
    history.append(make_point(1))
    history.append(HistoryPoint(MetricsSnapshot(), T0 + timedelta(seconds=2)))

    assert history.series("db_query_execution_time") == [
        (T0 + timedelta(seconds=1), 1),
        (T0 + timedelta(seconds=2), None),
    ]


def test_history_series_rejects_unknown_field() -> None:
    """series() should reject names that are not snapshot fields."""
    history = RollingHistory()
    history.append(make_point(1))

    with pytest.raises(KeyError):
        history.series("cpu")


def test_history_rejects_non_positive_capacity() -> None:
    """Capacity must be positive."""
    with pytest.raises(ValueError):
        RollingHistory(capacity=0)


def test_history_clear() -> None:
    """clear() should empty the buffer."""
    history = RollingHistory()
    history.append(make_point(1))

    history.clear()

    assert len(history) == 0
