"""Fixed-capacity rolling history of metrics snapshots."""

from __future__ import annotations

import dataclasses
from collections import deque
from collections.abc import Iterator
from datetime import datetime
from typing import Any

from src.ports.snapshot import HistoryPoint

__all__ = ["RollingHistory", "HISTORY_CAPACITY"]

HISTORY_CAPACITY = 60


class RollingHistory:
    """Oldest-evicted-first buffer feeding time-series consumers.

    Appends happen in completion order. Capture times are kept
    non-decreasing: a point stamped earlier than the newest one (wall clock
    stepped back) is re-stamped with the newest timestamp.

    Not thread-safe; owned by a single event loop.
    """

    def __init__(self, capacity: int = HISTORY_CAPACITY) -> None:
        """Initialize an empty history.

        Args:
            capacity: Maximum number of points retained.
        """
        if capacity <= 0:
            raise ValueError("capacity must be positive")
        self._points: deque[HistoryPoint] = deque(maxlen=capacity)

    @property
    def capacity(self) -> int:
        """Maximum number of points retained."""
        return self._points.maxlen or 0

    @property
    def points(self) -> tuple[HistoryPoint, ...]:
        """Immutable copy of the buffer, oldest first."""
        return tuple(self._points)

    @property
    def latest(self) -> HistoryPoint | None:
        """Most recently appended point, or None when empty."""
        return self._points[-1] if self._points else None

    def append(self, point: HistoryPoint) -> tuple[HistoryPoint, ...]:
        """Append a point, evicting the oldest once over capacity.

        Args:
            point: Snapshot tagged with its capture time.

        Returns:
            The history after insertion, oldest first.
        """
        last = self.latest
        if last is not None and point.captured_at < last.captured_at:
            point = dataclasses.replace(point, captured_at=last.captured_at)
        # deque(maxlen) drops exactly one element from the left when full
        self._points.append(point)
        return self.points

    def series(self, field: str) -> list[tuple[datetime, Any]]:
        """Return (captured_at, value) pairs for one snapshot field."""
        return [(p.captured_at, p.value(field)) for p in self._points]

    def clear(self) -> None:
        """Drop every point."""
        self._points.clear()

    def __len__(self) -> int:
        return len(self._points)

    def __iter__(self) -> Iterator[HistoryPoint]:
        """Iterate over a copy, so appends during iteration are safe."""
        return iter(tuple(self._points))
