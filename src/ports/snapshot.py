"""Snapshot DTOs produced by the decoder and kept in history."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any

__all__ = ["MetricsSnapshot", "SentimentSummary", "HistoryPoint", "METRIC_FIELDS"]

METRIC_FIELDS = (
    "availability",
    "status_code",
    "db_query_execution_time",
    "throttle_operation_count",
    "lambda_avg_execution_time",
)


@dataclass(slots=True, frozen=True)
class MetricsSnapshot:
    """One decoded reading of the server-health endpoint.

    Every field is None when the source object did not carry it.

    Attributes:
        availability: "UP", "DOWN" or any other string reported by the source.
        status_code: Status code reported by the monitored service.
        db_query_execution_time: DB query execution time in milliseconds.
        throttle_operation_count: Number of throttled operations.
        lambda_avg_execution_time: Average Lambda execution time in milliseconds.
    """

    availability: str | None = None
    status_code: int | None = None
    db_query_execution_time: float | None = None
    throttle_operation_count: int | None = None
    lambda_avg_execution_time: float | None = None

    @property
    def is_up(self) -> bool:
        """True when the source reports availability "UP"."""
        return self.availability == "UP"


@dataclass(slots=True, frozen=True)
class SentimentSummary:
    """Aggregated customer-feedback sentiment counts."""

    positive: int = 0
    negative: int = 0
    neutral: int = 0

    @property
    def total(self) -> int:
        """Sum of all sentiment counts."""
        return self.positive + self.negative + self.neutral

    def as_series(self) -> list[dict[str, Any]]:
        """Return name/value pairs in the order a pie chart expects."""
        return [
            {"name": "Positive", "value": self.positive},
            {"name": "Negative", "value": self.negative},
            {"name": "Neutral", "value": self.neutral},
        ]


@dataclass(slots=True, frozen=True)
class HistoryPoint:
    """A metrics snapshot tagged with its capture time.

    Attributes:
        snapshot: The decoded reading.
        captured_at: Timezone-aware wall-clock time of capture.
    """

    snapshot: MetricsSnapshot
    captured_at: datetime

    def value(self, field: str) -> Any:
        """Return one snapshot field by name (None when absent)."""
        if field not in METRIC_FIELDS:
            raise KeyError(f"Unknown metric field: {field}")
        return getattr(self.snapshot, field)
