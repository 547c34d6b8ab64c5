"""Metrics port definition (interface and DTO)."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

__all__ = ["HttpAttemptDto", "MetricsPort"]


@dataclass(slots=True, frozen=True)
class HttpAttemptDto:
    """Immutable record of a single GET attempt.

    Attributes:
        url: Requested URL.
        started_at_sec: Monotonic seconds when the request left the process.
        finished_at_sec: Monotonic seconds when the attempt completed or failed.
        is_failed: True on network error or non-2xx status.
        status_code: HTTP status code when a response arrived; None otherwise.
    """

    url: str
    started_at_sec: float
    finished_at_sec: float
    is_failed: bool = False
    status_code: int | None = None

    @property
    def latency_ms(self) -> float:
        return (self.finished_at_sec - self.started_at_sec) * 1_000.0


class MetricsPort(Protocol):
    """Interface for recording HTTP attempt metrics.

    Implementations must be async-safe and non-blocking.
    The HTTP adapter calls update() after each attempt; presentation layers
    call __str__() to render summaries.
    """

    def update(self, attempt: HttpAttemptDto, /) -> None:
        """Record a finished HTTP attempt.

        Args:
            attempt: The attempt to record.
        """
        ...

    def __str__(self) -> str:
        """Return concise textual summary for humans.

        Returns:
            Formatted metrics string.
        """
        ...
