"""Poll state variants (DTOs)."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

__all__ = ["Idle", "Loading", "Ready", "Failed", "PollState"]


@dataclass(slots=True, frozen=True)
class Idle:
    """No poll has been issued yet."""


@dataclass(slots=True, frozen=True)
class Loading:
    """A request is in flight."""


@dataclass(slots=True, frozen=True)
class Ready:
    """Last poll succeeded.

    Attributes:
        snapshot: The value decoded by the most recent successful poll.
    """

    snapshot: Any


@dataclass(slots=True, frozen=True)
class Failed:
    """Last poll failed.

    Attributes:
        message: Human-readable reason.
    """

    message: str


PollState = Idle | Loading | Ready | Failed
