"""Fetch lifecycle for a single endpoint: Idle -> Loading -> Ready | Failed."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from datetime import datetime, timezone
from typing import Any, Generic, TypeVar

from src.core.envelope import decode
from src.core.errors import PollError
from src.core.history import RollingHistory
from src.ports.http import JsonFetcherPort
from src.ports.snapshot import HistoryPoint, MetricsSnapshot
from src.ports.state import Failed, Idle, Loading, PollState, Ready

__all__ = ["Poller", "MetricsPoller", "StateListener"]

logger = logging.getLogger(__name__)

T = TypeVar("T")

StateListener = Callable[[PollState], None]


def utc_now() -> datetime:
    """Get current wall-clock time (timezone-aware, UTC)."""
    return datetime.now(timezone.utc)


class Poller(Generic[T]):
    """Owns the fetch lifecycle of one endpoint.

    Holds a single PollState plus the last successfully decoded value, so a
    Failed poll never erases what was last known. Presentation layers either
    read the properties or subscribe to state changes.

    At most one request is in flight: a poll() issued while another is
    pending returns the current state without touching the network.
    """

    def __init__(
        self,
        fetcher: JsonFetcherPort,
        decode_fn: Callable[[Any], T],
        *,
        name: str = "poller",
    ) -> None:
        """Initialize poller in the Idle state.

        Args:
            fetcher: Port used to GET and parse the endpoint response.
            decode_fn: Turns the parsed response into a typed value; raises
                DecodeError on a bad shape.
            name: Label used in log lines.
        """
        self.name = name
        self._fetcher = fetcher
        self._decode = decode_fn
        self._state: PollState = Idle()
        self._last_value: T | None = None
        self._in_flight = False
        self._listeners: list[StateListener] = []

    @property
    def state(self) -> PollState:
        return self._state

    @property
    def last_value(self) -> T | None:
        """Most recent successfully decoded value, kept across failures."""
        return self._last_value

    @property
    def error(self) -> str | None:
        """Failure message while the current state is Failed, else None."""
        return self._state.message if isinstance(self._state, Failed) else None

    @property
    def in_flight(self) -> bool:
        return self._in_flight

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Register a callback invoked on every state transition.

        Args:
            listener: Called with the new state.

        Returns:
            Callable that removes the listener.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    async def poll(self, url: str) -> PollState:
        """Issue one GET to url and update the state.

        Never raises for request, status or decoding problems: they end the
        cycle as Failed. Cancellation also ends Failed, then propagates.

        Args:
            url: Endpoint to poll.

        Returns:
            The state reached by this poll.
        """
        if self._in_flight:
            logger.debug(f"[{self.name}] poll skipped, previous request still in flight")
            return self._state

        self._in_flight = True
        self._set_state(Loading())
        try:
            raw = await self._fetcher.get_json(url)
            value = self._decode(raw)
        except asyncio.CancelledError:
            logger.info(f"[{self.name}] poll of {url} cancelled")
            self._set_state(Failed("Poll cancelled"))
            raise
        except PollError as e:
            logger.warning(f"[{self.name}] poll of {url} failed: {e}")
            return self._set_state(Failed(str(e)))
        except Exception as e:  # noqa: BLE001
            logger.error(f"[{self.name}] unexpected error polling {url}: {e}", exc_info=True)
            return self._set_state(Failed(f"Unexpected error: {e}"))
        finally:
            self._in_flight = False

        self._last_value = value
        self._on_success(value)
        return self._set_state(Ready(value))

    def _on_success(self, value: T) -> None:
        """Hook run after a successful decode, before the Ready transition."""

    def _set_state(self, state: PollState) -> PollState:
        self._state = state
        for listener in list(self._listeners):
            try:
                listener(state)
            except Exception as e:  # noqa: BLE001
                logger.error(f"[{self.name}] state listener failed: {e}", exc_info=True)
        return state


class MetricsPoller(Poller[MetricsSnapshot]):
    """Poller for the server-health endpoint that records rolling history."""

    def __init__(
        self,
        fetcher: JsonFetcherPort,
        history: RollingHistory,
        *,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        """Initialize metrics poller.

        Args:
            fetcher: Port used to GET the metrics endpoint.
            history: Buffer receiving one point per successful poll.
            clock: Source of capture timestamps.
        """
        super().__init__(fetcher, decode, name="metrics")
        self.history = history
        self._clock = clock

    def _on_success(self, value: MetricsSnapshot) -> None:
        self.history.append(HistoryPoint(snapshot=value, captured_at=self._clock()))
        logger.debug(f"[{self.name}] history size {len(self.history)}/{self.history.capacity}")
