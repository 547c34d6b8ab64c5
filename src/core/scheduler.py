"""Timer that re-invokes a poll function at a fixed interval."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from types import TracebackType
from typing import Any

__all__ = ["CancelHandle", "start_polling", "get_now_time"]

logger = logging.getLogger(__name__)

PollFn = Callable[[], Awaitable[Any]]


def get_now_time() -> float:
    """Get current monotonic time in seconds.

    Uses event loop's monotonic clock for accurate scheduling
    without wall-clock drift.

    Returns:
        Current time in seconds (monotonic).
    """
    return asyncio.get_running_loop().time()


class CancelHandle:
    """Handle returned by start_polling().

    States: Running (timer active) and Stopped. cancel() moves Running to
    Stopped and is a no-op afterwards. Polls already started keep running
    until they finish; drain() waits for them.

    Usable as an async context manager that cancels and drains on exit.
    """

    def __init__(self) -> None:
        self._timer: asyncio.Task[None] | None = None
        self._pending: set[asyncio.Task[None]] = set()

    @property
    def is_running(self) -> bool:
        return self._timer is not None and not self._timer.done()

    @property
    def pending(self) -> int:
        """Number of poll invocations still in flight."""
        return len(self._pending)

    def cancel(self) -> None:
        """Stop all future invocations; in-flight polls are left alone."""
        if self._timer is None:
            return
        timer, self._timer = self._timer, None
        if not timer.done():
            timer.cancel()
            logger.info("Polling stopped.")

    async def drain(self) -> None:
        """Wait until every in-flight poll has completed."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    async def __aenter__(self) -> CancelHandle:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.cancel()
        await self.drain()

    def _spawn(self, poll_fn: PollFn) -> None:
        """Run one poll as a background task (fire-and-forget)."""

        async def _run_once() -> None:
            try:
                await poll_fn()
            except asyncio.CancelledError:
                logger.info("Poll cancelled.")
            except Exception as e:  # noqa: BLE001
                logger.error(f"Unexpected error in poll task: {e}", exc_info=True)
            finally:
                task = asyncio.current_task()
                if task is not None:
                    self._pending.discard(task)

        task: asyncio.Task[None] = asyncio.get_running_loop().create_task(_run_once())
        self._pending.add(task)

    async def _tick(self, poll_fn: PollFn, interval_sec: float) -> None:
        """Spawn poll_fn now and then every interval_sec, until cancelled.

        Notes:
            - The timer never awaits a poll: each runs in its own task so the
              period stays fixed even when the endpoint is slow.
            - Ticks are computed from the start time, so sleep overshoot
              does not accumulate.
        """
        next_tick = get_now_time()
        while True:
            self._spawn(poll_fn)
            next_tick += interval_sec
            await asyncio.sleep(max(0.0, next_tick - get_now_time()))


def start_polling(poll_fn: PollFn, interval_sec: float, enabled: bool) -> CancelHandle:
    """Start invoking poll_fn on a fixed interval.

    Must be called from a running event loop.

    Args:
        poll_fn: Coroutine function performing one poll.
        interval_sec: Seconds between invocations (used only when enabled).
        enabled: When False, poll_fn runs exactly once and the returned
            handle is already stopped.

    Returns:
        Handle used to stop the timer and wait for in-flight polls.

    Raises:
        ValueError: If enabled and interval_sec is not positive.
    """
    handle = CancelHandle()

    if not enabled:
        logger.info("Repeated polling disabled, polling once.")
        handle._spawn(poll_fn)
        return handle

    if interval_sec <= 0:
        raise ValueError("interval_sec must be positive")

    logger.info(f"Polling every {interval_sec}s.")
    handle._timer = asyncio.get_running_loop().create_task(handle._tick(poll_fn, interval_sec))
    return handle
