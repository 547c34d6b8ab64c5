"""HTTP client adapter with timeout and metrics integration."""

import asyncio
import json
import logging
from types import TracebackType
from typing import Any

import aiohttp
from aiohttp import ClientTimeout

from src.core.errors import DecodeError, HttpStatusError, NetworkError
from src.ports.metrics import HttpAttemptDto, MetricsPort

__all__ = ["HttpClient"]

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SEC = 10.0


class HttpClient:
    """HTTP client returning parsed JSON bodies.

    Features:
    - One GET per call, no retry (the scheduler re-polls on its own timer).
    - Total timeout per request.
    - Metrics collection (latency, failure rate).
    - Context manager for proper resource cleanup.

    Translates transport problems into the core error taxonomy:
    aiohttp errors and timeouts become NetworkError, non-2xx statuses
    HttpStatusError, and unparsable bodies DecodeError.
    """

    def __init__(
        self,
        metrics: MetricsPort | None = None,
        timeout_sec: float = DEFAULT_TIMEOUT_SEC,
    ) -> None:
        """Initialize HTTP client.

        Args:
            metrics: Optional metrics collector to track attempts.
            timeout_sec: Total timeout for one request in seconds.
        """
        self.metrics = metrics
        self.timeout_sec = timeout_sec
        self.session: aiohttp.ClientSession | None = None

    async def __aenter__(self) -> "HttpClient":
        """Enter async context manager (start session).

        Returns:
            Self for use in async with statement.
        """
        self.session = aiohttp.ClientSession()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        """Exit async context manager (close session).

        Args:
            exc_type: Exception type if raised in context.
            exc: Exception instance if raised in context.
            tb: Traceback if raised in context.
        """
        if self.session:
            await self.session.close()

    async def get_json(self, url: str) -> Any:
        """GET url and return its JSON body.

        Args:
            url: Endpoint to fetch.

        Returns:
            Parsed JSON value.

        Raises:
            RuntimeError: If session not initialized.
            NetworkError: Connection failure or timeout.
            HttpStatusError: Response status outside 2xx.
            DecodeError: Body is not valid UTF-8 JSON.
        """
        if self.session is None:
            raise RuntimeError("Session not initialized; use 'async with' context manager")

        loop = asyncio.get_running_loop()
        started = loop.time()
        status: int | None = None
        try:
            resp = await self.session.get(url, timeout=ClientTimeout(total=self.timeout_sec))
            status = resp.status
            # Reading the whole body also releases the connection
            body = await resp.read()
        except asyncio.TimeoutError as e:
            self._record(url, started, failed=True, status=None)
            raise NetworkError(f"Request to {url} timed out after {self.timeout_sec}s") from e
        except aiohttp.ClientError as e:
            self._record(url, started, failed=True, status=status)
            raise NetworkError(f"Request to {url} failed: {e}") from e

        if not 200 <= status < 300:
            self._record(url, started, failed=True, status=status)
            raise HttpStatusError(status, url)

        self._record(url, started, failed=False, status=status)
        try:
            return json.loads(body)
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise DecodeError(f"Response from {url} is not valid JSON: {e}") from e

    def _record(self, url: str, started: float, *, failed: bool, status: int | None) -> None:
        """Push one attempt into the metrics collector, if any."""
        if not self.metrics:
            return
        self.metrics.update(
            HttpAttemptDto(
                url=url,
                started_at_sec=started,
                finished_at_sec=asyncio.get_running_loop().time(),
                is_failed=failed,
                status_code=status,
            )
        )
        logger.info(f"HTTP metrics: {self.metrics}")
