"""Tests for HTTP client adapter."""

import asyncio
from unittest.mock import AsyncMock, Mock

import aiohttp
import pytest

from src.adapters.driven.http.client import HttpClient
from src.core.errors import DecodeError, HttpStatusError, NetworkError
from src.ports.metrics import HttpAttemptDto, MetricsPort

__all__ = []

URL = "http://test/monitoring"


class DummyMetrics(MetricsPort):
    """Metrics implementation for testing."""

    def __init__(self) -> None:
        self.attempts: list[HttpAttemptDto] = []

    def update(self, attempt: HttpAttemptDto) -> None:
        """Record attempt."""
        self.attempts.append(attempt)

    def __str__(self) -> str:
        """Return string representation."""
        return f"Recorded {len(self.attempts)} attempts"


def make_client(
    status: int = 200,
    body: bytes = b"{}",
    metrics: MetricsPort | None = None,
) -> HttpClient:
    """Create a client whose session returns a canned response."""
    client = HttpClient(metrics=metrics)
    client.session = AsyncMock()

    mock_response = AsyncMock()
    mock_response.status = status
    mock_response.read = AsyncMock(return_value=body)
    client.session.get = AsyncMock(return_value=mock_response)
    return client


@pytest.mark.asyncio
async def test_http_client_context_manager() -> None:
    """HTTP client should initialize and close session."""
    client = HttpClient()
    assert client.session is None

    async with client as c:
        assert c.session is not None
        assert c is client

    assert client.session.closed


@pytest.mark.asyncio
async def test_get_json_returns_parsed_body() -> None:
    """2xx JSON body should be parsed and returned."""
    client = make_client(body=b'{"body": "{\\"Availability\\": \\"UP\\"}"}')

    result = await client.get_json(URL)

    assert result == {"body": '{"Availability": "UP"}'}
    client.session.get.assert_awaited_once()
    assert client.session.get.call_args[0][0] == URL


@pytest.mark.asyncio
async def test_get_json_raises_status_error_on_non_2xx() -> None:
    """Non-2xx responses should raise HttpStatusError."""
    client = make_client(status=500, body=b"Internal Server Error")

    with pytest.raises(HttpStatusError, match="Status: 500") as exc_info:
        await client.get_json(URL)

    assert exc_info.value.status == 500
    assert exc_info.value.url == URL


@pytest.mark.asyncio
async def test_get_json_raises_decode_error_on_invalid_json() -> None:
    """Invalid JSON body should raise DecodeError."""
    client = make_client(body=b"<html>gateway</html>")

    with pytest.raises(DecodeError, match="not valid JSON"):
        await client.get_json(URL)


@pytest.mark.asyncio
async def test_get_json_raises_decode_error_on_non_utf8_body() -> None:
    """A body that is not valid UTF-8 should raise DecodeError and still be recorded."""
    metrics = DummyMetrics()
    client = make_client(body=b'{"Availability": "\xff"}', metrics=metrics)

    with pytest.raises(DecodeError, match="not valid JSON"):
        await client.get_json(URL)

    assert len(metrics.attempts) == 1
    assert metrics.attempts[0].status_code == 200


@pytest.mark.asyncio
async def test_get_json_wraps_connection_errors() -> None:
    """aiohttp connection errors should become NetworkError."""
    client = HttpClient()
    client.session = AsyncMock()
    client.session.get = AsyncMock(
        side_effect=aiohttp.ClientConnectorError(Mock(), OSError("refused"))
    )

    with pytest.raises(NetworkError):
        await client.get_json(URL)


@pytest.mark.asyncio
async def test_get_json_wraps_timeouts() -> None:
    """Timeouts should become NetworkError."""
    client = HttpClient(timeout_sec=0.5)
    client.session = AsyncMock()
    client.session.get = AsyncMock(side_effect=asyncio.TimeoutError())

    with pytest.raises(NetworkError, match="timed out"):
        await client.get_json(URL)


@pytest.mark.asyncio
async def test_get_json_raises_if_session_not_initialized() -> None:
    """get_json should raise if session is None."""
    client = HttpClient()

    with pytest.raises(RuntimeError, match="Session not initialized"):
        await client.get_json(URL)


@pytest.mark.asyncio
async def test_http_client_records_success_metrics() -> None:
    """HTTP client should update metrics after a successful request."""
    metrics = DummyMetrics()
    client = make_client(status=200, metrics=metrics)

    await client.get_json(URL)

    assert len(metrics.attempts) == 1
    assert metrics.attempts[0].url == URL
    assert metrics.attempts[0].status_code == 200
    assert metrics.attempts[0].is_failed is False
    assert metrics.attempts[0].latency_ms >= 0


@pytest.mark.asyncio
async def test_http_client_marks_failures() -> None:
    """HTTP client should mark non-2xx statuses as failed."""
    metrics = DummyMetrics()
    client = make_client(status=503, metrics=metrics)

    with pytest.raises(HttpStatusError):
        await client.get_json(URL)

    assert metrics.attempts[0].is_failed is True
    assert metrics.attempts[0].status_code == 503


@pytest.mark.asyncio
async def test_http_client_marks_network_failures() -> None:
    """Network failures should be recorded without a status code."""
    metrics = DummyMetrics()
    client = HttpClient(metrics=metrics)
    client.session = AsyncMock()
    client.session.get = AsyncMock(side_effect=aiohttp.ClientOSError("reset"))

    with pytest.raises(NetworkError):
        await client.get_json(URL)

    assert metrics.attempts[0].is_failed is True
    assert metrics.attempts[0].status_code is None
