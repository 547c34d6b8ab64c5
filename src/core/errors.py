"""Error taxonomy for a single poll cycle."""

__all__ = ["PollError", "NetworkError", "HttpStatusError", "DecodeError"]


class PollError(Exception):
    """Base class for errors that end a poll cycle as Failed."""


class NetworkError(PollError):
    """Request could not complete (connection refused, DNS, timeout, ...)."""


class HttpStatusError(PollError):
    """Endpoint answered with a non-2xx status.

    Attributes:
        status: HTTP status code received.
        url: URL that was requested.
    """

    def __init__(self, status: int, url: str) -> None:
        super().__init__(f"HTTP error! Status: {status}")
        self.status = status
        self.url = url


class DecodeError(PollError):
    """Response body is malformed JSON or has an unexpected shape."""
