"""HTTP fetch port definition (interface)."""

from typing import Any, Protocol

__all__ = ["JsonFetcherPort"]


class JsonFetcherPort(Protocol):
    """Interface for issuing one GET and returning the parsed JSON body.

    Decouples core polling logic from HTTP implementation details.
    Implementations raise only PollError subclasses:
    NetworkError, HttpStatusError or DecodeError.
    """

    async def get_json(self, url: str, /) -> Any:
        """Fetch url and return the decoded JSON value.

        Args:
            url: Endpoint to GET.

        Returns:
            The parsed JSON document (any JSON type).
        """
        ...
