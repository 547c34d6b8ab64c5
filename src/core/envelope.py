"""Decoding of raw endpoint responses into snapshots.

Endpoints answer either with the metrics object itself or with a
Lambda-proxy envelope ``{"body": "<json string>"}``. Both shapes are
accepted; anything else raises DecodeError.
"""

import json
from typing import Any

from src.core.errors import DecodeError
from src.ports.snapshot import MetricsSnapshot, SentimentSummary

__all__ = ["unwrap", "decode", "decode_sentiment"]

# Source field name -> MetricsSnapshot attribute
_METRICS_FIELD_MAP = {
    "Availability": "availability",
    "StatusCode": "status_code",
    "DBQueryExecutionTime": "db_query_execution_time",
    "ThrottleOperationCount": "throttle_operation_count",
    "LambdaAvgExecutionTime": "lambda_avg_execution_time",
}

_SENTIMENT_FIELD_MAP = {
    "Positive": "positive",
    "Negative": "negative",
    "Neutral": "neutral",
}


def unwrap(raw: Any) -> dict[str, Any]:
    """Return the payload object, parsing a string ``body`` if present.

    Args:
        raw: Parsed JSON value received from the endpoint.

    Returns:
        The metrics (or sentiment) object.

    Raises:
        DecodeError: If the body string is not valid JSON or the payload
            is not a JSON object.
    """
    payload = raw
    if isinstance(raw, dict) and isinstance(raw.get("body"), str):
        try:
            payload = json.loads(raw["body"])
        except json.JSONDecodeError as e:
            raise DecodeError(f"Envelope body is not valid JSON: {e}") from e

    if not isinstance(payload, dict):
        raise DecodeError(f"Expected a JSON object, got {type(payload).__name__}")
    return payload


def decode(raw: Any) -> MetricsSnapshot:
    """Decode a metrics response (direct or proxy-wrapped).

    Fields are copied verbatim; absent fields stay None.

    Raises:
        DecodeError: See unwrap().
    """
    payload = unwrap(raw)
    return MetricsSnapshot(
        **{attr: payload.get(key) for key, attr in _METRICS_FIELD_MAP.items()}
    )


def decode_sentiment(raw: Any) -> SentimentSummary:
    """Decode a feedback-summary response; absent or empty counts become 0."""
    payload = unwrap(raw)
    return SentimentSummary(
        **{attr: payload.get(key) or 0 for key, attr in _SENTIMENT_FIELD_MAP.items()}
    )
