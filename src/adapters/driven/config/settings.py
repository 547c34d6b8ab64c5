"""Configuration loading from environment variables."""

import logging
import os

from dotenv import load_dotenv
from pydantic import BaseModel, Field, HttpUrl, TypeAdapter, field_validator

__all__ = ["Settings", "load_settings", "parse_flag"]

load_dotenv()

logger = logging.getLogger(__name__)
_http_url_adapter = TypeAdapter(HttpUrl)

DEFAULT_POLL_INTERVAL_SEC = 10.0
DEFAULT_REQUEST_TIMEOUT_SEC = 10.0


def _validate_endpoint(v: str, label: str) -> str:
    """Check that v is an absolute http(s) URL.

    Raises:
        ValueError: If URL is invalid or uses another scheme.
    """
    try:
        url = _http_url_adapter.validate_python(v)
        if url.scheme not in ("http", "https"):
            raise ValueError("Only http:// and https:// endpoints allowed")
    except Exception as e:
        raise ValueError(f"Invalid {label}: {e}") from e
    return v


def parse_flag(raw: str | None) -> bool:
    """Interpret a boolean env flag; only the literal "true" enables it."""
    return (raw or "").strip().lower() == "true"


class Settings(BaseModel):
    """Runtime configuration for the poller service.

    Attributes:
        metrics_endpoint: Endpoint returning server-health metrics.
        feedback_endpoint: Optional endpoint returning feedback sentiment.
        repeated_polling: Poll on a timer when True, once otherwise.
        poll_interval_sec: Interval between polls in seconds (must be positive).
        request_timeout_sec: Timeout of one GET in seconds (must be positive).
        log_level: Level applied to application loggers.
    """

    metrics_endpoint: str = Field(..., description="HTTP endpoint returning metrics.")
    feedback_endpoint: str | None = Field(
        default=None,
        description=(
            "Optional HTTP endpoint returning feedback sentiment. "
            "If not set, sentiment is not polled."
        ),
    )
    repeated_polling: bool = Field(default=False, description="Enable timer-driven re-polling.")
    poll_interval_sec: float = Field(
        default=DEFAULT_POLL_INTERVAL_SEC, gt=0, description="Interval between polls in seconds."
    )
    request_timeout_sec: float = Field(
        default=DEFAULT_REQUEST_TIMEOUT_SEC, gt=0, description="Timeout of one request in seconds."
    )
    log_level: str = Field(default="INFO", description="Application log level.")

    @field_validator("metrics_endpoint")
    @classmethod
    def validate_metrics_endpoint(cls, v: str) -> str:
        """Validate that endpoint is a valid HTTP(S) URL.

        Raises:
            ValueError: If URL is invalid or not http(s).
        """
        return _validate_endpoint(v, "metrics endpoint")

    @field_validator("feedback_endpoint")
    @classmethod
    def validate_feedback_endpoint(cls, v: str | None) -> str | None:
        """Validate the feedback endpoint, if provided."""
        if v is None:
            return v
        return _validate_endpoint(v, "feedback endpoint")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"Unknown log level: {v}")
        return level


def _read_seconds(name: str, default: float) -> float:
    """Read a positive number of seconds from env var name.

    Raises:
        RuntimeError: If the value is not a positive number.
    """
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = float(raw)
        if value <= 0:
            raise ValueError("Must be positive")
    except ValueError as e:
        raise RuntimeError(f"{name} must be a positive number (got: {raw})") from e
    return value


def load_settings() -> Settings:
    """Load and validate settings from environment.

    Required environment variables:
    - METRICS_ENDPOINT: Valid HTTP(S) URL returning metrics.

    Optional:
    - FEEDBACK_ENDPOINT: URL returning feedback sentiment counts.
    - REPEATED_API_CALL: "true" enables timer-driven polling.
    - POLL_INTERVAL_SECONDS: Positive number, default 10.
    - REQUEST_TIMEOUT_SECONDS: Positive number, default 10.
    - LOG_LEVEL: Logging level name, default INFO.

    Returns:
        Validated Settings object.

    Raises:
        RuntimeError: If required env vars missing or invalid.
        ValueError: If configuration is invalid.
    """
    try:
        metrics_endpoint = os.environ["METRICS_ENDPOINT"]
    except KeyError as e:
        raise RuntimeError(f"Missing required environment variable: {e.args[0]}") from e

    settings = Settings(
        metrics_endpoint=metrics_endpoint,
        feedback_endpoint=os.getenv("FEEDBACK_ENDPOINT") or None,
        repeated_polling=parse_flag(os.getenv("REPEATED_API_CALL")),
        poll_interval_sec=_read_seconds("POLL_INTERVAL_SECONDS", DEFAULT_POLL_INTERVAL_SEC),
        request_timeout_sec=_read_seconds("REQUEST_TIMEOUT_SECONDS", DEFAULT_REQUEST_TIMEOUT_SEC),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
    )

    logger.info(
        f"Poller configured: metrics={settings.metrics_endpoint}, "
        f"feedback={settings.feedback_endpoint or '<disabled>'}, "
        f"repeated={settings.repeated_polling}, "
        f"interval={settings.poll_interval_sec}s, "
        f"timeout={settings.request_timeout_sec}s"
    )

    return settings
