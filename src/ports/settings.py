"""Settings port definition (DTO)."""

from dataclasses import dataclass

__all__ = ["SettingsPort"]


@dataclass
class SettingsPort:
    """Runtime settings for the poller.

    Decouples core from concrete configuration sources, enabling
    easy testing and implementation swapping.

    Attributes:
        metrics_endpoint: URL returning server-health metrics.
        feedback_endpoint: Optional URL returning feedback sentiment counts.
        repeated_polling: Re-poll every poll_interval_sec when True, poll once otherwise.
        poll_interval_sec: Seconds between polls.
        request_timeout_sec: Upper bound for a single GET.
    """

    metrics_endpoint: str
    feedback_endpoint: str | None = None
    repeated_polling: bool = False
    poll_interval_sec: float = 10.0
    request_timeout_sec: float = 10.0
