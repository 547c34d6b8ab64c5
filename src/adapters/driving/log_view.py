"""Log-based presentation of the dashboard view."""

import logging

from src.core.dashboard import DashboardView
from src.ports.snapshot import MetricsSnapshot, SentimentSummary
from src.ports.state import Failed, Loading, Ready

__all__ = ["LogView", "format_metrics", "format_sentiment"]

logger = logging.getLogger(__name__)

_MISSING = "n/a"


def _ms(value: float | None) -> str:
    return _MISSING if value is None else f"{value} ms"


def _plain(value: object) -> str:
    return _MISSING if value is None else str(value)


def format_metrics(snapshot: MetricsSnapshot) -> str:
    """Render a snapshot as one line; absent fields print as n/a."""
    return (
        f"availability={_plain(snapshot.availability)} | "
        f"status={_plain(snapshot.status_code)} | "
        f"db={_ms(snapshot.db_query_execution_time)} | "
        f"throttled={_plain(snapshot.throttle_operation_count)} | "
        f"lambda={_ms(snapshot.lambda_avg_execution_time)}"
    )


def format_sentiment(summary: SentimentSummary) -> str:
    """Render sentiment counts and their total as one line."""
    return (
        f"positive={summary.positive} negative={summary.negative} "
        f"neutral={summary.neutral} total={summary.total}"
    )


class LogView:
    """Subscriber that logs each dashboard transition.

    While metrics are failing, the last known snapshot is still printed
    next to the error so an operator can tell "no data yet" from
    "data went stale". A reading that reports the service as not UP is
    logged as a warning.
    """

    def __init__(self, log: logging.Logger | None = None) -> None:
        self._log = log or logger
        self._seen_metrics_state: object = None
        self._seen_sentiment_state: object = None

    def __call__(self, view: DashboardView) -> None:
        """Render only the sections whose state changed since the last call."""
        if view.metrics_state is not self._seen_metrics_state:
            self._seen_metrics_state = view.metrics_state
            self.render_metrics(view)
        if view.sentiment_state is not self._seen_sentiment_state:
            self._seen_sentiment_state = view.sentiment_state
            self.render_sentiment(view)

    def render_metrics(self, view: DashboardView) -> None:
        """Log the metrics section of the view."""
        state = view.metrics_state
        if isinstance(state, Loading) and not view.has_data:
            self._log.info("Loading metrics...")
        elif isinstance(state, Ready):
            emit = self._log.info if state.snapshot.is_up else self._log.warning
            emit(
                f"Metrics: {format_metrics(state.snapshot)} "
                f"| history={len(view.history)}"
            )
        elif isinstance(state, Failed):
            if view.metrics is None:
                self._log.error(f"Metrics error: {state.message}")
            else:
                self._log.warning(
                    f"Metrics error: {state.message} "
                    f"(last known: {format_metrics(view.metrics)})"
                )

    def render_sentiment(self, view: DashboardView) -> None:
        """Log the sentiment section of the view (nothing while Idle or Loading)."""
        sentiment_state = view.sentiment_state
        if isinstance(sentiment_state, Ready):
            self._log.info(f"Sentiment: {format_sentiment(sentiment_state.snapshot)}")
        elif isinstance(sentiment_state, Failed):
            self._log.warning(f"Sentiment error: {sentiment_state.message}")
