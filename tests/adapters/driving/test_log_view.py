"""Tests for the log-based presentation."""

from datetime import datetime, timezone
from unittest.mock import Mock

from src.adapters.driving.log_view import LogView, format_metrics, format_sentiment
from src.core.dashboard import DashboardView
from src.ports.snapshot import HistoryPoint, MetricsSnapshot, SentimentSummary
from src.ports.state import Failed, Idle, Loading, PollState, Ready

__all__ = []

SNAPSHOT = MetricsSnapshot("UP", 200, 120, 0, 250)


def make_view(
    metrics_state: PollState,
    metrics: MetricsSnapshot | None = None,
    sentiment_state: PollState | None = None,
) -> DashboardView:
    """Build a view around the given states."""
    history = ()
    if metrics is not None:
        history = (HistoryPoint(metrics, datetime(2024, 5, 1, tzinfo=timezone.utc)),)
    sentiment_state = sentiment_state or Idle()
    return DashboardView(
        metrics_state=metrics_state,
        metrics=metrics,
        metrics_error=metrics_state.message if isinstance(metrics_state, Failed) else None,
        history=history,
        sentiment_state=sentiment_state,
        sentiment=sentiment_state.snapshot if isinstance(sentiment_state, Ready) else None,
        sentiment_error=None,
    )


def test_format_metrics_full_snapshot() -> None:
    """Every field should be rendered with units."""
    line = format_metrics(SNAPSHOT)

    assert "availability=UP" in line
    assert "status=200" in line
    assert "db=120 ms" in line
    assert "throttled=0" in line
    assert "lambda=250 ms" in line


def test_format_metrics_handles_missing_fields() -> None:
    """Absent fields should print as n/a instead of failing."""
    line = format_metrics(MetricsSnapshot())

    assert line.count("n/a") == 5


def test_format_sentiment() -> None:
    """Sentiment line should list each count and the total."""
    assert format_sentiment(SentimentSummary(3, 2, 1)) == (
        "positive=3 negative=2 neutral=1 total=6"
    )


def test_log_view_logs_loading_without_data() -> None:
    """First load should be reported as loading."""
    log = Mock()

    LogView(log)(make_view(Loading()))

    log.info.assert_called_once_with("Loading metrics...")


def test_log_view_logs_ready_metrics() -> None:
    """Ready state should log the snapshot and history size."""
    log = Mock()

    LogView(log)(make_view(Ready(SNAPSHOT), SNAPSHOT))

    message = log.info.call_args[0][0]
    assert "availability=UP" in message
    assert "history=1" in message


def test_log_view_error_without_data() -> None:
    """Failure before any data should log an error."""
    log = Mock()

    LogView(log)(make_view(Failed("HTTP error! Status: 500")))

    log.error.assert_called_once_with("Metrics error: HTTP error! Status: 500")


def test_log_view_error_with_stale_data() -> None:
    """Failure after data should warn and show the last known snapshot."""
    log = Mock()

    LogView(log)(make_view(Failed("timed out"), SNAPSHOT))

    message = log.warning.call_args[0][0]
    assert "timed out" in message
    assert "last known" in message
    log.error.assert_not_called()


def test_log_view_renders_only_changed_sections() -> None:
    """Repeated views with the same states should not log twice."""
    log = Mock()
    view = make_view(Ready(SNAPSHOT), SNAPSHOT, Ready(SentimentSummary(1, 0, 0)))
    log_view = LogView(log)

    log_view(view)
    log_view(view)

    assert log.info.call_count == 2


def test_log_view_logs_sentiment_failure() -> None:
    """Sentiment failures should be reported as warnings."""
    log = Mock()

    LogView(log)(make_view(Ready(SNAPSHOT), SNAPSHOT, Failed("HTTP error! Status: 502")))

    log.warning.assert_called_once_with("Sentiment error: HTTP error! Status: 502")


def test_log_view_warns_when_service_down() -> None:
    """A Ready reading that is not UP should be logged as a warning."""
    log = Mock()
    down = MetricsSnapshot("DOWN", 503, 900, 4, 700)

    LogView(log)(make_view(Ready(down), down))

    message = log.warning.call_args[0][0]
    assert "availability=DOWN" in message
    log.info.assert_not_called()
