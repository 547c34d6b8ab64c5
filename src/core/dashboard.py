"""Controller combining the metrics and feedback pollers into one view."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass

from src.core.envelope import decode_sentiment
from src.core.history import RollingHistory
from src.core.poller import MetricsPoller, Poller
from src.ports.http import JsonFetcherPort
from src.ports.settings import SettingsPort
from src.ports.snapshot import HistoryPoint, MetricsSnapshot, SentimentSummary
from src.ports.state import Idle, PollState

__all__ = ["Dashboard", "DashboardView"]

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class DashboardView:
    """Immutable read model for presentation layers.

    The current error and the last known value are exposed independently;
    the consumer decides whether stale data stays visible during an error.

    Attributes:
        metrics_state: Current state of the metrics poller.
        metrics: Last successfully decoded metrics snapshot.
        metrics_error: Failure message while metrics_state is Failed.
        history: Rolling history, oldest first.
        sentiment_state: Current state of the feedback poller (Idle if disabled).
        sentiment: Last successfully decoded sentiment summary.
        sentiment_error: Failure message while sentiment_state is Failed.
    """

    metrics_state: PollState
    metrics: MetricsSnapshot | None
    metrics_error: str | None
    history: tuple[HistoryPoint, ...]
    sentiment_state: PollState
    sentiment: SentimentSummary | None
    sentiment_error: str | None

    @property
    def has_data(self) -> bool:
        """True once any metrics snapshot was received ("no data yet" otherwise)."""
        return self.metrics is not None


class Dashboard:
    """Single owner of poll state and history for the dashboard."""

    def __init__(
        self,
        settings: SettingsPort,
        fetcher: JsonFetcherPort,
        history: RollingHistory | None = None,
    ) -> None:
        """Build pollers for the configured endpoints.

        Args:
            settings: Runtime settings (endpoints).
            fetcher: Port shared by both pollers.
            history: Buffer for metrics points; a fresh one when omitted.
        """
        self.settings = settings
        self.history = history if history is not None else RollingHistory()
        self.metrics = MetricsPoller(fetcher, self.history)
        self.feedback: Poller[SentimentSummary] | None = None
        if settings.feedback_endpoint:
            self.feedback = Poller(fetcher, decode_sentiment, name="feedback")

    async def refresh(self) -> DashboardView:
        """Poll every configured endpoint concurrently.

        Returns:
            The view after all polls completed.
        """
        polls = [self.metrics.poll(self.settings.metrics_endpoint)]
        if self.feedback is not None and self.settings.feedback_endpoint:
            polls.append(self.feedback.poll(self.settings.feedback_endpoint))
        logger.debug(f"Refreshing {len(polls)} endpoint(s)...")
        await asyncio.gather(*polls)
        return self.view()

    def view(self) -> DashboardView:
        """Build an immutable view of both pollers and the history."""
        feedback = self.feedback
        return DashboardView(
            metrics_state=self.metrics.state,
            metrics=self.metrics.last_value,
            metrics_error=self.metrics.error,
            history=self.history.points,
            sentiment_state=feedback.state if feedback else Idle(),
            sentiment=feedback.last_value if feedback else None,
            sentiment_error=feedback.error if feedback else None,
        )

    def subscribe(self, listener: Callable[[DashboardView], None]) -> Callable[[], None]:
        """Call listener with a fresh view on every poller state change.

        Returns:
            Callable that removes the listener from every poller.
        """

        def on_state(_: PollState) -> None:
            listener(self.view())

        unsubscribers = [self.metrics.subscribe(on_state)]
        if self.feedback is not None:
            unsubscribers.append(self.feedback.subscribe(on_state))

        def unsubscribe() -> None:
            for fn in unsubscribers:
                fn()

        return unsubscribe
