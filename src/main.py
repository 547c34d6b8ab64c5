"""Application entrypoint."""

import asyncio
import logging

from src.adapters.driven.config.settings import load_settings
from src.adapters.driven.http.client import HttpClient
from src.adapters.driven.logging.logging_config import configure_logs
from src.adapters.driven.metrics.http_metrics import Metrics
from src.adapters.driving.log_view import LogView
from src.adapters.driving.signals import make_stop_event
from src.core.dashboard import Dashboard
from src.core.scheduler import start_polling
from src.ports.settings import SettingsPort

__all__ = ["main", "run_dashboard"]

logger = logging.getLogger(__name__)


async def main() -> None:
    """Start the health poller service.

    Startup sequence:
    1. Configure logging.
    2. Load and validate configuration.
    3. Build the dashboard and attach the log view.
    4. Poll once, or on a timer when repeated polling is enabled.
    5. Gracefully shutdown on SIGTERM.
    """
    configure_logs()
    logger.info("Starting health poller service...")

    try:
        config = load_settings()
    except (RuntimeError, ValueError) as exc:
        logger.error(
            "Configuration error: %s\n"
            "Hint: check METRICS_ENDPOINT, FEEDBACK_ENDPOINT, "
            "POLL_INTERVAL_SECONDS and REQUEST_TIMEOUT_SECONDS.",
            exc,
        )
        return

    configure_logs(config.log_level)

    # Wrap config into port so core depends on interface (hexagonal)
    settings_port = SettingsPort(
        metrics_endpoint=config.metrics_endpoint,
        feedback_endpoint=config.feedback_endpoint,
        repeated_polling=config.repeated_polling,
        poll_interval_sec=config.poll_interval_sec,
        request_timeout_sec=config.request_timeout_sec,
    )

    metrics = Metrics()
    http_client = HttpClient(metrics=metrics, timeout_sec=settings_port.request_timeout_sec)

    async with http_client as http:
        dashboard = Dashboard(settings=settings_port, fetcher=http)
        dashboard.subscribe(LogView())

        try:
            await run_dashboard(dashboard, settings_port, make_stop_event())
        except Exception as e:
            logger.error(f"Unhandled exception in poll loop: {e}", exc_info=True)

        logger.info("Health poller stopped.")


async def run_dashboard(
    dashboard: Dashboard,
    settings: SettingsPort,
    stop: asyncio.Event,
) -> None:
    """Drive the dashboard until polling ends.

    With repeated polling, runs until stop is set; otherwise returns once
    the single poll completed. In-flight polls are always drained before
    returning.

    Args:
        dashboard: Controller owning pollers and history.
        settings: Runtime settings (interval, repeated flag).
        stop: Event set on termination signals.
    """
    handle = start_polling(
        dashboard.refresh,
        interval_sec=settings.poll_interval_sec,
        enabled=settings.repeated_polling,
    )
    async with handle:
        if handle.is_running:
            await stop.wait()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logging.getLogger(__name__).info("Shutdown requested by user (Ctrl+C).")
