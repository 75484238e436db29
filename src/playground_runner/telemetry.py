from __future__ import annotations

import logging
from typing import Any

from applicationinsights import TelemetryClient as AppInsightsClient
from applicationinsights.channel import AsynchronousQueue, AsynchronousSender, TelemetryChannel

logger = logging.getLogger(__name__)


class TelemetryClient:
    """Process-wide telemetry sink.

    With an instrumentation key, events and exceptions are sent to Application
    Insights by `backend`; every event is also written to the
    `playground_runner.telemetry` logger.
    """

    def __init__(self, instrumentation_key: str | None = None, backend: Any | None = None) -> None:
        self.instrumentation_key = instrumentation_key
        self.backend = backend

    @property
    def enabled(self) -> bool:
        return self.backend is not None

    def track_event(
        self,
        name: str,
        properties: dict[str, str] | None = None,
        measurements: dict[str, float] | None = None,
    ) -> None:
        logger.info("event %s properties=%s measurements=%s", name, properties or {}, measurements or {})
        if self.backend is not None:
            self.backend.track_event(name, properties, measurements)

    def track_exception(self, error: BaseException, properties: dict[str, str] | None = None) -> None:
        logger.warning(
            "exception %s: %s properties=%s",
            type(error).__name__,
            error,
            properties or {},
            exc_info=error,
        )
        if self.backend is not None:
            self.backend.track_exception(
                type(error), error, error.__traceback__, properties=properties
            )

    def flush(self) -> None:
        if self.backend is not None:
            self.backend.flush()


def build_app_insights_client(instrumentation_key: str) -> AppInsightsClient:
    # Items are queued and sent from a background thread.
    channel = TelemetryChannel(None, AsynchronousQueue(AsynchronousSender()))
    return AppInsightsClient(instrumentation_key, channel)


def setup_telemetry(instrumentation_key: str | None) -> TelemetryClient:
    if not instrumentation_key:
        logger.info("No instrumentation key configured; telemetry goes to the log only")
        return TelemetryClient()

    return TelemetryClient(instrumentation_key, build_app_insights_client(instrumentation_key))
