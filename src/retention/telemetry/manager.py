"""TelemetryManager fans events out to configured exporters.

Evaluations are short and synchronous, so events are dispatched inline
on the caller's thread; there is no queue and no export thread.

Design principles:
- Individual exporter failures never reach the evaluation caller
- One failing exporter does not stop the others
- After max_consecutive_failures events where EVERY exporter failed,
  telemetry disables itself and logs once at CRITICAL
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

import structlog

from retention.contracts.events import TelemetryEvent
from retention.telemetry.protocols import ExporterProtocol

logger = structlog.get_logger(__name__)


class NoOpTelemetry:
    """Telemetry collaborator that discards every event."""

    def handle_event(self, event: TelemetryEvent) -> None:
        pass


class TelemetryManager:
    """Coordinates event emission to configured exporters.

    Example:
        >>> manager = TelemetryManager(exporters=[console_exporter])
        >>> evaluator = InstrumentedRetentionEvaluator(telemetry=manager)
        >>> evaluator.evaluate(...)
        >>> manager.close()
    """

    _LOG_INTERVAL = 100

    def __init__(
        self,
        exporters: Sequence[ExporterProtocol],
        *,
        max_consecutive_failures: int = 10,
    ) -> None:
        self._exporters = list(exporters)
        self._max_consecutive_failures = max_consecutive_failures
        self._consecutive_total_failures = 0

        self._events_emitted = 0
        self._events_dropped = 0
        self._exporter_failures: dict[str, int] = {}
        self._last_logged_drop_count = 0

        self._disabled = False
        self._closed = False

    @property
    def exporters(self) -> tuple[ExporterProtocol, ...]:
        return tuple(self._exporters)

    def handle_event(self, event: TelemetryEvent) -> None:
        """Dispatch an event to every exporter. Never raises."""
        if self._disabled or self._closed or not self._exporters:
            return

        failures = 0
        for exporter in self._exporters:
            try:
                exporter.export(event)
            except Exception as e:
                failures += 1
                self._exporter_failures[exporter.name] = self._exporter_failures.get(exporter.name, 0) + 1
                logger.warning(
                    "telemetry_exporter_failed",
                    exporter=exporter.name,
                    event_type=type(event).__name__,
                    error=str(e),
                )

        if failures < len(self._exporters):
            # At least one exporter delivered the event
            self._events_emitted += 1
            self._consecutive_total_failures = 0
            return

        self._consecutive_total_failures += 1
        self._events_dropped += 1

        if self._events_dropped - self._last_logged_drop_count >= self._LOG_INTERVAL:
            logger.error(
                "telemetry_all_exporters_failing",
                dropped_since_last_log=self._events_dropped - self._last_logged_drop_count,
                dropped_total=self._events_dropped,
            )
            self._last_logged_drop_count = self._events_dropped

        if self._consecutive_total_failures >= self._max_consecutive_failures:
            logger.critical(
                "telemetry_disabled",
                consecutive_failures=self._consecutive_total_failures,
                events_dropped=self._events_dropped,
            )
            self._disabled = True

    @property
    def health_metrics(self) -> dict[str, Any]:
        """Operational counters for the manager itself."""
        return {
            "events_emitted": self._events_emitted,
            "events_dropped": self._events_dropped,
            "exporter_failures": dict(self._exporter_failures),
            "consecutive_total_failures": self._consecutive_total_failures,
            "disabled": self._disabled,
        }

    def flush(self) -> None:
        for exporter in self._exporters:
            try:
                exporter.flush()
            except Exception as e:
                logger.warning("telemetry_flush_failed", exporter=exporter.name, error=str(e))

    def close(self) -> None:
        """Flush and close every exporter. Idempotent."""
        if self._closed:
            return
        self.flush()
        self._closed = True
        logger.debug("telemetry_manager_closed", **self.health_metrics)
        for exporter in self._exporters:
            try:
                exporter.close()
            except Exception as e:
                logger.warning("telemetry_close_failed", exporter=exporter.name, error=str(e))
