"""Console exporter for telemetry events.

Writes events to stdout or stderr as JSON lines or a short
human-readable form. Used for local debugging and in CI logs.
"""

from __future__ import annotations

import json
import sys
from dataclasses import asdict, fields
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, Any, Literal, TextIO, TypeGuard

import structlog

from retention.telemetry.errors import TelemetryExporterError

if TYPE_CHECKING:
    from retention.contracts.events import TelemetryEvent

logger = structlog.get_logger(__name__)


def _is_valid_format(v: str) -> TypeGuard[Literal["json", "pretty"]]:
    return v in {"json", "pretty"}


def _is_valid_output(v: str) -> TypeGuard[Literal["stdout", "stderr"]]:
    return v in {"stdout", "stderr"}


class ConsoleExporter:
    """Export telemetry events to stdout/stderr.

    Configuration options:
        format: "json" (default) or "pretty"
        output: "stdout" (default) or "stderr"

    Example configuration:
        telemetry:
          enabled: true
          exporters:
            - name: console
              options:
                format: pretty
                output: stderr
    """

    _name = "console"

    _VALID_FORMATS: frozenset[str] = frozenset({"json", "pretty"})
    _VALID_OUTPUTS: frozenset[str] = frozenset({"stdout", "stderr"})

    def __init__(self) -> None:
        self._format: Literal["json", "pretty"] = "json"
        self._output: Literal["stdout", "stderr"] = "stdout"
        self._stream: TextIO | None = None

    @property
    def name(self) -> str:
        return self._name

    def configure(self, config: dict[str, Any]) -> None:
        """Validate and apply exporter options.

        Raises:
            TelemetryExporterError: If format or output is invalid
        """
        format_value = config.get("format", "json")
        if not isinstance(format_value, str):
            raise TelemetryExporterError(
                self._name,
                f"'format' must be a string, got {type(format_value).__name__}",
            )
        if _is_valid_format(format_value):
            self._format = format_value
        else:
            raise TelemetryExporterError(
                self._name,
                f"Invalid format '{format_value}'. Must be one of: {', '.join(sorted(self._VALID_FORMATS))}",
            )

        output_value = config.get("output", "stdout")
        if not isinstance(output_value, str):
            raise TelemetryExporterError(
                self._name,
                f"'output' must be a string, got {type(output_value).__name__}",
            )
        if _is_valid_output(output_value):
            self._output = output_value
        else:
            raise TelemetryExporterError(
                self._name,
                f"Invalid output '{output_value}'. Must be one of: {', '.join(sorted(self._VALID_OUTPUTS))}",
            )

        logger.debug("console_exporter_configured", format=self._format, output=self._output)

    def _target(self) -> TextIO:
        # Resolved lazily so pytest's capsys and CliRunner see the output
        if self._stream is not None:
            return self._stream
        return sys.stdout if self._output == "stdout" else sys.stderr

    def export(self, event: TelemetryEvent) -> None:
        """Write one event. Never raises."""
        try:
            if self._format == "json":
                line = json.dumps(self._serialize_event(event))
            else:
                line = self._format_pretty(event)
            print(line, file=self._target())
        except Exception as e:
            logger.warning(
                "telemetry_export_failed",
                exporter=self._name,
                event_type=type(event).__name__,
                error=str(e),
            )

    def _serialize_event(self, event: TelemetryEvent) -> dict[str, Any]:
        data = asdict(event)
        data["event_type"] = type(event).__name__
        for key, value in data.items():
            if isinstance(value, datetime):
                data[key] = value.isoformat()
            elif isinstance(value, Enum):
                data[key] = value.value
        return data

    def _format_pretty(self, event: TelemetryEvent) -> str:
        """Format: [TIMESTAMP] EventType: correlation_id (key=value, ...)"""
        base_fields = {"timestamp", "correlation_id"}
        details = ", ".join(
            f"{f.name}={getattr(event, f.name)}" for f in fields(event) if f.name not in base_fields
        )
        correlation = event.correlation_id or "-"
        header = f"[{event.timestamp.isoformat()}] {type(event).__name__}: {correlation}"
        if details:
            return f"{header} ({details})"
        return header

    def flush(self) -> None:
        self._target().flush()

    def close(self) -> None:
        pass
