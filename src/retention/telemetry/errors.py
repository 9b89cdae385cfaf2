"""Telemetry-specific exceptions.

These exceptions are for telemetry subsystem errors only.
They are never raised by the evaluation engine.
"""

from retention.contracts.errors import RetentionError


class TelemetryExporterError(RetentionError):
    """Raised when an exporter encounters a configuration or discovery error.

    This is raised during exporter setup, NOT during export operations.
    Export operations must not raise - they log errors instead.

    Attributes:
        exporter_name: Name of the exporter that failed
        message: Human-readable error description
    """

    def __init__(self, exporter_name: str, message: str) -> None:
        self.exporter_name = exporter_name
        self.message = message
        super().__init__(f"Exporter '{exporter_name}' failed: {message}")
