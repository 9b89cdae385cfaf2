"""Protocol definitions for telemetry collaborators."""

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from retention.contracts.events import TelemetryEvent


@runtime_checkable
class ExporterProtocol(Protocol):
    """Protocol for telemetry exporters.

    Exporters ship telemetry events somewhere (console, log pipeline,
    observability backend). They are discovered via pluggy hooks and
    configured from the telemetry settings.

    Lifecycle:
        1. Discovery: retention_get_exporters hook returns exporter classes
        2. Instantiation: create_telemetry_manager creates instances
        3. Configuration: configure() called with exporter options
        4. Operation: export() called for each event (must not raise)
        5. Shutdown: flush() then close()

    Error handling:
        - configure() MUST raise TelemetryExporterError on invalid config
        - export() MUST NOT raise - log errors and continue
        - close() MUST be idempotent
    """

    @property
    def name(self) -> str:
        """Exporter name used in telemetry settings."""
        ...

    def configure(self, config: dict[str, Any]) -> None:
        """Configure the exporter.

        Raises:
            TelemetryExporterError: If configuration is invalid
        """
        ...

    def export(self, event: "TelemetryEvent") -> None:
        """Export a single event. MUST NOT raise."""
        ...

    def flush(self) -> None:
        """Flush buffered events. No-op if nothing is buffered."""
        ...

    def close(self) -> None:
        """Release resources. Must be idempotent."""
        ...


@runtime_checkable
class RetentionTelemetry(Protocol):
    """Optional collaborator that observes evaluations.

    Passed explicitly to InstrumentedRetentionEvaluator; there is no
    global telemetry state. handle_event() must never raise into the
    caller and must never influence the evaluation result.
    """

    def handle_event(self, event: "TelemetryEvent") -> None:
        """Receive one event."""
        ...
