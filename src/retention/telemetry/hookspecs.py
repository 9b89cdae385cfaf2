"""pluggy hook specifications for telemetry exporters.

Exporters implement these hooks to register themselves. The telemetry
factory calls them to discover available exporters.

Usage (implementing an exporter plugin):
    from retention.telemetry.hookspecs import hookimpl

    class MyExporterPlugin:
        @hookimpl
        def retention_get_exporters(self):
            return [MyExporter]
"""

from typing import TYPE_CHECKING

import pluggy

if TYPE_CHECKING:
    from retention.telemetry.protocols import ExporterProtocol

PROJECT_NAME = "retention"

hookspec = pluggy.HookspecMarker(PROJECT_NAME)

hookimpl = pluggy.HookimplMarker(PROJECT_NAME)


class RetentionTelemetrySpec:
    """Hook specifications for telemetry exporter plugins."""

    @hookspec
    def retention_get_exporters(self) -> list[type["ExporterProtocol"]]:  # type: ignore[empty-body]
        """Return telemetry exporter classes (not instances)."""
