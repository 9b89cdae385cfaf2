"""Built-in telemetry exporters.

Exporters are discovered via the retention_get_exporters pluggy hook.
BuiltinExportersPlugin registers every exporter shipped in this package.
"""

from retention.telemetry.exporters.console import ConsoleExporter
from retention.telemetry.hookspecs import hookimpl


class BuiltinExportersPlugin:
    """Plugin that registers built-in telemetry exporters."""

    @hookimpl
    def retention_get_exporters(self) -> list[type]:
        return [ConsoleExporter]


__all__ = [
    "BuiltinExportersPlugin",
    "ConsoleExporter",
]
