"""Factory functions for creating a TelemetryManager from settings.

Handles:
1. Discovering exporter classes via telemetry pluggy hooks
2. Instantiating and configuring the exporters named in settings
3. Creating the TelemetryManager

Usage:
    from retention.telemetry.factory import create_telemetry_manager

    manager = create_telemetry_manager(settings.telemetry)
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING, Any

import pluggy
import structlog

from retention.telemetry.errors import TelemetryExporterError
from retention.telemetry.exporters import BuiltinExportersPlugin
from retention.telemetry.hookspecs import PROJECT_NAME, RetentionTelemetrySpec
from retention.telemetry.manager import TelemetryManager
from retention.telemetry.protocols import ExporterProtocol

if TYPE_CHECKING:
    from retention.core.config import TelemetrySettings

logger = structlog.get_logger(__name__)


def _resolve_exporter_name(exporter_class: type[ExporterProtocol]) -> str:
    """Resolve exporter name from the class-level _name or an instance.

    Raises:
        TelemetryExporterError: If the name is missing or empty
    """
    class_name = exporter_class.__name__

    class_dict = exporter_class.__dict__
    if "_name" in class_dict:
        hint = class_dict["_name"]
        if type(hint) is str and hint != "":
            return hint
        raise TelemetryExporterError(
            class_name,
            f"Exporter class attribute _name must be a non-empty string, got {hint!r}",
        )

    try:
        instance = exporter_class()
    except Exception as e:
        raise TelemetryExporterError(
            class_name,
            f"Failed to instantiate exporter class during discovery: {e}",
        ) from e

    resolved = instance.name
    if type(resolved) is not str or resolved == "":
        raise TelemetryExporterError(
            class_name,
            f"Exporter name must be a non-empty string, got {resolved!r}",
        )
    return resolved


def discover_exporter_registry(
    exporter_plugins: Iterable[Any] = (),
) -> dict[str, type[ExporterProtocol]]:
    """Discover telemetry exporters via pluggy hooks.

    Registers the built-in exporters plus any extra plugin objects, then
    calls every retention_get_exporters hook.

    Returns:
        Mapping of exporter name to exporter class

    Raises:
        TelemetryExporterError: On invalid plugins or duplicate names
    """
    plugin_manager = pluggy.PluginManager(PROJECT_NAME)
    plugin_manager.add_hookspecs(RetentionTelemetrySpec)

    for plugin in (BuiltinExportersPlugin(), *exporter_plugins):
        try:
            plugin_manager.register(plugin)
            plugin_manager.check_pending()
        except (pluggy.PluginValidationError, ValueError) as e:
            raise TelemetryExporterError(
                "telemetry_plugins",
                f"Invalid telemetry exporter plugin {type(plugin).__name__}: {e}",
            ) from e

    registry: dict[str, type[ExporterProtocol]] = {}
    for exporters in plugin_manager.hook.retention_get_exporters():
        if exporters is None or isinstance(exporters, str | bytes):
            raise TelemetryExporterError(
                "telemetry_plugins",
                f"retention_get_exporters returned {type(exporters).__name__}; expected a list of exporter classes",
            )
        for exporter_class in exporters:
            name = _resolve_exporter_name(exporter_class)
            if name in registry:
                raise TelemetryExporterError(
                    name,
                    f"Duplicate telemetry exporter name '{name}' discovered: "
                    f"{registry[name].__name__} and {exporter_class.__name__}",
                )
            registry[name] = exporter_class

    return registry


def create_telemetry_manager(
    settings: TelemetrySettings,
    *,
    exporter_plugins: Iterable[Any] = (),
) -> TelemetryManager | None:
    """Create a TelemetryManager from telemetry settings.

    Returns:
        TelemetryManager if telemetry is enabled, None otherwise

    Raises:
        TelemetryExporterError: If discovery fails, an exporter name is
            unknown, or an exporter rejects its options
    """
    if not settings.enabled:
        logger.debug("telemetry_disabled", reason="settings.enabled=False")
        return None

    registry = discover_exporter_registry(exporter_plugins)

    exporters: list[ExporterProtocol] = []
    for exporter_settings in settings.exporters:
        try:
            exporter_class = registry[exporter_settings.name]
        except KeyError:
            raise TelemetryExporterError(
                exporter_settings.name,
                f"Unknown exporter. Available exporters: {sorted(registry)}",
            ) from None

        exporter = exporter_class()
        exporter.configure(dict(exporter_settings.options))
        exporters.append(exporter)
        logger.debug(
            "exporter_configured",
            exporter=exporter_settings.name,
            options_keys=sorted(exporter_settings.options),
        )

    if not exporters:
        logger.warning("telemetry_enabled_no_exporters")

    return TelemetryManager(exporters, max_consecutive_failures=settings.max_consecutive_failures)
