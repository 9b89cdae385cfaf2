"""Operational telemetry for retention evaluation.

Telemetry observes evaluations from the outside. It never changes a
result and never turns an evaluation failure into something else.

Usage:
    from retention.telemetry import create_telemetry_manager
    from retention.engine import InstrumentedRetentionEvaluator

    manager = create_telemetry_manager(settings.telemetry)
    evaluator = InstrumentedRetentionEvaluator(telemetry=manager)
"""

from retention.telemetry.errors import TelemetryExporterError
from retention.telemetry.events import (
    EvaluationCompleted,
    EvaluationFailed,
    EvaluationStarted,
)
from retention.telemetry.factory import create_telemetry_manager
from retention.telemetry.hookspecs import hookimpl
from retention.telemetry.manager import NoOpTelemetry, TelemetryManager
from retention.telemetry.protocols import ExporterProtocol, RetentionTelemetry

__all__ = [
    "EvaluationCompleted",
    "EvaluationFailed",
    "EvaluationStarted",
    "ExporterProtocol",
    "NoOpTelemetry",
    "RetentionTelemetry",
    "TelemetryExporterError",
    "TelemetryManager",
    "create_telemetry_manager",
    "hookimpl",
]
