"""Base type for telemetry events.

Concrete events live in retention.telemetry.events. The base is defined
here so exporters and protocols can type against it without importing
the telemetry package.
"""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True, slots=True)
class TelemetryEvent:
    """Base class for all telemetry events.

    All events include:
    - timestamp: When the event occurred (UTC)
    - correlation_id: Caller-supplied identifier of the evaluation, if any

    Events are immutable (frozen) and are handed to every exporter
    as-is.
    """

    timestamp: datetime
    correlation_id: str | None
