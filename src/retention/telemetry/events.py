"""Telemetry event definitions for retention evaluation.

Events are operational visibility only. The RetentionResult (and its
decision log) is the record of what was decided; telemetry describes
how long it took and how big it was.
"""

from dataclasses import dataclass

from retention.contracts.events import TelemetryEvent


@dataclass(frozen=True, slots=True)
class EvaluationStarted(TelemetryEvent):
    """Emitted before an evaluation runs.

    Attributes:
        releases_to_keep: The requested n
        project_count: Number of supplied projects
        environment_count: Number of supplied environments
        release_count: Number of supplied releases
        deployment_count: Number of supplied deployments
    """

    releases_to_keep: int
    project_count: int
    environment_count: int
    release_count: int
    deployment_count: int


@dataclass(frozen=True, slots=True)
class EvaluationCompleted(TelemetryEvent):
    """Emitted when an evaluation returns a result."""

    kept_releases: int
    invalid_deployments_excluded: int
    groups_evaluated: int
    duration_ms: float


@dataclass(frozen=True, slots=True)
class EvaluationFailed(TelemetryEvent):
    """Emitted when an evaluation raises.

    Attributes:
        error_type: Exception class name
        error_code: Stable validation code, or None for unexpected errors
        message: Exception message
        duration_ms: Time until the failure
    """

    error_type: str
    error_code: str | None
    message: str
    duration_ms: float
