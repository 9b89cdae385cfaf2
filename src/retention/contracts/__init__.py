"""Shared contracts for cross-boundary data types.

All dataclasses, enums and exceptions that cross subsystem boundaries
are defined here. This package is a LEAF MODULE with no outbound
dependencies to core/engine/telemetry.

Settings classes are NOT re-exported here - import them from
retention.core.config.

Import patterns:
    from retention.contracts import Project, Deployment, RetentionResult
    from retention.core.config import RetentionSettings
"""

from retention.contracts.dataset import (
    Dataset,
    DatasetValidationReport,
    ValidationMessage,
    ValidationSummary,
)
from retention.contracts.entities import Deployment, Environment, Project, Release
from retention.contracts.enums import (
    DatasetMessageCode,
    DecisionType,
    ErrorCode,
    ReasonCode,
)
from retention.contracts.errors import (
    DatasetFormatError,
    RetentionError,
    RetentionValidationError,
)
from retention.contracts.results import (
    DecisionLogEntry,
    KeptRelease,
    RetentionDiagnostics,
    RetentionResult,
)

__all__ = [
    "Dataset",
    "DatasetFormatError",
    "DatasetMessageCode",
    "DatasetValidationReport",
    "DecisionLogEntry",
    "DecisionType",
    "Deployment",
    "Environment",
    "ErrorCode",
    "KeptRelease",
    "Project",
    "ReasonCode",
    "Release",
    "RetentionDiagnostics",
    "RetentionError",
    "RetentionResult",
    "RetentionValidationError",
    "ValidationMessage",
    "ValidationSummary",
]
