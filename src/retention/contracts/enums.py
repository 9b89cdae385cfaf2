"""Stable codes used across subsystem boundaries.

Every code here is part of the public contract: callers match on them
to translate failures and decisions into protocol-specific responses.
Changing a value is a breaking change.
"""

from enum import StrEnum


class ReasonCode(StrEnum):
    """Why a decision log entry exists."""

    KEPT_TOP_N = "kept.top_n"
    INVALID_REFERENCE = "diagnostic.invalid_reference"


class DecisionType(StrEnum):
    """Coarse decision classification used for log ordering.

    Kept entries always precede diagnostic entries.
    """

    KEPT = "kept"
    DIAGNOSTIC = "diagnostic"


class ErrorCode(StrEnum):
    """Fatal validation codes raised by the evaluation engine."""

    N_NEGATIVE = "validation.n_negative"
    NULL_ELEMENT = "validation.null_element"
    DUPLICATE_PROJECT_ID = "validation.duplicate_id.project"
    DUPLICATE_ENVIRONMENT_ID = "validation.duplicate_id.environment"
    DUPLICATE_RELEASE_ID = "validation.duplicate_id.release"


class DatasetMessageCode(StrEnum):
    """Codes for the accumulating dataset validation report.

    These are reported, not raised. They use a flatter naming scheme
    than ErrorCode because they describe document problems, not engine
    input failures.
    """

    NULL_ELEMENT = "validation.null_element"
    MISSING_REQUIRED_FIELD = "validation.missing_required_field"
    DUPLICATE_PROJECT_ID = "validation.duplicate_project_id"
    DUPLICATE_ENVIRONMENT_ID = "validation.duplicate_environment_id"
    DUPLICATE_RELEASE_ID = "validation.duplicate_release_id"
    DUPLICATE_DEPLOYMENT_ID = "validation.duplicate_deployment_id"
    INVALID_REFERENCE = "validation.invalid_reference"
