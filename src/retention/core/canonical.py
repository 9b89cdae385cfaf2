# src/retention/core/canonical.py
"""
Canonical JSON serialization for deterministic output and fingerprints.

Two-phase approach:
1. Normalize: Convert datetimes, enums and result dataclasses to
   JSON-safe primitives (our code)
2. Serialize: Produce deterministic JSON per RFC 8785/JCS (rfc8785 package)

Identical RetentionResults always serialize to identical bytes, which is
what makes result fingerprints comparable across runs and machines.

IMPORTANT: NaN and Infinity are strictly REJECTED, not silently converted.
"""

from __future__ import annotations

import hashlib
import math
from datetime import UTC, datetime
from enum import Enum
from typing import Any

import rfc8785

from retention.contracts.dataset import DatasetValidationReport, ValidationMessage
from retention.contracts.results import (
    DecisionLogEntry,
    KeptRelease,
    RetentionDiagnostics,
    RetentionResult,
)

# Version string reported alongside every fingerprint
CANONICAL_VERSION = "sha256-rfc8785-v1"


def format_timestamp(value: datetime) -> str:
    """ISO-8601 in UTC. Naive datetimes are assumed to be UTC."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone(UTC).isoformat()


def _normalize_value(obj: Any) -> Any:
    if isinstance(obj, float):
        if math.isnan(obj) or math.isinf(obj):
            raise ValueError(f"Cannot canonicalize non-finite float: {obj}. Use None for missing values, not NaN.")
        return obj
    if isinstance(obj, Enum):
        return obj.value
    if obj is None or isinstance(obj, str | int | bool):
        return obj
    if isinstance(obj, datetime):
        return format_timestamp(obj)
    return obj


def _normalize_for_canonical(data: Any) -> Any:
    if isinstance(data, dict):
        return {k: _normalize_for_canonical(v) for k, v in data.items()}
    if isinstance(data, list | tuple):
        return [_normalize_for_canonical(v) for v in data]
    return _normalize_value(data)


def canonical_json(obj: Any) -> str:
    """Produce canonical JSON (no whitespace, sorted keys).

    Raises:
        ValueError: If data contains NaN or Infinity
        TypeError: If data contains types that cannot be serialized
    """
    normalized = _normalize_for_canonical(obj)
    result: bytes = rfc8785.dumps(normalized)
    return result.decode("utf-8")


def stable_hash(obj: Any) -> str:
    """SHA-256 hex digest of canonical JSON."""
    return hashlib.sha256(canonical_json(obj).encode("utf-8")).hexdigest()


# =============================================================================
# Result documents (camelCase, matching the dataset document convention)
# =============================================================================


def kept_release_to_dict(kept: KeptRelease) -> dict[str, Any]:
    return {
        "releaseId": kept.release_id,
        "projectId": kept.project_id,
        "environmentId": kept.environment_id,
        "version": kept.version,
        "created": format_timestamp(kept.created),
        "latestDeployedAt": format_timestamp(kept.latest_deployed_at),
        "rank": kept.rank,
        "reasonCode": kept.reason_code.value,
    }


def decision_to_dict(entry: DecisionLogEntry) -> dict[str, Any]:
    return {
        "projectId": entry.project_id,
        "environmentId": entry.environment_id,
        "releaseId": entry.release_id,
        "n": entry.n,
        "rank": entry.rank,
        "latestDeployedAt": format_timestamp(entry.latest_deployed_at) if entry.latest_deployed_at else None,
        "reasonText": entry.reason_text,
        "reasonCode": entry.reason_code.value,
        "decisionType": entry.decision_type.value,
        "correlationId": entry.correlation_id,
    }


def diagnostics_to_dict(diagnostics: RetentionDiagnostics) -> dict[str, Any]:
    return {
        "groupsEvaluated": diagnostics.groups_evaluated,
        "invalidDeploymentsExcluded": diagnostics.invalid_deployments_excluded,
        "totalKeptReleases": diagnostics.total_kept_releases,
    }


def result_to_dict(result: RetentionResult) -> dict[str, Any]:
    """JSON-ready document for a RetentionResult.

    List order is preserved exactly; only object keys are reordered by
    canonical_json().
    """
    return {
        "keptReleases": [kept_release_to_dict(k) for k in result.kept_releases],
        "decisions": [decision_to_dict(d) for d in result.decisions],
        "diagnostics": diagnostics_to_dict(result.diagnostics),
    }


def result_fingerprint(result: RetentionResult) -> str:
    """Stable SHA-256 fingerprint of a result document."""
    return stable_hash(result_to_dict(result))


def _message_to_dict(message: ValidationMessage) -> dict[str, Any]:
    return {"code": message.code.value, "message": message.message, "path": message.path}


def report_to_dict(report: DatasetValidationReport) -> dict[str, Any]:
    """JSON-ready document for a DatasetValidationReport."""
    summary = report.summary
    return {
        "isValid": report.is_valid,
        "errors": [_message_to_dict(m) for m in report.errors],
        "warnings": [_message_to_dict(m) for m in report.warnings],
        "summary": {
            "projectCount": summary.project_count,
            "environmentCount": summary.environment_count,
            "releaseCount": summary.release_count,
            "deploymentCount": summary.deployment_count,
            "errorCount": summary.error_count,
            "warningCount": summary.warning_count,
        },
    }
