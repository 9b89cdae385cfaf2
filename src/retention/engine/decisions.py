"""Decision log entry construction.

Reason texts are part of the output contract: downstream tooling greps
them, so the exact wording and punctuation must not drift.
"""

from __future__ import annotations

from collections.abc import Sequence

from retention.contracts.entities import Deployment
from retention.contracts.enums import ReasonCode
from retention.contracts.results import DecisionLogEntry
from retention.engine.policy import ReleaseCandidate

# Project id recorded for a diagnostic whose release cannot be resolved
UNKNOWN_PROJECT_ID = "unknown"


def kept_reason_text(candidate: ReleaseCandidate, releases_to_keep: int) -> str:
    return (
        f"Release '{candidate.release_id}' kept: rank {candidate.rank} of {releases_to_keep} "
        f"for project '{candidate.project_id}' / environment '{candidate.environment_id}'"
    )


def build_kept_entry(
    candidate: ReleaseCandidate,
    releases_to_keep: int,
    correlation_id: str | None,
) -> DecisionLogEntry:
    """Create the "kept" decision entry for a retained candidate."""
    return DecisionLogEntry(
        project_id=candidate.project_id,
        environment_id=candidate.environment_id,
        release_id=candidate.release_id,
        n=releases_to_keep,
        rank=candidate.rank,
        latest_deployed_at=candidate.latest_deployed_at,
        reason_text=kept_reason_text(candidate, releases_to_keep),
        reason_code=ReasonCode.KEPT_TOP_N,
        correlation_id=correlation_id,
    )


def build_diagnostic_entry(
    deployment: Deployment,
    project_id: str,
    reasons: Sequence[str],
    releases_to_keep: int,
    correlation_id: str | None,
) -> DecisionLogEntry:
    """Create the "diagnostic" decision entry for an excluded deployment.

    Args:
        deployment: The excluded deployment
        project_id: The release's project id, or UNKNOWN_PROJECT_ID
        reasons: Non-empty reasons, in the order they were checked
        releases_to_keep: The n the evaluation ran with
        correlation_id: Caller-supplied identifier, carried verbatim
    """
    return DecisionLogEntry(
        project_id=project_id,
        environment_id=deployment.environment_id,
        release_id=deployment.release_id,
        n=releases_to_keep,
        rank=0,
        latest_deployed_at=None,
        reason_text=f"Deployment '{deployment.id}' excluded: {'; '.join(reasons)}",
        reason_code=ReasonCode.INVALID_REFERENCE,
        correlation_id=correlation_id,
    )
