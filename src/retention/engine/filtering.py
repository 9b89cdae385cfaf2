# src/retention/engine/filtering.py
"""Deployment validity filter.

Partitions deployments into valid ones (forwarded to the policy
evaluator) and excluded ones (recorded as diagnostic decision entries).

Unlike structural validation this stage ACCUMULATES: every applicable
reason for a deployment is reported, in this fixed order:

    1. release exists
    2. if the release exists, its project exists
    3. environment exists

Dangling references are an expected input-quality condition, so this
stage never raises on user data.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass

from retention.contracts.entities import Deployment
from retention.contracts.results import DecisionLogEntry
from retention.engine.decisions import UNKNOWN_PROJECT_ID, build_diagnostic_entry
from retention.engine.index import ReferenceIndex

# Returns the reasons a deployment is invalid; empty means valid
ValidityCheck = Callable[[Deployment, ReferenceIndex], tuple[str, ...]]


@dataclass(frozen=True, slots=True)
class FilteredDeployments:
    """Output of the deployment filter.

    valid_deployments and diagnostic_entries preserve input order.
    """

    valid_deployments: tuple[Deployment, ...]
    diagnostic_entries: tuple[DecisionLogEntry, ...]

    @property
    def excluded_count(self) -> int:
        # One diagnostic per excluded deployment, never two
        return len(self.diagnostic_entries)


def invalid_reference_reasons(deployment: Deployment, index: ReferenceIndex) -> tuple[str, ...]:
    """Return every dangling-reference reason for a deployment."""
    reasons: list[str] = []

    release = index.releases_by_id.get(deployment.release_id)
    if release is None:
        reasons.append(f"release '{deployment.release_id}' not found")
    elif release.project_id not in index.projects_by_id:
        reasons.append(f"project '{release.project_id}' not found")

    if deployment.environment_id not in index.environments_by_id:
        reasons.append(f"environment '{deployment.environment_id}' not found")

    return tuple(reasons)


def filter_deployments(
    deployments: Sequence[Deployment],
    index: ReferenceIndex,
    *,
    releases_to_keep: int,
    correlation_id: str | None = None,
    validity_check: ValidityCheck = invalid_reference_reasons,
) -> FilteredDeployments:
    """Split deployments into valid and diagnosed.

    Args:
        deployments: Validated deployments, processed in input order
        index: Reference index for the same evaluation
        releases_to_keep: Recorded on diagnostic entries
        correlation_id: Caller-supplied identifier for diagnostic entries
        validity_check: Reason function; replaceable for isolated tests

    Returns:
        FilteredDeployments with valid deployments forwarded unchanged
    """
    valid: list[Deployment] = []
    diagnostics: list[DecisionLogEntry] = []

    for deployment in deployments:
        reasons = validity_check(deployment, index)
        if not reasons:
            valid.append(deployment)
            continue

        release = index.releases_by_id.get(deployment.release_id)
        project_id = release.project_id if release is not None else UNKNOWN_PROJECT_ID
        diagnostics.append(
            build_diagnostic_entry(
                deployment,
                project_id,
                reasons,
                releases_to_keep,
                correlation_id,
            )
        )

    return FilteredDeployments(
        valid_deployments=tuple(valid),
        diagnostic_entries=tuple(diagnostics),
    )
