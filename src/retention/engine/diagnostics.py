"""Summary counters for an evaluation."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from retention.contracts.results import KeptRelease, RetentionDiagnostics
from retention.engine.policy import GroupKey, ReleaseCandidate


def calculate_diagnostics(
    candidates: Sequence[ReleaseCandidate],
    invalid_excluded_count: int,
    kept_releases: Sequence[KeptRelease],
    groups: Iterable[GroupKey] | None = None,
) -> RetentionDiagnostics:
    """Compute RetentionDiagnostics.

    groups_evaluated counts distinct (project, environment) pairs that
    had at least one eligible release. Pass the evaluator's groups to
    count them regardless of n; when omitted, the pairs present among
    candidates are counted instead (identical whenever n > 0).
    """
    if groups is None:
        groups = ((c.project_id, c.environment_id) for c in candidates)

    return RetentionDiagnostics(
        groups_evaluated=len(set(groups)),
        invalid_deployments_excluded=invalid_excluded_count,
        total_kept_releases=len(kept_releases),
    )
