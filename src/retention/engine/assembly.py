# src/retention/engine/assembly.py
"""Result assembly: kept releases and the unified decision log.

Ordering rules (all comparisons ordinal):
- kept releases: (project_id, environment_id, rank)
- decision log: every kept entry first, in kept-release order, then
  every diagnostic entry ordered by (project_id, environment_id,
  release_id, reason_text)

Diagnostics are ordered by content rather than by deployment input
order so that shuffling the input collections never changes the log.
reason_text embeds the deployment id, so two diagnostics only tie when
they are identical.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from retention.contracts.results import DecisionLogEntry, KeptRelease
from retention.engine.decisions import build_kept_entry
from retention.engine.policy import ReleaseCandidate


@dataclass(frozen=True, slots=True)
class AssembledResults:
    kept_releases: tuple[KeptRelease, ...]
    decisions: tuple[DecisionLogEntry, ...]


def to_kept_release(candidate: ReleaseCandidate) -> KeptRelease:
    """Field-for-field projection of a candidate."""
    return KeptRelease(
        release_id=candidate.release_id,
        project_id=candidate.project_id,
        environment_id=candidate.environment_id,
        version=candidate.version,
        created=candidate.created,
        latest_deployed_at=candidate.latest_deployed_at,
        rank=candidate.rank,
        reason_code=candidate.reason_code,
    )


def _diagnostic_sort_key(entry: DecisionLogEntry) -> tuple[str, str, str, str]:
    return (entry.project_id, entry.environment_id, entry.release_id, entry.reason_text)


def assemble_results(
    candidates: Sequence[ReleaseCandidate],
    diagnostic_entries: Sequence[DecisionLogEntry],
    releases_to_keep: int,
    correlation_id: str | None = None,
) -> AssembledResults:
    """Map candidates to kept releases and build the combined decision log.

    Diagnostic entries are carried through unchanged; their text was
    built by the deployment filter.
    """
    ordered = sorted(candidates, key=lambda c: (c.project_id, c.environment_id, c.rank))

    kept_releases = tuple(to_kept_release(c) for c in ordered)
    kept_entries = [build_kept_entry(c, releases_to_keep, correlation_id) for c in ordered]
    diagnostics = sorted(diagnostic_entries, key=_diagnostic_sort_key)

    return AssembledResults(
        kept_releases=kept_releases,
        decisions=(*kept_entries, *diagnostics),
    )
