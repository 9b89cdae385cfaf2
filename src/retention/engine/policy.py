# src/retention/engine/policy.py
"""Retention policy evaluation: grouping, ranking and top-N selection.

Algorithm:
    1. Group valid deployments by (project via release, environment,
       release) and take the latest deployed_at per group.
    2. Regroup those per-release summaries by (project, environment).
    3. Rank each group with a total order:
         a. latest_deployed_at descending
         b. release created descending
         c. release id ascending, ordinal ("Release-10" < "Release-2")
    4. Keep the first min(n, group size) entries, ranked 1..k.

This is a pure function of its inputs. Because the comparator is a
total order and groups are emitted in sorted order, the output does not
depend on the order of the supplied deployments.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from datetime import datetime
from functools import cmp_to_key

from retention.contracts.entities import Deployment, Release
from retention.contracts.enums import ReasonCode

# (project_id, environment_id)
GroupKey = tuple[str, str]


@dataclass(frozen=True, slots=True)
class GroupEntry:
    """One release's summary within a (project, environment) group."""

    release_id: str
    version: str | None
    created: datetime
    latest_deployed_at: datetime


@dataclass(frozen=True, slots=True)
class RankedCandidate:
    """A GroupEntry with its 1-based position after ranking."""

    entry: GroupEntry
    rank: int


@dataclass(frozen=True, slots=True)
class ReleaseCandidate:
    """A selected, ranked release for a (project, environment) group."""

    project_id: str
    environment_id: str
    release_id: str
    version: str | None
    created: datetime
    latest_deployed_at: datetime
    rank: int
    reason_code: ReasonCode = ReasonCode.KEPT_TOP_N


@dataclass(frozen=True, slots=True)
class PolicyEvaluation:
    """Output of the policy evaluator.

    Attributes:
        candidates: Selected candidates ordered by (project, environment, rank)
        groups: Every (project, environment) pair with at least one
            eligible release, sorted. Present even when n == 0 selects
            nothing.
    """

    candidates: tuple[ReleaseCandidate, ...]
    groups: tuple[GroupKey, ...]


def _cmp(a: object, b: object) -> int:
    return (a > b) - (a < b)  # type: ignore[operator]


def compare_entries(a: GroupEntry, b: GroupEntry) -> int:
    """Default ranking comparator; negative means a ranks before b."""
    by_deployed = _cmp(b.latest_deployed_at, a.latest_deployed_at)
    if by_deployed:
        return by_deployed
    by_created = _cmp(b.created, a.created)
    if by_created:
        return by_created
    # Python str ordering is by code point: ordinal, case-sensitive
    return _cmp(a.release_id, b.release_id)


EntryComparator = Callable[[GroupEntry, GroupEntry], int]


def rank_entries(
    entries: Sequence[GroupEntry],
    comparator: EntryComparator = compare_entries,
) -> list[RankedCandidate]:
    """Sort a group's entries and assign ranks 1..len(entries)."""
    ordered = sorted(entries, key=cmp_to_key(comparator))
    return [RankedCandidate(entry=entry, rank=position) for position, entry in enumerate(ordered, start=1)]


def select_top_n(ranked: Sequence[RankedCandidate], releases_to_keep: int) -> list[RankedCandidate]:
    """Take the first releases_to_keep ranked candidates."""
    return list(ranked[:releases_to_keep])


def summarize_groups(
    valid_deployments: Sequence[Deployment],
    releases_by_id: Mapping[str, Release],
) -> dict[GroupKey, list[GroupEntry]]:
    """Build per-group release summaries from valid deployments.

    Deployments whose release is not in releases_by_id are skipped; the
    deployment filter guarantees this does not happen in a normal run.
    """
    latest: dict[tuple[str, str, str], datetime] = {}
    for deployment in valid_deployments:
        release = releases_by_id.get(deployment.release_id)
        if release is None:
            continue
        key = (release.project_id, deployment.environment_id, release.id)
        current = latest.get(key)
        if current is None or deployment.deployed_at > current:
            latest[key] = deployment.deployed_at

    groups: dict[GroupKey, list[GroupEntry]] = defaultdict(list)
    for (project_id, environment_id, release_id), deployed_at in latest.items():
        release = releases_by_id[release_id]
        groups[(project_id, environment_id)].append(
            GroupEntry(
                release_id=release_id,
                version=release.version,
                created=release.created,
                latest_deployed_at=deployed_at,
            )
        )
    return dict(groups)


def evaluate_policy(
    valid_deployments: Sequence[Deployment],
    releases_by_id: Mapping[str, Release],
    releases_to_keep: int,
    *,
    comparator: EntryComparator = compare_entries,
) -> PolicyEvaluation:
    """Rank every group and select the releases to keep.

    Args:
        valid_deployments: Deployments that passed the validity filter
        releases_by_id: Release lookup from the reference index
        releases_to_keep: n, already validated as >= 0
        comparator: Ranking order; defaults to compare_entries

    Returns:
        PolicyEvaluation with candidates in (project, environment, rank) order
    """
    groups = summarize_groups(valid_deployments, releases_by_id)

    candidates: list[ReleaseCandidate] = []
    for project_id, environment_id in sorted(groups):
        ranked = rank_entries(groups[(project_id, environment_id)], comparator)
        for selected in select_top_n(ranked, releases_to_keep):
            entry = selected.entry
            candidates.append(
                ReleaseCandidate(
                    project_id=project_id,
                    environment_id=environment_id,
                    release_id=entry.release_id,
                    version=entry.version,
                    created=entry.created,
                    latest_deployed_at=entry.latest_deployed_at,
                    rank=selected.rank,
                    reason_code=ReasonCode.KEPT_TOP_N,
                )
            )

    return PolicyEvaluation(candidates=tuple(candidates), groups=tuple(sorted(groups)))
