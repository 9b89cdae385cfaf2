# tests/property/engine/test_retention_properties.py
"""Property-based tests for retention evaluation.

Datasets are drawn from small id pools so that dangling references,
repeated deployments and timestamp ties are common.

Properties:
- Shuffling any input collection never changes the result
- Repeated evaluation is byte-identical
- Kept releases always have a valid deployment to their environment
- latest_deployed_at is the maximum over valid deployments
- Ranks are contiguous from 1, at most n, in comparator order
- Each invalid deployment yields exactly one diagnostic entry
"""

from __future__ import annotations

from collections import defaultdict
from datetime import UTC, datetime, timedelta

import pytest
from hypothesis import given
from hypothesis import strategies as st

from retention.contracts import (
    Dataset,
    DecisionType,
    Deployment,
    Environment,
    ErrorCode,
    Project,
    Release,
    RetentionValidationError,
)
from retention.core.canonical import canonical_json, result_to_dict
from retention.engine import compare_entries, evaluate_retention
from retention.engine.policy import GroupEntry
from tests.property.settings import DETERMINISM_SETTINGS, QUICK_SETTINGS, STANDARD_SETTINGS

BASE = datetime(2024, 1, 1, tzinfo=UTC)

project_ids = st.sampled_from(["P1", "P2", "P3"])
environment_ids = st.sampled_from(["E1", "E2", "E3"])
release_ids = st.sampled_from(["R1", "R2", "R3", "R4", "R5", "R10", "r1"])
# Few distinct hours so ties on deployed_at and created are frequent
timestamps = st.integers(min_value=0, max_value=5).map(lambda h: BASE + timedelta(hours=h))


@st.composite
def datasets(draw: st.DrawFn) -> Dataset:
    projects = [
        Project(id=p, name=f"Project {p}") for p in draw(st.lists(project_ids, unique=True, max_size=3))
    ]
    environments = [
        Environment(id=e, name=f"Env {e}") for e in draw(st.lists(environment_ids, unique=True, max_size=3))
    ]
    releases = [
        Release(
            id=r,
            # P9 never exists: some releases point at a missing project
            project_id=draw(st.one_of(project_ids, st.just("P9"))),
            version=draw(st.one_of(st.none(), st.just("1.0"))),
            created=draw(timestamps),
        )
        for r in draw(st.lists(release_ids, unique=True, max_size=6))
    ]
    deployments = [
        Deployment(
            id=f"D{i % 4}",
            release_id=draw(st.one_of(release_ids, st.just("R-missing"))),
            environment_id=draw(st.one_of(environment_ids, st.just("E-missing"))),
            deployed_at=draw(timestamps),
        )
        for i in range(draw(st.integers(min_value=0, max_value=12)))
    ]
    return Dataset(
        projects=tuple(projects),
        environments=tuple(environments),
        releases=tuple(releases),
        deployments=tuple(deployments),
    )


releases_to_keep = st.integers(min_value=0, max_value=4)


def _evaluate(dataset: Dataset, n: int, correlation_id: str | None = None):
    return evaluate_retention(
        dataset.projects, dataset.environments, dataset.releases, dataset.deployments, n, correlation_id
    )


def _valid_deployments(dataset: Dataset) -> list[Deployment]:
    project_set = {p.id for p in dataset.projects}
    environment_set = {e.id for e in dataset.environments}
    releases = {r.id: r for r in dataset.releases}
    return [
        d
        for d in dataset.deployments
        if d.release_id in releases
        and releases[d.release_id].project_id in project_set
        and d.environment_id in environment_set
    ]


class TestDeterminism:
    @given(dataset=datasets(), n=releases_to_keep, data=st.data())
    @DETERMINISM_SETTINGS
    def test_permutation_invariance(self, dataset: Dataset, n: int, data: st.DataObject) -> None:
        shuffled = Dataset(
            projects=tuple(data.draw(st.permutations(dataset.projects))),
            environments=tuple(data.draw(st.permutations(dataset.environments))),
            releases=tuple(data.draw(st.permutations(dataset.releases))),
            deployments=tuple(data.draw(st.permutations(dataset.deployments))),
        )

        assert _evaluate(shuffled, n, "c") == _evaluate(dataset, n, "c")

    @given(dataset=datasets(), n=releases_to_keep)
    @DETERMINISM_SETTINGS
    def test_idempotence(self, dataset: Dataset, n: int) -> None:
        first = canonical_json(result_to_dict(_evaluate(dataset, n)))
        second = canonical_json(result_to_dict(_evaluate(dataset, n)))

        assert first == second


class TestSelection:
    @given(dataset=datasets(), n=releases_to_keep)
    @STANDARD_SETTINGS
    def test_kept_releases_are_eligible(self, dataset: Dataset, n: int) -> None:
        valid = _valid_deployments(dataset)
        eligible = {(d.release_id, d.environment_id) for d in valid}

        result = _evaluate(dataset, n)

        for kept in result.kept_releases:
            assert (kept.release_id, kept.environment_id) in eligible

    @given(dataset=datasets(), n=releases_to_keep)
    @STANDARD_SETTINGS
    def test_latest_deployment_wins(self, dataset: Dataset, n: int) -> None:
        latest: dict[tuple[str, str], datetime] = {}
        for d in _valid_deployments(dataset):
            key = (d.release_id, d.environment_id)
            latest[key] = max(latest.get(key, d.deployed_at), d.deployed_at)

        result = _evaluate(dataset, n)

        for kept in result.kept_releases:
            assert kept.latest_deployed_at == latest[(kept.release_id, kept.environment_id)]

    @given(dataset=datasets(), n=releases_to_keep)
    @STANDARD_SETTINGS
    def test_ranks_contiguous_and_ordered(self, dataset: Dataset, n: int) -> None:
        result = _evaluate(dataset, n)

        groups: dict[tuple[str, str], list] = defaultdict(list)
        for kept in result.kept_releases:
            groups[(kept.project_id, kept.environment_id)].append(kept)

        for members in groups.values():
            assert [k.rank for k in members] == list(range(1, len(members) + 1))
            assert len(members) <= n
            entries = [
                GroupEntry(
                    release_id=k.release_id,
                    version=k.version,
                    created=k.created,
                    latest_deployed_at=k.latest_deployed_at,
                )
                for k in members
            ]
            for earlier, later in zip(entries, entries[1:], strict=False):
                assert compare_entries(earlier, later) < 0

    @given(dataset=datasets(), n=releases_to_keep)
    @STANDARD_SETTINGS
    def test_group_keeps_min_of_n_and_eligible(self, dataset: Dataset, n: int) -> None:
        releases = {r.id: r for r in dataset.releases}
        eligible: dict[tuple[str, str], set[str]] = defaultdict(set)
        for d in _valid_deployments(dataset):
            eligible[(releases[d.release_id].project_id, d.environment_id)].add(d.release_id)

        result = _evaluate(dataset, n)

        kept_per_group: dict[tuple[str, str], int] = defaultdict(int)
        for kept in result.kept_releases:
            kept_per_group[(kept.project_id, kept.environment_id)] += 1
        for group, members in eligible.items():
            assert kept_per_group[group] == min(n, len(members))
        assert result.diagnostics.groups_evaluated == len(eligible)


class TestDiagnostics:
    @given(dataset=datasets(), n=releases_to_keep)
    @STANDARD_SETTINGS
    def test_one_diagnostic_per_invalid_deployment(self, dataset: Dataset, n: int) -> None:
        invalid_count = len(dataset.deployments) - len(_valid_deployments(dataset))

        result = _evaluate(dataset, n)

        diagnostics = [d for d in result.decisions if d.decision_type == DecisionType.DIAGNOSTIC]
        assert len(diagnostics) == invalid_count
        assert result.diagnostics.invalid_deployments_excluded == invalid_count

    @given(dataset=datasets(), n=releases_to_keep)
    @STANDARD_SETTINGS
    def test_kept_entries_precede_diagnostics(self, dataset: Dataset, n: int) -> None:
        result = _evaluate(dataset, n)

        types = [d.decision_type for d in result.decisions]
        assert types == sorted(types, key=lambda t: t != DecisionType.KEPT)
        assert types.count(DecisionType.KEPT) == result.diagnostics.total_kept_releases


class TestValidation:
    @given(dataset=datasets(), n=st.integers(max_value=-1))
    @QUICK_SETTINGS
    def test_negative_n_always_rejected(self, dataset: Dataset, n: int) -> None:
        with pytest.raises(RetentionValidationError) as exc_info:
            _evaluate(dataset, n)

        assert exc_info.value.code == ErrorCode.N_NEGATIVE
