# tests/unit/engine/test_assembly.py
"""Tests for result assembly and decision log ordering."""

from __future__ import annotations

from retention.contracts import DecisionLogEntry, DecisionType, ReasonCode
from retention.engine.assembly import assemble_results, to_kept_release
from retention.engine.policy import ReleaseCandidate
from tests.fixtures.factories import at


def _candidate(project: str, environment: str, release: str, rank: int) -> ReleaseCandidate:
    return ReleaseCandidate(
        project_id=project,
        environment_id=environment,
        release_id=release,
        version="1.0",
        created=at(8),
        latest_deployed_at=at(10),
        rank=rank,
    )


def _diagnostic(project: str, environment: str, release: str, deployment: str) -> DecisionLogEntry:
    return DecisionLogEntry(
        project_id=project,
        environment_id=environment,
        release_id=release,
        n=1,
        rank=0,
        latest_deployed_at=None,
        reason_text=f"Deployment '{deployment}' excluded: release '{release}' not found",
        reason_code=ReasonCode.INVALID_REFERENCE,
    )


class TestToKeptRelease:
    def test_field_for_field(self) -> None:
        candidate = _candidate("P1", "E1", "R1", 2)

        kept = to_kept_release(candidate)

        assert kept.release_id == "R1"
        assert kept.project_id == "P1"
        assert kept.environment_id == "E1"
        assert kept.version == "1.0"
        assert kept.created == at(8)
        assert kept.latest_deployed_at == at(10)
        assert kept.rank == 2
        assert kept.reason_code == ReasonCode.KEPT_TOP_N


class TestAssembleResults:
    def test_kept_releases_sorted_by_project_environment_rank(self) -> None:
        candidates = [
            _candidate("P2", "E1", "R5", 1),
            _candidate("P1", "E2", "R3", 2),
            _candidate("P1", "E2", "R4", 1),
            _candidate("P1", "E1", "R1", 1),
        ]

        assembled = assemble_results(candidates, [], 2)

        assert [(k.project_id, k.environment_id, k.rank) for k in assembled.kept_releases] == [
            ("P1", "E1", 1),
            ("P1", "E2", 1),
            ("P1", "E2", 2),
            ("P2", "E1", 1),
        ]

    def test_decisions_mirror_kept_then_diagnostics(self) -> None:
        candidates = [_candidate("P1", "E1", "R1", 1)]
        diagnostics = [_diagnostic("unknown", "E1", "R-x", "D9")]

        assembled = assemble_results(candidates, diagnostics, 1, correlation_id="abc")

        kept_entry, diagnostic_entry = assembled.decisions
        assert kept_entry.decision_type == DecisionType.KEPT
        assert kept_entry.correlation_id == "abc"
        assert kept_entry.latest_deployed_at == at(10)
        assert kept_entry.reason_text == "Release 'R1' kept: rank 1 of 1 for project 'P1' / environment 'E1'"
        assert diagnostic_entry is diagnostics[0]

    def test_diagnostics_ordered_by_content(self) -> None:
        diagnostics = [
            _diagnostic("unknown", "E2", "R-b", "D2"),
            _diagnostic("P1", "E1", "R-a", "D3"),
            _diagnostic("unknown", "E1", "R-c", "D1"),
            _diagnostic("P1", "E1", "R-a", "D1"),
        ]

        assembled = assemble_results([], diagnostics, 1)

        assert [d.reason_text for d in assembled.decisions] == [
            "Deployment 'D1' excluded: release 'R-a' not found",
            "Deployment 'D3' excluded: release 'R-a' not found",
            "Deployment 'D1' excluded: release 'R-c' not found",
            "Deployment 'D2' excluded: release 'R-b' not found",
        ]

    def test_empty(self) -> None:
        assembled = assemble_results([], [], 3)

        assert assembled.kept_releases == ()
        assert assembled.decisions == ()
