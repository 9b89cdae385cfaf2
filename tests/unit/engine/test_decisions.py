# tests/unit/engine/test_decisions.py
"""Tests for decision entry construction and reason texts."""

from retention.contracts import DecisionType, ReasonCode
from retention.engine.decisions import build_diagnostic_entry, build_kept_entry, kept_reason_text
from retention.engine.policy import ReleaseCandidate
from tests.fixtures.factories import at, make_deployment


class TestKeptEntry:
    def test_reason_text(self) -> None:
        candidate = ReleaseCandidate(
            project_id="P1",
            environment_id="Prod",
            release_id="R7",
            version="7.0",
            created=at(8),
            latest_deployed_at=at(12),
            rank=2,
        )

        assert kept_reason_text(candidate, 3) == "Release 'R7' kept: rank 2 of 3 for project 'P1' / environment 'Prod'"

        entry = build_kept_entry(candidate, 3, None)
        assert entry.decision_type == DecisionType.KEPT
        assert entry.n == 3
        assert entry.rank == 2
        assert entry.latest_deployed_at == at(12)


class TestDiagnosticEntry:
    def test_reasons_joined_with_semicolons(self) -> None:
        entry = build_diagnostic_entry(
            make_deployment("D5", "R-x", "E-x"),
            "unknown",
            ["release 'R-x' not found", "environment 'E-x' not found"],
            1,
            "corr",
        )

        assert entry.reason_text == "Deployment 'D5' excluded: release 'R-x' not found; environment 'E-x' not found"
        assert entry.reason_code == ReasonCode.INVALID_REFERENCE
        assert entry.decision_type == DecisionType.DIAGNOSTIC
        assert entry.correlation_id == "corr"
