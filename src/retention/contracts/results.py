"""Evaluation outputs.

These types answer: "What did an evaluation decide, and why?"

IMPORTANT:
- KeptRelease is a flat projection of a ranked candidate; it carries no
  behaviour.
- DecisionLogEntry covers BOTH kept releases and excluded deployments.
  decision_type is derived from reason_code, never stored separately.
- correlation_id is always the caller's value verbatim (or None). The
  engine never generates one.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from retention.contracts.enums import DecisionType, ReasonCode


@dataclass(frozen=True, slots=True)
class KeptRelease:
    """A release retained for one (project, environment) pair."""

    release_id: str
    project_id: str
    environment_id: str
    version: str | None
    created: datetime
    latest_deployed_at: datetime
    rank: int
    reason_code: ReasonCode


@dataclass(frozen=True, slots=True)
class DecisionLogEntry:
    """One explained decision.

    Kept entries mirror a KeptRelease. Diagnostic entries describe an
    excluded deployment: rank is 0 and latest_deployed_at is None.

    Fields:
        project_id: Owning project, or "unknown" when the release is missing
        environment_id: Environment the decision applies to
        release_id: Release the decision applies to
        n: The releases-to-keep value the evaluation ran with
        rank: 1-based rank for kept entries, 0 for diagnostics
        latest_deployed_at: Most recent deployment time (kept entries only)
        reason_text: Human-readable explanation
        reason_code: Stable machine-readable reason
        correlation_id: Caller-supplied identifier, if any
    """

    project_id: str
    environment_id: str
    release_id: str
    n: int
    rank: int
    latest_deployed_at: datetime | None
    reason_text: str
    reason_code: ReasonCode
    correlation_id: str | None = None

    @property
    def decision_type(self) -> DecisionType:
        """Classification used to order kept entries before diagnostics."""
        if self.reason_code == ReasonCode.KEPT_TOP_N:
            return DecisionType.KEPT
        return DecisionType.DIAGNOSTIC


@dataclass(frozen=True, slots=True)
class RetentionDiagnostics:
    """Summary counters for one evaluation."""

    groups_evaluated: int
    invalid_deployments_excluded: int
    total_kept_releases: int


@dataclass(frozen=True, slots=True)
class RetentionResult:
    """Complete result of one evaluation.

    Both sequences are deterministically ordered; see the assembler for
    the ordering rules.
    """

    kept_releases: tuple[KeptRelease, ...]
    decisions: tuple[DecisionLogEntry, ...]
    diagnostics: RetentionDiagnostics
