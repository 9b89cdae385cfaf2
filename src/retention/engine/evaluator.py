# src/retention/engine/evaluator.py
"""Retention evaluation pipeline.

Composes the stages into the single synchronous entry point:

    validate -> index -> filter -> policy -> assemble -> diagnostics

The pipeline is pure: no I/O, no logging, no clocks, no shared state.
Every call allocates its own intermediate structures, so concurrent
calls need no locking. Observation (timing, spans, telemetry events)
belongs in InstrumentedRetentionEvaluator, never here.
"""

from __future__ import annotations

from collections.abc import Sequence

from retention.contracts.entities import Deployment, Environment, Project, Release
from retention.contracts.results import RetentionResult
from retention.engine.assembly import assemble_results
from retention.engine.diagnostics import calculate_diagnostics
from retention.engine.filtering import filter_deployments
from retention.engine.index import build_reference_index
from retention.engine.policy import EntryComparator, compare_entries, evaluate_policy
from retention.engine.validation import validate_inputs


def evaluate_retention(
    projects: Sequence[Project] | None,
    environments: Sequence[Environment] | None,
    releases: Sequence[Release] | None,
    deployments: Sequence[Deployment] | None,
    releases_to_keep: int,
    correlation_id: str | None = None,
    *,
    comparator: EntryComparator = compare_entries,
) -> RetentionResult:
    """Decide which releases to keep per (project, environment).

    Args:
        projects: Projects; None is treated as empty
        environments: Environments; None is treated as empty
        releases: Releases; None is treated as empty
        deployments: Deployments; None is treated as empty
        releases_to_keep: n, the number of releases kept per group
        correlation_id: Copied verbatim onto every decision entry
        comparator: Ranking order within a group

    Returns:
        RetentionResult with kept releases, decision log and diagnostics

    Raises:
        RetentionValidationError: If n is negative, a collection holds a
            None element, or ids repeat within projects, environments or
            releases. Nothing is returned in that case.
    """
    projects = tuple(projects or ())
    environments = tuple(environments or ())
    releases = tuple(releases or ())
    deployments = tuple(deployments or ())

    validate_inputs(projects, environments, releases, deployments, releases_to_keep)

    index = build_reference_index(projects, environments, releases)

    filtered = filter_deployments(
        deployments,
        index,
        releases_to_keep=releases_to_keep,
        correlation_id=correlation_id,
    )

    policy = evaluate_policy(
        filtered.valid_deployments,
        index.releases_by_id,
        releases_to_keep,
        comparator=comparator,
    )

    assembled = assemble_results(
        policy.candidates,
        filtered.diagnostic_entries,
        releases_to_keep,
        correlation_id,
    )

    diagnostics = calculate_diagnostics(
        policy.candidates,
        filtered.excluded_count,
        assembled.kept_releases,
        groups=policy.groups,
    )

    return RetentionResult(
        kept_releases=assembled.kept_releases,
        decisions=assembled.decisions,
        diagnostics=diagnostics,
    )
