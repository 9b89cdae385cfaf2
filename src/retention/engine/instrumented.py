# src/retention/engine/instrumented.py
"""Observability decorator around the pure evaluation pipeline.

InstrumentedRetentionEvaluator wraps evaluate_retention() as a whole:
it opens a span, times the call, and emits started/completed/failed
telemetry events. It never alters the returned result and re-raises
every error unchanged.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from datetime import UTC, datetime
from time import perf_counter

import structlog

from retention.contracts.entities import Deployment, Environment, Project, Release
from retention.contracts.errors import RetentionValidationError
from retention.contracts.events import TelemetryEvent
from retention.contracts.results import RetentionResult
from retention.engine.evaluator import evaluate_retention
from retention.engine.spans import SpanFactory
from retention.telemetry.events import (
    EvaluationCompleted,
    EvaluationFailed,
    EvaluationStarted,
)
from retention.telemetry.manager import NoOpTelemetry
from retention.telemetry.protocols import RetentionTelemetry

logger = structlog.get_logger(__name__)


def _utc_now() -> datetime:
    return datetime.now(UTC)


class InstrumentedRetentionEvaluator:
    """Evaluate retention with spans, timing and telemetry events.

    All collaborators are optional and explicit; there is no global
    telemetry state.

    Args:
        telemetry: Receives EvaluationStarted/Completed/Failed events
        span_factory: Opens the retention.evaluate span
        clock: Source of event timestamps
    """

    def __init__(
        self,
        telemetry: RetentionTelemetry | None = None,
        span_factory: SpanFactory | None = None,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        self._telemetry: RetentionTelemetry = telemetry if telemetry is not None else NoOpTelemetry()
        self._spans = span_factory if span_factory is not None else SpanFactory()
        self._clock = clock

    def _emit(self, event: TelemetryEvent) -> None:
        # handle_event failures never reach the evaluation caller
        try:
            self._telemetry.handle_event(event)
        except Exception as e:
            logger.warning("telemetry_handle_event_failed", event_type=type(event).__name__, error=str(e))

    def evaluate(
        self,
        projects: Sequence[Project] | None,
        environments: Sequence[Environment] | None,
        releases: Sequence[Release] | None,
        deployments: Sequence[Deployment] | None,
        releases_to_keep: int,
        correlation_id: str | None = None,
    ) -> RetentionResult:
        """Same contract as evaluate_retention(), observed."""
        counts = {
            "projects": len(projects or ()),
            "environments": len(environments or ()),
            "releases": len(releases or ()),
            "deployments": len(deployments or ()),
        }
        self._emit(
            EvaluationStarted(
                timestamp=self._clock(),
                correlation_id=correlation_id,
                releases_to_keep=releases_to_keep,
                project_count=counts["projects"],
                environment_count=counts["environments"],
                release_count=counts["releases"],
                deployment_count=counts["deployments"],
            )
        )

        with self._spans.evaluate_span(releases_to_keep, counts) as span:
            start = perf_counter()
            try:
                result = evaluate_retention(
                    projects,
                    environments,
                    releases,
                    deployments,
                    releases_to_keep,
                    correlation_id,
                )
            except Exception as exc:
                duration_ms = (perf_counter() - start) * 1000
                error_code = exc.code.value if isinstance(exc, RetentionValidationError) else None
                span.set_attribute("exception.type", type(exc).__name__)
                logger.info(
                    "retention_evaluation_failed",
                    correlation_id=correlation_id,
                    error_code=error_code,
                    error=str(exc),
                )
                self._emit(
                    EvaluationFailed(
                        timestamp=self._clock(),
                        correlation_id=correlation_id,
                        error_type=type(exc).__name__,
                        error_code=error_code,
                        message=str(exc),
                        duration_ms=duration_ms,
                    )
                )
                raise

            duration_ms = (perf_counter() - start) * 1000
            diagnostics = result.diagnostics
            span.set_attribute("retention.kept_releases", diagnostics.total_kept_releases)
            span.set_attribute("retention.invalid_deployments_excluded", diagnostics.invalid_deployments_excluded)
            span.set_attribute("retention.groups_evaluated", diagnostics.groups_evaluated)

        logger.debug(
            "retention_evaluation_completed",
            correlation_id=correlation_id,
            kept_releases=diagnostics.total_kept_releases,
            invalid_deployments_excluded=diagnostics.invalid_deployments_excluded,
            groups_evaluated=diagnostics.groups_evaluated,
            duration_ms=round(duration_ms, 3),
        )
        self._emit(
            EvaluationCompleted(
                timestamp=self._clock(),
                correlation_id=correlation_id,
                kept_releases=diagnostics.total_kept_releases,
                invalid_deployments_excluded=diagnostics.invalid_deployments_excluded,
                groups_evaluated=diagnostics.groups_evaluated,
                duration_ms=duration_ms,
            )
        )
        return result
