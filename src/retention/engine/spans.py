# src/retention/engine/spans.py
"""OpenTelemetry span factory for retention evaluation.

Falls back to no-op spans when no tracer is configured.

Span Hierarchy:
    retention.evaluate
    retention.validate_dataset
"""

from collections.abc import Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from opentelemetry.trace import Span, Tracer


class NoOpSpan:
    """No-op span for when tracing is disabled."""

    def set_attribute(self, key: str, value: Any) -> None:
        pass

    def set_status(self, status: Any) -> None:
        pass

    def record_exception(self, exception: BaseException) -> None:
        pass

    def is_recording(self) -> bool:
        return False


class SpanFactory:
    """Factory for creating OpenTelemetry spans.

    Example:
        factory = SpanFactory(tracer=opentelemetry.trace.get_tracer("retention"))

        with factory.evaluate_span(releases_to_keep=3, counts={...}) as span:
            ...
    """

    _NOOP_SPAN = NoOpSpan()

    def __init__(self, tracer: "Tracer | None" = None) -> None:
        self._tracer = tracer

    @property
    def enabled(self) -> bool:
        return self._tracer is not None

    @contextmanager
    def evaluate_span(
        self,
        releases_to_keep: int,
        counts: dict[str, int],
    ) -> Iterator["Span | NoOpSpan"]:
        """Create a span around one retention evaluation.

        Args:
            releases_to_keep: The requested n
            counts: Input sizes keyed by collection name
                ("projects", "environments", "releases", "deployments")
        """
        if self._tracer is None:
            yield self._NOOP_SPAN
            return

        with self._tracer.start_as_current_span("retention.evaluate") as span:
            span.set_attribute("retention.n", releases_to_keep)
            for name, count in counts.items():
                span.set_attribute(f"input.{name}.count", count)
            yield span

    @contextmanager
    def validate_dataset_span(self, counts: dict[str, int]) -> Iterator["Span | NoOpSpan"]:
        """Create a span around a dataset validation report."""
        if self._tracer is None:
            yield self._NOOP_SPAN
            return

        with self._tracer.start_as_current_span("retention.validate_dataset") as span:
            for name, count in counts.items():
                span.set_attribute(f"{name}_count", count)
            yield span
