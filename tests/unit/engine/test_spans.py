# tests/unit/engine/test_spans.py
"""Tests for OpenTelemetry span factory."""

import pytest

from retention.engine.spans import NoOpSpan, SpanFactory

COUNTS = {"projects": 1, "environments": 2, "releases": 3, "deployments": 4}


def _recording_factory():
    pytest.importorskip("opentelemetry.sdk")
    from opentelemetry.sdk.trace import TracerProvider
    from opentelemetry.sdk.trace.export import SimpleSpanProcessor
    from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter

    # Local provider only; never set_tracer_provider() global state
    exporter = InMemorySpanExporter()
    provider = TracerProvider()
    provider.add_span_processor(SimpleSpanProcessor(exporter))
    return SpanFactory(tracer=provider.get_tracer("test")), exporter


class TestSpanFactory:
    """OpenTelemetry span creation."""

    def test_noop_without_tracer(self) -> None:
        factory = SpanFactory()

        assert not factory.enabled
        with factory.evaluate_span(3, COUNTS) as span:
            assert isinstance(span, NoOpSpan)
        with factory.validate_dataset_span(COUNTS) as span:
            assert isinstance(span, NoOpSpan)

    def test_evaluate_span_attributes(self) -> None:
        factory, exporter = _recording_factory()

        assert factory.enabled
        with factory.evaluate_span(3, COUNTS) as span:
            assert span.is_recording()

        [finished] = exporter.get_finished_spans()
        assert finished.name == "retention.evaluate"
        assert finished.attributes["retention.n"] == 3
        assert finished.attributes["input.deployments.count"] == 4

    def test_validate_dataset_span_name_is_stable(self) -> None:
        factory, exporter = _recording_factory()

        with factory.validate_dataset_span(COUNTS):
            pass

        [finished] = exporter.get_finished_spans()
        assert finished.name == "retention.validate_dataset"
        assert finished.attributes["releases_count"] == 3

    def test_noop_span_interface(self) -> None:
        noop = NoOpSpan()

        noop.set_attribute("key", "value")
        noop.set_status(None)
        noop.record_exception(ValueError("test"))
        assert noop.is_recording() is False
