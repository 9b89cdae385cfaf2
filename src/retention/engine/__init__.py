"""Retention evaluation engine.

The pure pipeline (validation, reference index, deployment filter,
policy evaluator, result assembler, diagnostics) plus the
observability decorator that wraps it.

Import patterns:
    from retention.engine import evaluate_retention
    from retention.engine import InstrumentedRetentionEvaluator
"""

from retention.engine.dataset_validation import validate_dataset
from retention.engine.evaluator import evaluate_retention
from retention.engine.instrumented import InstrumentedRetentionEvaluator
from retention.engine.policy import compare_entries
from retention.engine.spans import SpanFactory

__all__ = [
    "InstrumentedRetentionEvaluator",
    "SpanFactory",
    "compare_entries",
    "evaluate_retention",
    "validate_dataset",
]
