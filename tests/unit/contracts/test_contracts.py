# tests/unit/contracts/test_contracts.py
"""Tests for contract types: immutability, derived fields, error text."""

from __future__ import annotations

from dataclasses import FrozenInstanceError

import pytest

from retention.contracts import (
    DatasetFormatError,
    DecisionLogEntry,
    DecisionType,
    ErrorCode,
    ReasonCode,
    RetentionError,
    RetentionValidationError,
)
from tests.fixtures.factories import make_project


def _entry(reason_code: ReasonCode) -> DecisionLogEntry:
    return DecisionLogEntry(
        project_id="P1",
        environment_id="E1",
        release_id="R1",
        n=1,
        rank=1,
        latest_deployed_at=None,
        reason_text="text",
        reason_code=reason_code,
    )


class TestEntities:
    def test_entities_are_frozen(self) -> None:
        project = make_project("P1")

        with pytest.raises(FrozenInstanceError):
            project.id = "P2"  # type: ignore[misc]


class TestDecisionType:
    def test_derived_from_reason_code(self) -> None:
        assert _entry(ReasonCode.KEPT_TOP_N).decision_type == DecisionType.KEPT
        assert _entry(ReasonCode.INVALID_REFERENCE).decision_type == DecisionType.DIAGNOSTIC

    def test_codes_are_stable_strings(self) -> None:
        assert ReasonCode.KEPT_TOP_N == "kept.top_n"
        assert ReasonCode.INVALID_REFERENCE == "diagnostic.invalid_reference"
        assert ErrorCode.DUPLICATE_ENVIRONMENT_ID == "validation.duplicate_id.environment"


class TestErrors:
    def test_validation_error_carries_code_and_message(self) -> None:
        error = RetentionValidationError(ErrorCode.NULL_ELEMENT, "Null element found at index 0 in 'releases'.")

        assert isinstance(error, RetentionError)
        assert error.code == ErrorCode.NULL_ELEMENT
        assert str(error) == "validation.null_element: Null element found at index 0 in 'releases'."

    def test_dataset_format_error_names_source(self) -> None:
        error = DatasetFormatError("data.json", "invalid JSON at line 1 column 2: Expecting value")

        assert isinstance(error, RetentionError)
        assert str(error) == "Invalid dataset data.json: invalid JSON at line 1 column 2: Expecting value"
