"""Dataset document types.

A Dataset is the four entity collections as they arrive from a file or
request body. DatasetValidationReport is the accumulating, never-raising
quality report produced for a dataset before (or instead of) evaluation.
"""

from __future__ import annotations

from dataclasses import dataclass

from retention.contracts.entities import Deployment, Environment, Project, Release
from retention.contracts.enums import DatasetMessageCode


@dataclass(frozen=True, slots=True)
class Dataset:
    """Entity collections for one evaluation.

    A None element stands for a null slot in the source document. It is
    kept so that evaluation rejects it with validation.null_element.
    """

    projects: tuple[Project | None, ...] = ()
    environments: tuple[Environment | None, ...] = ()
    releases: tuple[Release | None, ...] = ()
    deployments: tuple[Deployment | None, ...] = ()


@dataclass(frozen=True, slots=True)
class ValidationMessage:
    """A single error or warning in a dataset validation report.

    path uses a JSON-path-like notation over the camelCase document,
    e.g. "deployments[3].environmentId" or "projects[].id".
    """

    code: DatasetMessageCode
    message: str
    path: str | None = None


@dataclass(frozen=True, slots=True)
class ValidationSummary:
    """Counts describing a validated dataset."""

    project_count: int
    environment_count: int
    release_count: int
    deployment_count: int
    error_count: int
    warning_count: int


@dataclass(frozen=True, slots=True)
class DatasetValidationReport:
    """Result of validating a dataset document.

    errors make the dataset unusable; warnings describe dangling
    references that evaluation will diagnose and exclude.
    """

    errors: tuple[ValidationMessage, ...]
    warnings: tuple[ValidationMessage, ...]
    summary: ValidationSummary

    @property
    def is_valid(self) -> bool:
        """True when the dataset has no errors (warnings are allowed)."""
        return len(self.errors) == 0
