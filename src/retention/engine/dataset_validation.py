# src/retention/engine/dataset_validation.py
"""Accumulating dataset validation report.

Unlike validate_inputs(), which raises on the first structural problem,
this reports EVERY problem in a dataset so a user can fix them in one
pass. It never raises on data.

Errors (dataset unusable):
    - null elements inside a collection
    - duplicate ids in any collection, deployments included
    - blank required fields
Warnings (evaluation will diagnose and exclude):
    - release referencing an unknown project
    - deployment referencing an unknown release or environment

Messages are sorted by (code, path, message) so the report is
independent of collection order within the same paths.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Any

from retention.contracts.dataset import (
    Dataset,
    DatasetValidationReport,
    ValidationMessage,
    ValidationSummary,
)
from retention.contracts.enums import DatasetMessageCode


def _is_blank(value: str | None) -> bool:
    return value is None or value.strip() == ""


def _duplicate_id_messages(
    items: Sequence[Any],
    id_of: Callable[[Any], str],
    collection_name: str,
    code: DatasetMessageCode,
) -> list[ValidationMessage]:
    seen: set[str] = set()
    duplicates: set[str] = set()
    for item in items:
        item_id = id_of(item)
        if item_id in seen:
            duplicates.add(item_id)
        seen.add(item_id)

    return [
        ValidationMessage(
            code=code,
            message=f"Duplicate ID '{duplicate}' found in {collection_name}.",
            path=f"{collection_name}[].id",
        )
        for duplicate in sorted(duplicates)
    ]


def _missing(message: str, path: str) -> ValidationMessage:
    return ValidationMessage(code=DatasetMessageCode.MISSING_REQUIRED_FIELD, message=message, path=path)


def _required(value: str | None, message: str, path: str) -> list[ValidationMessage]:
    return [_missing(message, path)] if _is_blank(value) else []


def _null_element_messages(items: Sequence[Any], collection_name: str) -> list[ValidationMessage]:
    return [
        ValidationMessage(
            code=DatasetMessageCode.NULL_ELEMENT,
            message=f"Null element found at index {i} in '{collection_name}'.",
            path=f"{collection_name}[{i}]",
        )
        for i, item in enumerate(items)
        if item is None
    ]


def _present(items: Sequence[Any]) -> list[Any]:
    return [item for item in items if item is not None]


def _collect(dataset: Dataset) -> tuple[list[ValidationMessage], list[ValidationMessage]]:
    errors: list[ValidationMessage] = []
    warnings: list[ValidationMessage] = []

    errors += _null_element_messages(dataset.projects, "projects")
    errors += _null_element_messages(dataset.environments, "environments")
    errors += _null_element_messages(dataset.releases, "releases")
    errors += _null_element_messages(dataset.deployments, "deployments")

    errors += _duplicate_id_messages(
        _present(dataset.projects), lambda p: p.id, "projects", DatasetMessageCode.DUPLICATE_PROJECT_ID
    )
    for i, project in enumerate(dataset.projects):
        if project is None:
            continue
        errors += _required(project.id, "Project ID is required.", f"projects[{i}].id")
        errors += _required(project.name, "Project name is required.", f"projects[{i}].name")

    errors += _duplicate_id_messages(
        _present(dataset.environments), lambda e: e.id, "environments", DatasetMessageCode.DUPLICATE_ENVIRONMENT_ID
    )
    for i, environment in enumerate(dataset.environments):
        if environment is None:
            continue
        errors += _required(environment.id, "Environment ID is required.", f"environments[{i}].id")
        errors += _required(environment.name, "Environment name is required.", f"environments[{i}].name")

    errors += _duplicate_id_messages(
        _present(dataset.releases), lambda r: r.id, "releases", DatasetMessageCode.DUPLICATE_RELEASE_ID
    )
    project_ids = {p.id for p in _present(dataset.projects)}
    for i, release in enumerate(dataset.releases):
        if release is None:
            continue
        errors += _required(release.id, "Release ID is required.", f"releases[{i}].id")
        if _is_blank(release.project_id):
            errors.append(_missing("Release projectId is required.", f"releases[{i}].projectId"))
        elif release.project_id not in project_ids:
            warnings.append(
                ValidationMessage(
                    code=DatasetMessageCode.INVALID_REFERENCE,
                    message=f"Release '{release.id}' references unknown project '{release.project_id}'.",
                    path=f"releases[{i}].projectId",
                )
            )

    errors += _duplicate_id_messages(
        _present(dataset.deployments), lambda d: d.id, "deployments", DatasetMessageCode.DUPLICATE_DEPLOYMENT_ID
    )
    release_ids = {r.id for r in _present(dataset.releases)}
    environment_ids = {e.id for e in _present(dataset.environments)}
    for i, deployment in enumerate(dataset.deployments):
        if deployment is None:
            continue
        errors += _required(deployment.id, "Deployment ID is required.", f"deployments[{i}].id")

        if _is_blank(deployment.release_id):
            errors.append(_missing("Deployment releaseId is required.", f"deployments[{i}].releaseId"))
        elif deployment.release_id not in release_ids:
            warnings.append(
                ValidationMessage(
                    code=DatasetMessageCode.INVALID_REFERENCE,
                    message=f"Deployment '{deployment.id}' references unknown release '{deployment.release_id}'.",
                    path=f"deployments[{i}].releaseId",
                )
            )

        if _is_blank(deployment.environment_id):
            errors.append(_missing("Deployment environmentId is required.", f"deployments[{i}].environmentId"))
        elif deployment.environment_id not in environment_ids:
            warnings.append(
                ValidationMessage(
                    code=DatasetMessageCode.INVALID_REFERENCE,
                    message=(
                        f"Deployment '{deployment.id}' references unknown environment "
                        f"'{deployment.environment_id}'."
                    ),
                    path=f"deployments[{i}].environmentId",
                )
            )

    return errors, warnings


def _sort_key(message: ValidationMessage) -> tuple[str, str, str]:
    return (message.code.value, message.path or "", message.message)


def validate_dataset(dataset: Dataset) -> DatasetValidationReport:
    """Build a validation report for a dataset. Never raises on data."""
    errors, warnings = _collect(dataset)
    errors.sort(key=_sort_key)
    warnings.sort(key=_sort_key)

    return DatasetValidationReport(
        errors=tuple(errors),
        warnings=tuple(warnings),
        summary=ValidationSummary(
            project_count=len(dataset.projects),
            environment_count=len(dataset.environments),
            release_count=len(dataset.releases),
            deployment_count=len(dataset.deployments),
            error_count=len(errors),
            warning_count=len(warnings),
        ),
    )
