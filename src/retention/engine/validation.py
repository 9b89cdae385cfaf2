# src/retention/engine/validation.py
"""Structural validation of evaluation inputs.

Runs a fixed, ordered sequence of checks and raises on the FIRST
violation (fail-fast). Order matters and is part of the contract:

    1. releases_to_keep >= 0
    2. no None element in projects, environments, releases, deployments
    3. unique ids in projects, environments, releases

Cross-entity references are NOT checked here; dangling references are
the deployment filter's job and are never fatal. Deployment ids are not
checked for uniqueness: a release may be deployed many times.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Any

from retention.contracts.entities import Deployment, Environment, Project, Release
from retention.contracts.enums import ErrorCode
from retention.contracts.errors import RetentionValidationError


def check_releases_to_keep(releases_to_keep: int) -> None:
    """Reject a negative releases_to_keep."""
    if releases_to_keep < 0:
        raise RetentionValidationError(
            ErrorCode.N_NEGATIVE,
            f"Parameter 'releasesToKeep' must be >= 0, but was {releases_to_keep}.",
        )


def check_no_null_elements(collection: Sequence[Any], collection_name: str) -> None:
    """Reject a collection containing a None slot.

    Args:
        collection: Entities to check
        collection_name: Name used in the error message (e.g. "projects")

    Raises:
        RetentionValidationError: With code validation.null_element, naming
            the collection and the index of the first None
    """
    for index, item in enumerate(collection):
        if item is None:
            raise RetentionValidationError(
                ErrorCode.NULL_ELEMENT,
                f"Null element found at index {index} in '{collection_name}'.",
            )


def check_unique_ids(
    collection: Sequence[Any],
    id_of: Callable[[Any], str],
    entity_type: str,
    code: ErrorCode,
) -> None:
    """Reject a collection with repeated ids.

    Every duplicated id is reported once, in order of first repetition.
    """
    seen: set[str] = set()
    duplicates: list[str] = []
    for item in collection:
        item_id = id_of(item)
        if item_id in seen:
            if item_id not in duplicates:
                duplicates.append(item_id)
        else:
            seen.add(item_id)

    if duplicates:
        raise RetentionValidationError(
            code,
            f"Duplicate {entity_type} ID(s) found: {', '.join(duplicates)}",
        )


def validate_inputs(
    projects: Sequence[Project] | None,
    environments: Sequence[Environment] | None,
    releases: Sequence[Release] | None,
    deployments: Sequence[Deployment] | None,
    releases_to_keep: int,
) -> None:
    """Validate raw evaluation input, raising on the first violation.

    None collections are treated as empty; they are not a failure.

    Raises:
        RetentionValidationError: On the first violated rule
    """
    projects = projects or ()
    environments = environments or ()
    releases = releases or ()
    deployments = deployments or ()

    check_releases_to_keep(releases_to_keep)

    check_no_null_elements(projects, "projects")
    check_no_null_elements(environments, "environments")
    check_no_null_elements(releases, "releases")
    check_no_null_elements(deployments, "deployments")

    check_unique_ids(projects, lambda p: p.id, "project", ErrorCode.DUPLICATE_PROJECT_ID)
    check_unique_ids(environments, lambda e: e.id, "environment", ErrorCode.DUPLICATE_ENVIRONMENT_ID)
    check_unique_ids(releases, lambda r: r.id, "release", ErrorCode.DUPLICATE_RELEASE_ID)
