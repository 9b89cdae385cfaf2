"""Reference index: O(1) lookups by id for one evaluation."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from types import MappingProxyType

from retention.contracts.entities import Environment, Project, Release


@dataclass(frozen=True, slots=True)
class ReferenceIndex:
    """Read-only id lookups built once per evaluation.

    Assumes id uniqueness has already been validated; it never
    re-validates. Keys are compared with exact, case-sensitive equality.
    """

    projects_by_id: Mapping[str, Project]
    environments_by_id: Mapping[str, Environment]
    releases_by_id: Mapping[str, Release]


def build_reference_index(
    projects: Sequence[Project],
    environments: Sequence[Environment],
    releases: Sequence[Release],
) -> ReferenceIndex:
    """Build a ReferenceIndex from validated entity collections."""
    return ReferenceIndex(
        projects_by_id=MappingProxyType({p.id: p for p in projects}),
        environments_by_id=MappingProxyType({e.id: e for e in environments}),
        releases_by_id=MappingProxyType({r.id: r for r in releases}),
    )
