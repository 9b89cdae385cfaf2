"""Input entities supplied by the caller.

These types answer: "What was deployed, where, and when?"

All entities are frozen. They are created by the caller (or the dataset
loader) and never modified by the engine. Ids are compared with exact,
case-sensitive string equality.
"""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True, slots=True)
class Project:
    """A deployable application."""

    id: str
    name: str


@dataclass(frozen=True, slots=True)
class Environment:
    """A deployment target such as staging or production."""

    id: str
    name: str


@dataclass(frozen=True, slots=True)
class Release:
    """An immutable, versioned snapshot of a project.

    project_id may reference a project that is not in the input set. That
    is handled at evaluation time through the deployments that reference
    this release; it is not a validation failure.
    """

    id: str
    project_id: str
    version: str | None
    created: datetime


@dataclass(frozen=True, slots=True)
class Deployment:
    """A release deployed to an environment at a point in time.

    Deployment ids are not required to be unique: the same release may
    legitimately be deployed many times.
    """

    id: str
    release_id: str
    environment_id: str
    deployed_at: datetime
