# src/retention/core/dataset.py
"""Dataset document loading.

Parses the JSON dataset document into entity collections:

    {
      "projects":     [{"id": "P1", "name": "Shop"}],
      "environments": [{"id": "E1", "name": "Production"}],
      "releases":     [{"id": "R1", "projectId": "P1", "version": "1.0.0",
                        "created": "2024-01-01T08:00:00Z"}],
      "deployments":  [{"id": "D1", "releaseId": "R1", "environmentId": "E1",
                        "deployedAt": "2024-01-01T10:00:00Z"}]
    }

Trust boundary rules:
- A missing or null collection is an empty collection.
- A null ELEMENT inside a collection is preserved as None so that the
  engine reports it with its stable validation.null_element code.
- A missing id, name or reference field is read as "" so that
  validate_dataset() reports it as validation.missing_required_field.
- A missing or unparseable timestamp, or a value of the wrong type,
  raises DatasetFormatError; it never reaches the engine.
- Naive timestamps are interpreted as UTC; aware timestamps are
  converted to UTC.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

import structlog
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from retention.contracts.dataset import Dataset
from retention.contracts.entities import Deployment, Environment, Project, Release
from retention.contracts.errors import DatasetFormatError

logger = structlog.get_logger(__name__)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


class _DocumentModel(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")


class ProjectDocument(_DocumentModel):
    id: str = ""
    name: str = ""

    def to_entity(self) -> Project:
        return Project(id=self.id, name=self.name)


class EnvironmentDocument(_DocumentModel):
    id: str = ""
    name: str = ""

    def to_entity(self) -> Environment:
        return Environment(id=self.id, name=self.name)


class ReleaseDocument(_DocumentModel):
    id: str = ""
    project_id: str = Field(default="", alias="projectId")
    version: str | None = None
    created: datetime

    @field_validator("created")
    @classmethod
    def normalize_created(cls, v: datetime) -> datetime:
        return _as_utc(v)

    def to_entity(self) -> Release:
        return Release(id=self.id, project_id=self.project_id, version=self.version, created=self.created)


class DeploymentDocument(_DocumentModel):
    id: str = ""
    release_id: str = Field(default="", alias="releaseId")
    environment_id: str = Field(default="", alias="environmentId")
    deployed_at: datetime = Field(alias="deployedAt")

    @field_validator("deployed_at")
    @classmethod
    def normalize_deployed_at(cls, v: datetime) -> datetime:
        return _as_utc(v)

    def to_entity(self) -> Deployment:
        return Deployment(
            id=self.id,
            release_id=self.release_id,
            environment_id=self.environment_id,
            deployed_at=self.deployed_at,
        )


class DatasetDocument(_DocumentModel):
    """Top-level dataset document. Null collections become empty lists."""

    projects: list[ProjectDocument | None] = Field(default_factory=list)
    environments: list[EnvironmentDocument | None] = Field(default_factory=list)
    releases: list[ReleaseDocument | None] = Field(default_factory=list)
    deployments: list[DeploymentDocument | None] = Field(default_factory=list)

    @field_validator("projects", "environments", "releases", "deployments", mode="before")
    @classmethod
    def null_collection_is_empty(cls, v: Any) -> Any:
        return [] if v is None else v

    def to_dataset(self) -> Dataset:
        return Dataset(
            projects=tuple(p.to_entity() if p is not None else None for p in self.projects),
            environments=tuple(e.to_entity() if e is not None else None for e in self.environments),
            releases=tuple(r.to_entity() if r is not None else None for r in self.releases),
            deployments=tuple(d.to_entity() if d is not None else None for d in self.deployments),
        )


def _format_validation_error(error: ValidationError) -> str:
    parts = []
    for detail in error.errors():
        loc = ".".join(str(x) for x in detail["loc"])
        parts.append(f"{loc}: {detail['msg']}")
    return "; ".join(parts)


def parse_dataset(document: Mapping[str, Any], *, source: str = "<mapping>") -> Dataset:
    """Parse an already-decoded dataset document.

    Raises:
        DatasetFormatError: If the document is not an object, a timestamp is
            missing or unparseable, or a value has the wrong type
    """
    if not isinstance(document, Mapping):
        raise DatasetFormatError(source, f"expected a JSON object, got {type(document).__name__}")
    try:
        parsed = DatasetDocument.model_validate(dict(document))
    except ValidationError as e:
        raise DatasetFormatError(source, _format_validation_error(e)) from e
    return parsed.to_dataset()


def load_dataset(path: Path) -> Dataset:
    """Load and parse a dataset JSON file.

    Raises:
        FileNotFoundError: If the file does not exist
        DatasetFormatError: If the file is not valid JSON or not a valid dataset
    """
    if not path.exists():
        raise FileNotFoundError(f"Dataset file not found: {path}")

    try:
        document = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise DatasetFormatError(str(path), f"invalid JSON at line {e.lineno} column {e.colno}: {e.msg}") from e

    dataset = parse_dataset(document, source=str(path))
    logger.debug(
        "dataset_loaded",
        path=str(path),
        projects=len(dataset.projects),
        environments=len(dataset.environments),
        releases=len(dataset.releases),
        deployments=len(dataset.deployments),
    )
    return dataset
