# src/retention/core/config.py
"""
Configuration schema and loading for release-retention.

Uses Pydantic for validation and Dynaconf for multi-source loading.
Settings are frozen (immutable) after construction.
"""

import os
import re
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator

_VALID_LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})


class LoggingSettings(BaseModel):
    """Logging configuration.

    Example YAML:
        logging:
          level: DEBUG
          json_output: true
    """

    model_config = {"frozen": True}

    level: str = Field(default="INFO", description="Root log level")
    json_output: bool = Field(default=False, description="Emit JSON log lines instead of console output")

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        upper = v.upper()
        if upper not in _VALID_LOG_LEVELS:
            raise ValueError(f"Invalid log level '{v}'. Must be one of: {', '.join(sorted(_VALID_LOG_LEVELS))}")
        return upper


class ExporterSettings(BaseModel):
    """One telemetry exporter: a registered name plus its options."""

    model_config = {"frozen": True}

    name: str = Field(min_length=1, description="Exporter name (e.g. 'console')")
    options: dict[str, Any] = Field(default_factory=dict, description="Exporter-specific options")


class TelemetrySettings(BaseModel):
    """Telemetry configuration.

    Example YAML:
        telemetry:
          enabled: true
          exporters:
            - name: console
              options:
                format: pretty
                output: stderr
    """

    model_config = {"frozen": True}

    enabled: bool = Field(default=False, description="Emit telemetry events for each evaluation")
    exporters: list[ExporterSettings] = Field(default_factory=list)
    max_consecutive_failures: int = Field(
        default=10,
        gt=0,
        description="Disable telemetry after this many events where every exporter failed",
    )


class OutputSettings(BaseModel):
    """How commands render their results."""

    model_config = {"frozen": True}

    format: Literal["console", "json"] = Field(default="console")
    indent: int | None = Field(
        default=None,
        ge=0,
        description="Indent JSON output; None emits canonical (RFC 8785) JSON",
    )


class RetentionSettings(BaseModel):
    """Top-level release-retention configuration.

    Example YAML:
        releases_to_keep: 3
        correlation_id: nightly-cleanup
        output:
          format: json
    """

    model_config = {"frozen": True}

    releases_to_keep: int = Field(
        default=3,
        ge=0,
        description="Releases kept per (project, environment) pair",
    )
    correlation_id: str | None = Field(
        default=None,
        description="Copied verbatim onto every decision entry",
    )
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    telemetry: TelemetrySettings = Field(default_factory=TelemetrySettings)
    output: OutputSettings = Field(default_factory=OutputSettings)


# Regex pattern for ${VAR} or ${VAR:-default} syntax
_ENV_VAR_PATTERN = re.compile(r"\$\{([A-Z_][A-Z0-9_]*)(?::-([^}]*))?\}")


def _expand_env_vars(config: dict[str, Any]) -> dict[str, Any]:
    """Recursively expand ${VAR} and ${VAR:-default} patterns in config values."""

    def _expand_string(value: str) -> str:
        def replacer(match: re.Match[str]) -> str:
            env_value = os.environ.get(match.group(1))
            if env_value is not None:
                return env_value
            default = match.group(2)
            if default is not None:
                return default
            # No env var and no default - keep original so validation reports it
            return match.group(0)

        return _ENV_VAR_PATTERN.sub(replacer, value)

    def _expand_value(value: Any) -> Any:
        if isinstance(value, str):
            return _expand_string(value)
        elif isinstance(value, dict):
            return {k: _expand_value(v) for k, v in value.items()}
        elif isinstance(value, list):
            return [_expand_value(item) for item in value]
        else:
            return value

    return {k: _expand_value(v) for k, v in config.items()}


def _lower_keys(value: Any) -> Any:
    # Dynaconf upper-cases keys at every level; Pydantic field names are lower-case
    if isinstance(value, dict):
        return {str(k).lower(): _lower_keys(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_lower_keys(item) for item in value]
    return value


def load_settings(config_path: Path | None = None) -> RetentionSettings:
    """Load settings from a YAML file with environment variable overrides.

    With no config_path only environment variables and defaults apply.

    Uses Dynaconf for multi-source loading with precedence:
    1. Environment variables (RETENTION_*) - highest priority
    2. Config file
    3. Defaults from Pydantic schema - lowest priority

    Environment variable format: RETENTION_LOGGING__LEVEL for nested keys.

    Raises:
        ValidationError: If configuration fails Pydantic validation
        FileNotFoundError: If config file doesn't exist
    """
    from dynaconf import Dynaconf

    # Dynaconf silently accepts missing files
    if config_path is not None and not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    dynaconf_settings = Dynaconf(
        envvar_prefix="RETENTION",
        settings_files=[str(config_path)] if config_path is not None else [],
        environments=False,
        load_dotenv=False,
        merge_enabled=True,
    )

    internal_keys = {"LOAD_DOTENV", "ENVIRONMENTS", "SETTINGS_FILES"}
    raw_config = {k: v for k, v in dynaconf_settings.as_dict().items() if k not in internal_keys}
    raw_config = _lower_keys(raw_config)
    raw_config = _expand_env_vars(raw_config)

    return RetentionSettings(**raw_config)


def resolve_config(settings: RetentionSettings) -> dict[str, Any]:
    """Convert validated settings to a JSON-ready dict (explicit + defaults)."""
    return settings.model_dump(mode="json")
