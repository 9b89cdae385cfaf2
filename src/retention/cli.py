# src/retention/cli.py
"""release-retention Command Line Interface.

Entry point for the retention CLI tool.
"""

import json
from pathlib import Path
from typing import Any

import typer
from dynaconf.vendor.ruamel.yaml.parser import ParserError as YamlParserError
from dynaconf.vendor.ruamel.yaml.scanner import ScannerError as YamlScannerError
from pydantic import ValidationError

from retention import __version__
from retention.contracts import (
    Dataset,
    DatasetFormatError,
    DatasetValidationReport,
    RetentionResult,
    RetentionValidationError,
)
from retention.core.config import RetentionSettings, load_settings
from retention.telemetry.errors import TelemetryExporterError

__all__ = ["app"]

_OUTPUT_FORMATS = ("console", "json")

app = typer.Typer(
    name="retention",
    help="Decide which deployed releases to keep per project and environment.",
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"retention version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    version: bool | None = typer.Option(
        None,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose/debug logging.",
    ),
    json_logs: bool = typer.Option(
        False,
        "--json-logs",
        help="Output structured JSON logs (for machine processing).",
    ),
) -> None:
    """Decide which deployed releases to keep per project and environment."""
    from retention.core.logging import configure_logging

    configure_logging(json_output=json_logs, level="DEBUG" if verbose else "WARNING")
    ctx.obj = {"logging_from_flags": verbose or json_logs}


def _check_output_format(value: str | None) -> str | None:
    if value is not None and value not in _OUTPUT_FORMATS:
        raise typer.BadParameter(f"must be one of: {', '.join(_OUTPUT_FORMATS)}")
    return value


def _load_settings_or_exit(settings_path: Path | None) -> RetentionSettings:
    try:
        return load_settings(settings_path.expanduser() if settings_path is not None else None)
    except (YamlParserError, YamlScannerError) as e:
        typer.echo(f"YAML syntax error in {settings_path}: {e.problem}", err=True)
        raise typer.Exit(1) from None
    except FileNotFoundError:
        typer.echo(f"Error: Settings file not found: {settings_path}", err=True)
        raise typer.Exit(1) from None
    except ValidationError as e:
        typer.echo("Configuration errors:", err=True)
        for error in e.errors():
            loc = ".".join(str(x) for x in error["loc"])
            typer.echo(f"  - {loc}: {error['msg']}", err=True)
        raise typer.Exit(1) from None


def _apply_logging_settings(ctx: typer.Context, config: RetentionSettings) -> None:
    """Use the logging settings (file, environment, defaults) unless logging flags were given."""
    from retention.core.logging import configure_logging

    if ctx.obj and ctx.obj.get("logging_from_flags"):
        return
    configure_logging(json_output=config.logging.json_output, level=config.logging.level)


def _load_dataset_or_exit(dataset_path: Path) -> Dataset:
    from retention.core.dataset import load_dataset

    try:
        return load_dataset(dataset_path.expanduser())
    except FileNotFoundError:
        typer.echo(f"Error: Dataset file not found: {dataset_path}", err=True)
        raise typer.Exit(1) from None
    except DatasetFormatError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from None


def _render_json(document: dict[str, Any], indent: int | None) -> str:
    from retention.core.canonical import canonical_json

    if indent is None:
        return canonical_json(document)
    return json.dumps(document, indent=indent, ensure_ascii=False)


def _echo_result_console(result: RetentionResult, releases_to_keep: int, fingerprint: str) -> None:
    diagnostics = result.diagnostics
    typer.echo(f"Releases to keep per project/environment: {releases_to_keep}")
    typer.echo(
        f"Groups evaluated: {diagnostics.groups_evaluated} | "
        f"Kept: {diagnostics.total_kept_releases} | "
        f"Invalid deployments excluded: {diagnostics.invalid_deployments_excluded}"
    )

    current_group: tuple[str, str] | None = None
    for kept in result.kept_releases:
        group = (kept.project_id, kept.environment_id)
        if group != current_group:
            typer.echo(f"\n{kept.project_id} / {kept.environment_id}")
            current_group = group
        version = kept.version if kept.version is not None else "-"
        typer.echo(
            f"  #{kept.rank} {kept.release_id} (version {version}) last deployed {kept.latest_deployed_at.isoformat()}"
        )

    diagnostics_entries = [d for d in result.decisions if d.decision_type == "diagnostic"]
    if diagnostics_entries:
        typer.echo("\nExcluded deployments:")
        for entry in diagnostics_entries:
            typer.echo(f"  - {entry.reason_text}")

    typer.echo(f"\nResult fingerprint: {fingerprint}")


@app.command()
def evaluate(
    ctx: typer.Context,
    dataset: Path = typer.Argument(
        ...,
        help="Path to the dataset JSON document.",
    ),
    releases_to_keep: int | None = typer.Option(
        None,
        "--keep",
        "-n",
        help="Releases to keep per project/environment (overrides settings).",
    ),
    correlation_id: str | None = typer.Option(
        None,
        "--correlation-id",
        "-c",
        help="Identifier copied onto every decision entry (overrides settings).",
    ),
    settings: Path | None = typer.Option(
        None,
        "--settings",
        "-s",
        help="Path to settings YAML file.",
    ),
    output_format: str | None = typer.Option(
        None,
        "--format",
        "-f",
        callback=_check_output_format,
        help="Output format: 'console' (human-readable) or 'json' (structured JSON).",
    ),
    output: Path | None = typer.Option(
        None,
        "--output",
        "-o",
        help="Also write the JSON result document to this file.",
    ),
) -> None:
    """Evaluate retention for a dataset and print the kept releases."""
    from retention.core.canonical import result_fingerprint, result_to_dict
    from retention.engine import InstrumentedRetentionEvaluator
    from retention.telemetry.factory import create_telemetry_manager

    config = _load_settings_or_exit(settings)
    _apply_logging_settings(ctx, config)
    n = releases_to_keep if releases_to_keep is not None else config.releases_to_keep
    correlation = correlation_id if correlation_id is not None else config.correlation_id
    fmt = output_format if output_format is not None else config.output.format

    data = _load_dataset_or_exit(dataset)

    try:
        manager = create_telemetry_manager(config.telemetry)
    except TelemetryExporterError as e:
        typer.echo(f"Telemetry configuration error: {e}", err=True)
        raise typer.Exit(1) from None

    evaluator = InstrumentedRetentionEvaluator(telemetry=manager)
    try:
        result = evaluator.evaluate(
            data.projects,
            data.environments,
            data.releases,
            data.deployments,
            n,
            correlation,
        )
    except RetentionValidationError as e:
        if fmt == "json":
            typer.echo(
                json.dumps({"event": "error", "code": e.code.value, "message": e.message}),
                err=True,
            )
        else:
            typer.echo(str(e), err=True)
        raise typer.Exit(1) from None
    finally:
        if manager is not None:
            manager.close()

    document = result_to_dict(result)
    if output is not None:
        output.expanduser().write_text(_render_json(document, config.output.indent) + "\n", encoding="utf-8")

    if fmt == "json":
        typer.echo(_render_json(document, config.output.indent))
    else:
        _echo_result_console(result, n, result_fingerprint(result))


def _echo_report_console(report: DatasetValidationReport) -> None:
    summary = report.summary
    status = "valid" if report.is_valid else "INVALID"
    typer.echo(
        f"Dataset is {status}: {summary.project_count} projects, {summary.environment_count} environments, "
        f"{summary.release_count} releases, {summary.deployment_count} deployments"
    )
    for label, messages in (("Errors", report.errors), ("Warnings", report.warnings)):
        if not messages:
            continue
        typer.echo(f"\n{label} ({len(messages)}):")
        for message in messages:
            location = f" at {message.path}" if message.path else ""
            typer.echo(f"  - [{message.code.value}]{location}: {message.message}")


@app.command()
def validate(
    dataset: Path = typer.Argument(
        ...,
        help="Path to the dataset JSON document.",
    ),
    output_format: str = typer.Option(
        "console",
        "--format",
        "-f",
        callback=_check_output_format,
        help="Output format: 'console' (human-readable) or 'json' (structured JSON).",
    ),
) -> None:
    """Report every structural and reference problem in a dataset.

    Exits with status 1 when the dataset has errors. Warnings (dangling
    references) do not fail validation; evaluation diagnoses them.
    """
    from retention.core.canonical import report_to_dict
    from retention.engine import SpanFactory, validate_dataset

    data = _load_dataset_or_exit(dataset)

    counts = {
        "projects": len(data.projects),
        "environments": len(data.environments),
        "releases": len(data.releases),
        "deployments": len(data.deployments),
    }
    with SpanFactory().validate_dataset_span(counts) as span:
        report = validate_dataset(data)
        span.set_attribute("error_count", report.summary.error_count)
        span.set_attribute("warning_count", report.summary.warning_count)

    if output_format == "json":
        typer.echo(_render_json(report_to_dict(report), None))
    else:
        _echo_report_console(report)

    if not report.is_valid:
        raise typer.Exit(1)


@app.command("config")
def show_config(
    settings: Path | None = typer.Option(
        None,
        "--settings",
        "-s",
        help="Path to settings YAML file.",
    ),
) -> None:
    """Print the resolved settings (file, environment and defaults) as YAML."""
    import yaml

    from retention.core.config import resolve_config

    config = _load_settings_or_exit(settings)
    typer.echo(yaml.safe_dump(resolve_config(config), sort_keys=False).rstrip())
