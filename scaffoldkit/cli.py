from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Any

import typer
from botocore.exceptions import BotoCoreError, ClientError
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from scaffoldkit.config.load import load_config, scaffold_default_config
from scaffoldkit.config.models import ScaffoldConfig
from scaffoldkit.constants import DEFAULT_CONFIG_FILE, PROJECT_TYPES
from scaffoldkit.intake.controller import build_domains, run_resolution
from scaffoldkit.logging.audit import AuditLogger
from scaffoldkit.lookups.aws import AwsProvider, DeploymentLookups
from scaffoldkit.lookups.cache import ExternalDataCache
from scaffoldkit.state.models import ResolutionResult
from scaffoldkit.store.config_store import JsonConfigStore
from scaffoldkit.ui.prompts import LinePrompter, Prompter, ScriptedPrompter, ScriptExhaustedError

app = typer.Typer(help="Resolve and persist the settings needed to scaffold a project")
console = Console()


@app.command()
def init(
    path: str = typer.Option(
        DEFAULT_CONFIG_FILE,
        "--path",
        help="Path where scaffoldkit.toml will be created.",
    ),
    force: bool = typer.Option(
        False,
        "--force",
        help="Overwrite the config file if it already exists.",
    ),
) -> None:
    target = Path(path)
    if target.exists() and not force:
        raise typer.BadParameter(f"{path} already exists. Use --force to overwrite.")
    scaffold_default_config(target)
    typer.echo(f"Initialized {target}")


@app.command()
def resolve(
    project_type: str | None = typer.Option(
        None,
        "--type",
        help="Project type to resolve settings for: microservice or lambda. Defaults to the config value.",
    ),
    force: bool = typer.Option(
        False,
        "--force",
        help="Ask every question again even when a value was stored by a previous run.",
    ),
    config: str = typer.Option(
        DEFAULT_CONFIG_FILE,
        "--config",
        help="Path to scaffoldkit.toml configuration file.",
    ),
    answers: str | None = typer.Option(
        None,
        "--answers",
        help="JSON file of answers keyed by field name for non-interactive runs.",
    ),
    create_bucket: bool = typer.Option(
        True,
        "--create-bucket/--no-create-bucket",
        help="Create the deployment bucket when the operator confirmed it.",
    ),
) -> None:
    cfg = _load(config)
    project_type = project_type or cfg.run.project_type
    if project_type not in PROJECT_TYPES:
        raise typer.BadParameter(f"Unknown project type '{project_type}'. Expected one of: {', '.join(PROJECT_TYPES)}.")

    try:
        store = JsonConfigStore(Path(cfg.store.path), cfg.store.namespace)
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc
    audit = AuditLogger(Path(cfg.run.logs_dir)) if cfg.run.audit_enabled else None
    cache = ExternalDataCache(audit)
    provider = AwsProvider(cfg.aws)
    domains = build_domains(project_type, cfg, DeploymentLookups(provider, cache))

    try:
        result = run_resolution(
            domains,
            store,
            prompter=_build_prompter(answers),
            force=force,
            cache=cache,
            audit=audit,
            project_type=project_type,
        )
    except ScriptExhaustedError as exc:
        raise typer.BadParameter(str(exc)) from exc

    _render_summary(result)
    for lookup in result.degraded_lookups:
        typer.echo(f"Warning: lookup {lookup.key} unavailable ({lookup.error_kind}); offered manual entry instead.")

    # A stored confirmation belongs to an earlier run.
    if create_bucket and result.answers.get("aws_s3_bucket_create") and result.origin_of("aws_s3_bucket_create") == "answered":
        _ensure_bucket(
            provider,
            str(result.answers["aws_s3_bucket"]),
            result.answers.get("aws_profile"),
            result.answers.get("aws_region"),
        )


@app.command()
def show(
    config: str = typer.Option(
        DEFAULT_CONFIG_FILE,
        "--config",
        help="Path to scaffoldkit.toml configuration file.",
    ),
) -> None:
    cfg = _load(config)
    try:
        store = JsonConfigStore(Path(cfg.store.path), cfg.store.namespace)
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc
    values = store.values()
    if not values:
        typer.echo(f"No stored values in {cfg.store.path}")
        return
    table = Table(title="Stored values", border_style="bright_black")
    table.add_column("Field", style="bold white")
    table.add_column("Value", style="white")
    for key in sorted(values):
        table.add_row(key, _display(values[key]))
    console.print(table)


def _load(config: str) -> ScaffoldConfig:
    try:
        return load_config(config)
    except ValidationError as exc:
        raise typer.BadParameter(f"Invalid config {config}: {exc}") from exc


def _build_prompter(answers_path: str | None) -> Prompter:
    if answers_path is None:
        return LinePrompter(lambda message: typer.prompt(message, default="", show_default=False, prompt_suffix=""))
    path = Path(answers_path)
    if not path.exists():
        raise typer.BadParameter(f"Answers file {answers_path} not found.")
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise typer.BadParameter(f"Answers file {answers_path} is not valid JSON: {exc}") from exc
    if not isinstance(payload, dict):
        raise typer.BadParameter("Answers file must contain a JSON object keyed by field name.")
    return ScriptedPrompter(payload)


def _render_summary(result: ResolutionResult) -> None:
    table = Table(title="Resolved settings", border_style="bright_black")
    table.add_column("Domain", style="bold white")
    table.add_column("Field", style="white")
    table.add_column("Value", style="white")
    table.add_column("Origin", style="dim")
    for resolution in result.domains:
        origins = {field.name: field.origin for field in resolution.fields}
        for name, value in resolution.answers.items():
            table.add_row(resolution.domain, name, _display(value), origins.get(name, "computed"))
    console.print(table)
    typer.echo(f"Questions asked: {result.questions_asked}")


def _ensure_bucket(provider: AwsProvider, bucket: str, profile: str | None, region: str | None) -> None:
    typer.echo(f"Creating S3 bucket: {bucket}")
    try:
        created = asyncio.run(provider.create_bucket(bucket, profile, region))
    except (BotoCoreError, ClientError) as exc:
        typer.echo(f"Error creating S3 bucket ({bucket}): {exc}")
        return
    typer.echo(f"S3 bucket created: {created['location'] or bucket}")


def _display(value: Any) -> str:
    if isinstance(value, (list, tuple)):
        return ", ".join(str(item) for item in value)
    return str(value)


if __name__ == "__main__":
    app()
