from __future__ import annotations

import asyncio
from collections.abc import Callable, Mapping, Sequence
from typing import Any

from scaffoldkit.config.models import ScaffoldConfig
from scaffoldkit.constants import PROJECT_TYPE_KEY
from scaffoldkit.intake.catalog import (
    LAMBDA_DOMAIN,
    PROJECT_DOMAIN,
    build_lambda_domains,
    build_microservice_domains,
    decamelize,
)
from scaffoldkit.intake.fields import Domain, FieldSpec
from scaffoldkit.intake.overrides import apply_overrides, has_override
from scaffoldkit.intake.planner import plan_questions
from scaffoldkit.intake.runner import PromptRunner
from scaffoldkit.logging.audit import AuditLogger
from scaffoldkit.lookups.aws import DeploymentLookups
from scaffoldkit.lookups.cache import ExternalDataCache
from scaffoldkit.state.models import DomainResolution, ResolutionResult, ResolvedField
from scaffoldkit.store.config_store import ConfigStore
from scaffoldkit.ui.prompts import Prompter


def namespaced_name(namespace: str | None, name: str) -> str:
    if namespace:
        return f"{namespace}/{name}"
    return name


def derive_project_composites(answers: Mapping[str, Any]) -> dict[str, Any]:
    return {
        "project_namespaced_name": namespaced_name(answers.get("project_namespace"), str(answers.get("project_name", ""))),
    }


def derive_lambda_composites(answers: Mapping[str, Any]) -> dict[str, Any]:
    function_name = str(answers.get("lambda_function_name", ""))
    handler_file = decamelize(function_name).replace("_", "-")
    return {
        "lambda_handler_file": f"{handler_file}-handler",
        "lambda_schema_file": f"{handler_file}-schema",
        "lambda_spec_file": f"{handler_file}-handler-spec",
        "lambda_qualified_name": f"{answers.get('project_prefix')}-{function_name}",
    }


COMPOSITE_DERIVATIONS: dict[str, Callable[[Mapping[str, Any]], dict[str, Any]]] = {
    PROJECT_DOMAIN: derive_project_composites,
    LAMBDA_DOMAIN: derive_lambda_composites,
}


def build_domains(
    project_type: str,
    cfg: ScaffoldConfig,
    lookups: DeploymentLookups,
    app_name: str | None = None,
) -> tuple[Domain, ...]:
    if project_type == "lambda":
        return build_lambda_domains(cfg.defaults, app_name)
    if project_type == "microservice":
        return build_microservice_domains(lookups, cfg.defaults, app_name)
    raise ValueError(f"Unsupported project type: {project_type}")


async def resolve_all(
    domains: Sequence[Domain],
    store: ConfigStore,
    *,
    prompter: Prompter,
    force: bool = False,
    cache: ExternalDataCache | None = None,
    audit: AuditLogger | None = None,
    project_type: str | None = None,
) -> ResolutionResult:
    """Resolve every domain in order, persisting each field as it resolves.

    Later domains see the final answers of earlier ones, plus any composite
    values derived after them, through the shared answer set.
    """
    runner = PromptRunner(prompter, audit=audit)
    shared: dict[str, Any] = {}
    result = ResolutionResult()
    if project_type is not None:
        store.set(PROJECT_TYPE_KEY, project_type)

    for domain in domains:
        resolution = await resolve_domain(domain, store, runner, shared, force=force, audit=audit)
        shared.update(resolution.answers)
        derive = COMPOSITE_DERIVATIONS.get(domain.name)
        if derive is not None:
            shared.update(derive(shared))
        result.domains.append(resolution)

    result.answers = shared
    if cache is not None:
        result.degraded_lookups = cache.degraded()
    return result


async def resolve_domain(
    domain: Domain,
    store: ConfigStore,
    runner: PromptRunner,
    shared: Mapping[str, Any],
    *,
    force: bool,
    audit: AuditLogger | None = None,
) -> DomainResolution:
    stored = {name: store.get(name) for name in domain.persisted_names()}
    plan = plan_questions(domain, stored, force)
    _log(audit, {"event_type": "domain_started", "domain": domain.name, "planned": [spec.name for spec in plan]})

    overridden = {base for base, _override in domain.overrides()}
    held: dict[str, Any] = {}

    def write(name: str, value: Any) -> None:
        if value is not None:
            store.set(name, value)

    # A base field with an override is written once its override has resolved.
    def persist(spec: FieldSpec, field: ResolvedField) -> None:
        if not domain.persist:
            return
        if spec.name in overridden:
            held[spec.name] = field.value
        elif spec.override_of is not None:
            base_value = held.pop(spec.override_of, None)
            write(spec.override_of, field.value if has_override(field.value) else base_value)
        elif spec.persisted:
            write(spec.name, field.value)

    asked_before = len(runner.asked)
    fields = await runner.run(domain, plan, stored, shared, on_resolved=persist)
    answers = apply_overrides(domain, {field.name: field.value for field in fields})
    resolution = DomainResolution(
        domain=domain.name,
        fields=fields,
        asked=runner.asked[asked_before:],
        answers=answers,
    )
    _log(audit, {"event_type": "domain_completed", "domain": domain.name, "asked": resolution.asked})
    return resolution


def run_resolution(
    domains: Sequence[Domain],
    store: ConfigStore,
    *,
    prompter: Prompter,
    force: bool = False,
    cache: ExternalDataCache | None = None,
    audit: AuditLogger | None = None,
    project_type: str | None = None,
) -> ResolutionResult:
    return asyncio.run(
        resolve_all(
            domains,
            store,
            prompter=prompter,
            force=force,
            cache=cache,
            audit=audit,
            project_type=project_type,
        )
    )


def _log(audit: AuditLogger | None, event: dict[str, Any]) -> None:
    if audit is not None:
        audit.log_resolution_event(event)
