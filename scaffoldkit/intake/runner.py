from __future__ import annotations

from collections.abc import Callable, Mapping
from types import MappingProxyType
from typing import Any

from scaffoldkit.intake.fields import Domain, FieldSpec, settle
from scaffoldkit.logging.audit import AuditLogger
from scaffoldkit.state.models import ResolvedField
from scaffoldkit.ui.prompts import Prompter, Question

ResolvedCallback = Callable[[FieldSpec, ResolvedField], None]


def select_default_index(choices: list[Any], value: Any) -> int | None:
    """Position of ``value`` in ``choices``, falling back to the last entry."""
    if not choices:
        return None
    try:
        return choices.index(value)
    except ValueError:
        return len(choices) - 1


class PromptRunner:
    def __init__(self, prompter: Prompter, *, audit: AuditLogger | None = None):
        self.prompter = prompter
        self.audit = audit
        self.asked: list[str] = []

    async def run(
        self,
        domain: Domain,
        plan: list[FieldSpec],
        stored: Mapping[str, Any],
        context: Mapping[str, Any] | None = None,
        on_resolved: ResolvedCallback | None = None,
    ) -> list[ResolvedField]:
        planned = {spec.name for spec in plan}
        answers: dict[str, Any] = dict(context or {})
        resolved: list[ResolvedField] = []

        for spec in domain.fields:
            snapshot = MappingProxyType(dict(answers))
            stored_value = stored.get(spec.name)
            if spec.name not in planned:
                field = ResolvedField(name=spec.name, value=stored_value, origin="stored")
            elif not await spec.is_visible(snapshot):
                value = await spec.compute_hidden_default(snapshot, stored_value)
                field = ResolvedField(name=spec.name, value=value, origin="computed")
            else:
                value = await self._ask(domain, spec, snapshot, stored_value)
                field = ResolvedField(name=spec.name, value=value, origin="answered")

            answers[spec.name] = field.value
            resolved.append(field)
            self._log(
                {
                    "event_type": "field_resolved",
                    "domain": domain.name,
                    "field": spec.name,
                    "origin": field.origin,
                    "value": field.value,
                }
            )
            if on_resolved is not None:
                on_resolved(spec, field)
        return resolved

    async def _ask(self, domain: Domain, spec: FieldSpec, snapshot: Mapping[str, Any], stored_value: Any) -> Any:
        default = await spec.compute_default(snapshot, stored_value)
        question = Question(kind=spec.kind, name=spec.name, message=spec.message, default=default)
        if spec.kind == "select":
            question.choices = await spec.load_choices(snapshot)
            question.default_index = select_default_index(question.choices, default)

        self.asked.append(spec.name)
        self._log({"event_type": "question_asked", "domain": domain.name, "field": spec.name})
        while True:
            raw = await settle(self.prompter.ask(question))
            verdict = _builtin_check(question, raw)
            if verdict is True:
                verdict = spec.check(raw)
            if verdict is True:
                return spec.apply_transform(raw)
            question.error = str(verdict)
            self._log(
                {
                    "event_type": "validation_failed",
                    "domain": domain.name,
                    "field": spec.name,
                    "message": question.error,
                }
            )

    def _log(self, event: dict[str, Any]) -> None:
        if self.audit is not None:
            self.audit.log_resolution_event(event)


def _builtin_check(question: Question, raw: Any) -> bool | str:
    if question.kind == "confirm" and not isinstance(raw, bool):
        return "Please answer yes or no"
    if question.kind == "select" and raw not in question.choices:
        return "Please pick one of the listed choices"
    return True
