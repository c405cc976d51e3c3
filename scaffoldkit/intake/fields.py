from __future__ import annotations

import inspect
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any, Literal

FieldKind = Literal["input", "select", "confirm"]
Answers = Mapping[str, Any]

DefaultFn = Callable[[Answers, Any], Any]
PredicateFn = Callable[[Answers], Any]
ChoicesFn = Callable[[Answers], Any]


async def settle(value: Any) -> Any:
    if inspect.isawaitable(value):
        return await value
    return value


@dataclass(frozen=True)
class FieldSpec:
    """Declarative description of one configurable value.

    ``default``, ``visible`` and ``choices`` receive a read-only snapshot of the
    answers resolved so far and may return either a value or an awaitable.
    ``default`` also receives the value held in the store for this field (or
    ``None``); when omitted the stored value is offered as-is.

    ``override_of`` names an earlier list field whose value this free-text field
    supersedes when non-empty. ``bound_to`` names an earlier field this one is
    always planned together with. Both kinds of anchored field are asked only
    when their anchor is asked.
    """

    name: str
    message: str
    kind: FieldKind = "input"
    default: DefaultFn | None = None
    validate: Callable[[Any], bool | str] | None = None
    transform: Callable[[Any], Any] | None = None
    visible: PredicateFn | None = None
    choices: ChoicesFn | None = None
    override_of: str | None = None
    bound_to: str | None = None
    persist: bool = True
    hidden_default: DefaultFn | None = None

    @property
    def anchor(self) -> str | None:
        return self.override_of or self.bound_to

    @property
    def persisted(self) -> bool:
        return self.persist and self.override_of is None

    async def compute_default(self, answers: Answers, stored: Any) -> Any:
        if self.default is None:
            return stored
        return await settle(self.default(answers, stored))

    async def compute_hidden_default(self, answers: Answers, stored: Any) -> Any:
        if self.hidden_default is None:
            return await self.compute_default(answers, stored)
        return await settle(self.hidden_default(answers, stored))

    async def is_visible(self, answers: Answers) -> bool:
        if self.visible is None:
            return True
        return bool(await settle(self.visible(answers)))

    async def load_choices(self, answers: Answers) -> list[Any]:
        if self.choices is None:
            return []
        return list(await settle(self.choices(answers)))

    def check(self, raw: Any) -> bool | str:
        if self.validate is None:
            return True
        return self.validate(raw)

    def apply_transform(self, raw: Any) -> Any:
        if self.transform is None:
            return raw
        return self.transform(raw)


@dataclass(frozen=True)
class Domain:
    name: str
    fields: tuple[FieldSpec, ...]
    persist: bool = True

    def __post_init__(self) -> None:
        seen: set[str] = set()
        for spec in self.fields:
            if spec.name in seen:
                raise ValueError(f"Duplicate field '{spec.name}' in domain '{self.name}'.")
            if spec.anchor is not None and spec.anchor not in seen:
                raise ValueError(
                    f"Field '{spec.name}' in domain '{self.name}' references '{spec.anchor}', "
                    "which must be declared before it."
                )
            if spec.override_of is not None and spec.kind != "input":
                raise ValueError(f"Override field '{spec.name}' must be a free-text input.")
            seen.add(spec.name)

    @property
    def names(self) -> list[str]:
        return [spec.name for spec in self.fields]

    def field(self, name: str) -> FieldSpec:
        for spec in self.fields:
            if spec.name == name:
                return spec
        raise KeyError(name)

    def overrides(self) -> list[tuple[str, str]]:
        return [(spec.override_of, spec.name) for spec in self.fields if spec.override_of is not None]

    def persisted_names(self) -> list[str]:
        if not self.persist:
            return []
        return [spec.name for spec in self.fields if spec.persisted]
