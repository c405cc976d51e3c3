from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any, Protocol

from scaffoldkit.intake.fields import FieldKind

TRUE_TOKENS = {"y", "yes", "true"}
FALSE_TOKENS = {"n", "no", "false"}


@dataclass
class Question:
    kind: FieldKind
    name: str
    message: str
    default: Any = None
    choices: list[Any] = field(default_factory=list)
    default_index: int | None = None
    error: str | None = None

    @property
    def default_choice(self) -> Any:
        if self.default_index is None or not self.choices:
            return None
        return self.choices[self.default_index]

    @property
    def default_answer(self) -> Any:
        if self.kind == "select":
            return self.default_choice
        if self.kind == "confirm":
            return bool(self.default)
        return self.default


class Prompter(Protocol):
    def ask(self, question: Question) -> Any: ...


class ScriptExhaustedError(ValueError):
    pass


class LinePrompter:
    """Asks questions through a ``prompt_fn(message) -> reply`` line function."""

    def __init__(self, prompt_fn: Callable[[str], str]):
        self.prompt_fn = prompt_fn

    def ask(self, question: Question) -> Any:
        reply = self.prompt_fn(self.render(question)).strip()
        return self.parse(question, reply)

    def render(self, question: Question) -> str:
        lines: list[str] = []
        if question.error:
            lines.append(f">> {question.error}")
        if question.kind == "select":
            for index, choice in enumerate(question.choices, start=1):
                marker = "*" if index - 1 == question.default_index else " "
                lines.append(f"{marker} {index}) {choice}")
        lines.append(f"{question.message}{_default_suffix(question)}: ")
        return "\n".join(lines)

    def parse(self, question: Question, reply: str) -> Any:
        if not reply:
            return question.default_answer
        if question.kind == "confirm":
            lowered = reply.lower()
            if lowered in TRUE_TOKENS:
                return True
            if lowered in FALSE_TOKENS:
                return False
            return reply
        if question.kind == "select":
            if reply.isdigit() and 1 <= int(reply) <= len(question.choices):
                return question.choices[int(reply) - 1]
            return reply
        return reply


class ScriptedPrompter:
    """Answers questions from a mapping of field name to reply.

    A tuple value lists successive replies for the same field, one per attempt.
    Fields without a scripted reply take the offered default.
    """

    def __init__(self, answers: Mapping[str, Any]):
        self._pending: dict[str, list[Any]] = {
            name: list(value) if isinstance(value, tuple) else [value] for name, value in answers.items()
        }
        self.asked: list[Question] = []

    def ask(self, question: Question) -> Any:
        self.asked.append(question)
        if question.name not in self._pending:
            if question.error:
                raise ScriptExhaustedError(f"Default for '{question.name}' was rejected: {question.error}")
            return question.default_answer
        pending = self._pending[question.name]
        if not pending:
            raise ScriptExhaustedError(
                f"No scripted answer left for '{question.name}' (last error: {question.error})."
            )
        return pending.pop(0)

    @property
    def asked_names(self) -> list[str]:
        return [question.name for question in self.asked]


def _default_suffix(question: Question) -> str:
    if question.kind == "confirm":
        return " [yes]" if question.default else " [no]"
    default = question.default_answer
    if default in (None, "", []):
        return ""
    if isinstance(default, (list, tuple)):
        return f" [{', '.join(str(item) for item in default)}]"
    return f" [{default}]"
