from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from scaffoldkit.intake.fields import Domain


def has_override(value: Any) -> bool:
    return isinstance(value, str) and len(value) > 0


def resolve_override(field_name: str, override_field_name: str, answers: Mapping[str, Any]) -> Any:
    override = answers.get(override_field_name)
    if has_override(override):
        return override
    return answers.get(field_name)


def apply_overrides(domain: Domain, answers: Mapping[str, Any]) -> dict[str, Any]:
    """Fold every override field of ``domain`` into its base field.

    Override fields are dropped from the returned mapping; all other entries
    pass through unchanged.
    """
    final = dict(answers)
    for base, override in domain.overrides():
        final[base] = resolve_override(base, override, answers)
        final.pop(override, None)
    return final
