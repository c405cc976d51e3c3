from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from scaffoldkit.intake.fields import Domain, FieldSpec


def plan_questions(domain: Domain, stored: Mapping[str, Any], force: bool) -> list[FieldSpec]:
    """Return the fields of ``domain`` that must be put to the operator.

    A field is planned when ``force`` is set or the store holds no value for it.
    Anchored fields (overrides and bound companions) follow their anchor: they
    are planned exactly when the anchor is. Declaration order is kept.
    """
    planned: list[FieldSpec] = []
    planned_names: set[str] = set()
    for spec in domain.fields:
        if spec.anchor is not None:
            include = spec.anchor in planned_names
        else:
            include = force or stored.get(spec.name) is None
        if include:
            planned.append(spec)
            planned_names.add(spec.name)
    return planned
