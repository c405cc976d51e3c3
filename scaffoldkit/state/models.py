from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field

FieldOrigin = Literal["stored", "computed", "answered"]


class ResolvedField(BaseModel):
    name: str = Field(description="Field name, unique within its domain.")
    value: Any = Field(default=None, description="Value recorded for the field in this resolution pass.")
    origin: FieldOrigin = Field(description="Where the value came from: the store, a computed default, or the operator.")


class DomainResolution(BaseModel):
    domain: str = Field(description="Name of the domain that was resolved.")
    fields: list[ResolvedField] = Field(
        default_factory=list,
        description="Exactly one resolved entry per declared field, in declaration order.",
    )
    asked: list[str] = Field(
        default_factory=list,
        description="Names of the fields that were actually presented to the operator.",
    )
    answers: dict[str, Any] = Field(
        default_factory=dict,
        description="Final answers after override resolution, keyed by field name.",
    )

    def value_of(self, name: str) -> Any:
        return self.answers.get(name)


class LookupResult(BaseModel):
    key: str = Field(description="Rendered lookup key (kind plus discriminating arguments).")
    value: Any = Field(default=None, description="Settled lookup value, or the safe empty value when degraded.")
    degraded: bool = Field(default=False, description="Whether the loader failed and the safe empty value was substituted.")
    error_kind: str | None = Field(default=None, description="Classified failure kind when degraded.")
    error: str | None = Field(default=None, description="Loader failure message when degraded.")


class ResolutionResult(BaseModel):
    domains: list[DomainResolution] = Field(
        default_factory=list,
        description="Per-domain resolutions in the order they ran.",
    )
    answers: dict[str, Any] = Field(
        default_factory=dict,
        description="Shared answer set including derived composite values.",
    )
    degraded_lookups: list[LookupResult] = Field(
        default_factory=list,
        description="External lookups that fell back to safe empty values.",
    )

    @property
    def questions_asked(self) -> int:
        return sum(len(domain.asked) for domain in self.domains)

    def domain(self, name: str) -> DomainResolution | None:
        return next((item for item in self.domains if item.domain == name), None)

    def origin_of(self, name: str) -> FieldOrigin | None:
        for resolution in self.domains:
            for field in resolution.fields:
                if field.name == name:
                    return field.origin
        return None
