from __future__ import annotations

from enum import Enum


class LookupErrorKind(str, Enum):
    UNAVAILABLE = "unavailable"
    NOT_FOUND = "not_found"
    MALFORMED = "malformed"


class ProviderLookupError(RuntimeError):
    def __init__(self, message: str, kind: LookupErrorKind):
        super().__init__(message)
        self.kind = kind

    def __repr__(self) -> str:
        return f"ProviderLookupError(kind={self.kind.value!r}, message={str(self)!r})"


def classify_lookup_error(exc: BaseException) -> ProviderLookupError:
    if isinstance(exc, ProviderLookupError):
        return exc
    lowered = str(exc).lower()
    if any(token in lowered for token in ("404", "not found", "nosuch", "does not exist")):
        return ProviderLookupError(str(exc), LookupErrorKind.NOT_FOUND)
    if isinstance(exc, (KeyError, TypeError, ValueError)):
        return ProviderLookupError(str(exc), LookupErrorKind.MALFORMED)
    return ProviderLookupError(str(exc) or exc.__class__.__name__, LookupErrorKind.UNAVAILABLE)
