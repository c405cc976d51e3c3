from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

from scaffoldkit.logging.audit import AuditLogger
from scaffoldkit.lookups.errors import classify_lookup_error
from scaffoldkit.state.models import LookupResult


@dataclass(frozen=True)
class LookupKey:
    kind: str
    discriminator: tuple[str, ...] = ()

    @property
    def label(self) -> str:
        if not self.discriminator:
            return self.kind
        return f"{self.kind}:{'/'.join(self.discriminator)}"


Loader = Callable[[], Awaitable[Any]]


class ExternalDataCache:
    """Memoizes slow external lookups for the lifetime of the cache object.

    The first ``fetch`` for a key schedules the loader and registers the pending
    task before it settles, so concurrent callers share one load. Loader failures
    settle to a degraded result carrying the caller-supplied empty value.
    """

    def __init__(self, audit: AuditLogger | None = None) -> None:
        self._entries: dict[LookupKey, asyncio.Future[LookupResult]] = {}
        self._settled: dict[LookupKey, LookupResult] = {}
        self._audit = audit

    def __contains__(self, key: LookupKey) -> bool:
        return key in self._entries or key in self._settled

    async def fetch(self, key: LookupKey, loader: Loader, *, empty: Any) -> LookupResult:
        settled = self._settled.get(key)
        if settled is not None:
            return settled
        entry = self._entries.get(key)
        if entry is None:
            entry = asyncio.ensure_future(self._load(key, loader, empty))
            self._entries[key] = entry
        return await entry

    async def fetch_choices(self, key: LookupKey, loader: Loader, *, sentinel: str) -> list[str]:
        result = await self.fetch(key, loader, empty=[])
        return [*result.value, sentinel]

    async def fetch_flag(self, key: LookupKey, loader: Loader) -> bool:
        result = await self.fetch(key, loader, empty=False)
        return bool(result.value)

    def degraded(self) -> list[LookupResult]:
        return [result for result in self._settled.values() if result.degraded]

    async def _load(self, key: LookupKey, loader: Loader, empty: Any) -> LookupResult:
        self._log({"event_type": "lookup_started", "key": key.label})
        try:
            value = await loader()
        except Exception as exc:
            classified = classify_lookup_error(exc)
            result = LookupResult(
                key=key.label,
                value=_copy_empty(empty),
                degraded=True,
                error_kind=classified.kind.value,
                error=str(classified),
            )
            self._log(
                {
                    "event_type": "lookup_degraded",
                    "key": key.label,
                    "error_kind": result.error_kind,
                    "error": result.error,
                }
            )
        else:
            if isinstance(empty, list):
                value = list(value or [])
            result = LookupResult(key=key.label, value=value)
            self._log({"event_type": "lookup_settled", "key": key.label})
        self._settled[key] = result
        return result

    def _log(self, event: dict[str, Any]) -> None:
        if self._audit is not None:
            self._audit.log_lookup_event(event)


def _copy_empty(empty: Any) -> Any:
    if isinstance(empty, list):
        return list(empty)
    return empty
