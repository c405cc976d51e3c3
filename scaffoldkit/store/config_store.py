from __future__ import annotations

import json
import os
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Any, Protocol

from scaffoldkit.constants import GENERATOR_NAME


class ConfigStore(Protocol):
    def get(self, key: str) -> Any: ...

    def set(self, key: str, value: Any) -> None: ...


class JsonConfigStore:
    """Durable key-value map persisted as ``{"<namespace>": {key: value}}``.

    Every ``set`` rewrites the file through a temporary sibling and an atomic
    replace. The in-memory view changes only once that write succeeded. Other
    namespaces in the same file are preserved.
    """

    def __init__(self, path: Path, namespace: str = GENERATOR_NAME):
        self.path = path
        self.namespace = namespace
        self._document = self._read()

    def get(self, key: str) -> Any:
        return self._section().get(key)

    def set(self, key: str, value: Any) -> None:
        document = {**self._document, self.namespace: {**self._section(), key: value}}
        self._write(document)
        self._document = document

    def values(self) -> dict[str, Any]:
        return dict(self._section())

    def _section(self) -> dict[str, Any]:
        return self._document.get(self.namespace, {})

    def _read(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            payload = json.loads(self.path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise ValueError(f"Config store {self.path} is not valid JSON: {exc}") from exc
        if not isinstance(payload, dict):
            raise ValueError(f"Config store {self.path} must contain a JSON object.")
        section = payload.get(self.namespace, {})
        if not isinstance(section, dict):
            raise ValueError(f"Config store section '{self.namespace}' must be a JSON object.")
        return payload

    def _write(self, document: dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        temp_path: Path | None = None
        try:
            with NamedTemporaryFile(
                "w",
                encoding="utf-8",
                delete=False,
                dir=self.path.parent,
                prefix=f".{self.path.name}.",
                suffix=".tmp",
            ) as handle:
                temp_path = Path(handle.name)
                handle.write(json.dumps(document, indent=2, sort_keys=True) + "\n")
            os.replace(temp_path, self.path)
        finally:
            if temp_path is not None and temp_path.exists():
                temp_path.unlink(missing_ok=True)
