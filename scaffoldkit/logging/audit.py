from __future__ import annotations

import json
from datetime import UTC, datetime
from itertools import count
from pathlib import Path
from typing import Any

from scaffoldkit.logging.redaction import redact_obj

RESOLUTION_STREAM = "resolution"
LOOKUP_STREAM = "lookup"


class AuditLogger:
    """Appends redacted resolution and lookup events as JSON lines.

    Both streams share one sequence counter, so interleaved prompts and lookups
    of a run can be put back in order across the two files.
    """

    def __init__(self, logs_dir: Path):
        logs_dir.mkdir(parents=True, exist_ok=True)
        self.resolution_events = logs_dir / "resolution_events.jsonl"
        self.lookup_events = logs_dir / "lookup_events.jsonl"
        self._streams = {
            RESOLUTION_STREAM: self.resolution_events,
            LOOKUP_STREAM: self.lookup_events,
        }
        self._seq = count(1)

    def log_resolution_event(self, event: dict[str, Any]) -> None:
        self.log(RESOLUTION_STREAM, event)

    def log_lookup_event(self, event: dict[str, Any]) -> None:
        self.log(LOOKUP_STREAM, event)

    def log(self, stream: str, event: dict[str, Any]) -> None:
        path = self._streams[stream]
        record = {
            **redact_obj(event),
            "seq": next(self._seq),
            "timestamp": datetime.now(UTC).isoformat(),
        }
        with path.open("a", encoding="utf-8") as f:
            f.write(json.dumps(record, sort_keys=True, default=str) + "\n")
