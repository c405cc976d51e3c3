from __future__ import annotations

import re
from typing import Any

REDACTED = "[REDACTED]"

CREDENTIAL_KEY_PATTERN = re.compile(r"(?i)(secret|token|password|access[_-]?key)")
ACCESS_KEY_ID_PATTERN = re.compile(r"\b(?:AKIA|ASIA)[0-9A-Z]{16}\b")
CREDENTIAL_ASSIGNMENT_PATTERN = re.compile(
    r"(?i)(?P<name>aws_secret_access_key|aws_session_token|secret|token|password)"
    r"(?P<sep>\s*[:=]\s*)(?P<quote>['\"]?)[\w\-./+=]+(?P=quote)"
)


def redact_text(value: str) -> str:
    """Mask AWS access key ids and ``name=value`` credential assignments."""
    masked = ACCESS_KEY_ID_PATTERN.sub(REDACTED, value)
    return CREDENTIAL_ASSIGNMENT_PATTERN.sub(_mask_assignment, masked)


def redact_obj(value: Any) -> Any:
    if isinstance(value, str):
        return redact_text(value)
    if isinstance(value, dict):
        return {
            key: REDACTED if CREDENTIAL_KEY_PATTERN.search(str(key)) else redact_obj(inner)
            for key, inner in value.items()
        }
    if isinstance(value, (list, tuple)):
        return [redact_obj(inner) for inner in value]
    return value


def _mask_assignment(match: re.Match[str]) -> str:
    quote = match["quote"]
    return f"{match['name']}{match['sep']}{quote}{REDACTED}{quote}"
