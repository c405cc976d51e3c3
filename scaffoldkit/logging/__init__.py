"""JSONL audit trail for field resolution and AWS lookups, with credential masking."""

from scaffoldkit.logging.audit import LOOKUP_STREAM, RESOLUTION_STREAM, AuditLogger
from scaffoldkit.logging.redaction import REDACTED, redact_obj, redact_text

__all__ = ["AuditLogger", "LOOKUP_STREAM", "REDACTED", "RESOLUTION_STREAM", "redact_obj", "redact_text"]
