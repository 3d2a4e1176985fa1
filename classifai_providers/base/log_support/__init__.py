"""JSON formatter with credential redaction and the event context dataclass."""

from .json_formatter import ISO, REDACTED, JsonFormatter, redact
from .logging_context import LogContext

__all__ = ["ISO", "REDACTED", "JsonFormatter", "LogContext", "redact"]
