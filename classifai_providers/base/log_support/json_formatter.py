"""JSON line formatter for the shared ``classifai`` logger.

Each record becomes one JSON object: timestamp, level, logger name, then the
event payload. ``log_event`` already emits JSON messages; their keys are
hoisted to the top level instead of being nested as a string. Attributes
passed through ``extra=`` are merged as well.

Credential-looking keys (``password``, ``api_key``, ``secret_access_key``...)
are redacted wherever they appear, so a provider block that ends up in an
event never leaks secrets to stderr or the rotating log file.
"""
from __future__ import annotations

import contextlib
import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict

ISO = "%Y-%m-%dT%H:%M:%S.%fZ"
REDACTED = "***"

# Attributes every LogRecord carries; anything else came from ``extra=``.
_RECORD_ATTRS = frozenset(vars(logging.LogRecord("", logging.INFO, "", 0, "", (), None))) | {"message", "asctime", "taskName"}
_SECRET_MARKERS = ("password", "secret", "api_key", "token", "access_key")


def _is_secret(key: str) -> bool:
    lowered = key.lower()
    return any(marker in lowered for marker in _SECRET_MARKERS)


def redact(value: Any) -> Any:
    """Return ``value`` with credential-looking mapping keys masked, recursively."""
    if isinstance(value, dict):
        return {k: (REDACTED if _is_secret(str(k)) and v else redact(v)) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [redact(v) for v in value]
    return value


class JsonFormatter(logging.Formatter):
    """Format records as single-line JSON with secrets redacted."""

    def format(self, record: logging.LogRecord) -> str:
        out: Dict[str, Any] = {
            "ts": datetime.now(timezone.utc).strftime(ISO),
            "level": record.levelname,
            "logger": record.name,
        }
        message = record.getMessage()
        payload: Any = None
        with contextlib.suppress(ValueError, TypeError):
            payload = json.loads(message)
        if isinstance(payload, dict):
            out.update(payload)
        else:
            out["msg"] = message
        for key, value in vars(record).items():
            if key.startswith("_") or key in _RECORD_ATTRS or key in out:
                continue
            out[key] = value
        if record.exc_info:
            out["exc"] = self.formatException(record.exc_info)
        return json.dumps(redact(out), ensure_ascii=False, default=str)


__all__ = ["JsonFormatter", "ISO", "REDACTED", "redact"]
