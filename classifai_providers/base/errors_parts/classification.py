"""
Error classification helpers mapping exceptions to normalized ErrorKind values.

Implements HTTP status extraction and status-to-kind mapping. Anything that
cannot be classified falls back to the kind of the boundary where it was
caught (``default``), so a failed connectivity check stays a
``connection_error`` and a failed capability call stays a ``provider_error``.
"""
from __future__ import annotations

from typing import Dict, Optional

from .error_kind import ErrorKind
from .feature_error import FeatureError


def _extract_status(exc: object) -> Optional[int]:
    """Attempt to extract an HTTP status code from an exception.

    Supported attribute shapes (checked in order):
    - ``exc.status_code``
    - ``exc.status``
    - ``exc.response.status_code``
    - ``exc.details["status"]`` (``FeatureError`` raised by the API client)
    Returns ``None`` if no valid status can be found.
    """
    for attr in ("status_code", "status"):
        val = getattr(exc, attr, None)
        if isinstance(val, int) and 100 <= val < 600:
            return val
    resp = getattr(exc, "response", None)
    if resp is not None:
        sc = getattr(resp, "status_code", None)
        if isinstance(sc, int) and 100 <= sc < 600:
            return sc
    details = getattr(exc, "details", None)
    if isinstance(details, dict):
        sc = details.get("status")
        if isinstance(sc, int) and 100 <= sc < 600:
            return sc
    return None


_HTTP_STATUS_MAP: Dict[int, ErrorKind] = {
    400: ErrorKind.VALIDATION,
    401: ErrorKind.CONNECTION,
    403: ErrorKind.CONNECTION,
    422: ErrorKind.VALIDATION,
}


def kind_for_status(status: Optional[int], default: ErrorKind = ErrorKind.PROVIDER) -> ErrorKind:
    """Map an HTTP status code to an ErrorKind, falling back to ``default``."""
    if status is None:
        return default
    return _HTTP_STATUS_MAP.get(status, default)


def classify_exception(exc: Exception, default: ErrorKind = ErrorKind.INTERNAL) -> ErrorKind:
    """Classify an exception into a normalized :class:`ErrorKind`.

    Precedence:
        1. HTTP status mapping (auth and request-shape failures).
        2. ``FeatureError`` passthrough.
        3. ``ValueError``/``TypeError`` as validation failures.
        4. ``default``.
    """
    status = _extract_status(exc)
    if status in _HTTP_STATUS_MAP:
        return _HTTP_STATUS_MAP[status]
    if isinstance(exc, FeatureError):
        return exc.kind
    if isinstance(exc, (ValueError, TypeError)):
        return ErrorKind.VALIDATION
    return default


__all__ = [
    "classify_exception",
    "kind_for_status",
    "_extract_status",
    "_HTTP_STATUS_MAP",
]
