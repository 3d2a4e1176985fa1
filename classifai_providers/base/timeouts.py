"""Timeout configuration for outbound provider calls.

The framework itself has no cancellation semantics: timeouts belong to the
HTTP client collaborator. This module centralizes the values that client
uses so no module hard-codes its own literal.

Supported environment variables (all optional, positive floats):
    CLASSIFAI_HTTP_TIMEOUT_SECONDS
    CLASSIFAI_CONNECT_TIMEOUT_SECONDS
"""
from __future__ import annotations

import os
from dataclasses import dataclass

from ..config.defaults import HTTP_DEFAULT_CONNECT_TIMEOUT_SECONDS, HTTP_DEFAULT_TIMEOUT_SECONDS

HTTP_TIMEOUT_ENV = "CLASSIFAI_HTTP_TIMEOUT_SECONDS"
CONNECT_TIMEOUT_ENV = "CLASSIFAI_CONNECT_TIMEOUT_SECONDS"


@dataclass(frozen=True)
class TimeoutConfig:
    """Container for normalized timeout values (seconds).

    Attributes:
        http_timeout_seconds: Read/write/pool timeout for a single request.
        connect_timeout_seconds: Timeout for establishing the TCP/TLS
            connection.
    """

    http_timeout_seconds: float = HTTP_DEFAULT_TIMEOUT_SECONDS
    connect_timeout_seconds: float = HTTP_DEFAULT_CONNECT_TIMEOUT_SECONDS


_CACHED: TimeoutConfig | None = None
_ENV_GUARD: str | None = None


def _parse_env_float(name: str, default: float) -> float:
    """Read ``name`` as a positive float, falling back to ``default``."""
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        val = float(raw)
    except ValueError:
        return default
    return val if val > 0 else default


def get_timeout_config() -> TimeoutConfig:
    """Return the process-cached ``TimeoutConfig``.

    The cache is refreshed when the relevant environment variables change so
    tests can adjust values at runtime.
    """
    global _CACHED, _ENV_GUARD  # noqa: PLW0603 - documented module cache
    guard = "/".join([os.getenv(HTTP_TIMEOUT_ENV, ""), os.getenv(CONNECT_TIMEOUT_ENV, "")])
    if _CACHED is not None and _ENV_GUARD == guard:
        return _CACHED
    _CACHED = TimeoutConfig(
        http_timeout_seconds=_parse_env_float(HTTP_TIMEOUT_ENV, HTTP_DEFAULT_TIMEOUT_SECONDS),
        connect_timeout_seconds=_parse_env_float(CONNECT_TIMEOUT_ENV, HTTP_DEFAULT_CONNECT_TIMEOUT_SECONDS),
    )
    _ENV_GUARD = guard
    return _CACHED


__all__ = ["TimeoutConfig", "get_timeout_config"]
