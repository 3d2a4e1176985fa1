"""
Normalized failure kinds (taxonomy).

Defines the `ErrorKind` enumeration carried by every ``Failure`` and
``FeatureError``. Values are lowercase snake_case and are considered a stable
public contract: calling layers (CLI, HTTP service) render them verbatim.
"""
from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    """Enumerated machine-readable failure categories."""

    CONFIGURATION = "configuration_error"
    VALIDATION = "validation_error"
    CONNECTION = "connection_error"
    NOT_ENABLED = "not_enabled"
    NOT_AUTHORIZED = "not_authorized"
    PROVIDER = "provider_error"
    STORE = "store_error"
    INTERNAL = "internal_error"


__all__ = ["ErrorKind"]
