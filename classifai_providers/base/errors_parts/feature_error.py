"""
Structured feature/provider error exception type.

Raised inside providers, features and stores; converted into a ``Failure``
at the boundary where it occurs so that it never escapes ``Feature.run`` or
``Dispatcher.dispatch``.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from .error_kind import ErrorKind


@dataclass
class FeatureError(Exception):
    """Represents a structured failure with a normalized kind.

    Attributes:
        kind: Normalized :class:`ErrorKind` classification for the failure.
        message: Human-readable error message suitable for operators.
        provider: Provider id where the error originated, if any.
        feature: Feature id involved, if any.
        details: Extra machine-readable context (HTTP status, field keys).
        raw: Optional original exception for diagnostics.
    """

    kind: ErrorKind
    message: str
    provider: Optional[str] = None
    feature: Optional[str] = None
    details: Dict[str, Any] = field(default_factory=dict)
    raw: Optional[Exception] = None

    def __str__(self) -> str:  # pragma: no cover - trivial
        """Return a compact string combining origin, kind, and message."""
        origin = self.provider or self.feature or "-"
        return f"{origin} {self.kind.value}: {self.message}"


__all__ = ["FeatureError"]
