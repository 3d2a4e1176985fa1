"""Tagged invocation outcomes.

Every capability operation, settings save, and dispatch returns either a
:class:`Success` carrying a payload or a :class:`Failure` carrying a stable
``kind`` and a human-readable ``message``. Callers branch on ``result.ok``
instead of catching exceptions.

``FeatureError`` is the internal raising form of a ``Failure``; the two
convert into each other with :meth:`Failure.from_exception` and
:meth:`Failure.to_error`.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Generic, Optional, TypeVar, Union

from .errors import ErrorKind, FeatureError, classify_exception

T = TypeVar("T")


@dataclass(frozen=True)
class Success(Generic[T]):
    """Successful outcome wrapping ``value``."""

    value: T

    @property
    def ok(self) -> bool:
        return True

    def unwrap(self) -> T:
        return self.value

    def to_dict(self) -> Dict[str, Any]:
        return {"ok": True, "value": self.value}


@dataclass(frozen=True)
class Failure:
    """Failed outcome with a machine-readable kind and operator message.

    Attributes:
        kind: Normalized :class:`ErrorKind`.
        message: Human-readable message; never empty.
        details: Optional structured context (provider id, HTTP status...).
    """

    kind: ErrorKind
    message: str
    details: Dict[str, Any] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return False

    def unwrap(self) -> Any:
        """Raise the equivalent :class:`FeatureError`."""
        raise self.to_error()

    def to_error(self) -> FeatureError:
        return FeatureError(
            kind=self.kind,
            message=self.message,
            provider=self.details.get("provider"),
            feature=self.details.get("feature"),
            details=dict(self.details),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ok": False,
            "error": {"kind": self.kind.value, "message": self.message, "details": dict(self.details)},
        }

    @classmethod
    def from_exception(
        cls,
        exc: Exception,
        default: ErrorKind = ErrorKind.INTERNAL,
        **details: Any,
    ) -> "Failure":
        """Build a ``Failure`` from any exception.

        ``FeatureError`` keeps its own message and details; other exceptions
        are classified with :func:`classify_exception` and fall back to
        ``default``. ``details`` entries fill keys that are not already set.
        """
        kind = classify_exception(exc, default=default)
        if isinstance(exc, FeatureError):
            merged: Dict[str, Any] = dict(exc.details)
            if exc.provider:
                merged.setdefault("provider", exc.provider)
            if exc.feature:
                merged.setdefault("feature", exc.feature)
            message = exc.message
        else:
            merged = {}
            message = str(exc) or exc.__class__.__name__
        for k, v in details.items():
            if v is not None:
                merged.setdefault(k, v)
        return cls(kind=kind, message=message, details=merged)


Result = Union[Success[T], Failure]


def capture(
    fn: Callable[..., T],
    *args: Any,
    default: ErrorKind = ErrorKind.INTERNAL,
    details: Optional[Dict[str, Any]] = None,
    **kwargs: Any,
) -> "Result[T]":
    """Call ``fn`` and wrap its return value or raised exception as a Result.

    A ``Success``/``Failure`` returned by ``fn`` is passed through unchanged.
    """
    try:
        out = fn(*args, **kwargs)
    except Exception as exc:  # boundary: convert every failure mode
        return Failure.from_exception(exc, default=default, **(details or {}))
    if isinstance(out, (Success, Failure)):
        return out
    return Success(out)


__all__ = ["Success", "Failure", "Result", "capture"]
