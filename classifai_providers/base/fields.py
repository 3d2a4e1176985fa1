"""Declarative settings field specifications and type-driven sanitizers.

Providers and features describe their configuration as an ordered tuple of
:class:`FieldSpec`. Normalization is driven entirely by the declared
:class:`FieldType`, so every sanitizer here must be idempotent:
``spec.sanitize(spec.sanitize(x)) == spec.sanitize(x)``.

Failure modes
-------------
``FieldSpec.sanitize`` raises :class:`FeatureError` with
``ErrorKind.VALIDATION`` for values that cannot be coerced (non-numeric
numbers, unknown select options). Callers collect these per field.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Tuple

from .errors import ErrorKind, FeatureError

_TAG_RE = re.compile(r"<[^>]*>")
_WS_RE = re.compile(r"\s+")
_TRUTHY = {"1", "true", "yes", "on", "y", "t"}
# Shown instead of a stored password; posting it back keeps the stored value.
MASK = "********"


class FieldType(str, Enum):
    """Input types understood by the normalizer."""

    TEXT = "text"
    PASSWORD = "password"
    URL = "url"
    NUMBER = "number"
    CHECKBOX = "checkbox"
    SELECT = "select"
    CHECKBOX_GROUP = "checkbox_group"


def sanitize_text(value: Any) -> str:
    """Strip tags, collapse whitespace, and trim a scalar into a string."""
    if value is None:
        return ""
    text = str(value)
    # Removing one tag can expose another (``<<a>b>``); repeat until stable.
    stripped = _TAG_RE.sub("", text)
    while stripped != text:
        text, stripped = stripped, _TAG_RE.sub("", stripped)
    return _WS_RE.sub(" ", text).strip()


def sanitize_url(value: Any) -> str:
    """Return a trimmed http(s) URL without trailing slash, or ``""``."""
    text = sanitize_text(value).replace(" ", "")
    if not re.match(r"^https?://[^/\s]+", text, flags=re.IGNORECASE):
        return ""
    return text.rstrip("/")


def to_bool(value: Any) -> bool:
    """Interpret checkbox-style values (``"1"``, ``"on"``, ``1``, ``True``)."""
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    return sanitize_text(value).lower() in _TRUTHY


@dataclass(frozen=True)
class FieldSpec:
    """A single configuration field.

    Attributes:
        key: Settings key inside the feature or provider block.
        type: Declared :class:`FieldType` driving sanitization.
        default: Value used when neither raw input nor previous settings
            provide the key.
        credential: Whether the field participates in the credential
            fingerprint (a change forces a connectivity re-check).
        label: Operator-facing label.
        options: Allowed values for ``select``/``checkbox_group`` fields.
            An empty mapping on a ``select`` means "free text".
        minimum: Lower bound for ``number`` fields (inclusive).
        maximum: Upper bound for ``number`` fields (inclusive).
        required: For credential fields, whether an empty value blocks
            connecting.
    """

    key: str
    type: FieldType
    default: Any = None
    credential: bool = False
    label: str = ""
    options: Mapping[str, str] = field(default_factory=dict)
    minimum: Optional[int] = None
    maximum: Optional[int] = None
    required: bool = True

    def sanitize(self, value: Any) -> Any:
        """Coerce ``value`` to this field's canonical representation."""
        if self.type in (FieldType.TEXT, FieldType.PASSWORD):
            return sanitize_text(value)
        if self.type is FieldType.URL:
            return sanitize_url(value)
        if self.type is FieldType.CHECKBOX:
            return to_bool(value)
        if self.type is FieldType.NUMBER:
            return self._sanitize_number(value)
        if self.type is FieldType.SELECT:
            return self._sanitize_select(value)
        if self.type is FieldType.CHECKBOX_GROUP:
            return self._sanitize_group(value)
        raise FeatureError(ErrorKind.CONFIGURATION, f"unsupported field type for '{self.key}'")

    def _sanitize_number(self, value: Any) -> int:
        try:
            num = int(float(sanitize_text(value) if isinstance(value, str) else value))
        except (TypeError, ValueError) as exc:
            raise FeatureError(
                ErrorKind.VALIDATION,
                f"'{self.key}' must be a number",
                details={"field": self.key},
            ) from exc
        if self.minimum is not None:
            num = max(self.minimum, num)
        if self.maximum is not None:
            num = min(self.maximum, num)
        return num

    def _sanitize_select(self, value: Any) -> str:
        text = sanitize_text(value)
        if self.options and text not in self.options:
            raise FeatureError(
                ErrorKind.VALIDATION,
                f"'{text}' is not a valid option for '{self.key}'",
                details={"field": self.key, "options": sorted(self.options)},
            )
        return text

    def _sanitize_group(self, value: Any) -> Dict[str, int]:
        if isinstance(value, Mapping):
            items = {sanitize_text(k): 1 if to_bool(v) else 0 for k, v in value.items()}
        elif isinstance(value, (list, tuple, set, frozenset)):
            items = {sanitize_text(k): 1 for k in value}
        else:
            raise FeatureError(
                ErrorKind.VALIDATION,
                f"'{self.key}' must be a mapping or a list",
                details={"field": self.key},
            )
        return {k: v for k, v in items.items() if k}


def field_defaults(fields: Tuple[FieldSpec, ...]) -> Dict[str, Any]:
    """Return ``{key: default}`` for an ordered field tuple."""
    out: Dict[str, Any] = {}
    for spec in fields:
        default = spec.default
        if isinstance(default, Mapping):
            default = dict(default)
        out[spec.key] = default
    return out


def enabled_keys(group: Any) -> Tuple[str, ...]:
    """Return the keys of a checkbox group whose value is truthy, in order."""
    if not isinstance(group, Mapping):
        return ()
    return tuple(k for k, v in group.items() if to_bool(v))


__all__ = [
    "MASK",
    "FieldType",
    "FieldSpec",
    "field_defaults",
    "enabled_keys",
    "sanitize_text",
    "sanitize_url",
    "to_bool",
]
