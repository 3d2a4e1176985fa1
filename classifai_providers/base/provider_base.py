"""Shared provider implementation: settings normalization and the connect/invoke contract.

Concrete providers declare:
    - ``id`` and ``label``
    - ``feature_capabilities``: feature id -> capability it serves
    - ``fields``: ordered ``FieldSpec`` tuple (credential fields flagged)
    - ``operations``: capability name -> method name
    - ``_connect(values)``: one lightweight external round trip

and inherit the rest. Normalization, fingerprinting and the cached connect
path live here so every provider behaves the same way:

* ``validate_and_normalize`` is idempotent and never performs I/O.
* ``connect`` performs zero external calls unless the credential fingerprint
  changed (or ``force`` is set) and never clears credentials on failure.
* ``invoke`` never raises; every failure mode comes back as ``Failure``.
"""
from __future__ import annotations

import contextlib
import copy
import hashlib
import json
import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, FrozenSet, List, Mapping, Optional, Tuple

from .errors import ErrorKind, FeatureError
from .fields import MASK, FieldSpec, FieldType, field_defaults
from .interfaces_parts.api_client import ApiClient, ApiResponse
from .log_support import LogContext
from .logging import get_logger, normalized_log_event
from .result import Failure, Result, Success

STATE_DEFAULTS: Mapping[str, Any] = MappingProxyType(
    {"authenticated": False, "credential_fingerprint": None, "connectivity": {}}
)
STATE_KEYS: Tuple[str, ...] = tuple(STATE_DEFAULTS)
MISSING_CREDENTIALS = "missing credentials"


def credential_fingerprint(fields: Tuple[FieldSpec, ...], values: Mapping[str, Any]) -> str:
    """SHA-256 over the ordered credential field values."""
    material = [[spec.key, "" if values.get(spec.key) is None else str(values.get(spec.key))] for spec in fields if spec.credential]
    digest = hashlib.sha256(json.dumps(material, separators=(",", ":")).encode("utf-8"))
    return digest.hexdigest()


@dataclass(frozen=True)
class NormalizedSettings:
    """Output of ``validate_and_normalize``.

    Attributes:
        values: Sanitized provider block, including carried state keys.
        credentials_changed: Whether any credential differs from the
            previous block.
        fingerprint: Fingerprint of the credential values in ``values``.
    """

    values: Dict[str, Any]
    credentials_changed: bool
    fingerprint: str


@dataclass(frozen=True)
class ConnectivityInfo:
    """Outcome of a successful ``connect``.

    ``cached`` is True when no external call was made and the information was
    read back from the previous provider state.
    """

    authenticated: bool
    data: Dict[str, Any] = field(default_factory=dict)
    cached: bool = False


class BaseProvider:
    """Base class for concrete providers.

    Parameters
    ----------
    api_client:
        HTTP/API client collaborator used for every external call.
    defaults:
        Optional overrides of the declared field defaults (e.g. values seeded
        from environment configuration). Unknown keys are ignored.
    """

    id: str = ""
    label: str = ""
    feature_capabilities: Mapping[str, str] = MappingProxyType({})
    fields: Tuple[FieldSpec, ...] = ()
    operations: Mapping[str, str] = MappingProxyType({})

    def __init__(self, api_client: ApiClient, *, defaults: Optional[Mapping[str, Any]] = None) -> None:
        self._api = api_client
        self._logger: logging.Logger = get_logger(f"classifai.providers.{self.id}")
        seeded = field_defaults(self.fields)
        for spec in self.fields:
            if defaults and spec.key in defaults:
                with contextlib.suppress(FeatureError):
                    seeded[spec.key] = spec.sanitize(defaults[spec.key])
        seeded.update(copy.deepcopy(dict(STATE_DEFAULTS)))
        self._defaults: Mapping[str, Any] = MappingProxyType(seeded)
        self._operations = MappingProxyType({cap: getattr(self, name) for cap, name in self.operations.items()})

    # ---- descriptive surface -------------------------------------------

    @property
    def supported_feature_ids(self) -> FrozenSet[str]:
        return frozenset(self.feature_capabilities)

    @property
    def capability_ops(self) -> FrozenSet[str]:
        return frozenset(self._operations)

    @property
    def default_settings(self) -> Mapping[str, Any]:
        return self._defaults

    def describe_settings_fields(self) -> Tuple[FieldSpec, ...]:
        return self.fields

    def feature_default_settings(self, feature_id: str) -> Dict[str, Any]:
        """Shared feature keys this provider contributes (none by default)."""
        return field_defaults(self.feature_settings_fields(feature_id))

    def feature_settings_fields(self, feature_id: str) -> Tuple[FieldSpec, ...]:
        return ()

    def supports(self, feature_id: str) -> bool:
        return feature_id in self.supported_feature_ids

    # ---- normalization ---------------------------------------------------

    def validate_and_normalize(self, raw: Mapping[str, Any], previous: Mapping[str, Any]) -> Result[NormalizedSettings]:
        """Sanitize ``raw`` by declared field type, falling back to ``previous``.

        Keys absent from ``raw`` keep their previous value (or the default),
        and so do password fields posted back as ``MASK``.
        State keys are always carried from ``previous``. Invalid raw values
        are collected and reported as one ``validation_error``.
        """
        raw = raw or {}
        previous = previous or {}
        values: Dict[str, Any] = {}
        invalid: Dict[str, str] = {}
        for spec in self.fields:
            if spec.key in raw and not (spec.type is FieldType.PASSWORD and raw[spec.key] == MASK):
                try:
                    values[spec.key] = spec.sanitize(raw[spec.key])
                except FeatureError as exc:
                    invalid[spec.key] = exc.message
                continue
            values[spec.key] = self._carried_value(spec, previous)

        if invalid:
            normalized_log_event(
                self._logger, "settings.normalize", LogContext(provider=self.id),
                phase="normalize", outcome="invalid", error_kind=ErrorKind.VALIDATION.value,
                fields=sorted(invalid),
            )
            return Failure(
                ErrorKind.VALIDATION,
                "; ".join(invalid[k] for k in sorted(invalid)),
                {"provider": self.id, "fields": invalid},
            )

        for key in STATE_KEYS:
            values[key] = copy.deepcopy(previous.get(key, STATE_DEFAULTS[key]))

        fingerprint = credential_fingerprint(self.fields, values)
        changed = fingerprint != self._previous_fingerprint(previous)
        normalized_log_event(
            self._logger, "settings.normalize", LogContext(provider=self.id),
            phase="normalize", outcome="ok", credentials_changed=changed,
        )
        return Success(NormalizedSettings(values=values, credentials_changed=changed, fingerprint=fingerprint))

    def _carried_value(self, spec: FieldSpec, previous: Mapping[str, Any]) -> Any:
        if spec.key in previous:
            # Invalid stored values fall back to the default.
            with contextlib.suppress(FeatureError):
                return spec.sanitize(previous[spec.key])
        return copy.deepcopy(self._defaults.get(spec.key, spec.default))

    def _previous_fingerprint(self, previous: Mapping[str, Any]) -> Optional[str]:
        # Only credentials that authenticated may skip the round trip.
        if not previous.get("authenticated"):
            return None
        stored = previous.get("credential_fingerprint")
        if isinstance(stored, str) and stored:
            return stored
        if not any(spec.key in previous for spec in self.fields if spec.credential):
            return None
        carried = {spec.key: self._carried_value(spec, previous) for spec in self.fields if spec.credential}
        return credential_fingerprint(self.fields, carried)

    def missing_credentials(self, values: Mapping[str, Any]) -> List[str]:
        return [spec.key for spec in self.fields if spec.credential and spec.required and not values.get(spec.key)]

    # ---- connectivity ----------------------------------------------------

    def connect(self, settings: Any, force: bool = False) -> Result[ConnectivityInfo]:
        """Validate external connectivity for ``settings``.

        ``settings`` is a ``NormalizedSettings`` or a stored provider block.
        Missing credentials fail without any call; unchanged credentials
        return the cached state unless ``force`` is set.
        """
        normalized = settings if isinstance(settings, NormalizedSettings) else self._from_block(settings)
        values = normalized.values
        ctx = LogContext(provider=self.id)

        missing = self.missing_credentials(values)
        if missing:
            normalized_log_event(
                self._logger, "provider.connect", ctx, phase="connect", outcome="skipped",
                error_kind=ErrorKind.CONNECTION.value, missing=missing,
            )
            return Failure(ErrorKind.CONNECTION, MISSING_CREDENTIALS, {"provider": self.id, "missing": missing})

        if not normalized.credentials_changed and not force:
            normalized_log_event(self._logger, "provider.connect", ctx, phase="connect", outcome="cached")
            return Success(
                ConnectivityInfo(
                    authenticated=bool(values.get("authenticated")),
                    data=copy.deepcopy(values.get("connectivity") or {}),
                    cached=True,
                )
            )

        try:
            data = self._connect(values)
        except Exception as exc:  # boundary: connectivity failures become Failure
            failure = Failure.from_exception(exc, default=ErrorKind.CONNECTION, provider=self.id)
            if failure.kind not in (ErrorKind.CONNECTION, ErrorKind.VALIDATION):
                failure = Failure(ErrorKind.CONNECTION, failure.message, failure.details)
            normalized_log_event(
                self._logger, "provider.connect", ctx, phase="connect", outcome="error",
                error_kind=failure.kind.value, message=failure.message,
            )
            return failure
        normalized_log_event(self._logger, "provider.connect", ctx, phase="connect", outcome="ok")
        return Success(ConnectivityInfo(authenticated=True, data=dict(data or {})))

    def _from_block(self, block: Mapping[str, Any]) -> NormalizedSettings:
        values = dict(self._defaults)
        values.update(block or {})
        fingerprint = credential_fingerprint(self.fields, values)
        return NormalizedSettings(
            values=values,
            credentials_changed=not values.get("authenticated") or fingerprint != values.get("credential_fingerprint"),
            fingerprint=fingerprint,
        )

    def _connect(self, values: Mapping[str, Any]) -> Mapping[str, Any]:
        """Perform one lightweight round trip; return data worth caching."""
        raise FeatureError(ErrorKind.CONFIGURATION, f"provider '{self.id}' cannot connect", provider=self.id)

    # ---- capabilities ----------------------------------------------------

    def invoke(self, capability: str, args: Mapping[str, Any], settings: Mapping[str, Any]) -> Result[Any]:
        """Run ``capability`` from this provider's operation table."""
        ctx = LogContext(provider=self.id, capability=capability, item_id=(args or {}).get("item_id"))
        operation = self._operations.get(capability)
        if operation is None:
            return Failure(
                ErrorKind.CONFIGURATION,
                f"provider '{self.id}' does not support '{capability}'",
                {"provider": self.id, "capability": capability},
            )
        try:
            value = operation(dict(args or {}), settings)
        except Exception as exc:  # boundary: capability failures become Failure
            failure = Failure.from_exception(exc, default=ErrorKind.PROVIDER, provider=self.id)
            normalized_log_event(
                self._logger, "provider.invoke", ctx, phase="invoke", outcome="error",
                error_kind=failure.kind.value, message=failure.message,
            )
            return failure
        normalized_log_event(self._logger, "provider.invoke", ctx, phase="invoke", outcome="ok")
        return value if isinstance(value, (Success, Failure)) else Success(value)

    def _expect(self, result: Result[ApiResponse]) -> ApiResponse:
        """Unwrap an API client result, re-raising failures with provider origin."""
        if isinstance(result, Failure):
            raise FeatureError(
                result.kind, result.message, provider=self.id, details=dict(result.details)
            )
        return result.value

    # ---- diagnostics -----------------------------------------------------

    def debug_information(self, settings: Mapping[str, Any]) -> Dict[str, Any]:
        """Human-readable status of a provider block with credentials masked."""
        info: Dict[str, Any] = {"provider": self.id, "authenticated": bool(settings.get("authenticated"))}
        for spec in self.fields:
            value = settings.get(spec.key, spec.default)
            if spec.credential and spec.type is FieldType.PASSWORD:
                value = MASK if value else ""
            info[spec.label or spec.key] = value
        return info


__all__ = [
    "BaseProvider",
    "NormalizedSettings",
    "ConnectivityInfo",
    "credential_fingerprint",
    "STATE_KEYS",
    "STATE_DEFAULTS",
    "MISSING_CREDENTIALS",
]
