"""Feature base class: settings merge, sanitize-then-persist, scope and ``run``.

A feature owns one settings blob in the store::

    {
        "enabled": bool,
        "provider": "<active provider id>",
        <feature shared keys...>,
        "<provider id>": {<provider keys...>, authenticated, credential_fingerprint, connectivity},
        ...
    }

Blocks of inactive providers are never dropped, so switching providers and
back restores the earlier configuration. All writes go through
``save_settings``/``set_enabled``/``reset_settings`` under the store's
per-feature lock, and each write is one atomic ``store.save``.

``run`` never branches on provider ids: it looks up the capability handler
registered for ``(feature_id, provider_id)`` in the registry.
"""
from __future__ import annotations

import copy
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, FrozenSet, List, Mapping, Optional, Tuple

from ..base.errors import ErrorKind, FeatureError
from ..base.fields import FieldSpec, FieldType, enabled_keys, field_defaults, sanitize_text, to_bool
from ..base.interfaces_parts.provider import Provider
from ..base.log_support import LogContext
from ..base.logging import get_logger, normalized_log_event
from ..base.registry import ProviderRegistry
from ..base.result import Failure, Result, Success
from ..persistence.interfaces.repos import ISettingsStore

SHARED_FIELDS: Tuple[FieldSpec, ...] = (
    FieldSpec("enabled", FieldType.CHECKBOX, default=False, label="Enable"),
)


class FeatureState(str, Enum):
    DISABLED = "disabled"
    ENABLED_UNAUTHENTICATED = "enabled_unauthenticated"
    ENABLED_AUTHENTICATED = "enabled_authenticated"


@dataclass(frozen=True)
class Scope:
    """Item types and statuses a feature may act on."""

    post_types: FrozenSet[str]
    statuses: FrozenSet[str]

    def allows(self, item_type: str, status: str) -> bool:
        return item_type in self.post_types and status in self.statuses

    def to_dict(self) -> Dict[str, List[str]]:
        return {"post_types": sorted(self.post_types), "statuses": sorted(self.statuses)}


def _merge(defaults: Mapping[str, Any], stored: Mapping[str, Any], provider_ids: Tuple[str, ...]) -> Dict[str, Any]:
    """Stored values win; provider blocks are merged one level deep."""
    out = copy.deepcopy(dict(defaults))
    for key, value in stored.items():
        if key in provider_ids and isinstance(value, Mapping) and isinstance(out.get(key), Mapping):
            block = dict(out[key])
            block.update(copy.deepcopy(dict(value)))
            out[key] = block
        else:
            out[key] = copy.deepcopy(value)
    return out


class Feature:
    """A named capability backed by exactly one active provider.

    Subclasses set ``id``, ``label``, ``default_provider_id`` and ``fields``
    (their shared settings, e.g. ``post_types``), and may override
    ``prepare_args``/``finalize`` around the provider call.
    """

    id: str = ""
    label: str = ""
    default_provider_id: str = ""
    fields: Tuple[FieldSpec, ...] = ()

    def __init__(self, registry: ProviderRegistry, store: ISettingsStore) -> None:
        self._registry = registry
        self._store = store
        self._logger: logging.Logger = get_logger(f"classifai.features.{self.id}")

    # ---- settings --------------------------------------------------------

    @property
    def supported_provider_ids(self) -> Tuple[str, ...]:
        return self._registry.providers_for(self.id)

    def shared_fields(self, provider_id: Optional[str] = None) -> Tuple[FieldSpec, ...]:
        """Shared fields for the feature, plus those the provider contributes."""
        extra: Tuple[FieldSpec, ...] = ()
        if provider_id in self._registry:
            extra = tuple(self._registry.get(provider_id).feature_settings_fields(self.id))
        return SHARED_FIELDS + tuple(self.fields) + extra

    def default_settings(self, provider_id: Optional[str] = None) -> Dict[str, Any]:
        """Feature defaults merged with ``provider_id``'s (default: the default provider)."""
        active = provider_id or self.default_provider_id
        out: Dict[str, Any] = {"provider": active}
        out.update(field_defaults(self.shared_fields(active)))
        for pid in self.supported_provider_ids:
            out[pid] = copy.deepcopy(dict(self._registry.get(pid).default_settings))
        return out

    def _merged(self, stored: Mapping[str, Any]) -> Dict[str, Any]:
        active = stored.get("provider") or self.default_provider_id
        return _merge(self.default_settings(active), stored, self.supported_provider_ids)

    def _load(self) -> Result[Dict[str, Any]]:
        try:
            return Success(self._store.load(self.id))
        except FeatureError as exc:
            return Failure.from_exception(exc, default=ErrorKind.STORE, feature=self.id)

    def get_settings(self, provider_id: Optional[str] = None) -> Dict[str, Any]:
        """Return merged settings, or one provider's block when ``provider_id`` is given.

        A key present both in the stored blob and in the defaults keeps the
        stored value.
        """
        settings = self._merged(self._store.load(self.id))
        if provider_id is None:
            return settings
        return dict(settings.get(provider_id) or {})

    def get_active_provider(self, settings: Optional[Mapping[str, Any]] = None) -> Provider:
        """Resolve the active provider or raise ``FeatureError(configuration_error)``."""
        settings = settings if settings is not None else self.get_settings()
        provider_id = settings.get("provider")
        if not provider_id:
            raise FeatureError(ErrorKind.CONFIGURATION, "no provider configured", feature=self.id)
        provider = self._registry.get(provider_id)
        if not provider.supports(self.id):
            raise FeatureError(
                ErrorKind.CONFIGURATION,
                f"provider '{provider_id}' does not support '{self.id}'",
                provider=provider_id,
                feature=self.id,
            )
        return provider

    def is_enabled(self, settings: Optional[Mapping[str, Any]] = None) -> bool:
        settings = settings if settings is not None else self.get_settings()
        return to_bool(settings.get("enabled"))

    def state(self, settings: Optional[Mapping[str, Any]] = None) -> FeatureState:
        settings = settings if settings is not None else self.get_settings()
        if not self.is_enabled(settings):
            return FeatureState.DISABLED
        block = settings.get(settings.get("provider") or "") or {}
        if block.get("authenticated"):
            return FeatureState.ENABLED_AUTHENTICATED
        return FeatureState.ENABLED_UNAUTHENTICATED

    def supported_scope(self, settings: Optional[Mapping[str, Any]] = None) -> Scope:
        """Enabled item types and statuses; a pure function of settings."""
        settings = settings if settings is not None else self.get_settings()
        return Scope(
            post_types=frozenset(enabled_keys(settings.get("post_types"))),
            statuses=frozenset(enabled_keys(settings.get("post_statuses"))),
        )

    # ---- sanitize-then-persist -------------------------------------------

    def save_settings(self, raw: Mapping[str, Any], reconnect: bool = False) -> Result[Dict[str, Any]]:
        """Sanitize ``raw``, reconnect the active provider if needed, and persist.

        ``raw`` holds shared keys at the top level and provider keys under the
        provider id. Keys absent from ``raw`` keep their stored values.
        Validation failures persist nothing. A connection failure still
        persists the settings, with ``authenticated`` set to False and the
        fingerprint cleared so the next save retries, and is reported in the
        returned ``connection`` entry. Store errors come back as
        ``Failure(store_error)``.
        """
        raw = raw or {}
        ctx = LogContext(feature=self.id)
        with self._store.lock(self.id):
            loaded = self._load()
            if not loaded.ok:
                return loaded
            stored = loaded.value
            current_pid = stored.get("provider") or self.default_provider_id
            provider_id = sanitize_text(raw.get("provider", current_pid))
            if provider_id not in self.supported_provider_ids:
                return Failure(
                    ErrorKind.VALIDATION,
                    f"provider '{provider_id}' is not available for '{self.id}'",
                    {"feature": self.id, "provider": provider_id, "supported": list(self.supported_provider_ids)},
                )
            provider = self._registry.get(provider_id)
            new = _merge(self.default_settings(provider_id), stored, self.supported_provider_ids)
            new["provider"] = provider_id

            invalid: Dict[str, str] = {}
            for spec in self.shared_fields(provider_id):
                if spec.key not in raw:
                    continue
                try:
                    new[spec.key] = spec.sanitize(raw[spec.key])
                except FeatureError as exc:
                    invalid[spec.key] = exc.message
            if invalid:
                return Failure(
                    ErrorKind.VALIDATION,
                    "; ".join(invalid[k] for k in sorted(invalid)),
                    {"feature": self.id, "fields": invalid},
                )

            raw_block = raw.get(provider_id)
            normalized = provider.validate_and_normalize(
                raw_block if isinstance(raw_block, Mapping) else {}, stored.get(provider_id) or {}
            )
            if not normalized.ok:
                return Failure(normalized.kind, normalized.message, {**normalized.details, "feature": self.id})

            values = dict(normalized.value.values)
            connection = provider.connect(normalized.value, force=reconnect)
            if connection.ok:
                info = connection.value
                values["authenticated"] = info.authenticated
                if not info.cached:
                    values["connectivity"] = info.data
                    values["credential_fingerprint"] = normalized.value.fingerprint
            else:
                values["authenticated"] = False
                values["credential_fingerprint"] = None
            new[provider_id] = values

            saved = self._store.save(self.id, new)
            if not saved.ok:
                return saved

        normalized_log_event(
            self._logger, "feature.save_settings", ctx,
            phase="save", outcome="ok" if connection.ok else "unauthenticated",
            error_kind=None if connection.ok else connection.kind.value, provider=provider_id,
        )
        return Success(
            {
                "settings": new,
                "state": self.state(new).value,
                "connection": _connection_dict(connection),
            }
        )

    def set_enabled(self, enabled: bool) -> Result[Dict[str, Any]]:
        """Toggle the enable flag without touching provider authentication."""
        with self._store.lock(self.id):
            loaded = self._load()
            if not loaded.ok:
                return loaded
            stored = loaded.value
            stored["enabled"] = bool(enabled)
            stored.setdefault("provider", self.default_provider_id)
            saved = self._store.save(self.id, stored)
        if not saved.ok:
            return saved
        settings = self._merged(stored)
        return Success({"enabled": bool(enabled), "state": self.state(settings).value})

    def reset_settings(self) -> Result[Dict[str, Any]]:
        """Replace the stored blob with defaults (all provider blocks included)."""
        defaults = self.default_settings()
        with self._store.lock(self.id):
            saved = self._store.save(self.id, defaults)
        return saved if not saved.ok else Success(defaults)

    # ---- execution -------------------------------------------------------

    def prepare_args(self, args: Mapping[str, Any], settings: Mapping[str, Any]) -> Dict[str, Any]:
        return dict(args)

    def finalize(self, value: Any, args: Mapping[str, Any], settings: Mapping[str, Any]) -> Any:
        return value

    def run(self, args: Optional[Mapping[str, Any]] = None) -> Result[Any]:
        """Single entry point: gate on state, then call the registered handler."""
        args = dict(args or {})
        ctx = LogContext(feature=self.id, item_id=args.get("item_id"))
        try:
            settings = self.get_settings()
            if not self.is_enabled(settings):
                result: Result[Any] = Failure(ErrorKind.NOT_ENABLED, f"feature '{self.id}' is disabled", {"feature": self.id})
            else:
                result = self._run_enabled(args, settings, ctx)
        except Exception as exc:  # boundary: nothing escapes run
            result = Failure.from_exception(exc, default=ErrorKind.INTERNAL, feature=self.id)

        normalized_log_event(
            self._logger, "feature.run", ctx, phase="run", outcome="ok" if result.ok else "error",
            error_kind=None if result.ok else result.kind.value,
        )
        return result

    def _run_enabled(self, args: Dict[str, Any], settings: Mapping[str, Any], ctx: LogContext) -> Result[Any]:
        provider = self.get_active_provider(settings)
        ctx.provider = provider.id
        block = settings.get(provider.id) or {}
        if not block.get("authenticated"):
            return Failure(
                ErrorKind.NOT_ENABLED,
                f"provider '{provider.id}' is not authenticated",
                {"feature": self.id, "provider": provider.id},
            )
        handler = self._registry.handler(self.id, provider.id)
        if handler is None:
            return Failure(
                ErrorKind.CONFIGURATION,
                f"no handler registered for '{self.id}' on '{provider.id}'",
                {"feature": self.id, "provider": provider.id},
            )
        provider_ids = set(self.supported_provider_ids)
        invoke_settings = {k: v for k, v in settings.items() if k not in provider_ids}
        invoke_settings.update(block)
        result = handler(self.prepare_args(args, settings), invoke_settings)
        if not result.ok:
            return Failure(result.kind, result.message, {**result.details, "feature": self.id})
        return Success(self.finalize(result.value, args, settings))

    # ---- diagnostics -----------------------------------------------------

    def debug_information(self) -> Dict[str, Any]:
        settings = self.get_settings()
        provider_id = settings.get("provider") or ""
        info: Dict[str, Any] = {
            "Feature": self.label or self.id,
            "State": self.state(settings).value,
            "Provider": provider_id,
            "Allowed post types": ", ".join(sorted(self.supported_scope(settings).post_types)),
            "Allowed post statuses": ", ".join(sorted(self.supported_scope(settings).statuses)),
        }
        if provider_id in self._registry:
            info.update(self._registry.get(provider_id).debug_information(settings.get(provider_id) or {}))
        return info


def _connection_dict(connection: Result[Any]) -> Dict[str, Any]:
    if connection.ok:
        info = connection.value
        return {"ok": True, "authenticated": info.authenticated, "cached": info.cached}
    return connection.to_dict()


__all__ = ["Feature", "FeatureState", "Scope", "SHARED_FIELDS"]
