from __future__ import annotations

import os
from typing import Any, Dict, List, Optional

from fastapi import HTTPException
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from classifai_providers.base.collaborators import StaticItemCatalog
from classifai_providers.base.errors import ErrorKind
from classifai_providers.base.fields import MASK, FieldType
from classifai_providers.base.result import Failure, Result
from classifai_providers.config.defaults import ITEMS_FILE_ENV
from classifai_providers.di import ProvidersContainer, build_container
from classifai_providers.features import Feature


# HTTP status per failure kind; anything unmapped renders as 500.
FAILURE_STATUS: Dict[ErrorKind, int] = {
    ErrorKind.CONFIGURATION: 400,
    ErrorKind.VALIDATION: 422,
    ErrorKind.CONNECTION: 502,
    ErrorKind.NOT_ENABLED: 409,
    ErrorKind.NOT_AUTHORIZED: 403,
    ErrorKind.PROVIDER: 502,
    ErrorKind.STORE: 500,
    ErrorKind.INTERNAL: 500,
}


class SettingsBody(BaseModel):
    """Raw settings for one feature.

    Shared keys sit at the top level; provider keys are nested under the
    provider id, exactly as ``Feature.save_settings`` expects them.
    """

    settings: Dict[str, Any] = {}
    reconnect: bool = False


class EnabledBody(BaseModel):
    """Toggle for a feature's enable flag."""

    enabled: bool


class DispatchBody(BaseModel):
    """Item-level invocation parameters."""

    actor: Optional[str] = None
    args: Dict[str, Any] = {}


_CONTAINER: Optional[ProvidersContainer] = None


def get_container_dep() -> ProvidersContainer:
    """FastAPI dependency returning the process-wide container.

    Built on first use; tests replace it through
    ``app.dependency_overrides``.
    """
    global _CONTAINER
    if _CONTAINER is None:
        items_file = os.getenv(ITEMS_FILE_ENV)
        items = StaticItemCatalog.from_json_file(items_file) if items_file else None
        _CONTAINER = build_container(items=items)
    return _CONTAINER


def failure_response(failure: Failure) -> JSONResponse:
    """Render a ``Failure`` as a JSON error body with a mapped status code."""
    return JSONResponse(status_code=FAILURE_STATUS.get(failure.kind, 500), content=failure.to_dict())


def render(result: Result[Any]) -> Any:
    if isinstance(result, Failure):
        return failure_response(result)
    return {"ok": True, "result": result.value}


def _feature_or_404(container: ProvidersContainer, feature_id: str) -> Feature:
    try:
        return container.feature(feature_id)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=f"unknown feature '{feature_id}'") from exc


def mask_settings(container: ProvidersContainer, settings: Dict[str, Any]) -> Dict[str, Any]:
    """Copy of ``settings`` with every password field of every provider block masked."""
    out = dict(settings)
    for provider_id, provider in container.registry.providers.items():
        block = out.get(provider_id)
        if not isinstance(block, dict):
            continue
        block = dict(block)
        for spec in provider.fields:
            if spec.type is FieldType.PASSWORD and block.get(spec.key):
                block[spec.key] = MASK
        out[provider_id] = block
    return out


def _build_features_response(container: ProvidersContainer) -> Dict[str, Any]:
    features: List[Dict[str, Any]] = []
    for feature in container.features.values():
        settings = feature.get_settings()
        features.append(
            {
                "id": feature.id,
                "label": feature.label,
                "provider": settings.get("provider"),
                "providers": list(feature.supported_provider_ids),
                "state": feature.state(settings).value,
                "scope": feature.supported_scope(settings).to_dict(),
            }
        )
    return {"ok": True, "features": features}


def _build_settings_response(container: ProvidersContainer, feature_id: str) -> Dict[str, Any]:
    feature = _feature_or_404(container, feature_id)
    return {"ok": True, "settings": mask_settings(container, feature.get_settings())}


def _handle_save_settings(container: ProvidersContainer, feature_id: str, body: SettingsBody) -> Any:
    feature = _feature_or_404(container, feature_id)
    result = feature.save_settings(body.settings, reconnect=body.reconnect)
    if isinstance(result, Failure):
        return failure_response(result)
    payload = dict(result.value)
    payload["settings"] = mask_settings(container, payload["settings"])
    return {"ok": True, **payload}


def _handle_set_enabled(container: ProvidersContainer, feature_id: str, body: EnabledBody) -> Any:
    return render(_feature_or_404(container, feature_id).set_enabled(body.enabled))


def _handle_reset(container: ProvidersContainer, feature_id: str) -> Any:
    result = _feature_or_404(container, feature_id).reset_settings()
    if isinstance(result, Failure):
        return failure_response(result)
    return {"ok": True, "settings": mask_settings(container, result.value)}


def _build_debug_response(container: ProvidersContainer, feature_id: str) -> Dict[str, Any]:
    return {"ok": True, "debug": _feature_or_404(container, feature_id).debug_information()}


def _handle_dispatch(container: ProvidersContainer, feature_id: str, item_id: str, body: DispatchBody) -> Any:
    return render(container.dispatcher.dispatch(feature_id, item_id, actor=body.actor, args=body.args))


__all__ = [
    "SettingsBody",
    "EnabledBody",
    "DispatchBody",
    "FAILURE_STATUS",
    "get_container_dep",
    "failure_response",
    "mask_settings",
    "render",
    "_build_features_response",
    "_build_settings_response",
    "_build_debug_response",
    "_handle_save_settings",
    "_handle_set_enabled",
    "_handle_reset",
    "_handle_dispatch",
]
