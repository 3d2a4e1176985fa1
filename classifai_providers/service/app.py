from __future__ import annotations

import os
from typing import Any, Dict

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from classifai_providers import __version__
from classifai_providers.base.errors import FeatureError
from classifai_providers.base.result import Failure
from classifai_providers.config.defaults import SERVICE_CORS_DEFAULT_ORIGINS, SERVICE_CORS_ENV
from classifai_providers.di import ProvidersContainer

from .app_parts.app_core import (
    DispatchBody,
    EnabledBody,
    SettingsBody,
    get_container_dep,
    _build_debug_response,
    _build_features_response,
    _build_settings_response,
    _handle_dispatch,
    _handle_reset,
    _handle_save_settings,
    _handle_set_enabled,
    failure_response,
)

app = FastAPI(title="ClassifAI Provider Service", version=__version__)


# ---------------------------------------------------------------------------
# CORS configuration
# ---------------------------------------------------------------------------

cors_origins_env = os.getenv(SERVICE_CORS_ENV, SERVICE_CORS_DEFAULT_ORIGINS)
allow_origins = [o.strip() for o in cors_origins_env.split(",") if o.strip()]
app.add_middleware(
    CORSMiddleware,
    allow_origins=allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(FeatureError)
async def feature_error_handler(request: Request, exc: FeatureError) -> JSONResponse:
    """Render errors raised outside a ``Result``, such as an unreadable settings store."""
    return failure_response(Failure.from_exception(exc))


@app.get("/api/health")
def health() -> Dict[str, Any]:
    """Check the health status of the service."""
    return {"ok": True}


# ---------------------------------------------------------------------------
# Feature settings endpoints
# ---------------------------------------------------------------------------


@app.get("/api/features")
def get_features(container: ProvidersContainer = Depends(get_container_dep)) -> Dict[str, Any]:
    """List features with their active provider, state and item scope."""
    return _build_features_response(container)


@app.get("/api/features/{feature_id}/settings")
def get_feature_settings(feature_id: str, container: ProvidersContainer = Depends(get_container_dep)) -> Dict[str, Any]:
    """Return merged settings for a feature with passwords masked."""
    return _build_settings_response(container, feature_id)


@app.post("/api/features/{feature_id}/settings")
def post_feature_settings(
    feature_id: str, body: SettingsBody, container: ProvidersContainer = Depends(get_container_dep)
) -> Any:
    """Sanitize and persist settings, re-checking connectivity when credentials changed.

    Validation failures answer 422 and persist nothing. A failed connection
    still persists the settings and is reported under ``connection``.
    """
    return _handle_save_settings(container, feature_id, body)


@app.post("/api/features/{feature_id}/enabled")
def post_feature_enabled(
    feature_id: str, body: EnabledBody, container: ProvidersContainer = Depends(get_container_dep)
) -> Any:
    return _handle_set_enabled(container, feature_id, body)


@app.post("/api/features/{feature_id}/reset")
def post_feature_reset(feature_id: str, container: ProvidersContainer = Depends(get_container_dep)) -> Any:
    """Restore every default for a feature, provider blocks included."""
    return _handle_reset(container, feature_id)


@app.get("/api/features/{feature_id}/debug")
def get_feature_debug(feature_id: str, container: ProvidersContainer = Depends(get_container_dep)) -> Dict[str, Any]:
    return _build_debug_response(container, feature_id)


# ---------------------------------------------------------------------------
# Dispatch endpoint
# ---------------------------------------------------------------------------


@app.post("/api/dispatch/{feature_id}/{item_id}")
def post_dispatch(
    feature_id: str,
    item_id: str,
    body: DispatchBody,
    container: ProvidersContainer = Depends(get_container_dep),
) -> Any:
    """Run a feature against one item.

    Rejections (disabled, out of scope, not authorized) and provider errors
    come back as ``{"ok": false, "error": {...}}`` with a mapped status code.
    """
    return _handle_dispatch(container, feature_id, item_id, body)


def get_app() -> FastAPI:
    """Return the FastAPI application instance."""
    return app
