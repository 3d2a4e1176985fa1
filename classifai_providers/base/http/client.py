"""Shared HTTP client pool and the ``HttpxApiClient`` collaborator.

Purpose:
    Provide a centralized, thread-safe pool of reusable ``httpx.Client``
    instances and an :class:`ApiClient` implementation on top of it.
    Timeouts derive exclusively from :func:`get_timeout_config`.

External dependencies:
    - ``httpx`` for the underlying synchronous HTTP client.

Error mapping:
    - Transport errors (DNS, TLS, timeouts) -> ``Failure(connection_error)``.
    - Non-2xx responses -> ``Failure`` classified by status
      (401/403 connection, 400/422 validation, anything else provider) with
      ``details["status"]`` set and the upstream error message extracted.

Lifecycle & cleanup:
    - Clients are cached by ``(base_url, purpose)``. All clients are closed at
      interpreter exit via ``atexit``; tests may call
      :func:`close_all_clients` explicitly.
"""

from __future__ import annotations

import atexit
import contextlib
import threading
from typing import Any, Dict, Mapping, Optional, Tuple

import httpx

from ..errors import ErrorKind, kind_for_status
from ..interfaces_parts.api_client import ApiResponse
from ..log_support import LogContext
from ..logging import get_logger, normalized_log_event
from ..result import Failure, Result, Success
from ..timeouts import get_timeout_config

_CLIENTS: Dict[Tuple[Optional[str], str], httpx.Client] = {}
_LOCK = threading.RLock()


def get_httpx_client(base_url: Optional[str], purpose: str) -> httpx.Client:
    """Return a pooled ``httpx.Client`` for the given base URL and purpose.

    The first request for a key creates a client configured with timeouts from
    :func:`get_timeout_config`. Subsequent requests reuse the same instance.
    Safe for concurrent use; per-key creation is guarded by a re-entrant lock.
    """
    key = (base_url, purpose)
    client = _CLIENTS.get(key)
    if client is not None:
        return client

    with _LOCK:
        client = _CLIENTS.get(key)
        if client is not None:
            return client
        cfg = get_timeout_config()
        timeout = httpx.Timeout(cfg.http_timeout_seconds, connect=cfg.connect_timeout_seconds)
        client = httpx.Client(base_url=base_url, timeout=timeout) if base_url else httpx.Client(timeout=timeout)
        _CLIENTS[key] = client
        return client


def close_all_clients() -> None:
    """Close and clear all pooled HTTP clients."""
    with _LOCK:
        for c in _CLIENTS.values():
            # nosec B110 - teardown during shutdown; close errors are non-actionable
            with contextlib.suppress(Exception):
                c.close()
        _CLIENTS.clear()


atexit.register(close_all_clients)


def _error_message(response: httpx.Response) -> str:
    """Pull the upstream error message out of a JSON error body if present."""
    with contextlib.suppress(ValueError):
        body = response.json()
        if isinstance(body, dict):
            err = body.get("error")
            if isinstance(err, dict) and err.get("message"):
                return str(err["message"])
            if isinstance(err, str) and err:
                return err
            if body.get("message"):
                return str(body["message"])
    return f"HTTP {response.status_code} {response.reason_phrase}".strip()


def _to_api_response(response: httpx.Response) -> ApiResponse:
    data: Any = None
    with contextlib.suppress(ValueError):
        data = response.json()
    return ApiResponse(
        status=response.status_code,
        data=data,
        text=response.text,
        headers=dict(response.headers),
    )


class HttpxApiClient:
    """``ApiClient`` implementation backed by the shared httpx pool.

    Parameters
    ----------
    purpose:
        Pool discriminator; keep stable to maximize connection reuse.
    client:
        Optional explicit ``httpx.Client`` (tests pass one built on
        ``httpx.MockTransport``). When omitted the pooled client is used.
    """

    def __init__(self, purpose: str = "api", client: Optional[httpx.Client] = None) -> None:
        self._purpose = purpose
        self._client = client
        self._logger = get_logger("classifai.http")

    def _http(self) -> httpx.Client:
        return self._client if self._client is not None else get_httpx_client(None, self._purpose)

    def get(
        self,
        url: str,
        *,
        params: Optional[Mapping[str, Any]] = None,
        headers: Optional[Mapping[str, str]] = None,
        auth: Optional[Tuple[str, str]] = None,
    ) -> Result[ApiResponse]:
        return self._request("GET", url, params=params, headers=headers, auth=auth)

    def post(
        self,
        url: str,
        *,
        json: Any = None,
        data: Optional[Mapping[str, Any]] = None,
        files: Optional[Mapping[str, Any]] = None,
        headers: Optional[Mapping[str, str]] = None,
        auth: Optional[Tuple[str, str]] = None,
    ) -> Result[ApiResponse]:
        return self._request("POST", url, json=json, data=data, files=files, headers=headers, auth=auth)

    def _request(self, method: str, url: str, **kwargs: Any) -> Result[ApiResponse]:
        request_kwargs = {k: v for k, v in kwargs.items() if v is not None}
        ctx = LogContext(extra={"method": method, "url": url})
        try:
            response = self._http().request(method, url, **request_kwargs)
        except httpx.HTTPError as exc:
            normalized_log_event(
                self._logger, "http.request", ctx, phase="request", outcome="error",
                error_kind=ErrorKind.CONNECTION.value, error=str(exc),
            )
            return Failure(ErrorKind.CONNECTION, str(exc) or exc.__class__.__name__, {"url": url})

        if response.is_success:
            return Success(_to_api_response(response))

        kind = kind_for_status(response.status_code)
        message = _error_message(response)
        normalized_log_event(
            self._logger, "http.request", ctx, phase="response", outcome="error",
            error_kind=kind.value, status=response.status_code,
        )
        return Failure(kind, message, {"status": response.status_code, "url": url})


__all__ = ["HttpxApiClient", "get_httpx_client", "close_all_clients"]
