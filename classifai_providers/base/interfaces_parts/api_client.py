"""HTTP/API client collaborator protocol and its parsed response type."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Protocol, Tuple, runtime_checkable

from ..result import Result


@dataclass(frozen=True)
class ApiResponse:
    """Parsed HTTP response handed back to providers.

    ``data`` is the decoded JSON body, or ``None`` when the body is not JSON.
    """

    status: int
    data: Any = None
    text: str = ""
    headers: Dict[str, str] = field(default_factory=dict)


@runtime_checkable
class ApiClient(Protocol):
    """Transport seam between providers and external APIs.

    Implementations own transport, timeouts and TLS; providers only build
    bodies and read ``ApiResponse.data``. Non-2xx responses and transport
    errors come back as ``Failure`` rather than raising.
    """

    def get(
        self,
        url: str,
        *,
        params: Optional[Mapping[str, Any]] = None,
        headers: Optional[Mapping[str, str]] = None,
        auth: Optional[Tuple[str, str]] = None,
    ) -> Result[ApiResponse]: ...

    def post(
        self,
        url: str,
        *,
        json: Any = None,
        data: Optional[Mapping[str, Any]] = None,
        files: Optional[Mapping[str, Any]] = None,
        headers: Optional[Mapping[str, str]] = None,
        auth: Optional[Tuple[str, str]] = None,
    ) -> Result[ApiResponse]: ...
