"""HTTP utilities package for providers.

Exposes pooled httpx clients and the ``HttpxApiClient`` collaborator.
"""

from .client import HttpxApiClient, close_all_clients, get_httpx_client

__all__ = ["HttpxApiClient", "get_httpx_client", "close_all_clients"]
