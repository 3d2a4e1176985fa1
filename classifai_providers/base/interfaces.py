"""
Provider-agnostic interfaces (Protocols) for the framework.

Re-exports the Protocols split into single-class modules under
``classifai_providers.base.interfaces_parts`` so imports stay stable.
"""

from __future__ import annotations

from .interfaces_parts import ApiClient, ApiResponse, Authorizer, ItemMetadata, Provider

__all__ = ["ApiClient", "ApiResponse", "Authorizer", "ItemMetadata", "Provider"]
