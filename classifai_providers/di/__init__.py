"""Composition root for the framework (no external DI library)."""
from __future__ import annotations

from .container import ProvidersContainer, build_container

__all__ = ["ProvidersContainer", "build_container"]
