"""Authorization collaborator protocol."""
from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class Authorizer(Protocol):
    """Decides whether ``actor`` may run ``capability`` on ``item_id``."""

    def can_perform(self, actor: Any, item_id: str, capability: str) -> bool: ...
