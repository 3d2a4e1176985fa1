"""Item metadata collaborator protocol (stands in for host post storage)."""
from __future__ import annotations

from typing import Optional, Protocol, runtime_checkable


@runtime_checkable
class ItemMetadata(Protocol):
    """Read-only view of the items features operate on.

    ``get_type``/``get_status``/``get_content`` raise ``KeyError`` for
    unknown items; the dispatcher converts that into a ``Failure``.
    """

    def get_type(self, item_id: str) -> str: ...

    def get_status(self, item_id: str) -> str: ...

    def get_content(self, item_id: str) -> str: ...

    def get_title(self, item_id: str) -> str: ...

    def get_file_path(self, item_id: str) -> Optional[str]: ...
