"""Reference implementations of the authorization and item metadata collaborators.

Hosts embedding the framework supply their own; these cover the CLI, the
dev server and tests. ``HttpxApiClient`` lives in ``base.http``.
"""
from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, Mapping, Optional


class AllowListAuthorizer:
    """Allow actors from a fixed set; ``actors=None`` allows everyone.

    ``capabilities`` optionally narrows which capabilities may be performed
    at all (e.g. a read-only deployment allowing only ``classification``).
    """

    def __init__(self, actors: Optional[Iterable[Any]] = None, capabilities: Optional[Iterable[str]] = None) -> None:
        self._actors = None if actors is None else frozenset(actors)
        self._capabilities = None if capabilities is None else frozenset(capabilities)

    def can_perform(self, actor: Any, item_id: str, capability: str) -> bool:
        if self._capabilities is not None and capability not in self._capabilities:
            return False
        return self._actors is None or actor in self._actors


@dataclass(frozen=True)
class ItemRecord:
    """One item as seen by features: type, status, content and optional file."""

    type: str
    status: str
    content: str = ""
    title: str = ""
    file_path: Optional[str] = None


class StaticItemCatalog:
    """In-memory ``ItemMetadata`` over a mapping of item id -> :class:`ItemRecord`.

    Unknown ids raise ``KeyError`` like a missing post would.
    """

    def __init__(self, items: Optional[Mapping[str, ItemRecord]] = None) -> None:
        self._items: Dict[str, ItemRecord] = dict(items or {})

    @classmethod
    def from_mapping(cls, data: Mapping[str, Mapping[str, Any]]) -> "StaticItemCatalog":
        items = {
            str(item_id): ItemRecord(
                type=str(row.get("type", "")),
                status=str(row.get("status", "")),
                content=str(row.get("content", "")),
                title=str(row.get("title", "")),
                file_path=row.get("file_path"),
            )
            for item_id, row in data.items()
        }
        return cls(items)

    @classmethod
    def from_json_file(cls, path: str | Path) -> "StaticItemCatalog":
        """Load ``{"<id>": {"type": ..., "status": ..., "content": ...}}`` from disk."""
        data = json.loads(Path(path).read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            raise ValueError(f"{path}: expected a JSON object keyed by item id")
        return cls.from_mapping(data)

    def _get(self, item_id: str) -> ItemRecord:
        return self._items[str(item_id)]

    def get_type(self, item_id: str) -> str:
        return self._get(item_id).type

    def get_status(self, item_id: str) -> str:
        return self._get(item_id).status

    def get_content(self, item_id: str) -> str:
        return self._get(item_id).content

    def get_title(self, item_id: str) -> str:
        return self._get(item_id).title

    def get_file_path(self, item_id: str) -> Optional[str]:
        return self._get(item_id).file_path


__all__ = ["AllowListAuthorizer", "ItemRecord", "StaticItemCatalog"]
