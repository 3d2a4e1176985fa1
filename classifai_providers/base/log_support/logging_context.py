"""Structured logging context carried through feature and provider events."""
from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any, Dict, Optional


@dataclass
class LogContext:
    """Fields shared by the events of one operation.

    ``Feature.run`` fills ``provider`` once the active provider is resolved,
    so the context is mutable. ``extra`` entries are flattened into the
    event; ``None`` values never appear in the output.
    """

    feature: Optional[str] = None
    provider: Optional[str] = None
    item_id: Optional[str] = None
    capability: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        out = {f.name: getattr(self, f.name) for f in fields(self) if f.name != "extra"}
        out.update(self.extra or {})
        return {k: v for k, v in out.items() if v is not None}


__all__ = ["LogContext"]
