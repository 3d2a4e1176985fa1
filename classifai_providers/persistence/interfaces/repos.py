"""Settings store protocol for the persistence layer.

Features depend only on this abstraction; concrete implementations live
under ``persistence/memory/`` and ``persistence/sqlite/``.

Contract:
- ``load`` returns the stored blob for a feature, or ``{}`` when absent. The
  feature merges defaults; the store never invents keys. A blob that
  cannot be read raises ``FeatureError(store_error)``.
- ``save`` replaces the whole blob in one atomic write. On failure the prior
  blob is retained unchanged and ``Failure(store_error)`` is returned.
- ``lock`` yields a per-feature re-entrant mutex guarding the
  read-modify-write cycle of a settings save.
- Round trip: ``save(fid, load(fid))`` leaves the stored blob identical.
"""

from __future__ import annotations

from typing import Any, ContextManager, Dict, Mapping, Protocol, Tuple, runtime_checkable

from ...base.result import Result


@runtime_checkable
class ISettingsStore(Protocol):
    """Persists one nested settings blob per feature id."""

    def load(self, feature_id: str) -> Dict[str, Any]: ...

    def save(self, feature_id: str, blob: Mapping[str, Any]) -> Result[None]: ...

    def delete(self, feature_id: str) -> Result[None]: ...

    def list_features(self) -> Tuple[str, ...]: ...

    def lock(self, feature_id: str) -> ContextManager[None]: ...


__all__ = ["ISettingsStore"]
