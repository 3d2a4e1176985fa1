"""In-memory ``ISettingsStore`` used by tests, the CLI dry runs and embedding hosts.

Blobs are deep-copied on the way in and out so callers can never mutate the
stored state without going through ``save``. A blob that cannot be deep
copied is rejected as a store error and the previous blob is kept.
"""
from __future__ import annotations

import copy
from typing import Any, ContextManager, Dict, Mapping, Optional, Tuple

from ...base.errors import ErrorKind
from ...base.log_support import LogContext
from ...base.logging import get_logger, normalized_log_event
from ...base.result import Failure, Result, Success
from ..locks import FeatureLocks


class InMemorySettingsStore:
    def __init__(self, initial: Optional[Mapping[str, Mapping[str, Any]]] = None) -> None:
        self._blobs: Dict[str, Dict[str, Any]] = {k: copy.deepcopy(dict(v)) for k, v in (initial or {}).items()}
        self._locks = FeatureLocks()
        self._logger = get_logger("classifai.store.memory")

    def load(self, feature_id: str) -> Dict[str, Any]:
        with self._locks.hold(feature_id):
            return copy.deepcopy(self._blobs.get(feature_id, {}))

    def save(self, feature_id: str, blob: Mapping[str, Any]) -> Result[None]:
        with self._locks.hold(feature_id):
            try:
                snapshot = copy.deepcopy(dict(blob))
            except (TypeError, copy.Error) as exc:
                normalized_log_event(
                    self._logger, "store.save", LogContext(feature=feature_id),
                    phase="save", outcome="error", error_kind=ErrorKind.STORE.value,
                )
                return Failure(ErrorKind.STORE, f"cannot store settings: {exc}", {"feature": feature_id})
            self._blobs[feature_id] = snapshot
        normalized_log_event(self._logger, "store.save", LogContext(feature=feature_id), phase="save", outcome="ok")
        return Success(None)

    def delete(self, feature_id: str) -> Result[None]:
        with self._locks.hold(feature_id):
            self._blobs.pop(feature_id, None)
        return Success(None)

    def list_features(self) -> Tuple[str, ...]:
        return tuple(sorted(self._blobs))

    def lock(self, feature_id: str) -> ContextManager[None]:
        return self._locks.hold(feature_id)


__all__ = ["InMemorySettingsStore"]
