"""Per-feature re-entrant locks shared by the settings store backends."""
from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Dict, Iterator


class FeatureLocks:
    """Lazily created ``RLock`` per feature id.

    Re-entrant so a feature holding its lock for a save can call ``save``,
    which takes the same lock again.
    """

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: Dict[str, threading.RLock] = {}

    def get(self, feature_id: str) -> threading.RLock:
        with self._guard:
            lock = self._locks.get(feature_id)
            if lock is None:
                lock = self._locks[feature_id] = threading.RLock()
            return lock

    @contextmanager
    def hold(self, feature_id: str) -> Iterator[None]:
        with self.get(feature_id):
            yield


__all__ = ["FeatureLocks"]
