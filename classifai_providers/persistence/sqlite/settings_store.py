"""SQLite-backed implementation of ``ISettingsStore``.

Each operation opens a short-lived connection through ``db_session`` so the
store is safe to share between threads. Blobs are serialized with sorted
keys; a save either replaces the row in one transaction or rolls back and
leaves the previous blob in place.
"""

from __future__ import annotations

import json
import sqlite3
from typing import Any, ContextManager, Dict, Mapping, Optional, Tuple

from ...base.errors import ErrorKind, FeatureError
from ...base.log_support import LogContext
from ...base.logging import get_logger, normalized_log_event
from ...base.result import Failure, Result, Success
from ..locks import FeatureLocks
from .engine import db_session

_UPSERT = (
    "INSERT INTO feature_settings(feature_id, blob_json, updated_at) VALUES(?, ?, CURRENT_TIMESTAMP) "
    "ON CONFLICT(feature_id) DO UPDATE SET blob_json=excluded.blob_json, updated_at=CURRENT_TIMESTAMP"
)
_STORE_ERRORS = (OSError, ValueError, sqlite3.Error)


class SettingsStoreSqlite:
    """Settings store persisting one JSON row per feature.

    Parameters
    ----------
    db_path:
        Database file; see :func:`engine.get_db_path` for the fallback chain.
    """

    def __init__(self, db_path: Optional[str] = None) -> None:
        self.db_path = db_path
        self._locks = FeatureLocks()
        self._logger = get_logger("classifai.store.sqlite")

    def load(self, feature_id: str) -> Dict[str, Any]:
        """Return the stored blob, or ``{}``; unreadable rows raise ``FeatureError(store_error)``."""
        try:
            with self._locks.hold(feature_id), db_session(self.db_path) as conn:
                row = conn.execute(
                    "SELECT blob_json FROM feature_settings WHERE feature_id = ?", (feature_id,)
                ).fetchone()
            data = json.loads(row[0]) if row and row[0] else {}
        except _STORE_ERRORS as exc:
            normalized_log_event(
                self._logger, "store.load", LogContext(feature=feature_id), phase="load", outcome="error",
                error_kind=ErrorKind.STORE.value, error=str(exc),
            )
            raise FeatureError(ErrorKind.STORE, f"cannot read settings: {exc}", feature=feature_id) from exc
        return data if isinstance(data, dict) else {}

    def save(self, feature_id: str, blob: Mapping[str, Any]) -> Result[None]:
        ctx = LogContext(feature=feature_id)
        try:
            payload = json.dumps(dict(blob), ensure_ascii=False, sort_keys=True)
            with self._locks.hold(feature_id), db_session(self.db_path) as conn:
                conn.execute(_UPSERT, (feature_id, payload))
        except (TypeError, *_STORE_ERRORS) as exc:
            normalized_log_event(
                self._logger, "store.save", ctx, phase="save", outcome="error",
                error_kind=ErrorKind.STORE.value, error=str(exc),
            )
            return Failure(ErrorKind.STORE, f"cannot store settings: {exc}", {"feature": feature_id})
        normalized_log_event(self._logger, "store.save", ctx, phase="save", outcome="ok")
        return Success(None)

    def delete(self, feature_id: str) -> Result[None]:
        try:
            with self._locks.hold(feature_id), db_session(self.db_path) as conn:
                conn.execute("DELETE FROM feature_settings WHERE feature_id = ?", (feature_id,))
        except _STORE_ERRORS as exc:
            return Failure(ErrorKind.STORE, f"cannot delete settings: {exc}", {"feature": feature_id})
        return Success(None)

    def list_features(self) -> Tuple[str, ...]:
        try:
            with db_session(self.db_path) as conn:
                rows = conn.execute("SELECT feature_id FROM feature_settings ORDER BY feature_id").fetchall()
        except _STORE_ERRORS as exc:
            raise FeatureError(ErrorKind.STORE, f"cannot list settings: {exc}") from exc
        return tuple(r[0] for r in rows)

    def lock(self, feature_id: str) -> ContextManager[None]:
        return self._locks.hold(feature_id)


__all__ = ["SettingsStoreSqlite"]
