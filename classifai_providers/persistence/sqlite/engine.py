"""SQLite engine helpers for the settings store.

Purpose
-------
Centralize opening SQLite connections and ensuring the schema exists.

External dependencies
---------------------
- Standard library only (``sqlite3``). No side effects at import time.

Timeout and reliability strategy
--------------------------------
- Applies ``busy_timeout`` (milliseconds) from ``config.defaults`` to
  mitigate lock contention between processes.
- Enables WAL journaling and NORMAL synchronous mode.
"""

from __future__ import annotations

import os
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

from ...config.defaults import (
    SETTINGS_DB_DEFAULT_PATH,
    SETTINGS_DB_ENV,
    SQLITE_BUSY_TIMEOUT_MS,
    SQLITE_JOURNAL_MODE,
    SQLITE_SYNCHRONOUS,
)


def get_db_path(db_path: Optional[str] = None) -> Path:
    """Return the database file path.

    Precedence: explicit ``db_path`` -> ``CLASSIFAI_DB_PATH`` -> default under
    the user's home directory. ``~`` is expanded.
    """
    return Path(db_path or os.getenv(SETTINGS_DB_ENV) or SETTINGS_DB_DEFAULT_PATH).expanduser()


def create_connection(db_path: Optional[str] = None) -> sqlite3.Connection:
    """Open a SQLite connection and apply PRAGMA settings.

    The parent directory is created first. ``row_factory`` is ``sqlite3.Row``.
    """
    path = get_db_path(db_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(str(path))
    conn.row_factory = sqlite3.Row
    conn.execute(f"PRAGMA journal_mode={SQLITE_JOURNAL_MODE};")
    conn.execute(f"PRAGMA synchronous={SQLITE_SYNCHRONOUS};")
    conn.execute(f"PRAGMA busy_timeout={SQLITE_BUSY_TIMEOUT_MS};")  # ms
    return conn


def init_schema(conn: sqlite3.Connection) -> None:
    """Create the ``feature_settings`` table if missing, then commit.

    One row per feature: the whole settings blob serialized as JSON, so a
    save is a single-row upsert and therefore atomic.
    """
    conn.execute(
        """
        CREATE TABLE IF NOT EXISTS feature_settings (
            feature_id TEXT PRIMARY KEY,
            blob_json  TEXT NOT NULL,
            updated_at TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP
        );
        """
    )
    conn.commit()


@contextmanager
def db_session(db_path: Optional[str] = None) -> Iterator[sqlite3.Connection]:
    """Yield a connection with schema initialized.

    Commits on normal exit, rolls back if an exception escapes, always closes.
    """
    conn = create_connection(db_path)
    try:
        init_schema(conn)
        yield conn
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


__all__ = ["get_db_path", "create_connection", "init_schema", "db_session"]
