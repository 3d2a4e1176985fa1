from .engine import create_connection, db_session, get_db_path, init_schema
from .settings_store import SettingsStoreSqlite

__all__ = ["create_connection", "db_session", "get_db_path", "init_schema", "SettingsStoreSqlite"]
