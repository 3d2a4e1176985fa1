"""Settings persistence: store protocol plus in-memory and SQLite backends."""

from .interfaces.repos import ISettingsStore
from .memory.store import InMemorySettingsStore
from .sqlite.settings_store import SettingsStoreSqlite

__all__ = ["ISettingsStore", "InMemorySettingsStore", "SettingsStoreSqlite"]
