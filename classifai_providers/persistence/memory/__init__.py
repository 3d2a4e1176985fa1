from .store import InMemorySettingsStore

__all__ = ["InMemorySettingsStore"]
