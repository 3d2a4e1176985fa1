from .repos import ISettingsStore

__all__ = ["ISettingsStore"]
