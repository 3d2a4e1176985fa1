"""Small provider-agnostic helpers."""

from .normalize import normalize_content, truncate_words

__all__ = ["normalize_content", "truncate_words"]
