"""Content normalization applied before text is sent to a provider.

Markup carries no meaning for classification, summarization or speech, so
HTML tags, block comments and bracketed shortcodes are removed, entities are
decoded and whitespace collapsed. When a title is given it is prefixed as its
own sentence, which keeps the subject in front of models that truncate.
"""
from __future__ import annotations

import html
import re
from typing import Optional

_COMMENT_RE = re.compile(r"<!--.*?-->", re.DOTALL)
_BLOCK_RE = re.compile(r"<(script|style)\b[^>]*>.*?</\1>", re.DOTALL | re.IGNORECASE)
_TAG_RE = re.compile(r"<[^>]+>")
_SHORTCODE_RE = re.compile(r"\[/?[a-zA-Z][\w-]*(?:\s[^\]]*)?/?\]")
_WS_RE = re.compile(r"\s+")


def normalize_content(content: Optional[str], title: Optional[str] = None) -> str:
    """Return plain text for ``content`` with ``title`` prefixed when given.

    Example:
        >>> normalize_content("<p>Hello [gallery ids='1'] <b>world</b></p>", "Greeting")
        'Greeting. Hello world'
    """
    text = content or ""
    text = _COMMENT_RE.sub(" ", text)
    text = _BLOCK_RE.sub(" ", text)
    text = _TAG_RE.sub(" ", text)
    text = _SHORTCODE_RE.sub(" ", text)
    text = _WS_RE.sub(" ", html.unescape(text)).strip()
    heading = _WS_RE.sub(" ", html.unescape(_TAG_RE.sub(" ", title or ""))).strip()
    if heading:
        heading = heading if heading[-1] in ".!?" else heading + "."
        return f"{heading} {text}".strip()
    return text


def truncate_words(text: str, limit: int) -> str:
    """Keep at most ``limit`` whitespace-separated words (``limit <= 0`` keeps all)."""
    words = text.split()
    if limit <= 0 or len(words) <= limit:
        return " ".join(words)
    return " ".join(words[:limit])


__all__ = ["normalize_content", "truncate_words"]
