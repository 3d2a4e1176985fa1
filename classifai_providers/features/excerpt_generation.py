"""Excerpt generation feature: summarize item content into a short teaser."""
from __future__ import annotations

from typing import Any, Mapping

from ..base.fields import FieldSpec, FieldType
from ..base.utils import truncate_words
from ..config.defaults import (
    EXCERPT_DEFAULT_POST_STATUSES,
    EXCERPT_DEFAULT_POST_TYPES,
    OPENAI_EXCERPT_DEFAULT_LENGTH,
    OPENAI_EXCERPT_MAX_LENGTH,
)
from .base import Feature


class ExcerptGeneration(Feature):
    id = "excerpt_generation"
    label = "Excerpt Generation"
    default_provider_id = "openai_chatgpt"
    fields = (
        FieldSpec("post_types", FieldType.CHECKBOX_GROUP, default=EXCERPT_DEFAULT_POST_TYPES, label="Allowed post types"),
        FieldSpec("post_statuses", FieldType.CHECKBOX_GROUP, default=EXCERPT_DEFAULT_POST_STATUSES, label="Allowed post statuses"),
        FieldSpec(
            "length",
            FieldType.NUMBER,
            default=OPENAI_EXCERPT_DEFAULT_LENGTH,
            label="Excerpt length (words)",
            minimum=1,
            maximum=OPENAI_EXCERPT_MAX_LENGTH,
        ),
    )

    def finalize(self, value: Any, args: Mapping[str, Any], settings: Mapping[str, Any]) -> Any:
        # Models overshoot word limits; enforce the configured length.
        if isinstance(value, Mapping) and isinstance(value.get("excerpt"), str):
            limit = int(settings.get("length") or OPENAI_EXCERPT_DEFAULT_LENGTH)
            return {**value, "excerpt": truncate_words(value["excerpt"], limit)}
        return value


__all__ = ["ExcerptGeneration"]
