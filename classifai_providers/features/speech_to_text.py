"""Speech-to-text feature: transcribe audio attachments."""
from __future__ import annotations

from ..base.fields import FieldSpec, FieldType
from ..config.defaults import SPEECH_TO_TEXT_POST_STATUSES, SPEECH_TO_TEXT_POST_TYPES
from .base import Feature


class SpeechToText(Feature):
    id = "speech_to_text"
    label = "Speech to Text"
    default_provider_id = "openai_whisper"
    fields = (
        FieldSpec("post_types", FieldType.CHECKBOX_GROUP, default=SPEECH_TO_TEXT_POST_TYPES, label="Allowed item types"),
        FieldSpec("post_statuses", FieldType.CHECKBOX_GROUP, default=SPEECH_TO_TEXT_POST_STATUSES, label="Allowed statuses"),
    )


__all__ = ["SpeechToText"]
