"""Text-to-speech feature: synthesize item content into an audio file."""
from __future__ import annotations

from typing import Any, Dict, Mapping

from ..base.fields import FieldSpec, FieldType
from ..config.defaults import TEXT_TO_SPEECH_DEFAULT_POST_STATUSES, TEXT_TO_SPEECH_DEFAULT_POST_TYPES
from .base import Feature


class TextToSpeech(Feature):
    id = "text_to_speech"
    label = "Text to Speech"
    default_provider_id = "aws_polly"
    fields = (
        FieldSpec("post_types", FieldType.CHECKBOX_GROUP, default=TEXT_TO_SPEECH_DEFAULT_POST_TYPES, label="Allowed post types"),
        FieldSpec(
            "post_statuses", FieldType.CHECKBOX_GROUP, default=TEXT_TO_SPEECH_DEFAULT_POST_STATUSES, label="Allowed post statuses"
        ),
    )

    def prepare_args(self, args: Mapping[str, Any], settings: Mapping[str, Any]) -> Dict[str, Any]:
        # ``content_hash`` is the hash of audio the caller already holds.
        out = dict(args)
        if out.get("content_hash") is not None:
            out["content_hash"] = str(out["content_hash"])
        return out


__all__ = ["TextToSpeech"]
