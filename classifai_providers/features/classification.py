"""Classification feature: assign taxonomy terms to items.

Backed by ``watson_nlu`` (term extraction) or ``openai_embeddings`` (item
vector for term similarity). ``classification_mode`` decides whether the host
links returned terms automatically or shows them for manual review.
"""
from __future__ import annotations

from typing import Any, Dict, Mapping

from ..base.fields import FieldSpec, FieldType
from ..config.defaults import CLASSIFICATION_DEFAULT_POST_STATUSES, CLASSIFICATION_DEFAULT_POST_TYPES
from .base import Feature

MANUAL_REVIEW = "manual_review"
AUTOMATIC = "automatic_classification"


class Classification(Feature):
    id = "classification"
    label = "Classification"
    default_provider_id = "watson_nlu"
    fields = (
        FieldSpec("post_types", FieldType.CHECKBOX_GROUP, default=CLASSIFICATION_DEFAULT_POST_TYPES, label="Allowed post types"),
        FieldSpec(
            "post_statuses", FieldType.CHECKBOX_GROUP, default=CLASSIFICATION_DEFAULT_POST_STATUSES, label="Allowed post statuses"
        ),
        FieldSpec(
            "classification_mode",
            FieldType.SELECT,
            default=MANUAL_REVIEW,
            label="Classification mode",
            options={MANUAL_REVIEW: "Manual review", AUTOMATIC: "Automatic classification"},
        ),
        FieldSpec(
            "classification_method",
            FieldType.SELECT,
            default="recommended_terms",
            label="Classification method",
            options={"recommended_terms": "Recommend terms", "existing_terms": "Only existing terms"},
        ),
    )

    def finalize(self, value: Any, args: Mapping[str, Any], settings: Mapping[str, Any]) -> Dict[str, Any]:
        out = dict(value) if isinstance(value, Mapping) else {"result": value}
        automatic = settings.get("classification_mode") == AUTOMATIC
        out["link_terms"] = bool(args.get("link_terms", True)) and automatic
        out["classification_method"] = settings.get("classification_method")
        return out


__all__ = ["Classification", "MANUAL_REVIEW", "AUTOMATIC"]
