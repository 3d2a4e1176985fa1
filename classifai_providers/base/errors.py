"""Unified failure taxonomy public surface.

This module re-exports the one-class-per-file implementations under
``classifai_providers.base.errors_parts`` to maintain a stable import path.
"""

from .errors_parts.error_kind import ErrorKind
from .errors_parts.feature_error import FeatureError
from .errors_parts.classification import classify_exception, kind_for_status

__all__ = ["ErrorKind", "FeatureError", "classify_exception", "kind_for_status"]
