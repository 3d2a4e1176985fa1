"""Errors parts package public surface.

Re-exports individual error taxonomy components for optional direct imports.
Prefer importing from `classifai_providers.base.errors` for the stable surface.
"""

from .error_kind import ErrorKind
from .feature_error import FeatureError
from .classification import classify_exception, kind_for_status

__all__ = ["ErrorKind", "FeatureError", "classify_exception", "kind_for_status"]
