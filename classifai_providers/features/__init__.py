"""Features backed by pluggable providers."""

from typing import Tuple, Type

from .base import Feature, FeatureState, Scope
from .classification import Classification
from .excerpt_generation import ExcerptGeneration
from .speech_to_text import SpeechToText
from .text_to_speech import TextToSpeech

FEATURE_CLASSES: Tuple[Type[Feature], ...] = (Classification, TextToSpeech, SpeechToText, ExcerptGeneration)

__all__ = [
    "Feature",
    "FeatureState",
    "Scope",
    "Classification",
    "ExcerptGeneration",
    "SpeechToText",
    "TextToSpeech",
    "FEATURE_CLASSES",
]
