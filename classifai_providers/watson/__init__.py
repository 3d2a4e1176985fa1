"""IBM Watson Natural Language Understanding provider."""

from .nlu import WatsonNLUProvider

__all__ = ["WatsonNLUProvider"]
