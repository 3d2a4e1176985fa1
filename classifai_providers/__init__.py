"""classifai_providers package

Pluggable-provider feature dispatch: features (classification, text to
speech, speech to text, excerpt generation) decoupled from the providers
that implement them (IBM Watson NLU, OpenAI, Amazon Polly).

Public API (re-exported):
    - Version: ``__version__``
    - Results and errors: :class:`Success`, :class:`Failure`,
      :class:`ErrorKind`, :class:`FeatureError`
    - Wiring: :class:`ProviderFactory`, :class:`ProviderRegistry`,
      :func:`build_container`
    - Features and dispatch: :class:`Feature`, :class:`Dispatcher`

Typical use::

    container = build_container(db_path="settings.db")
    container.feature("classification").save_settings({...})
    container.dispatcher.dispatch("classification", "42", actor="editor")
"""

__version__ = "0.1.0"

from .base.errors import ErrorKind, FeatureError
from .base.factory import ProviderFactory, UnknownProviderError
from .base.registry import ProviderRegistry, RegistryBuilder
from .base.result import Failure, Result, Success
from .di import ProvidersContainer, build_container
from .dispatch import Dispatcher
from .features import FEATURE_CLASSES, Feature, FeatureState

__all__ = [
    "__version__",
    "ErrorKind",
    "FeatureError",
    "Failure",
    "Result",
    "Success",
    "ProviderFactory",
    "UnknownProviderError",
    "ProviderRegistry",
    "RegistryBuilder",
    "ProvidersContainer",
    "build_container",
    "Dispatcher",
    "Feature",
    "FeatureState",
    "FEATURE_CLASSES",
]
