"""
Providers Base Package

Exports provider-agnostic contracts, the settings field model, the result
type, the registry and the provider factory:

- Interfaces: provider and collaborator protocols
- Fields: declarative settings schema and type-driven sanitizers
- Result: ``Success``/``Failure`` tagged outcomes
- Registry/Factory: immutable provider registry built once at startup
"""

from .collaborators import AllowListAuthorizer, ItemRecord, StaticItemCatalog
from .errors import ErrorKind, FeatureError, classify_exception
from .factory import ProviderFactory, UnknownProviderError
from .fields import FieldSpec, FieldType, enabled_keys, field_defaults
from .http import HttpxApiClient
from .interfaces import ApiClient, ApiResponse, Authorizer, ItemMetadata, Provider
from .provider_base import BaseProvider, ConnectivityInfo, NormalizedSettings, credential_fingerprint
from .registry import ProviderRegistry, RegistryBuilder
from .result import Failure, Result, Success, capture
from .timeouts import TimeoutConfig, get_timeout_config

__all__ = [
    "AllowListAuthorizer",
    "ApiClient",
    "ApiResponse",
    "Authorizer",
    "BaseProvider",
    "ConnectivityInfo",
    "ErrorKind",
    "FeatureError",
    "Failure",
    "FieldSpec",
    "FieldType",
    "HttpxApiClient",
    "ItemMetadata",
    "ItemRecord",
    "NormalizedSettings",
    "Provider",
    "ProviderFactory",
    "ProviderRegistry",
    "RegistryBuilder",
    "Result",
    "StaticItemCatalog",
    "Success",
    "TimeoutConfig",
    "UnknownProviderError",
    "capture",
    "classify_exception",
    "credential_fingerprint",
    "enabled_keys",
    "field_defaults",
    "get_timeout_config",
]
