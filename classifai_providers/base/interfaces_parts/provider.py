"""Provider protocol: settings schema plus the connect/invoke contract."""
from __future__ import annotations

from typing import Any, FrozenSet, Mapping, Protocol, Tuple, runtime_checkable

from ..fields import FieldSpec
from ..result import Result


@runtime_checkable
class Provider(Protocol):
    """A backend implementing one or more capability operations.

    Providers are immutable after registration. Settings normalization is
    driven by ``describe_settings_fields`` and must be idempotent.
    """

    @property
    def id(self) -> str: ...

    @property
    def supported_feature_ids(self) -> FrozenSet[str]: ...

    @property
    def capability_ops(self) -> FrozenSet[str]: ...

    @property
    def default_settings(self) -> Mapping[str, Any]: ...

    def describe_settings_fields(self) -> Tuple[FieldSpec, ...]: ...

    def validate_and_normalize(self, raw: Mapping[str, Any], previous: Mapping[str, Any]) -> Result[Any]: ...

    def connect(self, settings: Any, force: bool = False) -> Result[Any]: ...

    def invoke(self, capability: str, args: Mapping[str, Any], settings: Mapping[str, Any]) -> Result[Any]: ...
