"""Immutable provider registry and the per-(feature, provider) handler table.

The registry is built once at startup by :class:`RegistryBuilder` and then
passed by reference into features and the dispatcher. Nothing mutates it
afterwards: both tables are exposed as ``MappingProxyType`` views.

Adding a provider means registering it here; feature and dispatcher code
never branches on provider ids. ``Feature.run`` looks up
``handler(feature_id, provider_id)`` and calls it.
"""
from __future__ import annotations

from types import MappingProxyType
from typing import Any, Callable, Dict, Mapping, Optional, Tuple

from .errors import ErrorKind, FeatureError
from .interfaces_parts.provider import Provider
from .result import Result

CapabilityHandler = Callable[[Mapping[str, Any], Mapping[str, Any]], Result[Any]]


def _bind(provider: Provider, capability: str) -> CapabilityHandler:
    def handler(args: Mapping[str, Any], settings: Mapping[str, Any]) -> Result[Any]:
        return provider.invoke(capability, args, settings)

    handler.__name__ = f"{provider.id}_{capability}"
    return handler


class ProviderRegistry:
    """Read-only view over registered providers and capability handlers."""

    def __init__(
        self,
        providers: Mapping[str, Provider],
        handlers: Mapping[Tuple[str, str], CapabilityHandler],
    ) -> None:
        self._providers = MappingProxyType(dict(providers))
        self._handlers = MappingProxyType(dict(handlers))

    @property
    def providers(self) -> Mapping[str, Provider]:
        return self._providers

    @property
    def handlers(self) -> Mapping[Tuple[str, str], CapabilityHandler]:
        return self._handlers

    def __contains__(self, provider_id: object) -> bool:
        return provider_id in self._providers

    def __len__(self) -> int:
        return len(self._providers)

    def ids(self) -> Tuple[str, ...]:
        return tuple(self._providers)

    def get(self, provider_id: str) -> Provider:
        """Return a provider or raise ``FeatureError(configuration_error)``."""
        provider = self._providers.get(provider_id or "")
        if provider is None:
            raise FeatureError(
                ErrorKind.CONFIGURATION,
                f"provider '{provider_id}' is not registered",
                provider=provider_id or None,
            )
        return provider

    def handler(self, feature_id: str, provider_id: str) -> Optional[CapabilityHandler]:
        return self._handlers.get((feature_id, provider_id))

    def providers_for(self, feature_id: str) -> Tuple[str, ...]:
        """Provider ids declaring support for ``feature_id``, in registration order."""
        return tuple(pid for pid, p in self._providers.items() if feature_id in p.supported_feature_ids)


class RegistryBuilder:
    """Collects providers, then freezes them into a :class:`ProviderRegistry`.

    ``register`` binds one handler per supported feature from the provider's
    ``feature_capabilities`` table. ``capabilities`` overrides that table for
    hosts wiring a provider to a different operation.
    """

    def __init__(self) -> None:
        self._providers: Dict[str, Provider] = {}
        self._handlers: Dict[Tuple[str, str], CapabilityHandler] = {}
        self._built = False

    def register(self, provider: Provider, capabilities: Optional[Mapping[str, str]] = None) -> "RegistryBuilder":
        if self._built:
            raise FeatureError(ErrorKind.CONFIGURATION, "registry already built")
        if provider.id in self._providers:
            raise FeatureError(
                ErrorKind.CONFIGURATION, f"provider '{provider.id}' registered twice", provider=provider.id
            )
        table = dict(capabilities if capabilities is not None else getattr(provider, "feature_capabilities", {}))
        for feature_id, capability in table.items():
            if capability not in provider.capability_ops:
                raise FeatureError(
                    ErrorKind.CONFIGURATION,
                    f"provider '{provider.id}' has no '{capability}' operation for '{feature_id}'",
                    provider=provider.id,
                    feature=feature_id,
                )
            self._handlers[(feature_id, provider.id)] = _bind(provider, capability)
        self._providers[provider.id] = provider
        return self

    def build(self) -> ProviderRegistry:
        self._built = True
        return ProviderRegistry(self._providers, self._handlers)


__all__ = ["ProviderRegistry", "RegistryBuilder", "CapabilityHandler"]
