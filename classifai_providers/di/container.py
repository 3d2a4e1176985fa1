"""Composition root wiring the framework together.

Builds, once and in order: API client -> provider registry -> settings store
-> features -> dispatcher. Every collaborator can be injected, which is how
tests swap in call-counting stubs and an in-memory store. The container holds
no global state; build one per process (or per test).
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, Mapping, Optional

from ..base.collaborators import AllowListAuthorizer, StaticItemCatalog
from ..base.factory import ProviderFactory
from ..base.http import HttpxApiClient
from ..base.interfaces_parts.api_client import ApiClient
from ..base.interfaces_parts.authorizer import Authorizer
from ..base.interfaces_parts.item_metadata import ItemMetadata
from ..base.registry import ProviderRegistry
from ..dispatch.dispatcher import Dispatcher
from ..features import FEATURE_CLASSES, Feature
from ..persistence.interfaces.repos import ISettingsStore
from ..persistence.sqlite.settings_store import SettingsStoreSqlite


class ProvidersContainer:
    """Holds the wired registry, store, features and dispatcher.

    Args:
        api_client: HTTP collaborator; defaults to ``HttpxApiClient``.
        store: Settings store; defaults to ``SettingsStoreSqlite`` at
            ``db_path``.
        registry: Prebuilt registry; defaults to every provider the factory
            knows, seeded from config file and environment.
        authorizer: Defaults to allowing every actor.
        items: Item metadata; defaults to an empty catalog.
        provider_kwargs: Per-provider constructor kwargs when the registry is
            built here (e.g. ``{"aws_polly": {"client_factory": ...}}``).
    """

    def __init__(
        self,
        *,
        api_client: Optional[ApiClient] = None,
        store: Optional[ISettingsStore] = None,
        registry: Optional[ProviderRegistry] = None,
        authorizer: Optional[Authorizer] = None,
        items: Optional[ItemMetadata] = None,
        db_path: Optional[str] = None,
        use_environment: bool = True,
        provider_kwargs: Optional[Mapping[str, Mapping[str, Any]]] = None,
    ) -> None:
        self.api_client: ApiClient = api_client if api_client is not None else HttpxApiClient()
        self.registry: ProviderRegistry = registry if registry is not None else ProviderFactory.build_registry(
            self.api_client, use_environment=use_environment, provider_kwargs=provider_kwargs
        )
        self.store: ISettingsStore = store if store is not None else SettingsStoreSqlite(db_path)
        self.features: Dict[str, Feature] = {cls.id: cls(self.registry, self.store) for cls in FEATURE_CLASSES}
        self.authorizer: Authorizer = authorizer if authorizer is not None else AllowListAuthorizer()
        self.items: ItemMetadata = items if items is not None else StaticItemCatalog()
        self.dispatcher = Dispatcher(self.features.values(), self.authorizer, self.items)

    def feature(self, feature_id: str) -> Feature:
        """Return a feature by id; ``KeyError`` for unknown ids."""
        return self.features[feature_id]

    def feature_ids(self) -> Iterable[str]:
        return tuple(self.features)


def build_container(**kwargs: Any) -> ProvidersContainer:
    """Construct a :class:`ProvidersContainer`; see its docstring for kwargs."""
    return ProvidersContainer(**kwargs)


__all__ = ["ProvidersContainer", "build_container"]
