"""Provider Factory utilities.

Purpose
-------
Centralize creation of provider instances by canonical id. Provider modules
are imported lazily using ``importlib`` so optional SDKs (``boto3`` for
Polly) are only imported when that provider is actually built.

Timeout and fallback semantics
------------------------------
No timeouts are introduced here. The factory performs no retries or
fallbacks; it either returns an instance or raises a clear error.

Scope
-----
Supported providers: ``watson_nlu``, ``openai_embeddings``,
``openai_whisper``, ``openai_chatgpt``, ``azure_openai`` and ``aws_polly``.
"""

from __future__ import annotations

from importlib import import_module
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple, Type

from ..config import get_provider_config
from .fields import field_defaults
from .interfaces_parts.api_client import ApiClient
from .registry import ProviderRegistry, RegistryBuilder


class UnknownProviderError(Exception):
    """Raised when a provider cannot be resolved or initialized.

    Failure modes include:
    - The provider id is not registered in the factory mapping.
    - The provider module cannot be imported or the class is missing.
    - The provider constructor raised an exception during initialization.
    """


class ProviderFactory:
    """Create providers based on a canonical id (e.g., ``"watson_nlu"``)."""

    _PROVIDERS: Dict[str, Dict[str, str]] = {
        "watson_nlu": {"module": "classifai_providers.watson.nlu", "class": "WatsonNLUProvider"},
        "openai_embeddings": {"module": "classifai_providers.openai.embeddings", "class": "OpenAIEmbeddingsProvider"},
        "openai_whisper": {"module": "classifai_providers.openai.whisper", "class": "OpenAIWhisperProvider"},
        "openai_chatgpt": {"module": "classifai_providers.openai.chatgpt", "class": "OpenAIChatGPTProvider"},
        "azure_openai": {"module": "classifai_providers.openai.azure_openai", "class": "AzureOpenAIProvider"},
        "aws_polly": {"module": "classifai_providers.aws.polly", "class": "AmazonPollyProvider"},
    }

    @classmethod
    def provider_class(cls, provider_id: str) -> Type:
        name = (provider_id or "").lower().strip()
        spec = cls._PROVIDERS.get(name)
        if not spec:
            raise UnknownProviderError(f"Unknown provider '{provider_id}'")
        module_path, class_name = spec["module"], spec["class"]
        try:
            mod = import_module(module_path)
        except ImportError as exc:  # pragma: no cover - import failure path
            raise UnknownProviderError(
                f"Failed to import module '{module_path}' for provider '{provider_id}': {exc}"
            ) from exc
        try:
            return getattr(mod, class_name)
        except AttributeError as exc:
            raise UnknownProviderError(
                f"Provider class '{class_name}' not found in '{module_path}' for provider '{provider_id}'"
            ) from exc

    @classmethod
    def create(
        cls,
        provider_id: str,
        api_client: ApiClient,
        *,
        use_environment: bool = False,
        overrides: Optional[Mapping[str, Any]] = None,
        **kwargs: Any,
    ) -> Any:
        """Create a provider instance.

        Parameters
        ----------
        provider_id:
            Canonical provider id.
        api_client:
            HTTP/API client collaborator handed to the provider.
        use_environment:
            When True, field defaults are seeded from the config file and
            environment (see ``classifai_providers.config``).
        overrides:
            Explicit default overrides, applied last.
        **kwargs:
            Provider-specific constructor kwargs (e.g. ``client_factory`` for
            Polly).

        Raises
        ------
        UnknownProviderError
            If the id is unknown, the module fails to import, the class is
            missing, or the constructor raises.
        """
        klass = cls.provider_class(provider_id)
        if use_environment:
            defaults: Optional[Mapping[str, Any]] = get_provider_config(
                klass.id, field_defaults(klass.fields), overrides
            )
        else:
            defaults = dict(overrides) if overrides else None
        try:
            return klass(api_client, defaults=defaults, **kwargs)
        except TypeError as exc:
            raise UnknownProviderError(
                f"Invalid arguments for '{provider_id}' provider constructor: {exc}"
            ) from exc
        except Exception as exc:  # pragma: no cover - provider init error
            raise UnknownProviderError(f"Failed to initialize provider '{provider_id}': {exc}") from exc

    @classmethod
    def supported(cls) -> Tuple[str, ...]:
        """Return supported provider ids in deterministic order."""
        return tuple(cls._PROVIDERS.keys())

    @classmethod
    def build_registry(
        cls,
        api_client: ApiClient,
        *,
        provider_ids: Optional[Iterable[str]] = None,
        use_environment: bool = True,
        provider_kwargs: Optional[Mapping[str, Mapping[str, Any]]] = None,
    ) -> ProviderRegistry:
        """Create the requested providers and freeze them into a registry."""
        builder = RegistryBuilder()
        per_provider = provider_kwargs or {}
        for pid in provider_ids if provider_ids is not None else cls.supported():
            builder.register(
                cls.create(pid, api_client, use_environment=use_environment, **dict(per_provider.get(pid, {})))
            )
        return builder.build()


def create_provider(provider_id: str, api_client: ApiClient, **kwargs: Any) -> Any:
    """Compatibility helper that delegates to :meth:`ProviderFactory.create`."""
    return ProviderFactory.create(provider_id, api_client, **kwargs)


__all__ = ["ProviderFactory", "UnknownProviderError", "create_provider"]
