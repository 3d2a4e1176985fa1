"""Azure OpenAI provider (feature: excerpt_generation, capability: ``excerpt``).

Sends the ChatGPT excerpt prompt to a model deployment on an Azure OpenAI
resource. Azure differs from the OpenAI API only in transport:

- the key travels in an ``api-key`` header instead of a bearer token
- requests target ``{endpoint}/openai/deployments/{deployment}/...`` with an
  ``api-version`` query parameter, and the deployment picks the model
"""
from __future__ import annotations

from types import MappingProxyType
from typing import Any, Dict, Mapping
from urllib.parse import quote

from ..base.errors import ErrorKind, FeatureError
from ..base.fields import FieldSpec, FieldType
from ..config.defaults import AZURE_OPENAI_API_VERSION
from .chatgpt import OpenAIChatGPTProvider
from .openai_style import API_KEY_FIELD


class AzureOpenAIProvider(OpenAIChatGPTProvider):
    id = "azure_openai"
    label = "Azure OpenAI"
    feature_capabilities = MappingProxyType({"excerpt_generation": "excerpt"})
    operations = MappingProxyType({"excerpt": "excerpt"})
    fields = (
        FieldSpec("endpoint_url", FieldType.URL, default="", credential=True, label="Endpoint URL"),
        API_KEY_FIELD,
        FieldSpec("deployment", FieldType.TEXT, default="", credential=True, label="Deployment name"),
    )

    def _headers(self, values: Mapping[str, Any]) -> Dict[str, str]:
        api_key = values.get("api_key")
        if not api_key:
            raise FeatureError(ErrorKind.CONFIGURATION, "api_key is not configured", provider=self.id)
        return {"api-key": str(api_key)}

    def _completions_url(self, values: Mapping[str, Any]) -> str:
        endpoint = str(values.get("endpoint_url") or "").rstrip("/")
        deployment = quote(str(values.get("deployment") or ""), safe="")
        return f"{endpoint}/openai/deployments/{deployment}/chat/completions?api-version={AZURE_OPENAI_API_VERSION}"

    def _chat_completion(self, settings: Mapping[str, Any], body: Mapping[str, Any]) -> Dict[str, Any]:
        response = self._expect(
            self._api.post(self._completions_url(settings), json=dict(body), headers=self._headers(settings))
        )
        return response.data if isinstance(response.data, dict) else {}

    def _connect(self, values: Mapping[str, Any]) -> Mapping[str, Any]:
        # A one-token completion checks endpoint, key and deployment at once.
        self._chat_completion(values, {"messages": [{"role": "user", "content": "Hi"}], "max_tokens": 1})
        return {"deployment": values.get("deployment")}


__all__ = ["AzureOpenAIProvider"]
