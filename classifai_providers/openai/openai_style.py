"""Shared base for providers talking to the OpenAI REST API.

Centralizes:
- the ``api_key`` credential field and bearer headers
- URL construction from the configurable base URL
- connectivity via ``GET /models`` (cheapest authenticated call)

Concrete providers add their ``model`` field and capability methods.
"""
from __future__ import annotations

from typing import Any, Dict, Mapping

from ..base.errors import ErrorKind, FeatureError
from ..base.fields import FieldSpec, FieldType
from ..base.provider_base import BaseProvider
from ..config.defaults import OPENAI_DEFAULT_BASE_URL

API_KEY_FIELD = FieldSpec("api_key", FieldType.PASSWORD, default="", credential=True, label="API Key")
BASE_URL_FIELD = FieldSpec(
    "base_url", FieldType.URL, default=OPENAI_DEFAULT_BASE_URL, credential=True, required=False, label="API Base URL"
)


class BaseOpenAIStyleProvider(BaseProvider):
    """Common request plumbing for OpenAI-backed providers."""

    def _headers(self, values: Mapping[str, Any]) -> Dict[str, str]:
        api_key = values.get("api_key")
        if not api_key:
            raise FeatureError(ErrorKind.CONFIGURATION, "api_key is not configured", provider=self.id)
        return {"Authorization": f"Bearer {api_key}"}

    def _url(self, values: Mapping[str, Any], path: str) -> str:
        base = values.get("base_url") or OPENAI_DEFAULT_BASE_URL
        return f"{str(base).rstrip('/')}/{path.lstrip('/')}"

    def _connect(self, values: Mapping[str, Any]) -> Mapping[str, Any]:
        response = self._expect(self._api.get(self._url(values, "models"), headers=self._headers(values)))
        rows = response.data.get("data", []) if isinstance(response.data, dict) else []
        model = values.get("model")
        model_ids = {row.get("id") for row in rows if isinstance(row, dict)}
        return {"model_available": model in model_ids} if model else {}


__all__ = ["BaseOpenAIStyleProvider", "API_KEY_FIELD", "BASE_URL_FIELD"]
