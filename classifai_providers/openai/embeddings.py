"""OpenAI Embeddings provider (feature: classification, capability: ``embed``).

Classification by embeddings compares the item vector against term vectors
on the host side; this provider only produces the vector. Content is
normalized and truncated to a character budget below the model's token
limit.
"""
from __future__ import annotations

from types import MappingProxyType
from typing import Any, Dict, Mapping

from ..base.errors import ErrorKind, FeatureError
from ..base.fields import FieldSpec, FieldType
from ..base.utils import normalize_content
from ..config.defaults import OPENAI_EMBEDDINGS_DEFAULT_MODEL, OPENAI_EMBEDDINGS_MAX_CHARS
from .openai_style import API_KEY_FIELD, BASE_URL_FIELD, BaseOpenAIStyleProvider


class OpenAIEmbeddingsProvider(BaseOpenAIStyleProvider):
    id = "openai_embeddings"
    label = "OpenAI Embeddings"
    feature_capabilities = MappingProxyType({"classification": "embed"})
    operations = MappingProxyType({"embed": "embed"})
    fields = (
        API_KEY_FIELD,
        BASE_URL_FIELD,
        FieldSpec("model", FieldType.TEXT, default=OPENAI_EMBEDDINGS_DEFAULT_MODEL, label="Model"),
    )

    def embed(self, args: Mapping[str, Any], settings: Mapping[str, Any]) -> Dict[str, Any]:
        text = normalize_content(args.get("content"), args.get("title"))[:OPENAI_EMBEDDINGS_MAX_CHARS]
        if not text:
            raise FeatureError(ErrorKind.VALIDATION, "content is empty", provider=self.id)
        model = settings.get("model") or OPENAI_EMBEDDINGS_DEFAULT_MODEL
        response = self._expect(
            self._api.post(
                self._url(settings, "embeddings"),
                json={"model": model, "input": text},
                headers=self._headers(settings),
            )
        )
        data = response.data if isinstance(response.data, dict) else {}
        rows = data.get("data") or []
        if not rows or "embedding" not in rows[0]:
            raise FeatureError(ErrorKind.PROVIDER, "no embedding returned", provider=self.id)
        return {"embedding": rows[0]["embedding"], "model": data.get("model", model), "usage": data.get("usage", {})}


__all__ = ["OpenAIEmbeddingsProvider"]
