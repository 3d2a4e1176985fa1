"""OpenAI ChatGPT provider (feature: excerpt_generation, capability: ``excerpt``)."""
from __future__ import annotations

from types import MappingProxyType
from typing import Any, Dict, Mapping

from ..base.errors import ErrorKind, FeatureError
from ..base.fields import FieldSpec, FieldType
from ..base.utils import normalize_content
from ..config.defaults import (
    OPENAI_CHATGPT_DEFAULT_MODEL,
    OPENAI_EXCERPT_DEFAULT_LENGTH,
    OPENAI_EXCERPT_MAX_CONTENT_CHARS,
)
from .openai_style import API_KEY_FIELD, BASE_URL_FIELD, BaseOpenAIStyleProvider

EXCERPT_PROMPT = (
    "Summarize the following text into a teaser of no more than {length} words. "
    "The teaser should entice readers to read the full text. Return only the teaser."
)
_QUOTES = "\"'“”‘’"


class OpenAIChatGPTProvider(BaseOpenAIStyleProvider):
    id = "openai_chatgpt"
    label = "OpenAI ChatGPT"
    feature_capabilities = MappingProxyType({"excerpt_generation": "excerpt"})
    operations = MappingProxyType({"excerpt": "excerpt"})
    fields = (
        API_KEY_FIELD,
        BASE_URL_FIELD,
        FieldSpec("model", FieldType.TEXT, default=OPENAI_CHATGPT_DEFAULT_MODEL, label="Model"),
    )

    def excerpt(self, args: Mapping[str, Any], settings: Mapping[str, Any]) -> Dict[str, Any]:
        """Ask the chat model for a summary of at most ``length`` words."""
        text = normalize_content(args.get("content"), args.get("title"))[:OPENAI_EXCERPT_MAX_CONTENT_CHARS]
        if not text:
            raise FeatureError(ErrorKind.VALIDATION, "content is empty", provider=self.id)
        length = int(settings.get("length") or OPENAI_EXCERPT_DEFAULT_LENGTH)
        body = {
            "messages": [
                {"role": "system", "content": EXCERPT_PROMPT.format(length=length)},
                {"role": "user", "content": text},
            ],
            "temperature": 0.9,
        }
        data = self._chat_completion(settings, body)
        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as exc:
            raise FeatureError(ErrorKind.PROVIDER, "no completion returned", provider=self.id) from exc
        return {"excerpt": str(content).strip().strip(_QUOTES).strip(), "usage": data.get("usage", {})}

    def _chat_completion(self, settings: Mapping[str, Any], body: Mapping[str, Any]) -> Dict[str, Any]:
        payload = {"model": settings.get("model") or OPENAI_CHATGPT_DEFAULT_MODEL, **body}
        response = self._expect(
            self._api.post(self._url(settings, "chat/completions"), json=payload, headers=self._headers(settings))
        )
        return response.data if isinstance(response.data, dict) else {}


__all__ = ["OpenAIChatGPTProvider", "EXCERPT_PROMPT"]
