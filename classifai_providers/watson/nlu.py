"""IBM Watson NLU provider (feature: classification, capability: ``classify``).

Connectivity is verified with a one keyword analysis of a fixed sentence,
which is the cheapest authenticated call the API offers. Authentication is
HTTP basic: either a username/password pair or the literal username
``apikey`` with the API key as password.

``classify`` analyzes normalized item content for every enabled NLU feature
(category, keyword, concept, entity) and keeps results whose score or
relevance, scaled to 0-100, meets that feature's threshold. Results are
grouped by the configured taxonomy so the host can link terms.
"""
from __future__ import annotations

from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Tuple

from ..base.errors import ErrorKind, FeatureError
from ..base.fields import FieldSpec, FieldType, to_bool
from ..base.provider_base import BaseProvider
from ..base.utils import normalize_content
from ..config.defaults import (
    WATSON_NLU_AUTH_CHECK_TEXT,
    WATSON_NLU_DEFAULT_TAXONOMIES,
    WATSON_NLU_DEFAULT_THRESHOLD,
    WATSON_NLU_ENABLED_BY_DEFAULT,
    WATSON_NLU_FEATURES,
    WATSON_NLU_MAX_RESULTS,
    WATSON_NLU_VERSION,
)

# NLU feature -> (request/response key, score attribute)
_API_KEYS: Mapping[str, Tuple[str, str]] = MappingProxyType(
    {
        "category": ("categories", "score"),
        "keyword": ("keywords", "relevance"),
        "concept": ("concepts", "relevance"),
        "entity": ("entities", "relevance"),
    }
)


def _nlu_feature_fields() -> Tuple[FieldSpec, ...]:
    out: List[FieldSpec] = []
    for name in WATSON_NLU_FEATURES:
        label = name.capitalize()
        out.extend(
            (
                FieldSpec(name, FieldType.CHECKBOX, default=WATSON_NLU_ENABLED_BY_DEFAULT[name], label=f"{label} (status)"),
                FieldSpec(
                    f"{name}_threshold",
                    FieldType.NUMBER,
                    default=WATSON_NLU_DEFAULT_THRESHOLD,
                    label=f"{label} (threshold)",
                    minimum=0,
                    maximum=100,
                ),
                FieldSpec(
                    f"{name}_taxonomy",
                    FieldType.TEXT,
                    default=WATSON_NLU_DEFAULT_TAXONOMIES[name],
                    label=f"{label} (taxonomy)",
                ),
            )
        )
    return tuple(out)


_CLASSIFICATION_FIELDS = _nlu_feature_fields()


def analyze_url(endpoint_url: str) -> str:
    return f"{endpoint_url.rstrip('/')}/v1/analyze?version={WATSON_NLU_VERSION}"


class WatsonNLUProvider(BaseProvider):
    id = "watson_nlu"
    label = "IBM Watson NLU"
    feature_capabilities = MappingProxyType({"classification": "classify"})
    operations = MappingProxyType({"classify": "classify"})
    fields = (
        FieldSpec("endpoint_url", FieldType.URL, default="", credential=True, label="API URL"),
        FieldSpec("username", FieldType.TEXT, default="", credential=True, label="API User"),
        FieldSpec("password", FieldType.PASSWORD, default="", credential=True, label="API Key / Password"),
    )

    def feature_settings_fields(self, feature_id: str) -> Tuple[FieldSpec, ...]:
        return _CLASSIFICATION_FIELDS if feature_id == "classification" else ()

    def _auth(self, values: Mapping[str, Any]) -> Tuple[str, str]:
        return str(values.get("username", "")), str(values.get("password", ""))

    def _connect(self, values: Mapping[str, Any]) -> Mapping[str, Any]:
        body = {
            "text": WATSON_NLU_AUTH_CHECK_TEXT,
            "language": "en",
            "features": {"keywords": {"emotion": False, "limit": 1}},
        }
        response = self._expect(
            self._api.post(analyze_url(values["endpoint_url"]), json=body, auth=self._auth(values))
        )
        data = response.data if isinstance(response.data, dict) else {}
        return {"language": data.get("language", "en")}

    def classify(self, args: Mapping[str, Any], settings: Mapping[str, Any]) -> Dict[str, Any]:
        """Analyze ``args["content"]`` and return terms grouped by taxonomy."""
        text = normalize_content(args.get("content"), args.get("title"))
        if not text:
            raise FeatureError(ErrorKind.VALIDATION, "content is empty", provider=self.id)
        if not settings.get("endpoint_url"):
            raise FeatureError(ErrorKind.CONFIGURATION, "endpoint_url is not configured", provider=self.id)

        enabled = [name for name in WATSON_NLU_FEATURES if to_bool(settings.get(name, WATSON_NLU_ENABLED_BY_DEFAULT[name]))]
        if not enabled:
            raise FeatureError(ErrorKind.CONFIGURATION, "no NLU features are enabled", provider=self.id)

        features: Dict[str, Any] = {}
        for name in enabled:
            api_key, _ = _API_KEYS[name]
            features[api_key] = {"limit": WATSON_NLU_MAX_RESULTS}
            if name == "keyword":
                features[api_key]["emotion"] = False

        response = self._expect(
            self._api.post(
                analyze_url(settings["endpoint_url"]),
                json={"text": text, "features": features},
                auth=self._auth(settings),
            )
        )
        data = response.data if isinstance(response.data, dict) else {}

        terms: Dict[str, List[str]] = {}
        for name in enabled:
            api_key, score_attr = _API_KEYS[name]
            threshold = int(settings.get(f"{name}_threshold", WATSON_NLU_DEFAULT_THRESHOLD))
            taxonomy = settings.get(f"{name}_taxonomy") or WATSON_NLU_DEFAULT_TAXONOMIES[name]
            kept = _filter_terms(name, data.get(api_key) or [], score_attr, threshold)
            terms.setdefault(taxonomy, [])
            terms[taxonomy].extend(t for t in kept if t not in terms[taxonomy])

        return {"terms": terms, "language": data.get("language"), "usage": data.get("usage", {})}


def _filter_terms(name: str, rows: List[Mapping[str, Any]], score_attr: str, threshold: int) -> List[str]:
    kept: List[str] = []
    for row in rows:
        score = float(row.get(score_attr) or 0.0) * 100
        if score < threshold:
            continue
        if name == "category":
            # "/technology and computing/software" -> leaf label
            label = str(row.get("label", "")).strip("/").split("/")[-1]
        else:
            label = str(row.get("text", ""))
        label = label.strip()
        if label and label not in kept:
            kept.append(label)
    return kept


__all__ = ["WatsonNLUProvider", "analyze_url"]
