"""classifai_providers.config.env
==============================

Centralized environment variable mapping for provider credentials and
options.

``ENV_MAP`` maps a provider id to ``{settings_key: ENV_VAR_NAME}``. Values
that look like placeholders are ignored so a committed ``.env.example`` never
ends up as a live credential.

Helpers never raise on unknown providers or unset variables; callers decide
how to proceed.
"""

from __future__ import annotations

import os
from typing import Dict, Mapping, Optional

ENV_MAP: Dict[str, Dict[str, str]] = {
    "watson_nlu": {
        "endpoint_url": "WATSON_NLU_URL",
        "username": "WATSON_NLU_USERNAME",
        "password": "WATSON_NLU_PASSWORD",  # pragma: allowlist secret - env var name
    },
    "openai_embeddings": {"api_key": "OPENAI_API_KEY"},  # pragma: allowlist secret
    "openai_whisper": {"api_key": "OPENAI_API_KEY"},  # pragma: allowlist secret
    "openai_chatgpt": {"api_key": "OPENAI_API_KEY"},  # pragma: allowlist secret
    "azure_openai": {
        "endpoint_url": "AZURE_OPENAI_ENDPOINT",
        "api_key": "AZURE_OPENAI_API_KEY",  # pragma: allowlist secret - env var name
        "deployment": "AZURE_OPENAI_DEPLOYMENT",
    },
    "aws_polly": {
        "access_key_id": "AWS_ACCESS_KEY_ID",
        "secret_access_key": "AWS_SECRET_ACCESS_KEY",  # pragma: allowlist secret
        "aws_region": "AWS_DEFAULT_REGION",
    },
}


def is_placeholder(val: Optional[str]) -> bool:
    """Return True if the provided string looks like a placeholder/test value.

    Heuristics: contains 'placeholder', 'changeme', 'example', or starts with
    'test_'. The check is case-insensitive and resilient to surrounding spaces.
    """
    if val is None:
        return False
    v = str(val).strip().lower()
    return "placeholder" in v or "changeme" in v or "example" in v or v.startswith("test_")


def env_settings(provider_id: str, environ: Optional[Mapping[str, str]] = None) -> Dict[str, str]:
    """Return provider settings read from the environment.

    Unset, empty and placeholder values are skipped.
    """
    source = os.environ if environ is None else environ
    out: Dict[str, str] = {}
    for key, var in ENV_MAP.get((provider_id or "").lower(), {}).items():
        val = source.get(var)
        if val and not is_placeholder(val):
            out[key] = val
    return out


__all__ = ["ENV_MAP", "is_placeholder", "env_settings"]
