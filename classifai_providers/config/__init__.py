"""Unified configuration layer for providers.

Merge order for ``get_provider_config`` (later wins):
    1. Built-in defaults (the provider's field defaults, passed in)
    2. Optional external config file (JSON or YAML) pointed to by
       ``CLASSIFAI_CONFIG_FILE``, section keyed by provider id
    3. Environment variables (see ``config.env.ENV_MAP``)
    4. In-code overrides passed to the helper

External config file example::

    watson_nlu:
      endpoint_url: https://api.us-south.natural-language-understanding.watson.cloud.ibm.com
      username: apikey
    aws_polly:
      aws_region: eu-west-1

The merged mapping seeds a provider's default settings; stored feature
settings always win over it.
"""
from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from .defaults import CONFIG_FILE_ENV
from .env import env_settings, is_placeholder

_FILE_CACHE: Optional[Dict[str, Any]] = None
_FILE_CACHE_PATH: Optional[str] = None


def _load_external_config() -> Dict[str, Any]:
    """Load and cache the external config file (JSON first, then YAML)."""
    global _FILE_CACHE, _FILE_CACHE_PATH  # noqa: PLW0603 - module cache keyed by path
    path = os.getenv(CONFIG_FILE_ENV) or ""
    if _FILE_CACHE is not None and _FILE_CACHE_PATH == path:
        return _FILE_CACHE
    data: Any = {}
    p = Path(path) if path else None
    if p is not None and p.is_file():
        text = p.read_text(encoding="utf-8")
        try:
            data = json.loads(text)
        except ValueError:
            data = yaml.safe_load(text) or {}
    if not isinstance(data, dict):
        data = {}
    _FILE_CACHE, _FILE_CACHE_PATH = data, path
    return data


def reset_config_cache() -> None:
    """Forget the cached config file (tests switch ``CLASSIFAI_CONFIG_FILE``)."""
    global _FILE_CACHE, _FILE_CACHE_PATH  # noqa: PLW0603
    _FILE_CACHE, _FILE_CACHE_PATH = None, None


def get_provider_config(
    provider_id: str,
    defaults: Optional[Mapping[str, Any]] = None,
    overrides: Optional[Mapping[str, Any]] = None,
) -> Dict[str, Any]:
    """Return merged configuration for a provider.

    Merge order (later wins): defaults -> external config -> env vars -> overrides.
    Placeholder strings from the file are ignored like placeholder env values.
    """
    name = (provider_id or "").lower().strip()
    cfg: Dict[str, Any] = dict(defaults or {})

    file_cfg = _load_external_config().get(name)
    if isinstance(file_cfg, dict):
        cfg |= {k: v for k, v in file_cfg.items() if not (isinstance(v, str) and is_placeholder(v))}

    cfg |= env_settings(name)

    if overrides:
        cfg |= {k: v for k, v in overrides.items() if v is not None}
    return cfg


__all__ = ["get_provider_config", "reset_config_cache"]
