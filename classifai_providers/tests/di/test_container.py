"""Composition root wiring: defaults, injection and SQLite persistence."""

from __future__ import annotations

from pathlib import Path

import pytest

from classifai_providers import FEATURE_CLASSES, build_container
from classifai_providers.base.factory import ProviderFactory
from classifai_providers.persistence import SettingsStoreSqlite


def test_container_builds_every_feature(container) -> None:
    assert set(container.feature_ids()) == {cls.id for cls in FEATURE_CLASSES}  # nosec B101
    assert set(container.dispatcher.features) == set(container.feature_ids())  # nosec B101
    assert set(container.registry.ids()) == set(ProviderFactory.supported())  # nosec B101


def test_unknown_feature_raises_key_error(container) -> None:
    with pytest.raises(KeyError):
        container.feature("image_cropping")


def test_sqlite_backed_container_persists_across_instances(tmp_path: Path, api, polly_factory) -> None:
    db = str(tmp_path / "settings.db")
    kwargs = dict(
        api_client=api,
        db_path=db,
        use_environment=False,
        provider_kwargs={"aws_polly": {"client_factory": polly_factory}},
    )
    first = build_container(**kwargs)
    assert isinstance(first.store, SettingsStoreSqlite)  # nosec B101
    saved = first.feature("excerpt_generation").save_settings({"enabled": True, "openai_chatgpt": {"api_key": "sk-1"}})
    assert saved.value["state"] == "enabled_authenticated"  # nosec B101

    second = build_container(**kwargs)
    settings = second.feature("excerpt_generation").get_settings()
    assert settings["openai_chatgpt"]["api_key"] == "sk-1"  # nosec B101
    assert second.feature("excerpt_generation").state().value == "enabled_authenticated"  # nosec B101


def test_environment_seeds_provider_defaults(monkeypatch, api, store, polly_factory) -> None:
    monkeypatch.setenv("OPENAI_API_KEY", "sk-live-123")
    container = build_container(
        api_client=api, store=store, provider_kwargs={"aws_polly": {"client_factory": polly_factory}}
    )
    assert container.feature("speech_to_text").get_settings("openai_whisper")["api_key"] == "sk-live-123"  # nosec B101
    assert api.calls == []  # nosec B101 - building never connects
