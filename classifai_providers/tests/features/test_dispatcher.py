"""Dispatcher gating: each rejected stage short-circuits before any provider call."""

from __future__ import annotations

import pytest

from classifai_providers.base.collaborators import AllowListAuthorizer
from classifai_providers.base.errors import ErrorKind
from classifai_providers.dispatch import Dispatcher

WATSON = {"endpoint_url": "https://nlu.example.test", "username": "apikey", "password": "secret-1"}  # pragma: allowlist secret


@pytest.fixture()
def enabled_container(container, api):
    container.feature("classification").save_settings({"enabled": True, "watson_nlu": WATSON})
    container.feature("excerpt_generation").save_settings({"enabled": True, "openai_chatgpt": {"api_key": "sk-1"}})
    api.calls.clear()
    return container


def test_draft_item_outside_status_scope(enabled_container, api) -> None:
    result = enabled_container.dispatcher.dispatch("classification", "2")
    assert result.kind is ErrorKind.NOT_ENABLED  # nosec B101 - pytest assertion in tests
    assert result.details["status"] == "draft"  # nosec B101
    assert api.calls == []  # nosec B101


def test_page_item_outside_type_scope(enabled_container, api) -> None:
    result = enabled_container.dispatcher.dispatch("classification", "3")
    assert result.kind is ErrorKind.NOT_ENABLED  # nosec B101
    assert result.details["type"] == "page"  # nosec B101
    assert api.calls == []  # nosec B101


def test_unknown_feature(enabled_container) -> None:
    result = enabled_container.dispatcher.dispatch("image_cropping", "1")
    assert result.kind is ErrorKind.CONFIGURATION  # nosec B101


def test_unknown_item(enabled_container, api) -> None:
    result = enabled_container.dispatcher.dispatch("classification", "404")
    assert result.kind is ErrorKind.VALIDATION  # nosec B101
    assert api.calls == []  # nosec B101


def test_disabled_feature_checked_before_item(container, api) -> None:
    result = container.dispatcher.dispatch("classification", "404")
    assert result.kind is ErrorKind.NOT_ENABLED  # nosec B101
    assert api.calls == []  # nosec B101


def test_unauthorized_actor_never_reaches_provider(enabled_container, api, items) -> None:
    dispatcher = Dispatcher(
        enabled_container.features.values(), AllowListAuthorizer(actors={"editor"}), items
    )
    result = dispatcher.dispatch("classification", "1", actor="guest")
    assert result.kind is ErrorKind.NOT_AUTHORIZED  # nosec B101
    assert api.calls == []  # nosec B101
    assert dispatcher.dispatch("classification", "1", actor="editor").ok  # nosec B101


def test_authorizer_narrowed_by_capability(enabled_container, items) -> None:
    dispatcher = Dispatcher(
        enabled_container.features.values(), AllowListAuthorizer(capabilities={"excerpt_generation"}), items
    )
    assert dispatcher.dispatch("classification", "1").kind is ErrorKind.NOT_AUTHORIZED  # nosec B101


def test_published_post_is_classified(enabled_container, api) -> None:
    result = enabled_container.dispatcher.dispatch("classification", "1", actor="editor")
    assert result.ok  # nosec B101
    assert result.value["terms"]["watson-keyword"] == ["python"]  # nosec B101
    assert len(api.calls) == 1  # nosec B101
    sent = api.calls[0][2]["json"]["text"]
    assert sent == "Release notes. Python release"  # nosec B101


def test_caller_args_reach_feature(enabled_container) -> None:
    enabled_container.feature("classification").save_settings({"classification_mode": "automatic_classification"})
    result = enabled_container.dispatcher.dispatch("classification", "1", args={"link_terms": False})
    assert result.value["link_terms"] is False  # nosec B101


def test_excerpt_allows_drafts(enabled_container) -> None:
    result = enabled_container.dispatcher.dispatch("excerpt_generation", "2")
    assert result.ok  # nosec B101
    assert result.value["excerpt"] == "A short teaser about the post."  # nosec B101
