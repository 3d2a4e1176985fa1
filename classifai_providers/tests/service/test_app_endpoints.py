"""HTTP surface of the provider service.

The container dependency is overridden with the in-memory test container so
no endpoint touches the network, boto3 or the user's settings database.
"""

from __future__ import annotations

from typing import Iterator

import pytest
from fastapi.testclient import TestClient

from classifai_providers.service.app import get_app
from classifai_providers.service.app_parts.app_core import MASK, get_container_dep

WATSON = {"endpoint_url": "https://nlu.example.test", "username": "apikey", "password": "secret-1"}  # pragma: allowlist secret


@pytest.fixture()
def client(container) -> Iterator[TestClient]:
    app = get_app()
    app.dependency_overrides[get_container_dep] = lambda: container
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def _enable_classification(client: TestClient) -> None:
    resp = client.post("/api/features/classification/settings", json={"settings": {"enabled": True, "watson_nlu": WATSON}})
    assert resp.status_code == 200, resp.text  # nosec B101


def test_health(client: TestClient) -> None:
    assert client.get("/api/health").json() == {"ok": True}  # nosec B101 - pytest assertion in tests


def test_features_lists_state_and_scope(client: TestClient) -> None:
    body = client.get("/api/features").json()
    by_id = {f["id"]: f for f in body["features"]}
    assert set(by_id) == {"classification", "excerpt_generation", "speech_to_text", "text_to_speech"}  # nosec B101
    assert by_id["classification"]["state"] == "disabled"  # nosec B101
    assert by_id["classification"]["providers"] == ["watson_nlu", "openai_embeddings"]  # nosec B101
    assert by_id["speech_to_text"]["scope"] == {"post_types": ["attachment"], "statuses": ["inherit"]}  # nosec B101


def test_settings_round_trip_masks_passwords(client: TestClient) -> None:
    resp = client.post("/api/features/classification/settings", json={"settings": {"enabled": True, "watson_nlu": WATSON}})
    body = resp.json()
    assert body["ok"] is True and body["state"] == "enabled_authenticated"  # nosec B101
    assert body["connection"] == {"ok": True, "authenticated": True, "cached": False}  # nosec B101
    assert body["settings"]["watson_nlu"]["password"] == MASK  # nosec B101

    fetched = client.get("/api/features/classification/settings").json()["settings"]
    assert fetched["watson_nlu"]["password"] == MASK  # nosec B101
    assert fetched["watson_nlu"]["username"] == "apikey"  # nosec B101


def test_posting_fetched_settings_back_keeps_the_password(client: TestClient, api, store) -> None:
    _enable_classification(client)
    fetched = client.get("/api/features/classification/settings").json()["settings"]
    resp = client.post("/api/features/classification/settings", json={"settings": fetched})
    assert resp.status_code == 200 and resp.json()["connection"]["cached"] is True  # nosec B101
    assert store.load("classification")["watson_nlu"]["password"] == WATSON["password"]  # nosec B101
    assert len(api.calls) == 1  # nosec B101


def test_invalid_settings_answer_422_and_persist_nothing(client: TestClient, store) -> None:
    resp = client.post("/api/features/classification/settings", json={"settings": {"classification_mode": "bogus"}})
    assert resp.status_code == 422  # nosec B101
    assert resp.json()["error"]["kind"] == "validation_error"  # nosec B101
    assert store.load("classification") == {}  # nosec B101


def test_unknown_feature_is_404(client: TestClient) -> None:
    assert client.get("/api/features/image_cropping/settings").status_code == 404  # nosec B101
    assert client.post("/api/features/image_cropping/reset").status_code == 404  # nosec B101


def test_enabled_toggle(client: TestClient) -> None:
    resp = client.post("/api/features/excerpt_generation/enabled", json={"enabled": True})
    assert resp.json() == {"ok": True, "result": {"enabled": True, "state": "enabled_unauthenticated"}}  # nosec B101
    assert client.post("/api/features/excerpt_generation/enabled", json={}).status_code == 422  # nosec B101


def test_reset_restores_defaults(client: TestClient) -> None:
    _enable_classification(client)
    body = client.post("/api/features/classification/reset").json()
    assert body["settings"]["enabled"] is False  # nosec B101
    assert body["settings"]["watson_nlu"]["password"] == ""  # nosec B101


def test_debug_masks_credentials(client: TestClient) -> None:
    _enable_classification(client)
    debug = client.get("/api/features/classification/debug").json()["debug"]
    assert debug["State"] == "enabled_authenticated"  # nosec B101
    assert "secret-1" not in str(debug)  # nosec B101


def test_dispatch_disabled_feature_is_409(client: TestClient, api) -> None:
    resp = client.post("/api/dispatch/classification/1", json={})
    assert resp.status_code == 409  # nosec B101
    assert resp.json()["error"]["kind"] == "not_enabled"  # nosec B101
    assert api.calls == []  # nosec B101


def test_dispatch_unknown_feature_is_400(client: TestClient) -> None:
    resp = client.post("/api/dispatch/image_cropping/1", json={})
    assert resp.status_code == 400  # nosec B101
    assert resp.json()["error"]["kind"] == "configuration_error"  # nosec B101


def test_dispatch_success_shape(client: TestClient) -> None:
    _enable_classification(client)
    resp = client.post("/api/dispatch/classification/1", json={"actor": "editor"})
    assert resp.status_code == 200  # nosec B101
    body = resp.json()
    assert body["ok"] is True  # nosec B101
    assert body["result"]["terms"]["watson-category"] == ["software"]  # nosec B101
