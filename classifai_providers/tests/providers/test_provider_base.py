"""Normalization, credential change detection and the cached connect path.

Exercised through the Watson NLU provider with a call-counting API client.
"""

from __future__ import annotations

from classifai_providers.base.errors import ErrorKind
from classifai_providers.base.fields import MASK
from classifai_providers.base.interfaces_parts.api_client import ApiResponse
from classifai_providers.base.provider_base import MISSING_CREDENTIALS, credential_fingerprint
from classifai_providers.base.result import Failure, Success
from classifai_providers.watson.nlu import WatsonNLUProvider

CREDS = {"endpoint_url": "https://nlu.example.test/", "username": " apikey ", "password": "secret-1"}  # pragma: allowlist secret


def _stored_after_connect(provider: WatsonNLUProvider, raw: dict) -> dict:
    normalized = provider.validate_and_normalize(raw, {}).value
    info = provider.connect(normalized).value
    block = dict(normalized.values)
    block.update(authenticated=info.authenticated, connectivity=info.data, credential_fingerprint=normalized.fingerprint)
    return block


def test_validate_and_normalize_is_idempotent(api) -> None:
    provider = WatsonNLUProvider(api)
    first = provider.validate_and_normalize(CREDS, {})
    assert first.ok  # nosec B101 - pytest assertion in tests
    second = provider.validate_and_normalize(first.value.values, first.value.values)
    assert second.value.values == first.value.values  # nosec B101
    assert first.value.values["endpoint_url"] == "https://nlu.example.test"  # nosec B101
    assert first.value.values["username"] == "apikey"  # nosec B101
    assert api.calls == []  # nosec B101 - normalization never performs I/O


def test_first_normalization_reports_changed_credentials(api) -> None:
    normalized = WatsonNLUProvider(api).validate_and_normalize(CREDS, {}).value
    assert normalized.credentials_changed is True  # nosec B101


def test_unchanged_credentials_make_zero_external_calls(api) -> None:
    provider = WatsonNLUProvider(api)
    stored = _stored_after_connect(provider, CREDS)
    assert len(api.calls) == 1  # nosec B101

    again = provider.validate_and_normalize(CREDS, stored).value
    assert again.credentials_changed is False  # nosec B101
    result = provider.connect(again)
    assert result.ok and result.value.cached and result.value.authenticated  # nosec B101
    assert len(api.calls) == 1  # nosec B101


def test_force_reconnects_even_when_unchanged(api) -> None:
    provider = WatsonNLUProvider(api)
    stored = _stored_after_connect(provider, CREDS)
    again = provider.validate_and_normalize({}, stored).value
    assert provider.connect(again, force=True).ok  # nosec B101
    assert len(api.calls) == 2  # nosec B101


def test_changed_credential_triggers_one_call(api) -> None:
    provider = WatsonNLUProvider(api)
    stored = _stored_after_connect(provider, CREDS)
    changed = provider.validate_and_normalize({"password": "secret-2"}, stored).value  # pragma: allowlist secret
    assert changed.credentials_changed is True  # nosec B101
    assert provider.connect(changed).ok  # nosec B101
    assert len(api.calls) == 2  # nosec B101


def test_unauthenticated_block_always_reports_a_change(api) -> None:
    provider = WatsonNLUProvider(api)
    stored = dict(_stored_after_connect(provider, CREDS), authenticated=False)
    again = provider.validate_and_normalize(CREDS, stored).value
    assert again.credentials_changed is True  # nosec B101
    assert provider.connect(stored).ok  # nosec B101
    assert len(api.calls) == 2  # nosec B101


def test_masked_password_keeps_the_previous_value(api) -> None:
    provider = WatsonNLUProvider(api)
    stored = _stored_after_connect(provider, CREDS)
    again = provider.validate_and_normalize(dict(CREDS, password=MASK), stored).value
    assert again.values["password"] == "secret-1"  # nosec B101
    assert again.credentials_changed is False  # nosec B101


def test_non_credential_change_keeps_fingerprint(api) -> None:
    provider = WatsonNLUProvider(api)
    before = credential_fingerprint(provider.fields, {"endpoint_url": "https://a.test", "username": "u", "password": "p"})
    after = credential_fingerprint(
        provider.fields, {"endpoint_url": "https://a.test", "username": "u", "password": "p", "authenticated": True}
    )
    assert before == after  # nosec B101


def test_missing_credentials_fail_without_calls(api) -> None:
    provider = WatsonNLUProvider(api)
    normalized = provider.validate_and_normalize({}, {}).value
    result = provider.connect(normalized)
    assert isinstance(result, Failure)  # nosec B101
    assert result.kind is ErrorKind.CONNECTION and result.message == MISSING_CREDENTIALS  # nosec B101
    assert set(result.details["missing"]) == {"endpoint_url", "username", "password"}  # nosec B101
    assert api.calls == []  # nosec B101


def test_connect_maps_unauthorized_to_connection_error(api) -> None:
    api.responder = lambda method, url, kwargs: Failure(ErrorKind.CONNECTION, "Unauthorized", {"status": 401})
    provider = WatsonNLUProvider(api)
    result = provider.connect(provider.validate_and_normalize(CREDS, {}).value)
    assert not result.ok and result.kind is ErrorKind.CONNECTION  # nosec B101
    assert result.details["provider"] == "watson_nlu"  # nosec B101


def test_invalid_stored_value_falls_back_to_default(api) -> None:
    provider = WatsonNLUProvider(api)
    normalized = provider.validate_and_normalize({}, {"endpoint_url": "not a url"}).value
    assert normalized.values["endpoint_url"] == ""  # nosec B101


def test_state_keys_are_carried(api) -> None:
    provider = WatsonNLUProvider(api)
    previous = {"authenticated": True, "connectivity": {"language": "en"}, "credential_fingerprint": "abc"}
    values = provider.validate_and_normalize({}, previous).value.values
    assert values["authenticated"] is True and values["connectivity"] == {"language": "en"}  # nosec B101
    assert values["credential_fingerprint"] == "abc"  # nosec B101


def test_invoke_unknown_capability_and_exceptions(api) -> None:
    provider = WatsonNLUProvider(api)
    unknown = provider.invoke("synthesize", {}, {})
    assert not unknown.ok and unknown.kind is ErrorKind.CONFIGURATION  # nosec B101

    empty = provider.invoke("classify", {"content": ""}, {"endpoint_url": "https://nlu.test"})
    assert not empty.ok and empty.kind is ErrorKind.VALIDATION  # nosec B101

    api.responder = lambda method, url, kwargs: Failure(ErrorKind.PROVIDER, "HTTP 500", {"status": 500})
    broken = provider.invoke("classify", {"content": "text"}, {"endpoint_url": "https://nlu.test"})
    assert not broken.ok and broken.kind is ErrorKind.PROVIDER  # nosec B101


def test_debug_information_masks_passwords(api) -> None:
    info = WatsonNLUProvider(api).debug_information(
        {"endpoint_url": "https://nlu.test", "username": "apikey", "password": "secret-1", "authenticated": True}
    )
    assert info["API Key / Password"] == "********"  # nosec B101
    assert info["API User"] == "apikey"  # nosec B101
    assert "secret-1" not in str(info)  # nosec B101


def test_success_response_passthrough(api) -> None:
    api.responder = lambda method, url, kwargs: Success(ApiResponse(status=200, data={"language": "fr"}))
    provider = WatsonNLUProvider(api)
    result = provider.connect(provider.validate_and_normalize(CREDS, {}).value)
    assert result.value.data == {"language": "fr"}  # nosec B101
