"""Pytest configuration for the classifai_providers test suite.

Shared fixtures:

- ``isolated_env`` (autouse): strips provider credentials and ``CLASSIFAI_*``
  variables from the environment and forgets the cached config file, so a
  developer's shell never leaks into a test.
- ``api``: call-counting ``ApiClient`` stub answering from a responder.
- ``polly``: fake boto3 Polly client plus its counting factory.
- ``container``: fully wired container over an in-memory store.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple

import pytest

from classifai_providers.base.collaborators import AllowListAuthorizer, StaticItemCatalog
from classifai_providers.base.errors import ErrorKind
from classifai_providers.base.factory import ProviderFactory
from classifai_providers.base.interfaces_parts.api_client import ApiResponse
from classifai_providers.base.result import Failure, Result, Success
from classifai_providers.config import reset_config_cache
from classifai_providers.config.env import ENV_MAP
from classifai_providers.di import ProvidersContainer
from classifai_providers.persistence import InMemorySettingsStore

Responder = Callable[[str, str, Dict[str, Any]], Result[ApiResponse]]


class RecordingApiClient:
    """``ApiClient`` stub that records every call.

    ``responder(method, url, kwargs)`` produces the result; the default
    answers ``200 {}`` for everything.
    """

    def __init__(self, responder: Optional[Responder] = None) -> None:
        self.calls: List[Tuple[str, str, Dict[str, Any]]] = []
        self.responder: Responder = responder or (lambda method, url, kwargs: Success(ApiResponse(status=200, data={})))

    def get(self, url: str, **kwargs: Any) -> Result[ApiResponse]:
        return self._call("GET", url, kwargs)

    def post(self, url: str, **kwargs: Any) -> Result[ApiResponse]:
        return self._call("POST", url, kwargs)

    def _call(self, method: str, url: str, kwargs: Dict[str, Any]) -> Result[ApiResponse]:
        self.calls.append((method, url, kwargs))
        return self.responder(method, url, kwargs)

    def urls(self) -> List[str]:
        return [url for _, url, _ in self.calls]


class FakeAudioStream:
    def __init__(self, payload: bytes) -> None:
        self._payload = payload

    def read(self) -> bytes:
        return self._payload


class FakePollyClient:
    """Stand-in for ``boto3.client("polly")`` with call counters."""

    def __init__(self, voices: Optional[List[Dict[str, str]]] = None) -> None:
        self.voices = voices if voices is not None else [
            {"Id": "Joanna", "Name": "Joanna", "Gender": "Female", "LanguageName": "US English"},
            {"Id": "Brian", "Name": "Brian", "Gender": "Male", "LanguageName": "British English"},
        ]
        self.describe_calls = 0
        self.synthesize_calls: List[Dict[str, Any]] = []

    def describe_voices(self) -> Dict[str, Any]:
        self.describe_calls += 1
        return {"Voices": list(self.voices)}

    def synthesize_speech(self, **kwargs: Any) -> Dict[str, Any]:
        self.synthesize_calls.append(kwargs)
        return {"AudioStream": FakeAudioStream(b"ID3-fake-mp3"), "ContentType": "audio/mpeg"}


class PollyFactory:
    """Counting client factory handed to ``AmazonPollyProvider``."""

    def __init__(self, client: FakePollyClient) -> None:
        self.client = client
        self.credentials: List[Tuple[str, str, str]] = []

    def __call__(self, access_key_id: str, secret_access_key: str, region: str) -> FakePollyClient:
        self.credentials.append((access_key_id, secret_access_key, region))
        return self.client


def watson_responder(method: str, url: str, kwargs: Dict[str, Any]) -> Result[ApiResponse]:
    """Answer Watson analyze calls; the auth check gets a tiny keyword reply."""
    body = kwargs.get("json") or {}
    if body.get("text") and "Lorem ipsum" in body["text"]:
        return Success(ApiResponse(status=200, data={"language": "en", "keywords": [{"text": "lorem", "relevance": 0.9}]}))
    return Success(
        ApiResponse(
            status=200,
            data={
                "language": "en",
                "usage": {"features": 2},
                "categories": [
                    {"label": "/technology and computing/software", "score": 0.92},
                    {"label": "/sports/golf", "score": 0.41},
                ],
                "keywords": [
                    {"text": "python", "relevance": 0.88},
                    {"text": "release", "relevance": 0.52},
                ],
            },
        )
    )


def openai_responder(method: str, url: str, kwargs: Dict[str, Any]) -> Result[ApiResponse]:
    """Answer OpenAI and Azure OpenAI calls by path; query strings are ignored."""
    url = url.split("?", 1)[0]
    if url.endswith("/models"):
        return Success(ApiResponse(status=200, data={"data": [{"id": "gpt-3.5-turbo"}, {"id": "whisper-1"}]}))
    if url.endswith("/embeddings"):
        return Success(ApiResponse(status=200, data={"data": [{"embedding": [0.1, 0.2, 0.3]}], "model": "text-embedding-ada-002"}))
    if url.endswith("/audio/transcriptions"):
        return Success(ApiResponse(status=200, data={"text": " Hello from the recording. "}))
    if url.endswith("/chat/completions"):
        return Success(
            ApiResponse(status=200, data={"choices": [{"message": {"content": '"A short teaser about the post."'}}]})
        )
    return Failure(ErrorKind.PROVIDER, f"unexpected url {url}", {"status": 404, "url": url})


def routing_responder(method: str, url: str, kwargs: Dict[str, Any]) -> Result[ApiResponse]:
    if "/v1/analyze" in url:
        return watson_responder(method, url, kwargs)
    return openai_responder(method, url, kwargs)


WATSON_CREDENTIALS = {
    "endpoint_url": "https://nlu.example.test",
    "username": "apikey",
    "password": "secret-1",  # pragma: allowlist secret
}
POLLY_CREDENTIALS = {
    "access_key_id": "AKIA123",
    "secret_access_key": "s3cr3t",  # pragma: allowlist secret
    "aws_region": "us-east-1",
}


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    for mapping in ENV_MAP.values():
        for var in mapping.values():
            monkeypatch.delenv(var, raising=False)
    for var in ("CLASSIFAI_CONFIG_FILE", "CLASSIFAI_DB_PATH", "CLASSIFAI_ITEMS_FILE", "CLASSIFAI_LOG_LEVEL"):
        monkeypatch.delenv(var, raising=False)
    reset_config_cache()
    yield
    reset_config_cache()


@pytest.fixture()
def api() -> RecordingApiClient:
    return RecordingApiClient(routing_responder)


@pytest.fixture()
def polly_client() -> FakePollyClient:
    return FakePollyClient()


@pytest.fixture()
def polly_factory(polly_client: FakePollyClient) -> PollyFactory:
    return PollyFactory(polly_client)


@pytest.fixture()
def store() -> InMemorySettingsStore:
    return InMemorySettingsStore()


@pytest.fixture()
def items() -> StaticItemCatalog:
    return StaticItemCatalog.from_mapping(
        {
            "1": {"type": "post", "status": "publish", "title": "Release notes", "content": "<p>Python release</p>"},
            "2": {"type": "post", "status": "draft", "title": "Draft", "content": "<p>Work in progress</p>"},
            "3": {"type": "page", "status": "publish", "title": "About", "content": "<p>About us</p>"},
        }
    )


@pytest.fixture()
def container(
    api: RecordingApiClient, store: InMemorySettingsStore, polly_factory: PollyFactory, items: StaticItemCatalog
) -> ProvidersContainer:
    registry = ProviderFactory.build_registry(
        api, use_environment=False, provider_kwargs={"aws_polly": {"client_factory": polly_factory}}
    )
    return ProvidersContainer(
        api_client=api,
        store=store,
        registry=registry,
        authorizer=AllowListAuthorizer(),
        items=items,
    )
