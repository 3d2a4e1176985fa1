"""Amazon Polly provider (feature: text_to_speech, capability: ``synthesize``).

Polly is reached through ``boto3`` rather than the HTTP collaborator, since
request signing is the SDK's job. The client factory is injectable so tests
(and hosts with their own credential chain) can replace it.

Connectivity is ``describe_voices``; the returned voices are cached in the
provider block (``connectivity["voices"]``) and feed ``voice_options``. An
empty voice list counts as a failed connection.

``synthesize`` hashes the normalized text with md5. When the caller passes
the hash of the audio it already holds (``content_hash``) and the text is
unchanged, no synthesis call is made.
"""
from __future__ import annotations

import base64
import hashlib
from types import MappingProxyType
from typing import Any, Callable, Dict, List, Mapping, Optional

import boto3

from ..base.errors import ErrorKind, FeatureError
from ..base.fields import FieldSpec, FieldType
from ..base.interfaces_parts.api_client import ApiClient
from ..base.provider_base import BaseProvider
from ..base.utils import normalize_content
from ..config.defaults import (
    AWS_POLLY_DEFAULT_ENGINE,
    AWS_POLLY_DEFAULT_REGION,
    AWS_POLLY_ENGINES,
    AWS_POLLY_OUTPUT_FORMAT,
)

PollyClientFactory = Callable[[str, str, str], Any]


def default_polly_client(access_key_id: str, secret_access_key: str, region: str) -> Any:
    return boto3.client(
        "polly",
        aws_access_key_id=access_key_id,
        aws_secret_access_key=secret_access_key,
        region_name=region,
    )


def format_voice(voice: Mapping[str, Any]) -> str:
    """``"US English - Joanna (Female)"`` for a ``describe_voices`` entry."""
    return f"{voice.get('LanguageName', '')} - {voice.get('Name', '')} ({voice.get('Gender', '')})"


class AmazonPollyProvider(BaseProvider):
    id = "aws_polly"
    label = "Amazon Polly"
    feature_capabilities = MappingProxyType({"text_to_speech": "synthesize"})
    operations = MappingProxyType({"synthesize": "synthesize"})
    fields = (
        FieldSpec("access_key_id", FieldType.TEXT, default="", credential=True, label="AWS access key"),
        FieldSpec("secret_access_key", FieldType.PASSWORD, default="", credential=True, label="AWS secret access key"),
        FieldSpec("aws_region", FieldType.TEXT, default=AWS_POLLY_DEFAULT_REGION, credential=True, label="AWS Region"),
        FieldSpec(
            "voice_engine",
            FieldType.SELECT,
            default=AWS_POLLY_DEFAULT_ENGINE,
            label="Engine",
            options={engine: engine for engine in AWS_POLLY_ENGINES},
        ),
        FieldSpec("voice", FieldType.TEXT, default="", label="Voice"),
    )

    def __init__(
        self,
        api_client: ApiClient,
        *,
        defaults: Optional[Mapping[str, Any]] = None,
        client_factory: Optional[PollyClientFactory] = None,
    ) -> None:
        super().__init__(api_client, defaults=defaults)
        self._client_factory = client_factory or default_polly_client

    def _client(self, values: Mapping[str, Any]) -> Any:
        return self._client_factory(
            str(values.get("access_key_id", "")),
            str(values.get("secret_access_key", "")),
            str(values.get("aws_region") or AWS_POLLY_DEFAULT_REGION),
        )

    def _connect(self, values: Mapping[str, Any]) -> Mapping[str, Any]:
        voices = self._client(values).describe_voices().get("Voices") or []
        if not voices:
            raise FeatureError(ErrorKind.CONNECTION, "Connection to Amazon Polly failed.", provider=self.id)
        return {"voices": list(voices)}

    def voice_options(self, settings: Mapping[str, Any]) -> Dict[str, str]:
        """Voice id -> display label from the cached ``describe_voices`` result."""
        voices: List[Any] = (settings.get("connectivity") or {}).get("voices") or []
        return {v["Id"]: format_voice(v) for v in voices if isinstance(v, Mapping) and v.get("Id")}

    def synthesize(self, args: Mapping[str, Any], settings: Mapping[str, Any]) -> Dict[str, Any]:
        text = normalize_content(args.get("content"), args.get("title"))
        if not text:
            raise FeatureError(ErrorKind.VALIDATION, "content is empty", provider=self.id)
        content_hash = hashlib.md5(text.encode("utf-8"), usedforsecurity=False).hexdigest()
        if args.get("content_hash") == content_hash:
            return {"unchanged": True, "content_hash": content_hash}

        voice = settings.get("voice")
        if not voice:
            raise FeatureError(ErrorKind.CONFIGURATION, "no voice selected", provider=self.id)

        response = self._client(settings).synthesize_speech(
            OutputFormat=AWS_POLLY_OUTPUT_FORMAT,
            Text=text,
            TextType="text",
            VoiceId=voice,
            Engine=settings.get("voice_engine") or AWS_POLLY_DEFAULT_ENGINE,
        )
        stream = response["AudioStream"]
        audio = stream.read()
        return {
            "unchanged": False,
            "content_hash": content_hash,
            "content_type": response.get("ContentType", "audio/mpeg"),
            "audio_base64": base64.b64encode(audio).decode("ascii"),
        }

    def debug_information(self, settings: Mapping[str, Any]) -> Dict[str, Any]:
        info = super().debug_information(settings)
        info["Latest response - Voices"] = len(self.voice_options(settings))
        return info


__all__ = ["AmazonPollyProvider", "default_polly_client", "format_voice"]
