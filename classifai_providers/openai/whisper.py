"""OpenAI Whisper provider (feature: speech_to_text, capability: ``transcribe``).

Only audio files the API accepts are sent: a known extension and at most
25 MB. The file is uploaded as multipart form data and the plain transcript
text is returned.
"""
from __future__ import annotations

from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Mapping

from ..base.errors import ErrorKind, FeatureError
from ..base.fields import FieldSpec, FieldType
from ..config.defaults import (
    OPENAI_WHISPER_DEFAULT_MODEL,
    OPENAI_WHISPER_FILE_EXTENSIONS,
    OPENAI_WHISPER_MAX_BYTES,
)
from .openai_style import API_KEY_FIELD, BASE_URL_FIELD, BaseOpenAIStyleProvider


def check_audio_file(file_path: Any) -> Path:
    """Return the path when it is a supported audio file, else raise validation_error."""
    if not file_path:
        raise FeatureError(ErrorKind.VALIDATION, "no file to transcribe")
    path = Path(str(file_path))
    ext = path.suffix.lower().lstrip(".")
    if ext not in OPENAI_WHISPER_FILE_EXTENSIONS:
        raise FeatureError(
            ErrorKind.VALIDATION,
            f"unsupported file type '{ext or path.name}'",
            details={"allowed": list(OPENAI_WHISPER_FILE_EXTENSIONS)},
        )
    if not path.is_file():
        raise FeatureError(ErrorKind.VALIDATION, f"file not found: {path}")
    if path.stat().st_size > OPENAI_WHISPER_MAX_BYTES:
        raise FeatureError(
            ErrorKind.VALIDATION,
            "file exceeds the 25 MB upload limit",
            details={"size": path.stat().st_size, "limit": OPENAI_WHISPER_MAX_BYTES},
        )
    return path


class OpenAIWhisperProvider(BaseOpenAIStyleProvider):
    id = "openai_whisper"
    label = "OpenAI Whisper"
    feature_capabilities = MappingProxyType({"speech_to_text": "transcribe"})
    operations = MappingProxyType({"transcribe": "transcribe"})
    fields = (
        API_KEY_FIELD,
        BASE_URL_FIELD,
        FieldSpec("model", FieldType.TEXT, default=OPENAI_WHISPER_DEFAULT_MODEL, label="Model"),
    )

    def transcribe(self, args: Mapping[str, Any], settings: Mapping[str, Any]) -> Dict[str, Any]:
        path = check_audio_file(args.get("file_path"))
        model = settings.get("model") or OPENAI_WHISPER_DEFAULT_MODEL
        response = self._expect(
            self._api.post(
                self._url(settings, "audio/transcriptions"),
                data={"model": model, "response_format": "json"},
                files={"file": (path.name, path.read_bytes())},
                headers=self._headers(settings),
            )
        )
        data = response.data if isinstance(response.data, dict) else {}
        text = data.get("text")
        if text is None:
            raise FeatureError(ErrorKind.PROVIDER, "no transcript returned", provider=self.id)
        return {"text": str(text).strip(), "model": model}


__all__ = ["OpenAIWhisperProvider", "check_audio_file"]
