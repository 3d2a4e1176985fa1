"""OpenAI-backed providers (embeddings, Whisper transcription, ChatGPT and Azure OpenAI excerpts)."""

from .azure_openai import AzureOpenAIProvider
from .chatgpt import OpenAIChatGPTProvider
from .embeddings import OpenAIEmbeddingsProvider
from .whisper import OpenAIWhisperProvider

__all__ = ["AzureOpenAIProvider", "OpenAIChatGPTProvider", "OpenAIEmbeddingsProvider", "OpenAIWhisperProvider"]
