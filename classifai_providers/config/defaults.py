"""classifai_providers.config.defaults
====================================

Central place for small, stable default values used across providers,
features and the service layer. These defaults can be overridden via
environment variables or the external configuration file, but provide
sensible fallbacks for local development and tests.

Only plain constants live here; the module imports nothing from the package.
"""

from __future__ import annotations

# ---- Service / HTTP layer ----

# Comma-separated list of allowed origins for the dev server.
SERVICE_CORS_ENV = "CLASSIFAI_SERVICE_CORS_ORIGINS"
SERVICE_CORS_DEFAULT_ORIGINS = "http://localhost:5173,http://127.0.0.1:5173"
SERVICE_DEFAULT_HOST = "127.0.0.1"
SERVICE_DEFAULT_PORT = 8099
# JSON file of items keyed by id, read by the dev server container.
ITEMS_FILE_ENV = "CLASSIFAI_ITEMS_FILE"

# ---- Timeouts (seconds) ----
HTTP_DEFAULT_TIMEOUT_SECONDS = 30.0
HTTP_DEFAULT_CONNECT_TIMEOUT_SECONDS = 10.0

# ---- Persistence ----
SETTINGS_DB_ENV = "CLASSIFAI_DB_PATH"
SETTINGS_DB_DEFAULT_PATH = "~/.classifai/settings.db"
SQLITE_BUSY_TIMEOUT_MS = 5000
SQLITE_JOURNAL_MODE = "WAL"
SQLITE_SYNCHRONOUS = "NORMAL"
CONFIG_FILE_ENV = "CLASSIFAI_CONFIG_FILE"

# ---- IBM Watson NLU ----
WATSON_NLU_VERSION = "2022-08-10"
WATSON_NLU_AUTH_CHECK_TEXT = "Lorem ipsum dolor sit amet."
WATSON_NLU_DEFAULT_THRESHOLD = 70
WATSON_NLU_FEATURES = ("category", "keyword", "concept", "entity")
WATSON_NLU_DEFAULT_TAXONOMIES = {
    "category": "watson-category",
    "keyword": "watson-keyword",
    "concept": "watson-concept",
    "entity": "watson-entity",
}
WATSON_NLU_ENABLED_BY_DEFAULT = {"category": True, "keyword": True, "concept": False, "entity": False}
WATSON_NLU_MAX_RESULTS = 50

# ---- OpenAI ----
OPENAI_DEFAULT_BASE_URL = "https://api.openai.com/v1"
OPENAI_EMBEDDINGS_DEFAULT_MODEL = "text-embedding-ada-002"
OPENAI_EMBEDDINGS_MAX_CHARS = 8000 * 4
OPENAI_WHISPER_DEFAULT_MODEL = "whisper-1"
OPENAI_WHISPER_MAX_BYTES = 25 * 1024 * 1024
OPENAI_WHISPER_FILE_EXTENSIONS = ("mp3", "mp4", "mpeg", "mpga", "m4a", "wav", "webm")
OPENAI_CHATGPT_DEFAULT_MODEL = "gpt-3.5-turbo"
OPENAI_EXCERPT_DEFAULT_LENGTH = 55
OPENAI_EXCERPT_MAX_LENGTH = 500
OPENAI_EXCERPT_MAX_CONTENT_CHARS = 3000 * 4

# ---- Azure OpenAI ----
AZURE_OPENAI_API_VERSION = "2023-05-15"

# ---- Amazon Polly ----
AWS_POLLY_DEFAULT_REGION = "us-east-1"
AWS_POLLY_DEFAULT_ENGINE = "standard"
AWS_POLLY_ENGINES = ("standard", "neural", "long-form", "generative")
AWS_POLLY_OUTPUT_FORMAT = "mp3"

# ---- Features ----
CLASSIFICATION_DEFAULT_POST_TYPES = {"post": 1}
CLASSIFICATION_DEFAULT_POST_STATUSES = {"publish": 1}
TEXT_TO_SPEECH_DEFAULT_POST_TYPES = {"post": 1}
TEXT_TO_SPEECH_DEFAULT_POST_STATUSES = {"publish": 1}
SPEECH_TO_TEXT_POST_TYPES = {"attachment": 1}
SPEECH_TO_TEXT_POST_STATUSES = {"inherit": 1}
EXCERPT_DEFAULT_POST_TYPES = {"post": 1}
EXCERPT_DEFAULT_POST_STATUSES = {"publish": 1, "draft": 1}
