"""
Configuration settings loaded from environment variables
for the LingoStreet slang coach.
"""

from pathlib import Path

from utils import bool_from_str, csv_list, get_env, optional_float

# -----------------------------------------------------------------------------
# Base project settings
# -----------------------------------------------------------------------------
DEBUG: bool = bool_from_str(get_env("DEBUG", "f"))

BASE_DIR: Path = Path(__file__).resolve().parent.parent

PROJECT_NAME: str = get_env("PROJECT_NAME", "LingoStreet")
PROJECT_DESCRIPTION: str = get_env(
    "PROJECT_DESCRIPTION",
    (
        "LingoStreet is an AI street coach that reports the local slang, "
        "regional insults and cultural nuances of any place you name."
    ),
)
PROJECT_VERSION: str = get_env("PROJECT_VERSION", "0.1.0")

OPENAPI_URL: str = get_env("OPENAPI_URL", "/api/openapi.json")
DOCS_URL: str = get_env("DOCS_URL", "/api/docs")
REDOC_URL: str = get_env("REDOC_URL", "/api/redoc")

TEMPLATES_DIR: Path = BASE_DIR / "templates"


# -----------------------------------------------------------------------------
# Telemetry and logging
# -----------------------------------------------------------------------------
USE_FILE_LOG: bool = bool_from_str(get_env("USE_FILE_LOG", "f"))

LOG_FORMAT: str = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | <cyan>{name}</cyan>:"
    "<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)

DEFAULT_LOG_LEVEL: str = get_env("DEFAULT_LOG_LEVEL", "INFO")


# -----------------------------------------------------------------------------
# Gemini generative-language API
# -----------------------------------------------------------------------------
# The credential itself is never stored here: it is read from API_KEY
# (or GEMINI_API_KEY) every time a request is about to be made.
GEMINI_BASE_URL: str = get_env(
    "GEMINI_BASE_URL",
    "https://generativelanguage.googleapis.com/v1beta/models",
)
GEMINI_TIMEOUT: float | None = optional_float(get_env("GEMINI_TIMEOUT"))

TEXT_MODEL_NAME: str = get_env("TEXT_MODEL_NAME", "gemini-2.5-flash")
TEXT_TEMPERATURE: float = float(get_env("TEXT_TEMPERATURE", "0.9"))

SPEECH_MODEL_NAME: str = get_env(
    "SPEECH_MODEL_NAME", "gemini-2.5-flash-preview-tts"
)
SPEECH_VOICE_NAME: str = get_env("SPEECH_VOICE_NAME", "Fenrir")


# -----------------------------------------------------------------------------
# Session behaviour
# -----------------------------------------------------------------------------
HISTORY_LIMIT: int = int(get_env("HISTORY_LIMIT", "4"))
HISTORY_SEED: tuple = tuple(
    csv_list(get_env("HISTORY_SEED", "London,Brooklyn,Mumbai,Sydney"))
)

PORT: int = int(get_env("PORT", "8002"))
