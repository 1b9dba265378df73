"""
Default LingoStreet settings. Override these with settings in the module
pointed to by the LINGOSTREET_CONFIG environment variable.
"""

PROJECT_NAME = "LingoStreet"
PROJECT_DESCRIPTION = ""
PROJECT_VERSION = "0.1.0"

DEBUG = False

CORS_SETTINGS = {
    "allow_origins": ["*"],
    "allow_credentials": True,
    "allow_methods": ["*"],
    "allow_headers": ["*"],
}

# Credential lookup order; the first non-blank variable wins.
API_KEY_ENV_VARS = ("API_KEY", "GEMINI_API_KEY")

GEMINI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta/models"
GEMINI_TIMEOUT = None

TEXT_MODEL_NAME = "gemini-2.5-flash"
TEXT_TEMPERATURE = 0.9
TEXT_TEMPERATURE_RANGE = (0.8, 0.9)

SPEECH_MODEL_NAME = "gemini-2.5-flash-preview-tts"
SPEECH_VOICE_NAME = "Fenrir"
SPEECH_SAMPLE_RATE = 24000

HISTORY_LIMIT = 4
HISTORY_SEED = ("London", "Brooklyn", "Mumbai", "Sydney")

CURRENT_LOCATION_TOKEN = "My current region"

CONTENT_BLOCK_FINISH_REASONS = (
    "SAFETY",
    "PROHIBITED_CONTENT",
    "BLOCKLIST",
    "SPII",
)

MEANING_PREVIEW_LENGTH = 120
