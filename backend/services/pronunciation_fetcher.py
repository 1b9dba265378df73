from typing import Any, Callable, Dict, Optional

from conf import settings
from core.logging_config import get_logger
from core.metrics_config import PRONUNCIATION_FETCHES
from exceptions import AudioUnavailable, LingoStreetError
from services.audio import AudioClip, decode_pcm16
from services.gemini_client import GeminiClient, client_from_env, extract_inline_data
from utils.get_prompts import compile_pronunciation_prompt

logger = get_logger(__name__)


class PronunciationFetcher:
    """
    Fetches a spoken rendering of a slang term from the speech model.

    The model answers with base64 16-bit PCM (24 kHz, mono) which is decoded
    into an `AudioClip`. One request per call, no retry.
    """

    def __init__(
        self,
        client_factory: Callable[[], GeminiClient] = client_from_env,
        model_name: Optional[str] = None,
        voice_name: Optional[str] = None,
    ) -> None:
        self.client_factory = client_factory
        self.model_name = model_name or settings.SPEECH_MODEL_NAME
        self.voice_name = voice_name or settings.SPEECH_VOICE_NAME

    def build_payload(self, term: str, context: str) -> Dict[str, Any]:
        return {
            "contents": [
                {
                    "role": "user",
                    "parts": [{"text": compile_pronunciation_prompt(term, context)}],
                }
            ],
            "generationConfig": {
                "responseModalities": ["AUDIO"],
                "speechConfig": {
                    "voiceConfig": {
                        "prebuiltVoiceConfig": {"voiceName": self.voice_name}
                    }
                },
            },
        }

    async def fetch(self, term: str, context: str = "") -> AudioClip:
        """
        Fetch and decode the pronunciation of a term.

        Args:
            term: The slang term to speak.
            context: Short usage context that sets the tone.

        Raises:
            AudioUnavailable: The reply carried no usable audio.
            ConfigurationError: Missing or rejected credential.
            ContentBlocked: The safety filter refused the request.
            FetchFailed: Any other transport or HTTP failure.
        """
        try:
            client = self.client_factory()
            logger.info(f"Requesting pronunciation of '{term}' from {self.model_name}")
            body = await client.generate_content(
                self.model_name, self.build_payload(term, context)
            )
            data = extract_inline_data(body)
            if not data:
                raise AudioUnavailable()
            clip = decode_pcm16(data, sample_rate=settings.SPEECH_SAMPLE_RATE)
        except LingoStreetError as exc:
            PRONUNCIATION_FETCHES.labels(outcome=exc.kind.value).inc()
            logger.warning(f"Pronunciation of '{term}' failed: {exc.kind.value}: {exc}")
            raise

        PRONUNCIATION_FETCHES.labels(outcome="ok").inc()
        logger.debug(f"Decoded {len(clip.samples)} samples for '{term}'")
        return clip
