import base64
import binascii
import io
import wave
from dataclasses import dataclass, field

import numpy as np

from core.logging_config import get_logger
from exceptions import AudioUnavailable

logger = get_logger(__name__)

SAMPLE_RATE = 24000
CHANNELS = 1
SAMPLE_WIDTH = 2
PCM16_SCALE = 32768.0


@dataclass
class AudioClip:
    """
    Decoded mono audio, float32 samples normalized to [-1.0, 1.0].
    """

    samples: np.ndarray = field(default_factory=lambda: np.zeros(0, dtype=np.float32))
    sample_rate: int = SAMPLE_RATE
    channels: int = CHANNELS

    def __post_init__(self):
        self.samples = np.asarray(self.samples, dtype=np.float32)

    @property
    def duration(self) -> float:
        """Length in seconds."""
        return len(self.samples) / (self.sample_rate * self.channels)

    def to_wav_bytes(self) -> bytes:
        """
        Re-encode the clip as a 16-bit PCM WAV file for browser playback.
        """
        pcm16 = np.clip(np.round(self.samples * PCM16_SCALE), -32768, 32767)
        buffer = io.BytesIO()
        with wave.open(buffer, "wb") as wav_file:
            wav_file.setnchannels(self.channels)
            wav_file.setsampwidth(SAMPLE_WIDTH)
            wav_file.setframerate(self.sample_rate)
            wav_file.writeframes(pcm16.astype("<i2").tobytes())
        return buffer.getvalue()


def pcm16_to_floats(raw: bytes) -> np.ndarray:
    """
    Read little-endian signed 16-bit samples and scale them by 1/32768.

    A trailing odd byte cannot form a sample and is ignored.
    """
    usable = len(raw) // SAMPLE_WIDTH * SAMPLE_WIDTH
    if usable != len(raw):
        logger.warning(f"Dropping trailing byte of a {len(raw)}-byte PCM buffer")
    pcm16 = np.frombuffer(raw[:usable], dtype="<i2")
    return pcm16.astype(np.float32) / PCM16_SCALE


def decode_pcm16(
    data: str, sample_rate: int = SAMPLE_RATE, channels: int = CHANNELS
) -> AudioClip:
    """
    Decode a base64 PCM payload into an `AudioClip`.

    Args:
        data: Base64 text holding raw 16-bit little-endian PCM.
        sample_rate: Samples per second of the payload.
        channels: Channel count of the payload.

    Raises:
        AudioUnavailable: The payload is empty or not valid base64.
    """
    if not data:
        raise AudioUnavailable()
    try:
        raw = base64.b64decode(data, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise AudioUnavailable("The audio payload could not be decoded.") from exc
    if len(raw) < SAMPLE_WIDTH:
        raise AudioUnavailable()
    return AudioClip(
        samples=pcm16_to_floats(raw), sample_rate=sample_rate, channels=channels
    )
