import base64
from typing import Any, Callable, Dict, List, Optional

import httpx
import numpy as np

from schemas.slang import SlangReport, validate_report
from services.audio import AudioClip
from services.gemini_client import GeminiClient


def report_payload(location: str = "Tokyo", **overrides: Any) -> Dict[str, Any]:
    payload = {
        "location": location,
        "cultureNote": f"{location} talks fast and keeps it polite until it doesn't.",
        "slangs": [
            {
                "term": "yabai",
                "pronunciation": "yah-bye",
                "meaning": "Dangerous, or amazing, depending on the tone.",
                "intensity": "Mild",
                "usageContext": "Among friends, about food or gossip.",
                "exampleSentence": "This ramen is yabai.",
                "coachTip": "Works for good and bad news alike.",
            },
            {
                "term": "uzai",
                "meaning": "Annoying.",
                "intensity": "Moderate",
                "usageContext": "Complaining about someone.",
                "exampleSentence": "He keeps texting me, so uzai.",
            },
            {
                "term": "kimoi",
                "meaning": "Gross, creepy.",
                "intensity": "Spicy",
                "usageContext": "Teenagers roasting each other.",
                "exampleSentence": "Stop staring, kimoi.",
                "origin": "Short for kimochi warui.",
            },
            {
                "term": "kisama",
                "meaning": "A hostile 'you'.",
                "intensity": "Extreme",
                "usageContext": "Picking a fight. Never use it casually.",
                "exampleSentence": "Kisama, say that again!",
                "literalTranslation": "Honourable you",
            },
        ],
    }
    payload.update(overrides)
    return payload


def make_report(location: str = "Tokyo") -> SlangReport:
    return validate_report(report_payload(location))


def text_body(text: str, finish_reason: str = "STOP") -> Dict[str, Any]:
    return {
        "candidates": [
            {
                "content": {"role": "model", "parts": [{"text": text}]},
                "finishReason": finish_reason,
            }
        ]
    }


def audio_body(data: Optional[str]) -> Dict[str, Any]:
    parts = []
    if data is not None:
        parts.append(
            {"inlineData": {"mimeType": "audio/L16;codec=pcm;rate=24000", "data": data}}
        )
    return {"candidates": [{"content": {"role": "model", "parts": parts}}]}


def pcm_b64(*samples: int) -> str:
    return base64.b64encode(np.array(samples, dtype="<i2").tobytes()).decode()


class RecordingHandler:
    """
    MockTransport handler that records requests and answers with a canned
    response (or raises an httpx error).
    """

    def __init__(self, response: Any = None, status_code: int = 200) -> None:
        self.response = response
        self.status_code = status_code
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if isinstance(self.response, Exception):
            raise self.response
        if isinstance(self.response, (str, bytes)):
            return httpx.Response(self.status_code, content=self.response)
        return httpx.Response(self.status_code, json=self.response)


def client_factory_for(handler: Callable) -> Callable[[], GeminiClient]:
    def factory() -> GeminiClient:
        return GeminiClient(api_key="test-key", transport=httpx.MockTransport(handler))

    return factory


class FakeReportFetcher:
    def __init__(self, result: Any = None, on_call: Optional[Callable] = None) -> None:
        self.result = result
        self.on_call = on_call
        self.calls: List[str] = []

    async def fetch(self, location: str) -> SlangReport:
        self.calls.append(location)
        if self.on_call:
            self.on_call(location)
        if isinstance(self.result, BaseException):
            raise self.result
        return self.result or make_report(location)


class FakePronunciationFetcher:
    def __init__(self, result: Any = None, gate=None) -> None:
        self.result = result
        self.gate = gate
        self.calls: List[tuple] = []

    async def fetch(self, term: str, context: str = "") -> AudioClip:
        self.calls.append((term, context))
        if self.gate is not None:
            await self.gate.wait()
        if isinstance(self.result, Exception):
            raise self.result
        return self.result or AudioClip(samples=[0.0, 0.5, -0.5])

