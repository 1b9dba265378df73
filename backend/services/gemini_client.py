from typing import Any, Dict, List, Optional

import httpx

from conf import settings
from core.logging_config import get_logger
from exceptions import ConfigurationError, ContentBlocked, FetchFailed
from utils import first_env

logger = get_logger(__name__)

# Markers Gemini puts in a 400 body when the key itself is wrong.
INVALID_KEY_MARKERS = ("API_KEY_INVALID", "API key not valid")


class GeminiClient:
    """
    Thin async client for the Gemini generative-language REST API.

    One instance holds one credential; a fresh `httpx.AsyncClient` is opened
    for every request. Errors are translated into the LingoStreet taxonomy
    so callers never see raw httpx exceptions.
    """

    def __init__(
        self,
        api_key: str,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """
        Args:
            api_key: Gemini API key, sent as `x-goog-api-key`.
            base_url: Models endpoint root; defaults to `GEMINI_BASE_URL`.
            timeout: Seconds before giving up; None disables the timeout.
            transport: Optional httpx transport, e.g. a mock in tests.
        """
        if not api_key:
            raise ConfigurationError()
        self.api_key = api_key
        self.base_url = (base_url or settings.GEMINI_BASE_URL).rstrip("/")
        self.timeout = timeout
        self._transport = transport

    def url_for(self, model: str) -> str:
        return f"{self.base_url}/{model}:generateContent"

    async def generate_content(
        self, model: str, payload: Dict[str, Any]
    ) -> Dict[str, Any]:
        """
        POST a `generateContent` request and return the decoded JSON body.

        Raises:
            ConfigurationError: The service rejected the credential.
            ContentBlocked: The prompt was blocked by the safety filter.
            FetchFailed: Any other HTTP, transport or decoding failure.
        """
        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
            "x-goog-api-key": self.api_key,
        }
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, transport=self._transport
            ) as client:
                response = await client.post(
                    self.url_for(model), json=payload, headers=headers
                )
                response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise _translate_status_error(exc.response) from exc
        except httpx.HTTPError as exc:
            logger.error(f"Transport error calling {model}: {exc!r}")
            raise FetchFailed(f"Could not reach the coach: {exc}") from exc

        try:
            body = response.json()
        except ValueError as exc:
            raise FetchFailed("Gemini returned a body that is not JSON.") from exc
        if not isinstance(body, dict):
            raise FetchFailed("Gemini returned an unexpected body.")

        block_reason = (body.get("promptFeedback") or {}).get("blockReason")
        if block_reason:
            logger.warning(f"Prompt blocked by {model}: {block_reason}")
            raise ContentBlocked(reason=block_reason)
        return body


def _translate_status_error(response: httpx.Response) -> Exception:
    detail = response.text
    status = response.status_code
    if status in (401, 403) or (
        status == 400 and any(marker in detail for marker in INVALID_KEY_MARKERS)
    ):
        logger.error(f"Gemini rejected the API key (HTTP {status})")
        return ConfigurationError(
            "The API key was rejected. Check your project environment variables."
        )
    logger.error(f"Gemini HTTP {status}: {detail[:500]}")
    return FetchFailed(f"HTTP {status}: {detail[:200]}", status_code=status)


def client_from_env(**kwargs: Any) -> GeminiClient:
    """
    Build a `GeminiClient` with the credential currently in the environment.

    Called right before each request, so a key exported after start-up is
    picked up and a missing key fails before any network traffic.

    Raises:
        ConfigurationError: No credential is set.
    """
    api_key = first_env(settings.API_KEY_ENV_VARS)
    if not api_key:
        raise ConfigurationError()
    kwargs.setdefault("timeout", settings.GEMINI_TIMEOUT)
    return GeminiClient(api_key=api_key, **kwargs)


def first_candidate_parts(body: Dict[str, Any]) -> List[Dict[str, Any]]:
    """
    Return the content parts of the first candidate, or an empty list.

    Raises:
        ContentBlocked: The candidate was stopped by the safety filter
            before producing any parts.
    """
    candidates = body.get("candidates") or []
    if not candidates:
        return []
    candidate = candidates[0] or {}
    parts = [
        part
        for part in (candidate.get("content") or {}).get("parts") or []
        if isinstance(part, dict)
    ]
    finish_reason = candidate.get("finishReason")
    if finish_reason in settings.CONTENT_BLOCK_FINISH_REASONS and not parts:
        raise ContentBlocked(reason=finish_reason)
    return parts


def extract_text(body: Dict[str, Any]) -> str:
    """
    Concatenate the text parts of the first candidate.
    """
    texts = [part["text"] for part in first_candidate_parts(body) if part.get("text")]
    return "".join(texts)


def extract_inline_data(body: Dict[str, Any]) -> Optional[str]:
    """
    Return the base64 payload of the first inline-data part, if any.
    """
    for part in first_candidate_parts(body):
        inline = part.get("inlineData") or part.get("inline_data") or {}
        if inline.get("data"):
            return inline["data"]
    return None
