import json
import re
from typing import Any, Callable, Dict, Optional

from conf import settings
from core.logging_config import get_logger
from core.metrics_config import REPORT_FETCHES
from exceptions import EmptyResponse, LingoStreetError
from schemas.slang import SlangReport, response_schema, validate_report
from services.gemini_client import GeminiClient, client_from_env, extract_text
from utils.get_prompts import COACH_SYSTEM_INSTRUCTION, compile_report_prompt

logger = get_logger(__name__)


class SlangReportFetcher:
    """
    Fetches a regional slang report from the text model.

    Each call to `fetch` issues exactly one `generateContent` request asking
    for JSON that follows `schemas.slang.response_schema`, then validates
    the reply into a `SlangReport`. Nothing is retried.
    """

    def __init__(
        self,
        client_factory: Callable[[], GeminiClient] = client_from_env,
        model_name: Optional[str] = None,
        temperature: Optional[float] = None,
    ) -> None:
        """
        Args:
            client_factory: Returns a ready client; called once per fetch so
                the credential is read at call time.
            model_name: Text model; defaults to `TEXT_MODEL_NAME`.
            temperature: Sampling temperature; defaults to `TEXT_TEMPERATURE`.
        """
        self.client_factory = client_factory
        self.model_name = model_name or settings.TEXT_MODEL_NAME
        self.temperature = (
            settings.TEXT_TEMPERATURE if temperature is None else temperature
        )

    def build_payload(self, location: str) -> Dict[str, Any]:
        return {
            "systemInstruction": {"parts": [{"text": COACH_SYSTEM_INSTRUCTION}]},
            "contents": [
                {
                    "role": "user",
                    "parts": [{"text": compile_report_prompt(location)}],
                }
            ],
            "generationConfig": {
                "responseMimeType": "application/json",
                "responseSchema": response_schema(),
                "temperature": self.temperature,
            },
        }

    async def fetch(self, location: str) -> SlangReport:
        """
        Fetch and validate the slang report for a location.

        Args:
            location: Non-empty place name.

        Returns:
            The validated report.

        Raises:
            ConfigurationError: Missing or rejected credential.
            ContentBlocked: The safety filter refused the request.
            EmptyResponse: The reply was empty or not JSON.
            MalformedResponse: The JSON did not match the report schema.
            FetchFailed: Any other transport or HTTP failure.
        """
        if not location or not location.strip():
            raise ValueError("location must be a non-empty string")

        try:
            client = self.client_factory()
            logger.info(f"Requesting slang report for '{location}' from {self.model_name}")
            body = await client.generate_content(
                self.model_name, self.build_payload(location)
            )
            report = self._parse(body)
        except LingoStreetError as exc:
            REPORT_FETCHES.labels(outcome=exc.kind.value).inc()
            logger.warning(f"Slang report for '{location}' failed: {exc.kind.value}: {exc}")
            raise

        REPORT_FETCHES.labels(outcome="ok").inc()
        logger.info(
            f"Slang report for '{location}' parsed with {len(report.slangs)} entries"
        )
        return report

    @staticmethod
    def _parse(body: Dict[str, Any]) -> SlangReport:
        text = extract_text(body).strip()
        if not text:
            raise EmptyResponse()
        # Some models still wrap JSON in a markdown fence.
        text = re.sub(
            r"^```(?:json|md|markdown)?\s*|\s*```$",
            "",
            text,
            flags=re.IGNORECASE | re.DOTALL,
        )
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise EmptyResponse(
                "The coach answered, but not in JSON."
            ) from exc
        return validate_report(data)
