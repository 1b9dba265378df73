import json
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from exceptions import MalformedResponse


class Intensity(str, Enum):
    """
    How offensive a slang term is, from harmless banter to fighting words.
    """

    MILD = "Mild"
    MODERATE = "Moderate"
    SPICY = "Spicy"
    EXTREME = "Extreme"

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional["Intensity"]:
        """
        Match a raw label case-insensitively; unknown labels give None.
        """
        if not value:
            return None
        label = value.strip().lower()
        for level in cls:
            if level.value.lower() == label:
                return level
        return None


class SlangItem(BaseModel):
    """
    A single slang term as returned by the coach.

    `intensity` keeps the raw label so an unknown value never fails
    validation; use `level` for the parsed `Intensity`.
    """

    model_config = ConfigDict(populate_by_name=True)

    term: str = Field(..., description="The slang word or phrase")
    meaning: str = Field(..., description="What the term means")
    intensity: str = Field(..., description="One of Mild, Moderate, Spicy, Extreme")
    usage_context: str = Field(
        ..., alias="usageContext", description="When and where locals use it"
    )
    example_sentence: str = Field(
        ..., alias="exampleSentence", description="The term used in a sentence"
    )
    pronunciation: Optional[str] = Field(
        default=None, description="Phonetic pronunciation guide"
    )
    literal_translation: Optional[str] = Field(
        default=None, alias="literalTranslation"
    )
    origin: Optional[str] = Field(default=None)
    coach_tip: Optional[str] = Field(
        default=None, alias="coachTip", description="Street advice on using it"
    )

    @field_validator(
        "pronunciation", "literal_translation", "origin", "coach_tip", mode="before"
    )
    @classmethod
    def _blank_as_missing(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @property
    def level(self) -> Optional[Intensity]:
        return Intensity.parse(self.intensity)


class SlangReport(BaseModel):
    """
    Schema for a generated regional slang report.
    """

    model_config = ConfigDict(populate_by_name=True)

    location: str = Field(..., description="Place the report is about")
    culture_note: str = Field(
        ..., alias="cultureNote", description="Short note on the local vibe"
    )
    slangs: List[SlangItem] = Field(..., min_length=1)

    def to_payload(self) -> Dict[str, Any]:
        """
        Serialize back to the camelCase wire shape, dropping absent fields.
        """
        return self.model_dump(by_alias=True, exclude_none=True)


REQUIRED_REPORT_FIELDS = ["location", "cultureNote", "slangs"]
REQUIRED_ITEM_FIELDS = [
    "term",
    "meaning",
    "intensity",
    "usageContext",
    "exampleSentence",
]
OPTIONAL_ITEM_FIELDS = ["pronunciation", "literalTranslation", "origin", "coachTip"]


def response_schema() -> Dict[str, Any]:
    """
    Build the structured-output schema sent along with the report prompt.

    Uses the OpenAPI subset understood by Gemini's `responseSchema`.
    """
    item_fields = REQUIRED_ITEM_FIELDS + OPTIONAL_ITEM_FIELDS
    return {
        "type": "OBJECT",
        "properties": {
            "location": {"type": "STRING"},
            "cultureNote": {"type": "STRING"},
            "slangs": {
                "type": "ARRAY",
                "items": {
                    "type": "OBJECT",
                    "properties": {
                        name: (
                            {
                                "type": "STRING",
                                "enum": [level.value for level in Intensity],
                            }
                            if name == "intensity"
                            else {"type": "STRING"}
                        )
                        for name in item_fields
                    },
                    "required": list(REQUIRED_ITEM_FIELDS),
                },
            },
        },
        "required": list(REQUIRED_REPORT_FIELDS),
    }


def _describe_errors(exc: ValidationError) -> str:
    problems = []
    for err in exc.errors():
        location = ".".join(str(part) for part in err.get("loc", ())) or "report"
        problems.append(f"{location}: {err.get('msg', 'invalid')}")
    return "; ".join(problems)


def validate_report(payload: Union[str, bytes, Mapping[str, Any]]) -> SlangReport:
    """
    Turn a raw reply into a typed `SlangReport`.

    Args:
        payload: JSON text, or an already decoded JSON object.

    Returns:
        The validated report.

    Raises:
        MalformedResponse: If the payload is not a JSON object or misses any
            required field. A partially-populated report is never returned.
    """
    if isinstance(payload, (str, bytes)):
        try:
            payload = json.loads(payload)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise MalformedResponse(f"Reply is not valid JSON: {exc}") from exc

    if not isinstance(payload, Mapping):
        raise MalformedResponse(
            f"Expected a JSON object, got {type(payload).__name__}."
        )

    try:
        return SlangReport.model_validate(dict(payload))
    except ValidationError as exc:
        raise MalformedResponse(
            f"Slang report failed validation: {_describe_errors(exc)}"
        ) from exc
