from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class Phase(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    ERRORED = "errored"


class SessionSnapshot(BaseModel):
    """
    Read-only view of the coach session, returned by every /v1 endpoint.
    """

    phase: Phase
    query: str = ""
    loading: bool = False
    error: Optional[str] = None
    report: Optional[Dict[str, Any]] = Field(
        default=None, description="Current slang report in its camelCase wire shape"
    )
    history: List[str] = Field(default_factory=list)
    audio_in_flight: List[str] = Field(default_factory=list)
    audio_errors: Dict[str, str] = Field(default_factory=dict)


class ReportRequest(BaseModel):
    location: str = Field(..., description="Place to get the slang report for")


class QueryRequest(BaseModel):
    query: str = Field(default="", description="Current text of the search box")


class LocateRequest(BaseModel):
    """
    Outcome of the browser's geolocation permission prompt.
    """

    supported: bool = Field(
        default=True, description="Whether the browser exposes geolocation at all"
    )
    granted: bool = Field(
        default=False, description="Whether the user allowed location access"
    )


class PronounceRequest(BaseModel):
    term: str = Field(..., min_length=1, description="Slang term to speak")
    context: str = Field(default="", description="Usage context that sets the tone")
    card: Optional[int] = Field(
        default=None, ge=0, description="Position of the card in the report"
    )
