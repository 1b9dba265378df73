from fastapi import APIRouter, Body, Depends, Request
from fastapi.responses import JSONResponse, Response

from core.logging_config import get_logger
from exceptions import HTTP_STATUS_BY_KIND
from schemas.session import (
    LocateRequest,
    PronounceRequest,
    QueryRequest,
    ReportRequest,
    SessionSnapshot,
)
from services.coach_session import CoachSession
from utils import format_error_response

router = APIRouter(
    tags=["Coach"],
)

logger = get_logger(__name__)


def get_session(request: Request) -> CoachSession:
    return request.app.state.coach_session


@router.get("/state", summary="Current session state", response_model=SessionSnapshot)
async def read_state(session: CoachSession = Depends(get_session)) -> SessionSnapshot:
    return session.snapshot()


@router.put("/query", summary="Update the search box", response_model=SessionSnapshot)
async def update_query(
    request: QueryRequest = Body(...),
    session: CoachSession = Depends(get_session),
) -> SessionSnapshot:
    session.set_query(request.query)
    return session.snapshot()


@router.post("/report", summary="Get coached on a location", response_model=SessionSnapshot)
async def submit_report(
    request: ReportRequest = Body(...),
    session: CoachSession = Depends(get_session),
) -> SessionSnapshot:
    """
    Fetch a slang report for the location.

    Failures never produce an HTTP error: they are reported through the
    `phase` and `error` fields of the returned snapshot. A blank location
    leaves the session untouched.
    """
    session.set_query(request.location)
    await session.submit(request.location)
    return session.snapshot()


@router.post("/locate", summary="Get coached on the current region", response_model=SessionSnapshot)
async def locate(
    request: LocateRequest = Body(...),
    session: CoachSession = Depends(get_session),
) -> SessionSnapshot:
    """
    Run the current-location flow with the outcome of the browser's
    geolocation prompt.
    """

    async def locator() -> bool:
        return request.granted

    await session.use_current_location(locator if request.supported else None)
    return session.snapshot()


@router.delete("/error", summary="Dismiss the error banner", response_model=SessionSnapshot)
async def dismiss_error(session: CoachSession = Depends(get_session)) -> SessionSnapshot:
    session.dismiss_error()
    return session.snapshot()


@router.post(
    "/pronounce",
    summary="Hear a slang term",
    responses={
        200: {"content": {"audio/wav": {}}, "description": "Spoken term"},
        409: {"description": "Audio for this term is already being fetched"},
    },
)
async def pronounce(
    request: PronounceRequest = Body(...),
    session: CoachSession = Depends(get_session),
) -> Response:
    """
    Speak a term. Errors stay on the card: they are returned to the caller
    and never change the session phase or banner.
    """
    result = await session.speak(request.term, request.context, request.card)

    if result.status == "ready":
        return Response(content=result.clip.to_wav_bytes(), media_type="audio/wav")

    if result.status == "suppressed":
        return JSONResponse(
            status_code=409,
            content=format_error_response(
                status=409,
                error_type="in_flight",
                field="term",
                message="Already fetching this pronunciation.",
            ),
        )

    status = HTTP_STATUS_BY_KIND[result.kind]
    logger.info(f"Pronunciation of '{request.term}' returned {status}")
    return JSONResponse(
        status_code=status,
        content=format_error_response(
            status=status,
            error_type=result.kind.value,
            field="term",
            message=result.message,
        ),
    )
