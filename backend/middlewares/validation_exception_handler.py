from typing import Any, Dict, List

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from utils import format_error_response


async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    """
    Handle FastAPI request validation errors and format them into the
    same error envelope the rest of the API uses.

    Args:
        request: The incoming HTTP request.
        exc: The RequestValidationError exception instance.

    Returns:
        JSONResponse with one detail entry per invalid field.
    """
    formatted_errors: List[Dict[str, Any]] = []

    for err in exc.errors():
        location_parts = err.get("loc", [])
        formatted_errors.append({
            "location": " -> ".join(str(part) for part in location_parts),
            # Keep only the first line of multi-line pydantic messages
            "message": err.get("msg", "").split("\n", 1)[0],
            "type": err.get("type"),
        })

    first_field = (
        str(exc.errors()[0].get("loc", ["unknown"])[-1])
        if exc.errors()
        else "unknown"
    )
    return JSONResponse(
        status_code=422,
        content=format_error_response(
            status=422,
            error_type="RequestValidationError",
            field=first_field,
            message="Invalid request body.",
            details=formatted_errors,
        ),
    )
