from fastapi import Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from core.logging_config import get_logger
from exceptions import HTTP_STATUS_BY_KIND, ImproperlyConfigured, LingoStreetError
from utils import format_error_response

logger = get_logger("ExceptionHandler")


def exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Global exception handler for FastAPI.

    Logs the exception with traceback and returns a JSON response
    tailored to the exception type.

    Args:
        request: The incoming FastAPI request.
        exc: The exception instance.

    Returns:
        JSONResponse: Structured error response.
    """
    logger.opt(exception=exc).error(
        f"Error in {request.method} {request.url.path} - {exc!r}"
    )

    # Fetch errors that escaped the session boundary
    if isinstance(exc, LingoStreetError):
        status = HTTP_STATUS_BY_KIND[exc.kind]
        return JSONResponse(
            status_code=status,
            content=format_error_response(
                status=status,
                error_type=exc.kind.value,
                field="gemini",
                message=exc.message,
            ),
        )

    # Handle Pydantic ValidationError
    if isinstance(exc, ValidationError):
        formatted_errors = []
        for err in exc.errors():
            loc = err.get("loc", ["unknown"])
            field = loc[-1] if loc else "unknown"
            formatted_errors.append(
                {
                    "field": field,
                    "message": err.get("msg", "No message provided"),
                    "type": err.get("type", "unknown_type"),
                }
            )
        return JSONResponse(
            status_code=422,
            content=format_error_response(
                status=422,
                error_type="ValidationError",
                field="multiple_fields",
                message="Validation error.",
                details=formatted_errors,
            ),
        )

    # Handle configuration errors
    if isinstance(exc, ImproperlyConfigured):
        return JSONResponse(
            status_code=500,
            content=format_error_response(
                status=500,
                error_type="ImproperlyConfigured",
                field="settings",
                message=getattr(exc, "message", "Configuration error"),
            ),
        )

    return JSONResponse(
        status_code=500,
        content={
            "code": "internal_server_error",
            "detail": "Internal Server Error",
        },
    )
