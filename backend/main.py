from __future__ import annotations
import os
from typing import Optional

os.environ.setdefault("LINGOSTREET_CONFIG", "core.settings")

from conf import settings
from core.logging_config import get_logger
from core.metrics_config import setup_metrics
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from middlewares import (
    add_process_time_header,
    exception_handler,
    validation_exception_handler,
)
from services.coach_session import CoachSession
from services.pronunciation_fetcher import PronunciationFetcher
from services.slang_fetcher import SlangReportFetcher
from utils.healthcheck import (
    HealthCheckFactory,
    healthCheckRoute,
)
from utils.healthcheck.model import HealthCheckModel
from controllers import (
    coach,
    pages,
)


def set_middlewares(app: FastAPI) -> FastAPI:
    """
    Set middlewares for the FastAPI application.

    :param app: FastAPI application.

    :return: FastAPI application with middlewares.

    """

    app.add_middleware(CORSMiddleware, **settings.CORS_SETTINGS)
    logger.debug("Middleware added")

    app.middleware("http")(add_process_time_header)
    logger.debug("Process time Middleware added")

    app.add_exception_handler(
        Exception,
        exception_handler
    )
    logger.debug("Exception handler added")

    app.add_exception_handler(
        RequestValidationError,
        validation_exception_handler
    )
    logger.debug("Validation exception handler added")

    return app


def import_routes(app: FastAPI) -> FastAPI:

    app.include_router(pages.router)
    app.include_router(coach.router, prefix="/v1")
    return app


def build_session() -> CoachSession:
    """
    Build the single coach session hosted by this process, wired to the
    real Gemini fetchers.
    """
    return CoachSession(
        report_fetcher=SlangReportFetcher(),
        pronunciation_fetcher=PronunciationFetcher(),
    )


def get_application(logger, session: Optional[CoachSession] = None) -> FastAPI:
    """
    Returns a FastAPI application.

    :param logger: Logger used while wiring the application.
    :param session: Coach session to serve; a Gemini-backed one by default.

    :return: FastAPI application.
    """
    logger.info("Creating FastAPI application")
    app = FastAPI(
        title=settings.PROJECT_NAME,
        description=settings.PROJECT_DESCRIPTION,
        version=settings.PROJECT_VERSION,
        openapi_url=settings.OPENAPI_URL,
        docs_url=settings.DOCS_URL,
        redoc_url=settings.REDOC_URL,
    )
    logger.debug("FastAPI application created")

    app.state.coach_session = session or build_session()
    app.state.coach_session.subscribe(
        lambda previous, current: logger.info(
            f"Session {previous.value} -> {current.value}"
        )
    )

    app = set_middlewares(app)

    app = import_routes(app)

    _healthChecks = HealthCheckFactory()
    app.add_api_route(
        "/api/health/",
        tags=["Health Check"],
        endpoint=healthCheckRoute(factory=_healthChecks),
        response_model=HealthCheckModel,
    )
    app.add_api_route(
        "/api/health",
        tags=["Health Check"],
        endpoint=healthCheckRoute(factory=_healthChecks),
        include_in_schema=False,
    )

    setup_metrics(app)

    return app


logger = get_logger(__name__)

app = get_application(logger)

logger.info("LingoStreet application created")


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=settings.PORT)
