from datetime import datetime
from typing import Callable, List

from fastapi.responses import JSONResponse

from conf import settings
from utils import first_env

from .enum import HealthCheckStatusEnum
from .model import HealthCheckEntityModel, HealthCheckModel


class HealthCheckCredential:
    """
    Reports whether a Gemini credential is present, without calling Gemini.
    """

    alias = "gemini-credential"
    tags = ["gemini", "configuration"]

    def __call__(self) -> HealthCheckStatusEnum:
        if first_env(settings.API_KEY_ENV_VARS):
            return HealthCheckStatusEnum.HEALTHY
        return HealthCheckStatusEnum.UNHEALTHY


class HealthCheckFactory:
    def __init__(self) -> None:
        self._items: List = [HealthCheckCredential()]

    def add(self, item) -> None:
        self._items.append(item)

    def check(self) -> HealthCheckModel:
        result = HealthCheckModel()
        started = datetime.now()
        for item in self._items:
            item_started = datetime.now()
            status = item()
            entity = HealthCheckEntityModel(
                alias=item.alias,
                status=status,
                timeTaken=datetime.now() - item_started,
                tags=item.tags,
            )
            if status is HealthCheckStatusEnum.UNHEALTHY:
                result.status = HealthCheckStatusEnum.UNHEALTHY
            result.entities.append(entity)
        result.totalTimeTaken = datetime.now() - started
        return result


def healthCheckRoute(factory: HealthCheckFactory) -> Callable:
    """
    Build the health endpoint; any unhealthy entity answers with 503.
    """

    async def endpoint() -> JSONResponse:
        result = factory.check()
        status_code = (
            200 if result.status is HealthCheckStatusEnum.HEALTHY else 503
        )
        return JSONResponse(
            status_code=status_code, content=result.model_dump(mode="json")
        )

    return endpoint
