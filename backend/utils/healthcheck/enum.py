from enum import Enum


class HealthCheckStatusEnum(str, Enum):
    HEALTHY = "Healthy"
    UNHEALTHY = "Unhealthy"
