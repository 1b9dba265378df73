from prometheus_client import Counter, Histogram
from prometheus_fastapi_instrumentator import Instrumentator
from prometheus_fastapi_instrumentator.metrics import Info

# Prometheus metrics definitions
REPORT_FETCHES = Counter(
    "lingostreet_report_fetches_total",
    "Slang report fetches by outcome (ok or error kind).",
    ["outcome"],
)

PRONUNCIATION_FETCHES = Counter(
    "lingostreet_pronunciation_fetches_total",
    "Pronunciation audio fetches by outcome (ok or error kind).",
    ["outcome"],
)

LATENCY = Histogram(
    "lingostreet_request_duration_seconds",
    "Request latency by handler and method.",
    ["handler", "method"],
    buckets=[0.5, 2.0, 5.0, 15.0, 30.0],
)


def observe_latency(info: Info) -> None:
    """
    Record request latency; report generation is slow, hence wide buckets.

    Args:
        info: An Info object containing request, response, and timing data.
    """
    LATENCY.labels(
        info.modified_handler,
        info.method,
    ).observe(info.modified_duration)


def setup_metrics(app) -> None:
    """
    Set up Prometheus instrumentation for a FastAPI application.

    Args:
        app: FastAPI application instance to instrument.
    """
    instrumentator = Instrumentator(excluded_handlers=["/metrics"])
    instrumentator.add(observe_latency).instrument(app).expose(
        app, endpoint="/metrics"
    )
