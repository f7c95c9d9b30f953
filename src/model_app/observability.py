import sys
import time
import uuid
from typing import Any, Dict, Sequence

from loguru import logger
from prometheus_client import Counter, Histogram
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.types import ASGIApp

HTTP_REQUESTS_TOTAL = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["service", "method", "path", "status_code"],
)

HTTP_REQUEST_LATENCY_SECONDS = Histogram(
    "http_request_latency_seconds",
    "HTTP request latency in seconds",
    ["service", "method", "path", "status_code"],
    buckets=(0.01, 0.025, 0.05, 0.1, 0.2, 0.35, 0.5, 1, 2, 5),
)

MODEL_PREDICTIONS_TOTAL = Counter(
    "model_predictions_total",
    "Total predictions served",
    ["service", "model_version", "label"],
)

MODEL_INFERENCE_LATENCY_SECONDS = Histogram(
    "model_inference_latency_seconds",
    "Time spent inside model.predict",
    ["service", "model_version", "outcome"],
    buckets=(0.0001, 0.0005, 0.001, 0.005, 0.01, 0.05, 0.1),
)


def setup_logging(level: str = "INFO") -> None:
    """
    Production-friendly structured JSON logs to stdout.
    """
    logger.remove()
    logger.add(
        sink=sys.stdout,
        serialize=True,
        level=level.upper(),
        backtrace=False,
        diagnose=False,
    )


class RequestContextMiddleware(BaseHTTPMiddleware):
    """
    Adds X-Request-ID and emits request metrics.
    """
    def __init__(
        self,
        app: ASGIApp,
        service_name: str = "model-app",
        header_name: str = "X-Request-ID",
    ) -> None:
        super().__init__(app)
        self.service_name = service_name
        self.header_name = header_name

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get(self.header_name) or str(uuid.uuid4())
        request.state.request_id = request_id

        start = time.perf_counter()
        response = await call_next(request)
        dur = time.perf_counter() - start

        # Matched route template keeps label cardinality bounded.
        route = request.scope.get("route")
        path = getattr(route, "path", "unmatched")
        method = request.method
        status = str(response.status_code)

        HTTP_REQUESTS_TOTAL.labels(self.service_name, method, path, status).inc()
        HTTP_REQUEST_LATENCY_SECONDS.labels(self.service_name, method, path, status).observe(dur)

        response.headers[self.header_name] = request_id
        return response


def observe_inference_latency(
    *, service_name: str, model_version: str, outcome: str, seconds: float
) -> None:
    MODEL_INFERENCE_LATENCY_SECONDS.labels(service_name, model_version, outcome).observe(seconds)


def audit_prediction_event(
    *,
    service_name: str,
    request_id: str,
    model_version: str,
    latency_ms: float,
    inputs: Sequence[float],
    output: Dict[str, Any],
) -> None:
    logger.bind(
        event="prediction",
        service=service_name,
        request_id=request_id,
        model_version=model_version,
        latency_ms=round(latency_ms, 3),
        inputs=list(inputs),
        output=output,
    ).info("prediction_served")

    MODEL_PREDICTIONS_TOTAL.labels(service_name, model_version, str(output.get("output"))).inc()
