import time
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import PlainTextResponse
from loguru import logger
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from pydantic import ValidationError
from starlette.responses import Response

from . import __version__
from .config import Settings, load_settings
from .observability import (
    RequestContextMiddleware,
    audit_prediction_event,
    observe_inference_latency,
    setup_logging,
)
from .schemas import FEATURES_ADAPTER, HealthResponse, Prediction
from .training import train_model


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or load_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Runs before uvicorn binds the socket.
        app.state.model = train_model(settings)
        logger.info("Server is running on port {}", settings.port)
        yield
        app.state.model = None

    app = FastAPI(title="Model App", version=__version__, lifespan=lifespan)
    app.state.settings = settings
    app.state.model = None
    app.add_middleware(RequestContextMiddleware, service_name=settings.service_name)

    @app.exception_handler(RequestValidationError)
    async def invalid_input_handler(request: Request, exc: RequestValidationError):
        logger.bind(
            request_id=getattr(request.state, "request_id", "unknown"),
            path=request.url.path,
            errors=len(exc.errors()),
        ).warning("invalid_input")
        return PlainTextResponse("Invalid input", status_code=400)

    @app.get("/health", response_model=HealthResponse)
    def health_check(request: Request):
        model = request.app.state.model
        if model is None:
            raise HTTPException(status_code=500, detail="Model not loaded")
        return HealthResponse(
            status="ok",
            model_version=settings.model_version,
            num_labels=model.num_labels,
        )

    @app.get("/metrics")
    def metrics():
        # Prometheus scrape endpoint
        return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)

    @app.post("/predict", response_model=Prediction)
    async def predict(request: Request):
        # Decode the raw body whatever the Content-Type says.
        try:
            features = FEATURES_ADAPTER.validate_json(await request.body())
        except ValidationError as exc:
            raise RequestValidationError(exc.errors()) from exc

        model = request.app.state.model
        if model is None:
            raise HTTPException(status_code=500, detail="Model not loaded")

        start = time.perf_counter()
        label = model.predict(features)
        infer_seconds = time.perf_counter() - start

        observe_inference_latency(
            service_name=settings.service_name,
            model_version=settings.model_version,
            outcome="success",
            seconds=infer_seconds,
        )
        audit_prediction_event(
            service_name=settings.service_name,
            request_id=getattr(request.state, "request_id", "unknown"),
            model_version=settings.model_version,
            latency_ms=infer_seconds * 1000.0,
            inputs=features,
            output={"output": label},
        )
        return Prediction(input=features, output=label)

    return app


def main() -> None:
    settings = load_settings()
    setup_logging(settings.log_level)
    # uvicorn exits non-zero on bind failure
    uvicorn.run(
        "model_app.main:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
    )
