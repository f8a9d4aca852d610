import logging
import time
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from . import metrics
from .config import Settings
from .cors import PreflightMiddleware
from .fal import FalClient
from .pipeline import PIPELINES, router as pipeline_router
from .pipeline.errors import InvalidInput, MediaWorkerError, MethodNotAllowed, ServerMisconfigured
from .pipeline.models import ErrorResponse
from .textract import TextractClient

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Worker starting up...")
    metrics.set_gauge("start_time", time.time())
    app.state.settings.log_summary()
    yield
    logger.info("Worker shutting down...")


def _error_response(status_code: int, message: str, headers: Optional[dict] = None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ErrorResponse(error=message).model_dump(), headers=headers)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or Settings.from_env()
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = FastAPI(title="mediaworker", version="1.0.0", lifespan=lifespan)
    app.state.settings = settings
    app.state.fal_client = FalClient(
        api_key=settings.fal_api_key,
        queue_url=settings.fal_queue_url,
        poll_interval=settings.fal_poll_interval,
    )
    app.state.textract_client = TextractClient(
        region=settings.aws_region,
        access_key_id=settings.aws_access_key_id,
        secret_access_key=settings.aws_secret_access_key,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["POST", "OPTIONS"],
        allow_headers=["Content-Type"],
    )
    # Added last so it runs before CORSMiddleware sees the OPTIONS request
    app.add_middleware(PreflightMiddleware, allow_origins=settings.cors_origins)

    def render_error(exc: MediaWorkerError, headers: Optional[dict] = None) -> JSONResponse:
        if isinstance(exc, ServerMisconfigured):
            metrics.inc_counter("errors.misconfigured")
        return _error_response(exc.status_code, exc.message, headers=headers)

    @app.exception_handler(MediaWorkerError)
    async def handle_worker_error(request: Request, exc: MediaWorkerError):
        return render_error(exc)

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError):
        first = exc.errors()[0] if exc.errors() else {}
        field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        if field and first.get("type") != "json_invalid":
            return render_error(InvalidInput(f"{field}: {first.get('msg')}"))
        return render_error(InvalidInput())

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_error(request: Request, exc: StarletteHTTPException):
        headers = getattr(exc, "headers", None)
        if exc.status_code == 405:
            return render_error(MethodNotAllowed(), headers=headers)
        return _error_response(exc.status_code, str(exc.detail), headers=headers)

    app.include_router(pipeline_router)

    @app.get("/health")
    def health_check():
        """Verify the worker is running and credentials are configured."""
        return {
            "status": "ok",
            "fal_api_key_set": not settings.missing_generation_credentials(),
            "aws_credentials_set": not settings.missing_ocr_credentials(),
            "pipelines": list(PIPELINES.keys()),
        }

    @app.get("/metrics")
    def metrics_endpoint():
        return metrics.get_snapshot()

    @app.get("/")
    def root():
        return {
            "name": "mediaworker",
            "endpoints": [f"/api/{name}" for name in PIPELINES] + ["/api/ocr"],
        }

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=app.state.settings.port)
