"""
FastAPI routes for the generation pipelines and OCR.

Generation Endpoints (body: {prompt, seed?} → {videoUrl|imageUrl, seed}):
  POST /api/video-with-audio           - text → silent video → audio
  POST /api/image                      - text → image
  POST /api/video                      - text → silent video
  POST /api/image-to-video             - text → image → video
  POST /api/animated-video-with-audio  - text → image → video → audio

OCR Endpoint (body: {imageBase64} → {text}):
  POST /api/ocr

Each generation route is a thin binding of one PipelineDefinition.
"""

import logging
import time
from typing import Optional

from fastapi import APIRouter, Depends

from .definitions import get_pipeline
from .dependencies import get_executor, get_ocr_service, get_settings
from .errors import InvalidInput, MediaWorkerError, ServerMisconfigured
from .models import (
    GenerationBody,
    GenerationRequest,
    GenerationResponse,
    OcrBody,
    OcrResult,
)
from .ocr import OcrService
from .orchestrator import PipelineExecutor
from .. import metrics
from ..config import Settings

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["pipeline"])


def _require_credentials(missing: list, message: str):
    if missing:
        logger.error(f"{message} Missing: {', '.join(missing)}")
        raise ServerMisconfigured(message, detail=", ".join(missing))


def _generation_request(body: Optional[GenerationBody]) -> GenerationRequest:
    prompt = body.prompt if body else None
    if not prompt or not prompt.strip():
        raise InvalidInput("No prompt provided.")
    return GenerationRequest(prompt=prompt, seed=body.seed)


async def _run_generation(
    name: str,
    body: Optional[GenerationBody],
    settings: Settings,
    executor: PipelineExecutor,
) -> dict:
    definition = get_pipeline(name)
    metrics.inc_counter(f"requests.{definition.name}")
    _require_credentials(
        settings.missing_generation_credentials(),
        "Generation provider credentials are not configured on the server.",
    )
    request = _generation_request(body)

    start = time.perf_counter()
    try:
        result = await executor.run(definition, request)
    except MediaWorkerError as e:
        metrics.inc_counter(f"failures.{definition.name}")
        metrics.record_error(definition.name, type(e).__name__, e.message)
        logger.error(f"[{definition.name}] Pipeline failed: {e!r}")
        raise
    finally:
        metrics.record_latency(f"endpoint.{definition.name}", (time.perf_counter() - start) * 1000)

    logger.info(f"[{definition.name}] Pipeline complete: {result.artifact.url} (seed={result.seed})")
    return {definition.output_field.value: result.artifact.url, "seed": result.seed}


# ═════════════════════════════════════════════════════════════════════════════
# Generation
# ═════════════════════════════════════════════════════════════════════════════

@router.post("/video-with-audio", response_model=GenerationResponse, response_model_exclude_unset=True)
async def generate_video_with_audio(
    body: Optional[GenerationBody] = None,
    settings: Settings = Depends(get_settings),
    executor: PipelineExecutor = Depends(get_executor),
):
    """Silent text-to-video, then an ambient soundtrack over it."""
    return await _run_generation("video-with-audio", body, settings, executor)


@router.post("/image", response_model=GenerationResponse, response_model_exclude_unset=True)
async def generate_image(
    body: Optional[GenerationBody] = None,
    settings: Settings = Depends(get_settings),
    executor: PipelineExecutor = Depends(get_executor),
):
    return await _run_generation("image", body, settings, executor)


@router.post("/video", response_model=GenerationResponse, response_model_exclude_unset=True)
async def generate_video(
    body: Optional[GenerationBody] = None,
    settings: Settings = Depends(get_settings),
    executor: PipelineExecutor = Depends(get_executor),
):
    return await _run_generation("video", body, settings, executor)


@router.post("/image-to-video", response_model=GenerationResponse, response_model_exclude_unset=True)
async def generate_image_to_video(
    body: Optional[GenerationBody] = None,
    settings: Settings = Depends(get_settings),
    executor: PipelineExecutor = Depends(get_executor),
):
    """Still image first, then animated with the same seed."""
    return await _run_generation("image-to-video", body, settings, executor)


@router.post(
    "/animated-video-with-audio",
    response_model=GenerationResponse,
    response_model_exclude_unset=True,
)
async def generate_animated_video_with_audio(
    body: Optional[GenerationBody] = None,
    settings: Settings = Depends(get_settings),
    executor: PipelineExecutor = Depends(get_executor),
):
    """Still image, animated with the image's seed, then a soundtrack."""
    return await _run_generation("animated-video-with-audio", body, settings, executor)


# ═════════════════════════════════════════════════════════════════════════════
# OCR
# ═════════════════════════════════════════════════════════════════════════════

@router.post("/ocr", response_model=OcrResult)
async def extract_text(
    body: Optional[OcrBody] = None,
    settings: Settings = Depends(get_settings),
    service: OcrService = Depends(get_ocr_service),
):
    """Extract the text lines from an uploaded image."""
    metrics.inc_counter("requests.ocr")
    _require_credentials(
        settings.missing_ocr_credentials(),
        "OCR provider credentials are not configured on the server.",
    )
    if body is None or not body.imageBase64:
        raise InvalidInput("No image provided.")

    start = time.perf_counter()
    try:
        return await service.extract_text(body.imageBase64)
    except MediaWorkerError as e:
        metrics.inc_counter("failures.ocr")
        metrics.record_error("ocr", type(e).__name__, e.message)
        raise
    finally:
        metrics.record_latency("endpoint.ocr", (time.perf_counter() - start) * 1000)
