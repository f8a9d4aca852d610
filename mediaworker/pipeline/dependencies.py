"""
FastAPI dependencies. Everything is built once in create_app and read from
app.state; tests swap providers through app.dependency_overrides.
"""

from fastapi import Depends, Request

from .ocr import OcrService
from .orchestrator import GenerationProvider, PipelineExecutor
from ..config import Settings


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_generation_provider(request: Request) -> GenerationProvider:
    return request.app.state.fal_client


def get_ocr_provider(request: Request):
    return request.app.state.textract_client


def get_executor(
    settings: Settings = Depends(get_settings),
    provider: GenerationProvider = Depends(get_generation_provider),
) -> PipelineExecutor:
    return PipelineExecutor(provider, stage_timeout=settings.stage_timeout)


def get_ocr_service(provider=Depends(get_ocr_provider)) -> OcrService:
    return OcrService(provider)
