"""
Data types for the generation pipeline: request bodies, artifacts, stage and
pipeline definitions.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional

from pydantic import BaseModel, Field, StrictInt


# ── Stage kinds ──────────────────────────────────────────────────────────────

class StageKind(str, Enum):
    TEXT_TO_IMAGE = "text_to_image"
    TEXT_TO_VIDEO = "text_to_video"
    IMAGE_TO_VIDEO = "image_to_video"
    VIDEO_TO_AUDIO = "video_to_audio"


class OutputField(str, Enum):
    VIDEO_URL = "videoUrl"
    IMAGE_URL = "imageUrl"


# ── Per-request values ───────────────────────────────────────────────────────

@dataclass(frozen=True)
class GenerationRequest:
    prompt: str
    seed: Optional[int] = None


@dataclass(frozen=True)
class ArtifactReference:
    """URL of the latest media object a stage produced, plus its seed."""
    url: str
    seed: Optional[int] = None


@dataclass(frozen=True)
class PipelineResult:
    artifact: ArtifactReference
    seed: Optional[int] = None


# ── Declarative pipeline ─────────────────────────────────────────────────────

InputMapper = Callable[[Optional[ArtifactReference], GenerationRequest, Optional[int], dict], dict]
OutputExtractor = Callable[[Any], Optional[ArtifactReference]]


@dataclass(frozen=True)
class StageSpec:
    """
    One call to one provider endpoint.

    ``input_mapper`` receives the prior stage's artifact (None for the first
    stage), the request, and the seed to forward (None when the stage does
    not accept one or no seed exists yet), and a fresh dict of the stage's
    ``options``. Options are stored as a tuple of pairs so the stage, and any
    definition holding it, stays immutable and hashable.
    """
    provider_id: str
    kind: StageKind
    input_mapper: InputMapper
    output_extractor: OutputExtractor
    failure_message: str
    accepts_seed: bool = True
    options: tuple = ()

    def build_input(
        self,
        prior: Optional[ArtifactReference],
        request: GenerationRequest,
        seed: Optional[int],
    ) -> dict:
        return self.input_mapper(
            prior, request, seed if self.accepts_seed else None, dict(self.options)
        )


@dataclass(frozen=True)
class PipelineDefinition:
    name: str
    output_field: OutputField
    stages: tuple

    def __post_init__(self):
        if not self.stages:
            raise ValueError(f"Pipeline '{self.name}' has no stages")


# ── API Request / Response Models ────────────────────────────────────────────

class GenerationBody(BaseModel):
    """Body of every generation endpoint. Presence of prompt is checked by the handler."""
    prompt: Optional[str] = Field(None, description="Text description of the media to generate")
    seed: Optional[StrictInt] = Field(None, description="Determinism token forwarded to the first stage")

    model_config = {
        "json_schema_extra": {
            "example": {"prompt": "a castle on a hill at dawn", "seed": 7}
        }
    }


class GenerationResponse(BaseModel):
    videoUrl: Optional[str] = None
    imageUrl: Optional[str] = None
    seed: Optional[int] = None


class OcrBody(BaseModel):
    imageBase64: Optional[str] = Field(
        None, description="Data URL or raw base64 image payload"
    )


class OcrResult(BaseModel):
    text: str


class ErrorResponse(BaseModel):
    error: str
