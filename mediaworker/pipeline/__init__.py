"""
Generation Pipeline

Declarative multi-stage orchestration over hosted inference providers:
  video-with-audio           - text→video → video→audio
  image                      - text→image
  video                      - text→video
  image-to-video             - text→image → image→video
  animated-video-with-audio  - text→image → image→video → video→audio
plus single-call OCR.
"""

from .definitions import PIPELINES, get_pipeline
from .errors import StageFailure
from .models import ArtifactReference, GenerationRequest, PipelineDefinition
from .orchestrator import PipelineExecutor
from .routes import router

__all__ = [
    "PIPELINES",
    "get_pipeline",
    "StageFailure",
    "ArtifactReference",
    "GenerationRequest",
    "PipelineDefinition",
    "PipelineExecutor",
    "router",
]
