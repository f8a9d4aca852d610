"""
PipelineExecutor - runs one PipelineDefinition for one request.

Stages execute strictly in definition order. The running seed starts as the
client-supplied seed and is overwritten by any seed a stage returns; stages
that accept a seed receive the running value. The first failing stage aborts
the run: no later stage is invoked and no partial artifact is returned.
"""

import asyncio
import logging
import time
from typing import Optional, Protocol

from .errors import StageFailure
from .models import (
    ArtifactReference,
    GenerationRequest,
    PipelineDefinition,
    PipelineResult,
    StageSpec,
)
from .. import metrics

logger = logging.getLogger(__name__)


class GenerationProvider(Protocol):
    async def subscribe(self, endpoint: str, arguments: dict) -> dict: ...


class PipelineExecutor:
    """
    Usage:
        executor = PipelineExecutor(fal_client, stage_timeout=600)
        result = await executor.run(VIDEO_WITH_AUDIO, GenerationRequest("a castle"))
    """

    def __init__(self, provider: GenerationProvider, stage_timeout: Optional[float] = None):
        self.provider = provider
        self.stage_timeout = stage_timeout or None

    async def run(
        self,
        definition: PipelineDefinition,
        request: GenerationRequest,
    ) -> PipelineResult:
        current: Optional[ArtifactReference] = None
        seed = request.seed
        total = len(definition.stages)

        for index, stage in enumerate(definition.stages, start=1):
            logger.info(
                f"[{definition.name}] Stage {index}/{total}: {stage.kind.value} "
                f"via {stage.provider_id} (seed={seed if stage.accepts_seed else '-'})"
            )
            current = await self._run_stage(stage, current, request, seed)
            if current.seed is not None:
                seed = current.seed
            logger.info(f"[{definition.name}] Stage {index}/{total} done: seed={seed}")

        return PipelineResult(artifact=current, seed=seed)

    async def _run_stage(
        self,
        stage: StageSpec,
        prior: Optional[ArtifactReference],
        request: GenerationRequest,
        seed: Optional[int],
    ) -> ArtifactReference:
        arguments = stage.build_input(prior, request, seed)
        start = time.perf_counter()

        try:
            call = self.provider.subscribe(stage.provider_id, arguments)
            if self.stage_timeout:
                response = await asyncio.wait_for(call, timeout=self.stage_timeout)
            else:
                response = await call
        except asyncio.TimeoutError as e:
            metrics.inc_counter("errors.stage_timeout")
            limit = f" within {self.stage_timeout:g}s" if self.stage_timeout else ""
            raise StageFailure(
                stage.provider_id, f"{stage.provider_id} did not finish{limit}."
            ) from e
        except Exception as e:
            metrics.inc_counter("errors.stage_provider")
            logger.error(f"Stage {stage.provider_id} failed: {e}", exc_info=True)
            raise StageFailure(stage.provider_id, str(e) or stage.failure_message) from e
        finally:
            metrics.record_latency(
                f"stage.{stage.provider_id}", (time.perf_counter() - start) * 1000
            )

        artifact = stage.output_extractor(response)
        if artifact is None:
            metrics.inc_counter("errors.stage_missing_url")
            logger.error(f"Stage {stage.provider_id} returned no media URL: {response}")
            raise StageFailure(stage.provider_id, stage.failure_message)
        return artifact
