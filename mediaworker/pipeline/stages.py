"""
Stage factories for the four provider call kinds.

Each factory returns a StageSpec whose input mapper builds the provider
payload from the request / prior artifact plus the fixed preset values, and
whose output extractor pulls the media URL (and seed) from a fixed path in
the provider response.
"""

from typing import Any, Optional

from .models import ArtifactReference, GenerationRequest, StageKind, StageSpec
from ..presets import NegativePrompt, StylePreset, negative_prompt, style_suffix


# ── Output extraction ────────────────────────────────────────────────────────

def _coerce_seed(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str) and value.strip().lstrip("-").isdigit():
        return int(value)
    return None


def extract_video(response: Any) -> Optional[ArtifactReference]:
    """``response.video.url``"""
    if not isinstance(response, dict):
        return None
    video = response.get("video")
    url = video.get("url") if isinstance(video, dict) else None
    if not url or not isinstance(url, str):
        return None
    return ArtifactReference(url=url, seed=_coerce_seed(response.get("seed")))


def extract_first_image(response: Any) -> Optional[ArtifactReference]:
    """``response.images[0].url``"""
    if not isinstance(response, dict):
        return None
    images = response.get("images")
    if not images or not isinstance(images, list) or not isinstance(images[0], dict):
        return None
    url = images[0].get("url")
    if not url or not isinstance(url, str):
        return None
    return ArtifactReference(url=url, seed=_coerce_seed(response.get("seed")))


# ── Input mapping helpers ────────────────────────────────────────────────────

def _with_seed(payload: dict, seed: Optional[int]) -> dict:
    if seed is not None:
        payload["seed"] = seed
    return payload


def _require_prior(prior: Optional[ArtifactReference], kind: StageKind) -> ArtifactReference:
    # A definition that puts a media-input stage first is a programming error
    if prior is None:
        raise ValueError(f"{kind.value} stage needs the output of a previous stage")
    return prior


# ── Stage factories ──────────────────────────────────────────────────────────

def text_to_image(
    endpoint: str,
    style: StylePreset,
    negative: NegativePrompt,
    options: dict,
    failure_message: str = "Failed to generate the base image.",
) -> StageSpec:
    suffix = style_suffix(style)
    negative_text = negative_prompt(negative)

    def build(prior, request: GenerationRequest, seed, options: dict):
        payload = {
            "prompt": f"{request.prompt}{suffix}",
            "negative_prompt": negative_text,
            **options,
        }
        return _with_seed(payload, seed)

    return StageSpec(
        provider_id=endpoint,
        kind=StageKind.TEXT_TO_IMAGE,
        input_mapper=build,
        output_extractor=extract_first_image,
        failure_message=failure_message,
        options=tuple(options.items()),
    )


def text_to_video(
    endpoint: str,
    style: StylePreset,
    negative: NegativePrompt,
    options: dict,
    failure_message: str = "Failed to generate the base (silent) video.",
) -> StageSpec:
    suffix = style_suffix(style)
    negative_text = negative_prompt(negative)

    def build(prior, request: GenerationRequest, seed, options: dict):
        payload = {
            "prompt": f"{request.prompt}{suffix}",
            **options,
            "negative_prompt": negative_text,
        }
        return _with_seed(payload, seed)

    return StageSpec(
        provider_id=endpoint,
        kind=StageKind.TEXT_TO_VIDEO,
        input_mapper=build,
        output_extractor=extract_video,
        failure_message=failure_message,
        options=tuple(options.items()),
    )


def image_to_video(
    endpoint: str,
    style: StylePreset,
    negative: NegativePrompt,
    options: dict,
    failure_message: str = "Failed to animate the generated image.",
) -> StageSpec:
    suffix = style_suffix(style)
    negative_text = negative_prompt(negative)

    def build(prior, request: GenerationRequest, seed, options: dict):
        source = _require_prior(prior, StageKind.IMAGE_TO_VIDEO)
        payload = {
            "image_url": source.url,
            "prompt": f"{request.prompt}{suffix}",
            "negative_prompt": negative_text,
            **options,
        }
        return _with_seed(payload, seed)

    return StageSpec(
        provider_id=endpoint,
        kind=StageKind.IMAGE_TO_VIDEO,
        input_mapper=build,
        output_extractor=extract_video,
        failure_message=failure_message,
        options=tuple(options.items()),
    )


def video_to_audio(
    endpoint: str,
    audio_prompt: str,
    failure_message: str = "The audio response did not contain a valid video URL.",
) -> StageSpec:
    """The audio model describes sound, not the scene, so the user prompt is not sent."""

    def build(prior, request: GenerationRequest, seed, options: dict):
        source = _require_prior(prior, StageKind.VIDEO_TO_AUDIO)
        return {"video_url": source.url, **options}

    return StageSpec(
        provider_id=endpoint,
        kind=StageKind.VIDEO_TO_AUDIO,
        input_mapper=build,
        output_extractor=extract_video,
        failure_message=failure_message,
        accepts_seed=False,
        options=(("prompt", audio_prompt),),
    )
