"""
The five product pipelines. Each HTTP endpoint binds to exactly one of these.
"""

from .models import OutputField, PipelineDefinition
from .stages import image_to_video, text_to_image, text_to_video, video_to_audio
from ..presets import (
    AMBIENT_SCORE_PROMPT,
    ANIMATION_VIDEO,
    IMAGE_TO_VIDEO_ENDPOINT,
    PORTRAIT_VIDEO,
    TEXT_TO_IMAGE_ENDPOINT,
    TEXT_TO_VIDEO_ENDPOINT,
    VIDEO_TO_AUDIO_ENDPOINT,
    WIDESCREEN_IMAGE,
    WIDESCREEN_VIDEO,
    NegativePrompt,
    StylePreset,
)


VIDEO_WITH_AUDIO = PipelineDefinition(
    name="video-with-audio",
    output_field=OutputField.VIDEO_URL,
    stages=(
        text_to_video(
            TEXT_TO_VIDEO_ENDPOINT,
            StylePreset.BOOK_ILLUSTRATION,
            NegativePrompt.ANATOMY,
            WIDESCREEN_VIDEO,
        ),
        video_to_audio(VIDEO_TO_AUDIO_ENDPOINT, AMBIENT_SCORE_PROMPT),
    ),
)

IMAGE = PipelineDefinition(
    name="image",
    output_field=OutputField.IMAGE_URL,
    stages=(
        text_to_image(
            TEXT_TO_IMAGE_ENDPOINT,
            StylePreset.STORYBOOK_STILL,
            NegativePrompt.STILL_IMAGE,
            WIDESCREEN_IMAGE,
            failure_message="The image response did not contain a valid image URL.",
        ),
    ),
)

# Same provider as the first stage of VIDEO_WITH_AUDIO; differs in aspect
# ratio and prompt augmentation.
VIDEO = PipelineDefinition(
    name="video",
    output_field=OutputField.VIDEO_URL,
    stages=(
        text_to_video(
            TEXT_TO_VIDEO_ENDPOINT,
            StylePreset.CINEMATIC_MOTION,
            NegativePrompt.MOTION,
            PORTRAIT_VIDEO,
            failure_message="The video response did not contain a valid video URL.",
        ),
    ),
)

IMAGE_TO_VIDEO = PipelineDefinition(
    name="image-to-video",
    output_field=OutputField.VIDEO_URL,
    stages=(
        text_to_image(
            TEXT_TO_IMAGE_ENDPOINT,
            StylePreset.STORYBOOK_STILL,
            NegativePrompt.STILL_IMAGE,
            WIDESCREEN_IMAGE,
        ),
        image_to_video(
            IMAGE_TO_VIDEO_ENDPOINT,
            StylePreset.GENTLE_ANIMATION,
            NegativePrompt.MOTION,
            ANIMATION_VIDEO,
        ),
    ),
)

ANIMATED_VIDEO_WITH_AUDIO = PipelineDefinition(
    name="animated-video-with-audio",
    output_field=OutputField.VIDEO_URL,
    stages=(
        text_to_image(
            TEXT_TO_IMAGE_ENDPOINT,
            StylePreset.STORYBOOK_STILL,
            NegativePrompt.STILL_IMAGE,
            WIDESCREEN_IMAGE,
        ),
        image_to_video(
            IMAGE_TO_VIDEO_ENDPOINT,
            StylePreset.GENTLE_ANIMATION,
            NegativePrompt.MOTION,
            ANIMATION_VIDEO,
        ),
        video_to_audio(VIDEO_TO_AUDIO_ENDPOINT, AMBIENT_SCORE_PROMPT),
    ),
)


PIPELINES = {
    definition.name: definition
    for definition in (
        VIDEO_WITH_AUDIO,
        IMAGE,
        VIDEO,
        IMAGE_TO_VIDEO,
        ANIMATED_VIDEO_WITH_AUDIO,
    )
}


def get_pipeline(name: str) -> PipelineDefinition:
    definition = PIPELINES.get(name)
    if definition is None:
        raise ValueError(f"Unknown pipeline: {name}. Available: {list(PIPELINES.keys())}")
    return definition
