"""
Preset Library - fixed prompt augmentation and provider tuning constants.

Users only send a prompt; each pipeline stage appends a style suffix, sends a
negative prompt and pins its resolution / frame / step settings from here.
The values are product behavior and are kept verbatim.
"""

from enum import Enum


# ── fal.ai endpoints ─────────────────────────────────────────────────────────

TEXT_TO_IMAGE_ENDPOINT = "fal-ai/stable-diffusion-v35-large"
TEXT_TO_VIDEO_ENDPOINT = "fal-ai/wan/v2.2-5b/text-to-video"
IMAGE_TO_VIDEO_ENDPOINT = "fal-ai/wan/v2.2-5b/image-to-video"
VIDEO_TO_AUDIO_ENDPOINT = "fal-ai/mmaudio-v2"


# ── Style suffixes ───────────────────────────────────────────────────────────

class StylePreset(str, Enum):
    BOOK_ILLUSTRATION = "book-illustration"
    STORYBOOK_STILL = "storybook-still"
    CINEMATIC_MOTION = "cinematic-motion"
    GENTLE_ANIMATION = "gentle-animation"


STYLE_SUFFIXES = {
    StylePreset.BOOK_ILLUSTRATION: (
        ", cinematic, beautiful, book illustration, hyperrealistic, 4k, detailed"
    ),
    StylePreset.STORYBOOK_STILL: (
        ", beautiful book illustration, storybook art, soft lighting, "
        "highly detailed, 4k"
    ),
    StylePreset.CINEMATIC_MOTION: (
        ", cinematic, smooth camera movement, beautiful, hyperrealistic, 4k, detailed"
    ),
    StylePreset.GENTLE_ANIMATION: (
        ", gentle natural motion, subtle camera movement, cinematic, "
        "consistent with the source image"
    ),
}


# ── Negative prompts ─────────────────────────────────────────────────────────

class NegativePrompt(str, Enum):
    ANATOMY = "anatomy"
    STILL_IMAGE = "still-image"
    MOTION = "motion"


NEGATIVE_PROMPTS = {
    NegativePrompt.ANATOMY: (
        "distorted face, deformed hands, ugly, blurry, low quality, disfigured, deformed"
    ),
    NegativePrompt.STILL_IMAGE: (
        "distorted face, deformed hands, extra fingers, ugly, blurry, low quality, "
        "disfigured, deformed, watermark, text"
    ),
    NegativePrompt.MOTION: (
        "distorted face, deformed hands, ugly, blurry, low quality, disfigured, "
        "deformed, flickering, jitter, morphing"
    ),
}


# ── Audio prompts ────────────────────────────────────────────────────────────

AMBIENT_SCORE_PROMPT = "gentle ambient music, cinematic score"


# ── Tuning constants per stage ───────────────────────────────────────────────

# 121 frames at 24 fps is a 5 second clip
WIDESCREEN_VIDEO = {
    "aspect_ratio": "16:9",
    "num_frames": 121,
    "frames_per_second": 24,
    "resolution": "720p",
    "num_inference_steps": 50,
}

PORTRAIT_VIDEO = {
    "aspect_ratio": "9:16",
    "num_frames": 121,
    "frames_per_second": 24,
    "resolution": "720p",
    "num_inference_steps": 50,
}

ANIMATION_VIDEO = {
    "aspect_ratio": "auto",
    "num_frames": 121,
    "frames_per_second": 24,
    "resolution": "720p",
    "num_inference_steps": 40,
}

WIDESCREEN_IMAGE = {
    "image_size": "landscape_16_9",
    "num_inference_steps": 28,
    "guidance_scale": 3.5,
    "num_images": 1,
    "enable_safety_checker": True,
}


def style_suffix(preset: StylePreset) -> str:
    """Get the prompt suffix for a style preset. Raises if preset not found."""
    suffix = STYLE_SUFFIXES.get(preset)
    if suffix is None:
        raise ValueError(f"Unknown style preset: {preset}. Available: {[p.value for p in StylePreset]}")
    return suffix


def negative_prompt(preset: NegativePrompt) -> str:
    text = NEGATIVE_PROMPTS.get(preset)
    if text is None:
        raise ValueError(f"Unknown negative prompt: {preset}")
    return text
