"""
OCR: base64 image in, plain text out, via a single Textract call.
"""

import base64
import binascii
import logging
import re
from typing import Iterable, Optional, Protocol

from .errors import InvalidInput, ProviderError
from .models import OcrResult

logger = logging.getLogger(__name__)

# "data:image/png;base64," and friends
DATA_URL_PREFIX = re.compile(r"^data:[\w.+-]+/[\w.+-]+;base64,", re.IGNORECASE)


class OcrProvider(Protocol):
    async def detect_document_text(self, image_bytes: bytes) -> dict: ...


def decode_image_payload(payload: str) -> bytes:
    """Strip any data-URL prefix and decode the base64 body."""
    data = DATA_URL_PREFIX.sub("", payload.strip(), count=1)
    try:
        image_bytes = base64.b64decode(data, validate=False)
    except (binascii.Error, ValueError) as e:
        raise InvalidInput(f"Image payload is not valid base64: {e}")
    if not image_bytes:
        raise InvalidInput("No image provided.")
    return image_bytes


def assemble_text(blocks: Optional[Iterable[dict]]) -> str:
    """Join the text of every LINE block, in order, one per line."""
    lines = [
        block.get("Text") or ""
        for block in blocks or []
        if block.get("BlockType") == "LINE"
    ]
    return "\n".join(lines).strip()


class OcrService:
    def __init__(self, provider: OcrProvider):
        self.provider = provider

    async def extract_text(self, image_base64: str) -> OcrResult:
        image_bytes = decode_image_payload(image_base64)
        logger.info(f"Submitting {len(image_bytes)} bytes to OCR")

        try:
            response = await self.provider.detect_document_text(image_bytes)
        except Exception as e:
            logger.error(f"OCR provider error: {e}", exc_info=True)
            raise ProviderError(f"Failed to process image: {e}") from e

        return OcrResult(text=assemble_text(response.get("Blocks")))
