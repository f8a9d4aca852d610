"""
AWS Textract client for document OCR.

boto3 is blocking, so calls are pushed to a worker thread to keep the event
loop free while Textract runs.
"""

import asyncio
import logging

import boto3

logger = logging.getLogger(__name__)


class TextractClient:
    def __init__(
        self,
        region: str,
        access_key_id: str,
        secret_access_key: str,
        client=None,
    ):
        self.region = region
        self.access_key_id = access_key_id
        self.secret_access_key = secret_access_key
        self._boto_client = client

    @property
    def client(self):
        # Created on first use so startup works without AWS credentials
        if self._boto_client is None:
            self._boto_client = boto3.client(
                "textract",
                region_name=self.region,
                aws_access_key_id=self.access_key_id,
                aws_secret_access_key=self.secret_access_key,
            )
        return self._boto_client

    def detect_document_text_sync(self, image_bytes: bytes) -> dict:
        response = self.client.detect_document_text(Document={"Bytes": image_bytes})
        logger.info(f"Textract returned {len(response.get('Blocks') or [])} blocks")
        return response

    async def detect_document_text(self, image_bytes: bytes) -> dict:
        """DetectDocumentText on raw image bytes; returns the Textract response."""
        return await asyncio.to_thread(self.detect_document_text_sync, image_bytes)
