import base64

import pytest
from unittest.mock import AsyncMock, Mock, patch

from mediaworker.pipeline.errors import InvalidInput, ProviderError
from mediaworker.pipeline.ocr import OcrService, assemble_text, decode_image_payload
from mediaworker.textract import TextractClient

PNG_HEADER = b"\x89PNG\r\n\x1a\n"


class TestDecodeImagePayload:

    def test_data_url(self):
        payload = "data:image/png;base64," + base64.b64encode(PNG_HEADER).decode()
        assert decode_image_payload(payload) == PNG_HEADER

    def test_raw_base64(self):
        assert decode_image_payload(base64.b64encode(PNG_HEADER).decode()) == PNG_HEADER

    @pytest.mark.parametrize("mime", ["image/jpeg", "image/svg+xml", "application/pdf"])
    def test_any_mime_prefix_is_stripped(self, mime):
        payload = f"data:{mime};base64," + base64.b64encode(b"doc").decode()
        assert decode_image_payload(payload) == b"doc"

    def test_invalid_base64(self):
        with pytest.raises(InvalidInput):
            decode_image_payload("abc")

    def test_prefix_only(self):
        with pytest.raises(InvalidInput):
            decode_image_payload("data:image/png;base64,")


class TestAssembleText:

    def test_only_line_blocks_joined(self):
        blocks = [
            {"BlockType": "LINE", "Text": "A"},
            {"BlockType": "WORD", "Text": "x"},
            {"BlockType": "LINE", "Text": "B"},
        ]
        assert assemble_text(blocks) == "A\nB"

    def test_result_is_trimmed(self):
        blocks = [
            {"BlockType": "LINE", "Text": "  title"},
            {"BlockType": "LINE", "Text": "body  "},
        ]
        assert assemble_text(blocks) == "title\nbody"

    @pytest.mark.parametrize("blocks", [None, [], [{"BlockType": "PAGE"}]])
    def test_no_lines(self, blocks):
        assert assemble_text(blocks) == ""


class TestOcrService:

    @pytest.mark.asyncio
    async def test_extract_text(self):
        provider = Mock()
        provider.detect_document_text = AsyncMock(return_value={
            "Blocks": [{"BlockType": "LINE", "Text": "hello"}],
        })

        result = await OcrService(provider).extract_text(base64.b64encode(b"img").decode())

        assert result.text == "hello"
        provider.detect_document_text.assert_awaited_once_with(b"img")

    @pytest.mark.asyncio
    async def test_missing_blocks_key(self):
        provider = Mock()
        provider.detect_document_text = AsyncMock(return_value={})

        result = await OcrService(provider).extract_text("aW1n")

        assert result.text == ""

    @pytest.mark.asyncio
    async def test_provider_failure_is_wrapped(self):
        provider = Mock()
        provider.detect_document_text = AsyncMock(side_effect=RuntimeError("throttled"))

        with pytest.raises(ProviderError) as exc_info:
            await OcrService(provider).extract_text("aW1n")

        assert exc_info.value.message == "Failed to process image: throttled"
        assert exc_info.value.status_code == 500


class TestTextractClient:

    @pytest.mark.asyncio
    async def test_sends_bytes_as_document(self):
        boto_client = Mock()
        boto_client.detect_document_text.return_value = {"Blocks": []}
        client = TextractClient("us-east-1", "AKIA", "secret", client=boto_client)

        response = await client.detect_document_text(b"bytes")

        assert response == {"Blocks": []}
        boto_client.detect_document_text.assert_called_once_with(Document={"Bytes": b"bytes"})

    def test_boto_client_created_lazily_with_credentials(self):
        with patch("mediaworker.textract.boto3.client") as mock_factory:
            client = TextractClient("eu-west-1", "AKIA", "secret")
            mock_factory.assert_not_called()

            assert client.client is mock_factory.return_value
            client.client
            mock_factory.assert_called_once_with(
                "textract",
                region_name="eu-west-1",
                aws_access_key_id="AKIA",
                aws_secret_access_key="secret",
            )
