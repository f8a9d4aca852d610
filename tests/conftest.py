import pytest
from fastapi.testclient import TestClient
from unittest.mock import AsyncMock, Mock

from mediaworker import metrics
from mediaworker.config import Settings
from mediaworker.main import create_app
from mediaworker.pipeline.dependencies import get_generation_provider, get_ocr_provider


@pytest.fixture(autouse=True)
def clean_metrics():
    metrics.reset()
    yield
    metrics.reset()


@pytest.fixture
def settings():
    """Fully configured settings with the per-stage timeout disabled."""
    return Settings(
        fal_api_key="fal-test-key",
        aws_access_key_id="AKIATEST",
        aws_secret_access_key="secret",
        aws_region="us-east-1",
        stage_timeout=0,
    )


@pytest.fixture
def provider():
    """Generation provider whose subscribe() responses are set per test."""
    provider = Mock()
    provider.subscribe = AsyncMock()
    return provider


@pytest.fixture
def ocr_provider():
    provider = Mock()
    provider.detect_document_text = AsyncMock()
    return provider


def build_client(settings, provider, ocr_provider=None):
    app = create_app(settings)
    app.dependency_overrides[get_generation_provider] = lambda: provider
    app.dependency_overrides[get_ocr_provider] = lambda: ocr_provider
    return TestClient(app)


@pytest.fixture
def client(settings, provider, ocr_provider):
    return build_client(settings, provider, ocr_provider)


@pytest.fixture
def unconfigured_client(provider, ocr_provider):
    return build_client(Settings(), provider, ocr_provider)
