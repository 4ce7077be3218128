"""Pytest fixtures and shared test configuration.

Provides reusable fixtures for unit and integration tests.

Fixtures:
    - model_info: Model descriptor used in generation requests
    - make_request: Factory for StreamingRequest with overrides
    - callbacks: StreamingCallbacks backed by MagicMock sinks
    - generation_service: AsyncMock stand-in for the generation service
    - mock_http: MagicMock HttpClient with AsyncMock verbs
    - backend_app: Fresh in-process fake backend
    - http_client: HttpClient wired to the fake backend over ASGI
"""

from collections.abc import AsyncGenerator, Callable
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from src.client.config import ClientConfig
from src.client.http_client import HttpClient
from src.models.schemas import ModelInfo, StreamingCallbacks, StreamingRequest
from tests.integration.fake_backend import create_fake_backend


@pytest.fixture
def model_info() -> ModelInfo:
    """Return a model descriptor for test requests."""
    return ModelInfo(
        name="test-model",
        provider="test-provider",
        provider_id="test-provider-id",
        server_name="test-server",
        server_id="test-server-id",
    )


@pytest.fixture
def make_request(model_info: ModelInfo) -> Callable[..., StreamingRequest]:
    """Return a factory building StreamingRequest with optional overrides."""

    def factory(**overrides: Any) -> StreamingRequest:
        fields: dict[str, Any] = {
            "prompt": "Test prompt",
            "conversation_type": "chat",
            "conversation_id": None,
            "selected_model": model_info,
            "use_streaming": True,
        }
        fields.update(overrides)
        return StreamingRequest(**fields)

    return factory


@pytest.fixture
def callbacks() -> StreamingCallbacks:
    """Return callbacks whose sinks record every call."""
    return StreamingCallbacks(on_chunk=MagicMock(), on_conversation_id=MagicMock())


@pytest.fixture
def generation_service() -> MagicMock:
    """Return a generation service whose calls resolve immediately."""
    service = MagicMock()
    service.send_prompt = AsyncMock(return_value=None)
    service.cancel_generation = AsyncMock(return_value=None)
    return service


@pytest.fixture
def mock_http() -> MagicMock:
    """Return an HttpClient stand-in with awaitable verbs."""
    http = MagicMock(spec=HttpClient)
    http.get = AsyncMock()
    http.post = AsyncMock()
    http.put = AsyncMock()
    http.delete = AsyncMock(return_value={})
    return http


@pytest.fixture
def backend_app() -> FastAPI:
    """Create a fresh fake backend per test."""
    return create_fake_backend()


@pytest.fixture
async def http_client(backend_app: FastAPI) -> AsyncGenerator[HttpClient]:
    """Create an HttpClient talking to the fake backend.

    Yields:
        HttpClient whose transport is the ASGI app, authenticated with a test token.
    """
    transport = ASGITransport(app=backend_app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield HttpClient(
            ClientConfig(api_base_url="http://test", api_token="test-token"),
            client=client,
        )
