"""API test fixtures."""

from __future__ import annotations

from collections.abc import AsyncGenerator, Iterator
from unittest.mock import AsyncMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from httpx import ASGITransport, AsyncClient

from taskhub.api import create_app
from taskhub.config import Settings
from taskhub.container import AppContainer
from taskhub.repositories import InMemoryTaskRepository


@pytest.fixture
def mock_queue_publisher() -> AsyncMock:
    """Queue publisher double for response mirroring."""
    publisher = AsyncMock()
    publisher.send = AsyncMock()
    publisher.close = AsyncMock()
    return publisher


@pytest.fixture
def container(
    settings: Settings,
    repository: InMemoryTaskRepository,
    mock_event_publisher: AsyncMock,
    mock_queue_publisher: AsyncMock,
) -> AppContainer:
    """Container over an in-memory store and mock publishers."""
    return AppContainer(
        settings=settings,
        repository=repository,
        event_publisher=mock_event_publisher,
        queue_publisher=mock_queue_publisher,
    )


@pytest.fixture
def app(container: AppContainer) -> FastAPI:
    """Create test FastAPI app with injected dependencies."""
    return create_app(container=container)


@pytest.fixture
def client(app: FastAPI) -> Iterator[TestClient]:
    """Create test client (runs startup and shutdown)."""
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client


@pytest.fixture
async def async_client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Create async test client."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac
