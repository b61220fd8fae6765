"""
Pytest configuration and fixtures
"""

from __future__ import annotations

from datetime import UTC, datetime
from unittest.mock import AsyncMock

import pytest

from taskhub.config import APISettings, QueueSettings, Settings, StorageSettings
from taskhub.domain.task import Task
from taskhub.repositories import InMemoryTaskRepository


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep host environment variables out of settings."""
    for name in (
        "API_ENVIRONMENT",
        "API_API_PREFIX",
        "STORAGE_MONGODB_URL",
        "QUEUE_REDIS_URL",
        "QUEUE_NAME",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def settings() -> Settings:
    """Settings selecting in-memory storage and no queue."""
    return Settings(
        api=APISettings(_env_file=None),
        storage=StorageSettings(_env_file=None),
        queue=QueueSettings(_env_file=None),
    )


@pytest.fixture
def queue_settings() -> Settings:
    """Settings with the event queue enabled."""
    return Settings(
        api=APISettings(_env_file=None),
        storage=StorageSettings(_env_file=None),
        queue=QueueSettings(
            _env_file=None,
            redis_url="redis://localhost:6379/0",
            name="task-events",
        ),
    )


@pytest.fixture
def sample_task() -> Task:
    """A persisted-looking task with fixed timestamps."""
    created = datetime(2024, 1, 1, 12, 0, 0, tzinfo=UTC)
    return Task(
        id="task-1",
        title="Write report",
        description="Quarterly numbers",
        completed=False,
        created_at=created,
        updated_at=created,
    )


@pytest.fixture
def repository() -> InMemoryTaskRepository:
    """Empty in-memory repository."""
    return InMemoryTaskRepository()


@pytest.fixture
def mock_event_publisher() -> AsyncMock:
    """Task event publisher double recording every call."""
    publisher = AsyncMock()
    publisher.publish_created = AsyncMock()
    publisher.publish_updated = AsyncMock()
    publisher.publish_deleted = AsyncMock()
    publisher.close = AsyncMock()
    return publisher
