"""Dependency injection root.

Builds every shared dependency once at process start:
- TaskRepository (MongoDB or in-memory)
- TaskEventPublisher (Redis queue or no-op)
- QueuePublisher for response mirroring and queued task requests (Redis queue or no-op)
- TaskService and TaskRequestService
- ShutdownCoordinator over all closable resources

The container is passed explicitly to each front; there is no global
instance.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import structlog

from taskhub.config import QueueSettings, Settings, StorageSettings
from taskhub.domain.interfaces import (
    Closable,
    QueuePublisher,
    TaskEventPublisher,
    TaskRepository,
)
from taskhub.lifecycle import ShutdownCoordinator
from taskhub.messaging import (
    NoopQueuePublisher,
    NoopTaskEventPublisher,
    RedisQueuePublisher,
    RedisQueueSender,
    RedisTaskEventPublisher,
)
from taskhub.repositories import InMemoryTaskRepository, MongoConnection, MongoTaskRepository
from taskhub.services import TaskRequestService, TaskService

logger = structlog.get_logger()


def build_repository(settings: StorageSettings) -> TaskRepository:
    """Select the task repository from storage settings.

    Args:
        settings: Storage settings

    Returns:
        MongoTaskRepository if a connection string is set, else in-memory
    """
    if settings.uses_document_store:
        assert settings.mongodb_url is not None
        logger.info("task_storage_selected", backend="mongodb", database=settings.database)
        connection = MongoConnection(
            url=settings.mongodb_url,
            database=settings.database,
            collection=settings.collection,
            server_selection_timeout_ms=settings.server_selection_timeout_ms,
        )
        return MongoTaskRepository(connection)

    logger.info("task_storage_selected", backend="memory")
    return InMemoryTaskRepository()


def build_event_publisher(settings: QueueSettings) -> TaskEventPublisher:
    """Select the task event publisher from queue settings."""
    if settings.is_enabled:
        assert settings.redis_url is not None and settings.name is not None
        logger.info("task_events_selected", backend="redis", queue=settings.name)
        return RedisTaskEventPublisher(RedisQueueSender(settings.redis_url, settings.name))

    logger.info("task_events_selected", backend="noop")
    return NoopTaskEventPublisher()


def build_queue_publisher(settings: QueueSettings) -> QueuePublisher:
    """Select the generic queue publisher (response mirroring, task requests)."""
    if settings.is_enabled:
        assert settings.redis_url is not None and settings.name is not None
        return RedisQueuePublisher(RedisQueueSender(settings.redis_url, settings.name))
    return NoopQueuePublisher()


@dataclass
class AppContainer:
    """Holds the shared dependencies of one process.

    Usage:
        container = AppContainer.from_settings(get_settings())
        app = create_app(settings, container)
    """

    settings: Settings
    repository: TaskRepository
    event_publisher: TaskEventPublisher
    queue_publisher: QueuePublisher
    task_service: TaskService = field(init=False)
    task_requests: TaskRequestService = field(init=False)
    coordinator: ShutdownCoordinator = field(init=False)

    def __post_init__(self) -> None:
        self.task_service = TaskService(self.repository, self.event_publisher)
        self.task_requests = TaskRequestService(
            self.queue_publisher,
            enabled=self.settings.queue.is_enabled,
        )
        self.coordinator = ShutdownCoordinator(
            self._closables(),
            timeout=self.settings.api.shutdown_timeout_seconds,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> AppContainer:
        """Build all dependencies from settings.

        Args:
            settings: Application settings

        Returns:
            Ready-to-use container
        """
        container = cls(
            settings=settings,
            repository=build_repository(settings.storage),
            event_publisher=build_event_publisher(settings.queue),
            queue_publisher=build_queue_publisher(settings.queue),
        )
        logger.info("app_container_initialized")
        return container

    @property
    def mirrors_responses(self) -> bool:
        """Check if HTTP responses should be mirrored to the queue."""
        return self.settings.queue.is_enabled

    def _closables(self) -> list[Closable]:
        candidates: list[object] = [
            self.event_publisher,
            self.queue_publisher,
            self.repository,
        ]
        return [c for c in candidates if isinstance(c, Closable)]

    async def close(self) -> None:
        """Release all resources (idempotent)."""
        await self.coordinator.close()
