"""No-op publishers used when no queue is configured."""

from __future__ import annotations

from typing import Any

from taskhub.domain.task import Task


class NoopTaskEventPublisher:
    """Discards every task event."""

    async def publish_created(self, task: Task) -> None:
        return None

    async def publish_updated(self, task: Task) -> None:
        return None

    async def publish_deleted(self, task_id: str) -> None:
        return None

    async def close(self) -> None:
        return None


class NoopQueuePublisher:
    """Discards every message."""

    async def send(self, message: Any) -> None:
        return None

    async def close(self) -> None:
        return None
