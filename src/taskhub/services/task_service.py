"""Task service: the facade over the task use cases.

The service is the only component that knows about both persistence and
eventing. Events are published strictly after a successful write and on a
best-effort basis: publish errors are logged and discarded, never raised.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Sequence

import structlog

from taskhub.domain.interfaces import TaskEventPublisher, TaskRepository
from taskhub.domain.task import Task
from taskhub.events.types import TaskEventType

from .use_cases import (
    CreateTaskUseCase,
    DeleteTaskUseCase,
    GetAllTasksUseCase,
    GetTaskByIdUseCase,
    UpdateTaskUseCase,
)

logger = structlog.get_logger()


class TaskService:
    """Sequences use cases with best-effort event publication."""

    def __init__(
        self,
        repository: TaskRepository,
        event_publisher: TaskEventPublisher,
    ) -> None:
        """Initialize service.

        Args:
            repository: Task storage
            event_publisher: Lifecycle event channel
        """
        self.event_publisher = event_publisher
        self.create_use_case = CreateTaskUseCase(repository)
        self.get_all_use_case = GetAllTasksUseCase(repository)
        self.get_by_id_use_case = GetTaskByIdUseCase(repository)
        self.update_use_case = UpdateTaskUseCase(repository)
        self.delete_use_case = DeleteTaskUseCase(repository)

    async def create_task(self, title: str, description: str) -> Task:
        """Create a task and announce it.

        Args:
            title: Task title
            description: Task description

        Returns:
            Created task, regardless of the publish outcome
        """
        task = await self.create_use_case.execute(title, description)
        logger.info("task_created", task_id=task.id)

        await self._publish_safely(
            TaskEventType.TASK_CREATED,
            task.id,
            lambda: self.event_publisher.publish_created(task),
        )
        return task

    async def get_all_tasks(self) -> Sequence[Task]:
        """List all tasks."""
        return await self.get_all_use_case.execute()

    async def get_task_by_id(self, task_id: str) -> Task | None:
        """Get a task, None if not found."""
        return await self.get_by_id_use_case.execute(task_id)

    async def update_task(
        self,
        task_id: str,
        title: str,
        description: str,
        completed: bool,
    ) -> Task | None:
        """Update a task and announce the change.

        Args:
            task_id: Task identifier
            title: New title
            description: New description
            completed: Requested completion state

        Returns:
            Updated task or None if not found (nothing is published then)
        """
        task = await self.update_use_case.execute(task_id, title, description, completed)
        if task is None:
            return None

        logger.info("task_updated", task_id=task_id, completed=task.completed)
        await self._publish_safely(
            TaskEventType.TASK_UPDATED,
            task_id,
            lambda: self.event_publisher.publish_updated(task),
        )
        return task

    async def delete_task(self, task_id: str) -> bool:
        """Delete a task and announce the removal.

        Args:
            task_id: Task identifier

        Returns:
            True if deleted, False if not found (nothing is published then)
        """
        deleted = await self.delete_use_case.execute(task_id)
        if not deleted:
            return False

        logger.info("task_deleted", task_id=task_id)
        await self._publish_safely(
            TaskEventType.TASK_DELETED,
            task_id,
            lambda: self.event_publisher.publish_deleted(task_id),
        )
        return True

    async def _publish_safely(
        self,
        event_type: TaskEventType,
        task_id: str,
        publish: Callable[[], Awaitable[None]],
    ) -> None:
        """Run a publish call, logging and discarding any failure.

        Args:
            event_type: Event being published (for logging)
            task_id: Affected task (for logging)
            publish: Factory for the publish coroutine
        """
        try:
            await publish()
        except Exception as e:
            logger.warning(
                "task_event_publish_failed",
                event_type=str(event_type),
                task_id=task_id,
                error=str(e),
                error_type=type(e).__name__,
            )
