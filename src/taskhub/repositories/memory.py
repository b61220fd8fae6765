"""In-memory task repository."""

from __future__ import annotations

from dataclasses import replace

import structlog

from taskhub.domain.task import Task
from taskhub.exceptions import DuplicateKeyError

logger = structlog.get_logger()


class InMemoryTaskRepository:
    """Task repository backed by an insertion-ordered dict.

    Tasks are copied on the way in and out, so the store exclusively owns
    its records. Each call completes without suspending, which makes every
    operation atomic on a single event loop.
    """

    def __init__(self) -> None:
        """Initialize an empty store."""
        self._tasks: dict[str, Task] = {}
        self._retired_ids: set[str] = set()

    async def find_all(self) -> list[Task]:
        """Return all tasks in insertion order."""
        return [replace(task) for task in self._tasks.values()]

    async def find_by_id(self, task_id: str) -> Task | None:
        """Find a task by id.

        Args:
            task_id: Task identifier

        Returns:
            Copy of the stored task or None if not found
        """
        task = self._tasks.get(task_id)
        return replace(task) if task is not None else None

    async def create(self, task: Task) -> Task:
        """Store a new task.

        Args:
            task: Task to store

        Returns:
            Copy of the stored task

        Raises:
            DuplicateKeyError: If the id is in use or was used by a deleted task
        """
        if task.id in self._tasks or task.id in self._retired_ids:
            raise DuplicateKeyError(task.id)

        self._tasks[task.id] = replace(task)
        return replace(task)

    async def update(self, task_id: str, task: Task) -> Task | None:
        """Overwrite a stored task (last write wins).

        Args:
            task_id: Task identifier
            task: New task state

        Returns:
            Copy of the stored task or None if not found
        """
        if task_id not in self._tasks:
            return None

        self._tasks[task_id] = replace(task)
        return replace(task)

    async def delete(self, task_id: str) -> bool:
        """Remove a task.

        Args:
            task_id: Task identifier

        Returns:
            True if removed, False if not found
        """
        if self._tasks.pop(task_id, None) is None:
            return False

        self._retired_ids.add(task_id)
        return True

    async def close(self) -> None:
        """Nothing to release."""
        logger.debug("memory_repository_closed", task_count=len(self._tasks))
