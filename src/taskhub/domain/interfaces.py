"""Storage and eventing contracts the services depend on."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Protocol, runtime_checkable

from .task import Task


@runtime_checkable
class Closable(Protocol):
    """A resource that must be released on shutdown."""

    async def close(self) -> None: ...


class TaskRepository(Protocol):
    """Storage-agnostic CRUD contract for tasks.

    A missing id is an expected outcome, never an error: lookups return
    ``None`` and deletes return ``False``.
    """

    async def find_all(self) -> Sequence[Task]:
        """Return a snapshot of all stored tasks."""
        ...

    async def find_by_id(self, task_id: str) -> Task | None:
        """Return the task with ``task_id`` or ``None``."""
        ...

    async def create(self, task: Task) -> Task:
        """Persist a new task.

        Raises:
            DuplicateKeyError: If a task with the same id exists
        """
        ...

    async def update(self, task_id: str, task: Task) -> Task | None:
        """Overwrite the stored task, ``None`` if ``task_id`` is unknown."""
        ...

    async def delete(self, task_id: str) -> bool:
        """Remove the task, ``True`` if a record was removed."""
        ...


class TaskEventPublisher(Protocol):
    """Notifies an external channel about task lifecycle changes.

    Implementations may raise on send failure; callers on the request path
    are responsible for discarding those errors.
    """

    async def publish_created(self, task: Task) -> None: ...

    async def publish_updated(self, task: Task) -> None: ...

    async def publish_deleted(self, task_id: str) -> None: ...

    async def close(self) -> None: ...


class QueuePublisher(Protocol):
    """Sends arbitrary JSON-compatible messages to a queue."""

    async def send(self, message: Any) -> None: ...

    async def close(self) -> None: ...
