"""Single-operation task use cases.

Each use case depends only on the repository contract and invokes exactly
one repository write or read (update also loads the current state first).
"""

from __future__ import annotations

from collections.abc import Sequence

from taskhub.domain.interfaces import TaskRepository
from taskhub.domain.task import Task


class CreateTaskUseCase:
    def __init__(self, repository: TaskRepository) -> None:
        self.repository = repository

    async def execute(self, title: str, description: str) -> Task:
        task = Task.create(title, description)
        return await self.repository.create(task)


class GetAllTasksUseCase:
    def __init__(self, repository: TaskRepository) -> None:
        self.repository = repository

    async def execute(self) -> Sequence[Task]:
        return await self.repository.find_all()


class GetTaskByIdUseCase:
    def __init__(self, repository: TaskRepository) -> None:
        self.repository = repository

    async def execute(self, task_id: str) -> Task | None:
        return await self.repository.find_by_id(task_id)


class UpdateTaskUseCase:
    """Edit a task's text fields and move its completion state.

    The completion transition only runs when the requested state differs
    from the current one. The repository result is returned as is, so a
    task deleted between load and save comes back as None.
    """

    def __init__(self, repository: TaskRepository) -> None:
        self.repository = repository

    async def execute(
        self,
        task_id: str,
        title: str,
        description: str,
        completed: bool,
    ) -> Task | None:
        """Apply the update.

        Args:
            task_id: Task identifier
            title: New title
            description: New description
            completed: Requested completion state

        Returns:
            Updated task or None if not found
        """
        task = await self.repository.find_by_id(task_id)
        if task is None:
            return None

        was_completed = task.completed
        task.update(title, description)

        if completed and not was_completed:
            task.complete()
        elif not completed and was_completed:
            task.uncomplete()

        return await self.repository.update(task_id, task)


class DeleteTaskUseCase:
    def __init__(self, repository: TaskRepository) -> None:
        self.repository = repository

    async def execute(self, task_id: str) -> bool:
        return await self.repository.delete(task_id)
