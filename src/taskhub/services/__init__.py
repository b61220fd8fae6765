"""Application services and use cases."""

from .task_requests import TaskRequestService
from .task_service import TaskService
from .use_cases import (
    CreateTaskUseCase,
    DeleteTaskUseCase,
    GetAllTasksUseCase,
    GetTaskByIdUseCase,
    UpdateTaskUseCase,
)

__all__ = [
    "CreateTaskUseCase",
    "DeleteTaskUseCase",
    "GetAllTasksUseCase",
    "GetTaskByIdUseCase",
    "TaskRequestService",
    "TaskService",
    "UpdateTaskUseCase",
]
