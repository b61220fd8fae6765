"""Domain model and contracts."""

from .interfaces import Closable, QueuePublisher, TaskEventPublisher, TaskRepository
from .messages import TaskRequestMessage
from .task import Task

__all__ = [
    "Closable",
    "QueuePublisher",
    "Task",
    "TaskEventPublisher",
    "TaskRepository",
    "TaskRequestMessage",
]
