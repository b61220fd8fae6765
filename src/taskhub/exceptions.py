"""Core exceptions for storage and messaging operations."""

from __future__ import annotations


class TaskHubError(Exception):
    """Base exception for core operations.

    Attributes:
        message: Error description
        cause: Original exception that caused this error
    """

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        """Initialize core error.

        Args:
            message: Error description
            cause: Original exception that caused this error
        """
        super().__init__(message)
        self.message = message
        self.cause = cause


class DuplicateKeyError(TaskHubError):
    """A task with the same id already exists in the store.

    Not expected in normal operation since ids are generated server-side.
    """

    def __init__(self, task_id: str, cause: Exception | None = None) -> None:
        super().__init__(f"Task with id '{task_id}' already exists", cause)
        self.task_id = task_id


class StorageConnectionError(TaskHubError):
    """Storage backend could not be reached.

    The connection is attempted again on the next repository call.
    """

    pass


class EventPublishError(TaskHubError):
    """Sending a message to the queue failed."""

    pass


class QueueNotConfiguredError(TaskHubError):
    """An operation needs the queue but none is configured."""

    pass
