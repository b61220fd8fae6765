"""Queue message types for task lifecycle events."""

from .types import TaskEventEnvelope, TaskEventType, utc_timestamp

__all__ = [
    "TaskEventEnvelope",
    "TaskEventType",
    "utc_timestamp",
]
