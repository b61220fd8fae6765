"""Event envelope definitions for queue messages."""

from __future__ import annotations

from datetime import UTC, datetime
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_serializer

from taskhub.domain.task import isoformat_utc

__all__ = [
    "TaskEventType",
    "TaskEventEnvelope",
    "utc_timestamp",
]


class TaskEventType(StrEnum):
    """All event types written to the queue."""

    # Task lifecycle
    TASK_CREATED = "task.created"
    TASK_UPDATED = "task.updated"
    TASK_DELETED = "task.deleted"

    # Response mirroring
    HTTP_RESPONSE = "http.response"


def utc_timestamp() -> str:
    """Current time as an ISO-8601 UTC string."""
    return isoformat_utc(datetime.now(UTC))


class TaskEventEnvelope(BaseModel):
    """Wire envelope for a task lifecycle event.

    Serialized as ``{eventType, payload, timestamp}``.
    """

    event_type: TaskEventType = Field(serialization_alias="eventType")
    payload: dict[str, Any]
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))

    model_config = ConfigDict(use_enum_values=True)

    @field_serializer("timestamp")
    def _serialize_timestamp(self, value: datetime) -> str:
        return isoformat_utc(value)

    def to_message(self) -> dict[str, Any]:
        """Dump to the JSON-ready message body."""
        return self.model_dump(by_alias=True)
