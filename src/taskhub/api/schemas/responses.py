"""Response schemas for API endpoints.

Every response uses the ``{success, data?, message?, error?}`` envelope;
unset keys are omitted from the JSON body.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, field_serializer
from pydantic.alias_generators import to_camel

from taskhub.domain.task import Task, isoformat_utc

T = TypeVar("T")


class TaskResponse(BaseModel):
    """Response schema for task data (camelCase on the wire)."""

    id: str
    title: str
    description: str
    completed: bool
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    @field_serializer("created_at", "updated_at")
    def _serialize_timestamp(self, value: datetime) -> str:
        return isoformat_utc(value)

    @classmethod
    def from_task(cls, task: Task) -> TaskResponse:
        """Build from a domain task."""
        return cls(
            id=task.id,
            title=task.title,
            description=task.description,
            completed=task.completed,
            created_at=task.created_at,
            updated_at=task.updated_at,
        )


class ApiResponse(BaseModel, Generic[T]):
    """Generic response envelope."""

    success: bool
    data: T | None = None
    message: str | None = None
    error: str | None = None

    def to_body(self) -> dict[str, Any]:
        """Dump to a JSON-ready dict without unset keys."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class HelloResponse(BaseModel):
    """Greeting response."""

    success: bool = True
    message: str
    timestamp: datetime
    environment: str

    @field_serializer("timestamp")
    def _serialize_timestamp(self, value: datetime) -> str:
        return isoformat_utc(value)


class HealthResponse(BaseModel):
    """Health check response."""

    success: bool = True
    status: str
    uptime: float
    timestamp: datetime

    @field_serializer("timestamp")
    def _serialize_timestamp(self, value: datetime) -> str:
        return isoformat_utc(value)


class TaskRequestAccepted(BaseModel):
    """Acknowledgement that a task request was queued."""

    success: bool = True
    message: str
    request_id: str

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_body(self) -> dict[str, Any]:
        """Dump to a JSON-ready dict with camelCase keys."""
        return self.model_dump(mode="json", by_alias=True)
