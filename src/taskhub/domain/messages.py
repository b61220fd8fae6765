"""Queue messages that ask a downstream worker to act on tasks."""

from __future__ import annotations

import time
from datetime import UTC, datetime
from typing import Any
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, field_serializer
from pydantic.alias_generators import to_camel

from .task import isoformat_utc


def new_request_id() -> str:
    """Tracing id of the form ``req_<epoch ms>_<9 hex chars>``."""
    return f"req_{int(time.time() * 1000)}_{uuid4().hex[:9]}"


class TaskRequestMessage(BaseModel):
    """Request to create a task, accepted now and processed later.

    Keeps the queue format independent of the intake request body.
    Serialized as ``{title, description?, requestTimestamp, requestId}``.
    """

    title: str
    description: str | None = None
    request_timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))
    request_id: str = Field(default_factory=new_request_id)

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    @field_serializer("request_timestamp")
    def _serialize_timestamp(self, value: datetime) -> str:
        return isoformat_utc(value)

    def to_message(self) -> dict[str, Any]:
        """Dump to the JSON-ready message body."""
        return self.model_dump(by_alias=True, exclude_none=True)
