"""Request schemas for API endpoints."""

from pydantic import BaseModel, Field, StrictBool, StrictStr


class TaskCreate(BaseModel):
    """Request schema for creating a new task."""

    title: StrictStr = Field(
        ...,
        min_length=1,
        description="Task title",
    )
    description: StrictStr = Field(
        ...,
        min_length=1,
        description="Task description",
    )


class TaskUpdate(TaskCreate):
    """Request schema for replacing a task's editable fields."""

    completed: StrictBool = Field(
        ...,
        description="Requested completion state",
    )


class TaskRequestCreate(BaseModel):
    """Request schema for queueing a task creation."""

    title: StrictStr = Field(
        ...,
        min_length=1,
        description="Task title",
    )
    description: StrictStr | None = Field(
        default=None,
        description="Task description",
    )
