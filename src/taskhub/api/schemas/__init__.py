"""Pydantic schemas for API request/response validation."""

from .requests import TaskCreate, TaskRequestCreate, TaskUpdate
from .responses import (
    ApiResponse,
    HealthResponse,
    HelloResponse,
    TaskRequestAccepted,
    TaskResponse,
)

__all__ = [
    # Requests
    "TaskCreate",
    "TaskRequestCreate",
    "TaskUpdate",
    # Responses
    "ApiResponse",
    "HealthResponse",
    "HelloResponse",
    "TaskRequestAccepted",
    "TaskResponse",
]
