"""FastAPI dependencies for dependency injection.

Dependencies resolve from the container stored on ``app.state`` by the
app factory, so tests can inject a container built from test doubles.
"""

from typing import Annotated

from fastapi import Depends, Request

from taskhub.config import Settings
from taskhub.container import AppContainer
from taskhub.services import TaskRequestService, TaskService


def get_container(request: Request) -> AppContainer:
    """Container dependency.

    Args:
        request: Current request

    Returns:
        AppContainer built at startup
    """
    container: AppContainer = request.app.state.container
    return container


def get_task_service(
    container: AppContainer = Depends(get_container),
) -> TaskService:
    """Task service dependency."""
    return container.task_service


def get_task_request_service(
    container: AppContainer = Depends(get_container),
) -> TaskRequestService:
    """Task request service dependency."""
    return container.task_requests


def get_app_settings(
    container: AppContainer = Depends(get_container),
) -> Settings:
    """Settings dependency."""
    return container.settings


# Type aliases for cleaner route signatures
AppTaskService = Annotated[TaskService, Depends(get_task_service)]
AppTaskRequestService = Annotated[TaskRequestService, Depends(get_task_request_service)]
AppSettings = Annotated[Settings, Depends(get_app_settings)]
