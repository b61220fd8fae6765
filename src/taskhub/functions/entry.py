"""Function runtime entry point.

The container is built once per process (cold start) and shared by every
invocation handled by that process.
"""

from typing import Any

from taskhub.config import get_settings
from taskhub.container import AppContainer
from taskhub.logging_config import configure_logging

from .app import TaskFunctionApp

_settings = get_settings()
configure_logging(_settings.api.log_level, json_logs=True)

function_app = TaskFunctionApp(AppContainer.from_settings(_settings))


def handler(event: dict[str, Any], context: Any) -> dict[str, Any]:
    """Handle one proxy event.

    Args:
        event: API-Gateway-style proxy event
        context: Runtime context (unused)

    Returns:
        Proxy response
    """
    return function_app.invoke(event)
