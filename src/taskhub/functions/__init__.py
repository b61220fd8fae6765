"""Function-trigger front over the shared task service."""

from .app import TaskFunctionApp

__all__ = ["TaskFunctionApp"]
