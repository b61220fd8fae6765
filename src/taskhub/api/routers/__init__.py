"""API routers for endpoint organization."""

from .health import hello_router
from .health import router as health_router
from .tasks import router as tasks_router

__all__ = [
    "health_router",
    "hello_router",
    "tasks_router",
]
