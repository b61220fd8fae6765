"""Greeting and health check endpoints."""

import time
from datetime import UTC, datetime

from fastapi import APIRouter, Request

from ..dependencies import AppSettings
from ..schemas import HealthResponse, HelloResponse

router = APIRouter(tags=["health"])
hello_router = APIRouter(prefix="/hello", tags=["health"])


def _uptime_seconds(request: Request) -> float:
    started_at: float = getattr(request.app.state, "started_at", time.monotonic())
    return round(time.monotonic() - started_at, 3)


@router.get("/", response_model=HelloResponse)
@hello_router.get("", response_model=HelloResponse)
async def hello(settings: AppSettings) -> HelloResponse:
    """Greet the caller.

    Returns:
        Greeting with timestamp and environment label
    """
    return HelloResponse(
        message=f"Hello World from {settings.api.title}!",
        timestamp=datetime.now(UTC),
        environment=settings.api.environment,
    )


@router.get("/health", response_model=HealthResponse)
@hello_router.get("/health", response_model=HealthResponse)
async def health_check(request: Request) -> HealthResponse:
    """Check API health status.

    Returns:
        Health status with process uptime
    """
    return HealthResponse(
        status="healthy",
        uptime=_uptime_seconds(request),
        timestamp=datetime.now(UTC),
    )

