"""FastAPI middleware components."""

from __future__ import annotations

import time
import uuid
from typing import Any

import structlog
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

logger = structlog.get_logger()

REQUEST_ID_HEADER = "X-Request-ID"


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Tags each request with an ID and logs it against the matched route.

    The ID is taken from the X-Request-ID header (or generated), stored in
    request.state.request_id and bound to the structlog context, so every
    log line written while the request is handled carries it. Completion
    lines name the route template and, on task routes, the task id.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        """Process request with a bound request ID.

        Args:
            request: Incoming request
            call_next: Next middleware/handler

        Returns:
            Response with X-Request-ID and X-Response-Time headers
        """
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        request.state.request_id = request_id
        start_time = time.perf_counter()

        with structlog.contextvars.bound_contextvars(request_id=request_id):
            logger.info("request_started", method=request.method, path=request.url.path)

            response = await call_next(request)

            duration_ms = (time.perf_counter() - start_time) * 1000
            logger.info(
                "request_completed",
                method=request.method,
                status_code=response.status_code,
                duration_ms=round(duration_ms, 2),
                **_route_context(request),
            )

        response.headers[REQUEST_ID_HEADER] = request_id
        response.headers["X-Response-Time"] = f"{duration_ms:.2f}ms"
        return response


def _route_context(request: Request) -> dict[str, Any]:
    # Filled in by the router once it has matched; absent on 404s
    route = request.scope.get("route")
    context: dict[str, Any] = {"route": getattr(route, "path", request.url.path)}
    task_id = request.path_params.get("task_id")
    if task_id is not None:
        context["task_id"] = task_id
    return context
