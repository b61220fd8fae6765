"""Function-trigger front for serverless deployments.

Handles API-Gateway-style proxy events::

    {
        "httpMethod": "PUT",
        "path": "/api/tasks/123",
        "pathParameters": {"id": "123"},
        "body": "{\"title\": \"...\", \"description\": \"...\", \"completed\": true}"
    }

and returns ``{"statusCode", "headers", "body"}``. Routing, validation
models, envelopes and status codes are the same as the HTTP front; only
input extraction and output shaping differ.
"""

from __future__ import annotations

import asyncio
import base64
import binascii
import json
import re
import time
from collections.abc import Awaitable, Callable
from datetime import UTC, datetime
from typing import Any, TypeVar
from urllib.parse import unquote

import structlog
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from taskhub.api.exceptions import APIError, NotFoundError, ValidationError
from taskhub.api.handlers import (
    VALIDATION_ERROR_MESSAGE,
    format_validation_errors,
    internal_error_body,
)
from taskhub.api.response_queue import ResponseMirror
from taskhub.api.schemas import (
    ApiResponse,
    HealthResponse,
    HelloResponse,
    TaskCreate,
    TaskRequestCreate,
    TaskResponse,
    TaskUpdate,
)
from taskhub.api.task_requests import accept_task_request
from taskhub.container import AppContainer

logger = structlog.get_logger()

FunctionResult = tuple[int, dict[str, Any]]
RouteHandler = Callable[[dict[str, Any], dict[str, str]], Awaitable[FunctionResult]]

ModelT = TypeVar("ModelT", bound=BaseModel)

_JSON_HEADERS = {"Content-Type": "application/json"}


class TaskFunctionApp:
    """Routes proxy events to the task service.

    Owns the event loop used for every invocation so that connections
    opened by one invocation are reused by the next.

    Usage:
        function_app = TaskFunctionApp(AppContainer.from_settings(settings))

        def handler(event, context):
            return function_app.invoke(event)
    """

    def __init__(
        self,
        container: AppContainer,
        loop: asyncio.AbstractEventLoop | None = None,
        install_signal_handlers: bool = True,
    ) -> None:
        """Initialize the function app.

        Args:
            container: Shared dependencies
            loop: Event loop to run invocations on (a new one by default)
            install_signal_handlers: Drain resources on SIGINT/SIGTERM
        """
        self.container = container
        self.settings = container.settings
        self.service = container.task_service
        self.mirror = (
            ResponseMirror(container.queue_publisher) if container.mirrors_responses else None
        )
        self._loop = loop or asyncio.new_event_loop()
        self._started_at = time.monotonic()
        self._routes = self._build_routes(self.settings.api.api_prefix)

        if install_signal_handlers:
            container.coordinator.install_signal_handlers(self._loop)

    def _build_routes(self, prefix: str) -> list[tuple[str, re.Pattern[str], RouteHandler]]:
        base = re.escape(prefix.rstrip("/"))
        tasks = rf"{base}/tasks"
        return [
            ("GET", re.compile(r"^/?$"), self._hello),
            ("GET", re.compile(rf"^{base}/hello/?$"), self._hello),
            ("GET", re.compile(r"^/health/?$"), self._health),
            ("GET", re.compile(rf"^{base}/hello/health/?$"), self._health),
            ("GET", re.compile(rf"^{tasks}/?$"), self._list_tasks),
            ("POST", re.compile(rf"^{tasks}/?$"), self._create_task),
            ("POST", re.compile(rf"^{tasks}/queue/?$"), self._queue_task),
            ("GET", re.compile(rf"^{tasks}/(?P<id>[^/]+)/?$"), self._get_task),
            ("PUT", re.compile(rf"^{tasks}/(?P<id>[^/]+)/?$"), self._update_task),
            ("DELETE", re.compile(rf"^{tasks}/(?P<id>[^/]+)/?$"), self._delete_task),
        ]

    def invoke(self, event: dict[str, Any]) -> dict[str, Any]:
        """Synchronous entry point for the function runtime.

        A shutdown signal that arrives mid-invocation is drained and
        delivered again before this returns.
        """
        try:
            return self._loop.run_until_complete(self.handle(event))
        finally:
            self.container.coordinator.finish_pending_drain()

    async def handle(self, event: dict[str, Any]) -> dict[str, Any]:
        """Process one proxy event.

        Args:
            event: API-Gateway-style proxy event

        Returns:
            Proxy response with JSON body
        """
        method = str(event.get("httpMethod") or "GET").upper()
        path = str(event.get("path") or "/")

        logger.info("function_invoked", method=method, path=path)

        try:
            status, body = await self._dispatch(method, path, event)
        except APIError as e:
            logger.info("api_error", code=e.code, message=e.message, detail=e.error_detail)
            status = e.status_code
            body = ApiResponse[Any](
                success=False,
                message=e.message,
                error=e.error_detail,
            ).to_body()
        except Exception as e:
            logger.exception(
                "unhandled_error",
                error_type=type(e).__name__,
                error=str(e),
            )
            status, body = 500, internal_error_body(e, self.settings.api)

        if self.mirror is not None:
            await self.mirror.publish(method, path, status, body)

        logger.info("function_completed", method=method, path=path, status_code=status)
        return {
            "statusCode": status,
            "headers": dict(_JSON_HEADERS),
            "body": json.dumps(body),
        }

    async def _dispatch(self, method: str, path: str, event: dict[str, Any]) -> FunctionResult:
        path_matched = False
        for route_method, pattern, route_handler in self._routes:
            match = pattern.match(path)
            if match is None:
                continue
            path_matched = True
            if route_method == method:
                params = {k: unquote(v) for k, v in match.groupdict().items()}
                params.update(event.get("pathParameters") or {})
                return await route_handler(event, params)

        if path_matched:
            raise APIError("Method Not Allowed", code="HTTP_405", status_code=405)
        raise APIError("Not Found", code="HTTP_404", status_code=404)

    # Task routes

    async def _list_tasks(self, event: dict[str, Any], params: dict[str, str]) -> FunctionResult:
        tasks = await self.service.get_all_tasks()
        body = ApiResponse[list[TaskResponse]](
            success=True,
            data=[TaskResponse.from_task(task) for task in tasks],
        )
        return 200, body.to_body()

    async def _get_task(self, event: dict[str, Any], params: dict[str, str]) -> FunctionResult:
        task_id = params["id"]
        task = await self.service.get_task_by_id(task_id)
        if task is None:
            raise NotFoundError("Task", task_id)
        return 200, ApiResponse[TaskResponse](
            success=True, data=TaskResponse.from_task(task)
        ).to_body()

    async def _create_task(self, event: dict[str, Any], params: dict[str, str]) -> FunctionResult:
        request = _parse_body(event, TaskCreate)
        task = await self.service.create_task(request.title, request.description)
        return 201, ApiResponse[TaskResponse](
            success=True, data=TaskResponse.from_task(task)
        ).to_body()

    async def _queue_task(self, event: dict[str, Any], params: dict[str, str]) -> FunctionResult:
        request = _parse_body(event, TaskRequestCreate)
        accepted = await accept_task_request(
            self.container.task_requests, request, self.settings.api
        )
        return 202, accepted.to_body()

    async def _update_task(self, event: dict[str, Any], params: dict[str, str]) -> FunctionResult:
        task_id = params["id"]
        request = _parse_body(event, TaskUpdate)
        task = await self.service.update_task(
            task_id,
            request.title,
            request.description,
            request.completed,
        )
        if task is None:
            raise NotFoundError("Task", task_id)
        return 200, ApiResponse[TaskResponse](
            success=True, data=TaskResponse.from_task(task)
        ).to_body()

    async def _delete_task(self, event: dict[str, Any], params: dict[str, str]) -> FunctionResult:
        task_id = params["id"]
        if not await self.service.delete_task(task_id):
            raise NotFoundError("Task", task_id)
        return 200, ApiResponse[None](
            success=True, message="Task deleted successfully"
        ).to_body()

    # Greeting and health

    async def _hello(self, event: dict[str, Any], params: dict[str, str]) -> FunctionResult:
        body = HelloResponse(
            message=f"Hello World from {self.settings.api.title}!",
            timestamp=datetime.now(UTC),
            environment=self.settings.api.environment,
        )
        return 200, body.model_dump(mode="json")

    async def _health(self, event: dict[str, Any], params: dict[str, str]) -> FunctionResult:
        body = HealthResponse(
            status="healthy",
            uptime=round(time.monotonic() - self._started_at, 3),
            timestamp=datetime.now(UTC),
        )
        return 200, body.model_dump(mode="json")

    def close(self) -> None:
        """Drain resources and close the owned event loop."""
        if self._loop.is_closed():
            return
        self._loop.run_until_complete(self.container.close())
        self._loop.close()


def _parse_body(event: dict[str, Any], model: type[ModelT]) -> ModelT:
    """Decode and validate a JSON request body.

    Raises:
        ValidationError: If the body is not valid base64, JSON or model input
    """
    raw = event.get("body")
    try:
        if raw and event.get("isBase64Encoded"):
            raw = base64.b64decode(raw, validate=True).decode("utf-8")
        data = json.loads(raw) if isinstance(raw, (str, bytes)) else raw
    except (ValueError, binascii.Error) as e:
        raise ValidationError(VALIDATION_ERROR_MESSAGE, detail=f"body: {e}") from e

    try:
        return model.model_validate(data if data is not None else {})
    except PydanticValidationError as e:
        raise ValidationError(
            VALIDATION_ERROR_MESSAGE,
            detail=format_validation_errors(e.errors()),
        ) from e
