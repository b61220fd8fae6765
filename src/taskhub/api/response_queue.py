"""Mirrors every HTTP response to the event queue.

This is an observability side channel wrapped around the application; it
never changes a response and never raises into the request path.
"""

from __future__ import annotations

import json
from typing import Any

import structlog
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from taskhub.config import APISettings
from taskhub.domain.interfaces import QueuePublisher
from taskhub.events.types import TaskEventType

from .handlers import internal_error_body

logger = structlog.get_logger()


def _decode_body(body: bytes | None) -> Any:
    if not body:
        return None
    text = body.decode("utf-8", errors="replace")
    try:
        return json.loads(text)
    except ValueError:
        return text


class ResponseMirror:
    """Best-effort publisher of ``http.response`` messages.

    Shared by the HTTP middleware and the function-trigger front.
    """

    def __init__(self, publisher: QueuePublisher) -> None:
        """Initialize mirror.

        Args:
            publisher: Queue publisher the responses are sent to
        """
        self.publisher = publisher

    async def publish(
        self,
        method: str,
        path: str,
        status: int,
        response: Any,
    ) -> None:
        """Send one response description to the queue.

        Args:
            method: HTTP method
            path: Request path including query string
            status: Response status code
            response: Decoded response body (bytes are parsed as JSON if possible)
        """
        if isinstance(response, (bytes, bytearray)):
            response = _decode_body(bytes(response))

        message = {
            "eventType": str(TaskEventType.HTTP_RESPONSE),
            "method": method,
            "path": path,
            "status": status,
            "response": response,
        }
        try:
            await self.publisher.send(message)
        except Exception as e:
            logger.warning(
                "response_publish_failed",
                path=path,
                error=str(e),
                error_type=type(e).__name__,
            )


class ResponseQueueMiddleware:
    """ASGI middleware that records each response and mirrors it.

    The message is published after the last body chunk has been sent to
    the client. Requests that end in an unhandled exception are mirrored
    as status 500 with the same envelope the exception handler sends, before
    the exception continues upward.
    """

    def __init__(self, app: ASGIApp, mirror: ResponseMirror, settings: APISettings) -> None:
        self.app = app
        self.mirror = mirror
        self.settings = settings

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        status = 500
        chunks: list[bytes] = []

        async def send_wrapper(message: Message) -> None:
            nonlocal status
            if message["type"] == "http.response.start":
                status = message["status"]
            elif message["type"] == "http.response.body":
                chunks.append(message.get("body", b""))
            await send(message)

        path = scope["path"]
        if scope.get("query_string"):
            path = f"{path}?{scope['query_string'].decode('latin-1')}"

        try:
            await self.app(scope, receive, send_wrapper)
        except Exception as e:
            body = internal_error_body(e, self.settings)
            await self.mirror.publish(scope["method"], path, 500, body)
            raise

        await self.mirror.publish(scope["method"], path, status, b"".join(chunks))
