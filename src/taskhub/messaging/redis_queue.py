"""Redis-backed queue publishers.

A Redis list acts as the managed queue: every message is a JSON string
appended with ``RPUSH``.
"""

from __future__ import annotations

import asyncio
import json
from typing import Any

import redis.asyncio as redis
import structlog
from redis.exceptions import RedisError

from taskhub.domain.task import Task
from taskhub.events.types import TaskEventEnvelope, TaskEventType, utc_timestamp
from taskhub.exceptions import EventPublishError

logger = structlog.get_logger()


class RedisQueueSender:
    """Single reusable sender handle for one Redis queue.

    The client is created on the first send and shared by every later send.
    Closing waits for sends that are already in flight.
    """

    def __init__(self, redis_url: str, queue_name: str) -> None:
        """Initialize sender.

        Args:
            redis_url: Redis connection URL (e.g., redis://localhost:6379/0)
            queue_name: Name of the Redis list used as the queue
        """
        self.redis_url = redis_url
        self.queue_name = queue_name
        self._client: redis.Redis | None = None
        self._in_flight: set[asyncio.Task[Any]] = set()
        self._closed = False

    @property
    def is_connected(self) -> bool:
        """Check if a client has been created."""
        return self._client is not None

    def _get_client(self) -> redis.Redis:
        if self._client is None:
            self._client = redis.Redis.from_url(self.redis_url, decode_responses=True)
            logger.info(
                "queue_sender_created",
                url=self._mask_url(self.redis_url),
                queue=self.queue_name,
            )
        return self._client

    async def send(self, body: dict[str, Any]) -> None:
        """Append a JSON message to the queue.

        Args:
            body: JSON-serializable message body

        Raises:
            EventPublishError: If the sender is closed, or serialization or
                the Redis call fails
        """
        if self._closed:
            raise EventPublishError(f"Sender for queue '{self.queue_name}' is closed")

        try:
            payload = json.dumps(body, default=str)
        except (TypeError, ValueError) as e:
            raise EventPublishError("Message is not JSON serializable", cause=e) from e

        client = self._get_client()
        task = asyncio.ensure_future(client.rpush(self.queue_name, payload))
        self._in_flight.add(task)
        try:
            await task
        except RedisError as e:
            raise EventPublishError(
                f"Failed to send message to queue '{self.queue_name}'", cause=e
            ) from e
        finally:
            self._in_flight.discard(task)

    async def close(self) -> None:
        """Wait for in-flight sends, then close the client."""
        self._closed = True
        if self._in_flight:
            await asyncio.gather(*self._in_flight, return_exceptions=True)

        client, self._client = self._client, None
        if client is not None:
            await client.aclose()
            logger.info("queue_sender_closed", queue=self.queue_name)

    def _mask_url(self, url: str) -> str:
        """Mask password in URL for logging."""
        if "@" in url:
            parts = url.split("@")
            return f"redis://***@{parts[-1]}"
        return url


class RedisTaskEventPublisher:
    """Publishes task lifecycle events as ``{eventType, payload, timestamp}``.

    Send failures are raised to the caller.
    """

    def __init__(self, sender: RedisQueueSender) -> None:
        self.sender = sender

    async def publish_created(self, task: Task) -> None:
        await self._publish(TaskEventType.TASK_CREATED, task.to_dict())

    async def publish_updated(self, task: Task) -> None:
        await self._publish(TaskEventType.TASK_UPDATED, task.to_dict())

    async def publish_deleted(self, task_id: str) -> None:
        await self._publish(TaskEventType.TASK_DELETED, {"id": task_id})

    async def _publish(self, event_type: TaskEventType, payload: dict[str, Any]) -> None:
        envelope = TaskEventEnvelope(event_type=event_type, payload=payload)
        await self.sender.send(envelope.to_message())
        logger.debug("task_event_published", event_type=str(event_type))

    async def close(self) -> None:
        await self.sender.close()


class RedisQueuePublisher:
    """Generic message publisher used for mirroring HTTP responses."""

    def __init__(self, sender: RedisQueueSender) -> None:
        self.sender = sender

    async def send(self, message: Any) -> None:
        """Send a message with a ``timestamp`` field added.

        Non-dict messages are wrapped as ``{"value": message}``.
        """
        body = dict(message) if isinstance(message, dict) else {"value": message}
        body["timestamp"] = utc_timestamp()
        await self.sender.send(body)

    async def close(self) -> None:
        await self.sender.close()
