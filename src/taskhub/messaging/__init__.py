"""Event and queue publisher adapters."""

from .noop import NoopQueuePublisher, NoopTaskEventPublisher
from .redis_queue import RedisQueuePublisher, RedisQueueSender, RedisTaskEventPublisher

__all__ = [
    "NoopQueuePublisher",
    "NoopTaskEventPublisher",
    "RedisQueuePublisher",
    "RedisQueueSender",
    "RedisTaskEventPublisher",
]
