"""Queued task intake: accept a creation request now, create the task later."""

from __future__ import annotations

import structlog

from taskhub.domain.interfaces import QueuePublisher
from taskhub.domain.messages import TaskRequestMessage
from taskhub.exceptions import QueueNotConfiguredError

logger = structlog.get_logger()


class TaskRequestService:
    """Hands task creation requests to the queue.

    Unlike task events, a failed send is raised to the caller, since the
    request has then not been accepted.
    """

    def __init__(self, publisher: QueuePublisher, enabled: bool = True) -> None:
        """Initialize service.

        Args:
            publisher: Queue the requests are sent to
            enabled: False when no queue is configured and requests would be lost
        """
        self.publisher = publisher
        self.enabled = enabled

    async def submit(self, message: TaskRequestMessage) -> TaskRequestMessage:
        """Send one request to the queue.

        Args:
            message: Request to send

        Returns:
            The sent message, carrying its request id

        Raises:
            QueueNotConfiguredError: If no queue is configured
            EventPublishError: If the send fails
        """
        if not self.enabled:
            raise QueueNotConfiguredError("Task queue is not configured")

        await self.publisher.send(message.to_message())
        logger.info("task_request_queued", request_id=message.request_id)
        return message
