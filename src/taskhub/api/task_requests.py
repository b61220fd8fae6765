"""Queued task intake shared by the HTTP and function fronts."""

import structlog

from taskhub.config import APISettings
from taskhub.domain.messages import TaskRequestMessage
from taskhub.exceptions import EventPublishError, QueueNotConfiguredError
from taskhub.services import TaskRequestService

from .exceptions import QueueSendError, QueueUnavailableError
from .schemas import TaskRequestAccepted, TaskRequestCreate

logger = structlog.get_logger()

ACCEPTED_MESSAGE = "Task request sent to queue for processing"


def to_task_request_message(request: TaskRequestCreate) -> TaskRequestMessage:
    """Map a validated intake body to its queue message.

    The request id and timestamp are assigned here, at intake time.
    """
    return TaskRequestMessage(title=request.title, description=request.description)


async def accept_task_request(
    service: TaskRequestService,
    request: TaskRequestCreate,
    settings: APISettings,
) -> TaskRequestAccepted:
    """Queue a task request and build the 202 acknowledgement.

    Args:
        service: Task request service
        request: Validated intake body
        settings: API settings (decides whether failure detail is exposed)

    Returns:
        Acknowledgement carrying the request id

    Raises:
        QueueUnavailableError: If no queue is configured
        QueueSendError: If the send fails
    """
    message = to_task_request_message(request)
    try:
        await service.submit(message)
    except QueueNotConfiguredError as e:
        raise QueueUnavailableError() from e
    except EventPublishError as e:
        logger.error(
            "task_request_send_failed",
            request_id=message.request_id,
            error=e.message,
        )
        raise QueueSendError(None if settings.is_production else e.message) from e

    return TaskRequestAccepted(message=ACCEPTED_MESSAGE, request_id=message.request_id)
