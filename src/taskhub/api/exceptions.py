"""Custom exceptions for API layer."""

from typing import Any

from fastapi import HTTPException


class APIError(HTTPException):
    """Base exception for API errors.

    Extends HTTPException for native FastAPI integration.
    """

    def __init__(
        self,
        message: str,
        code: str,
        status_code: int = 400,
        detail: str | None = None,
    ) -> None:
        """Initialize API error.

        Args:
            message: User-facing error message
            code: Error code
            status_code: HTTP status code
            detail: Additional detail information
        """
        super().__init__(
            status_code=status_code,
            detail={"message": message, "code": code, "detail": detail},
        )
        self.message = message
        self.code = code
        self.error_detail = detail


class NotFoundError(APIError):
    """Resource not found error."""

    def __init__(
        self,
        resource: str,
        resource_id: Any,
    ) -> None:
        """Initialize not found error.

        Args:
            resource: Resource type (e.g., "Task")
            resource_id: Resource identifier
        """
        super().__init__(
            message=f"{resource} not found",
            code="NOT_FOUND",
            status_code=404,
            detail=f"{resource} with id '{resource_id}' does not exist",
        )
        self.resource = resource
        self.resource_id = resource_id


class ValidationError(APIError):
    """Malformed or incomplete request input."""

    def __init__(
        self,
        message: str = "Invalid request",
        detail: str | None = None,
    ) -> None:
        """Initialize validation error.

        Args:
            message: User-facing error message
            detail: Which fields failed and why
        """
        super().__init__(
            message=message,
            code="VALIDATION_ERROR",
            status_code=400,
            detail=detail,
        )


class QueueUnavailableError(APIError):
    """The task queue is not configured."""

    def __init__(self) -> None:
        super().__init__(
            message="Task queue is not configured",
            code="QUEUE_UNAVAILABLE",
            status_code=503,
        )


class QueueSendError(APIError):
    """A task request could not be sent to the queue."""

    def __init__(self, detail: str | None = None) -> None:
        """Initialize queue send error.

        Args:
            detail: Underlying failure, omitted in production
        """
        super().__init__(
            message="Failed to send task to queue",
            code="QUEUE_SEND_FAILED",
            status_code=500,
            detail=detail,
        )
