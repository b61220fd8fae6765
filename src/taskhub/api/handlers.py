"""Global exception handlers for FastAPI.

All errors are rendered with the standard response envelope.
"""

from collections.abc import Sequence
from typing import Any

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from taskhub.config import APISettings

from .exceptions import APIError
from .schemas import ApiResponse

logger = structlog.get_logger()

INTERNAL_ERROR_MESSAGE = "Internal server error"
VALIDATION_ERROR_MESSAGE = "Invalid request body"


def format_validation_errors(errors: Sequence[Any]) -> str:
    """Join pydantic error entries into one readable string.

    Args:
        errors: Entries as returned by ``ValidationError.errors()``

    Returns:
        ``loc: msg`` pairs separated by semicolons
    """
    parts = []
    for error in errors:
        loc = ".".join(str(x) for x in error["loc"])
        parts.append(f"{loc}: {error['msg']}")
    return "; ".join(parts)


def internal_error_body(exc: Exception, settings: APISettings) -> dict[str, Any]:
    """Envelope for unexpected failures.

    The underlying error text is only exposed outside production.
    """
    return ApiResponse[Any](
        success=False,
        message=INTERNAL_ERROR_MESSAGE,
        error=None if settings.is_production else str(exc),
    ).to_body()


def register_exception_handlers(app: FastAPI, settings: APISettings) -> None:
    """Register global exception handlers.

    Args:
        app: FastAPI application instance
        settings: API settings (environment decides error detail exposure)
    """

    @app.exception_handler(APIError)
    async def api_error_handler(
        request: Request,
        exc: APIError,
    ) -> JSONResponse:
        """Handle custom API errors."""
        logger.info(
            "api_error",
            code=exc.code,
            message=exc.message,
            detail=exc.error_detail,
        )

        return JSONResponse(
            status_code=exc.status_code,
            content=ApiResponse[Any](
                success=False,
                message=exc.message,
                error=exc.error_detail,
            ).to_body(),
        )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(
        request: Request,
        exc: HTTPException,
    ) -> JSONResponse:
        """Handle HTTP exceptions (unknown routes, wrong methods, ...)."""
        logger.info(
            "http_error",
            status_code=exc.status_code,
            detail=exc.detail,
        )

        return JSONResponse(
            status_code=exc.status_code,
            content=ApiResponse[Any](success=False, message=str(exc.detail)).to_body(),
            headers=exc.headers,
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request,
        exc: RequestValidationError,
    ) -> JSONResponse:
        """Handle request validation errors as 400."""
        detail = format_validation_errors(exc.errors())
        logger.info("validation_error", detail=detail)

        return JSONResponse(
            status_code=400,
            content=ApiResponse[Any](
                success=False,
                message=VALIDATION_ERROR_MESSAGE,
                error=detail,
            ).to_body(),
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(
        request: Request,
        exc: Exception,
    ) -> JSONResponse:
        """Handle unhandled exceptions."""
        # Runs outside the request context middleware, so the id is passed explicitly
        request_id = getattr(request.state, "request_id", "unknown")

        logger.exception(
            "unhandled_error",
            request_id=request_id,
            error_type=type(exc).__name__,
            error=str(exc),
        )

        return JSONResponse(
            status_code=500,
            content=internal_error_body(exc, settings),
        )
