from __future__ import annotations

from collections.abc import Awaitable, Callable
from enum import Enum
from typing import Protocol

from starlette.requests import Request
from starlette.responses import JSONResponse, PlainTextResponse, Response

from qrcode_api.logging import get_logger
from qrcode_api.request_context import request_id_for
from qrcode_api.types import RequestField


class ErrorCode(str, Enum):
    """Error codes for application errors.

    User errors map to 4xx statuses, system errors to 5xx.
    """

    INVALID_INPUT = "INVALID_INPUT"  # 400 - validation failed
    INTERNAL_ERROR = "INTERNAL_ERROR"  # 500 - QR generation or unexpected failure


_ERROR_CODE_STATUS: dict[ErrorCode, int] = {
    ErrorCode.INVALID_INPUT: 400,
    ErrorCode.INTERNAL_ERROR: 500,
}


class AppError(Exception):
    """Base application error with structured error code and HTTP status.

    Attributes:
        code: Machine-readable error code
        message: Human-readable error message, sent to the caller verbatim
        http_status: HTTP status code to return
    """

    def __init__(self, code: ErrorCode, message: str, http_status: int | None = None) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.http_status = (
            http_status if http_status is not None else _ERROR_CODE_STATUS.get(code, 500)
        )


class ValidationError(AppError):
    """A single rejected request parameter."""

    def __init__(self, field: RequestField, message: str) -> None:
        super().__init__(ErrorCode.INVALID_INPUT, message)
        self.field: RequestField = field


class EncodingFailure(RuntimeError):
    """The contents cannot be represented as a QR symbol with the chosen options."""


class RenderFailure(RuntimeError):
    """A QR matrix could not be serialized to the requested raster format."""


class _FastAPILike(Protocol):
    def add_exception_handler(
        self,
        exc_class_or_status_code: int | type[Exception],
        handler: Callable[[Request, Exception], Awaitable[Response]],
    ) -> None: ...


def error_body(message: str) -> dict[str, str]:
    """Client-facing payload for rejected requests."""
    return {"error": message}


def install_exception_handlers(
    app: _FastAPILike,
    *,
    logger_name: str = "qrcode-api",
    log_user_errors: bool = True,
) -> None:
    """Install centralized exception handlers.

    Registers handlers for:
    - AppError below 500: JSON ``{"error": message}``, logged at INFO
    - AppError 500 and above: plain-text message, logged at ERROR with traceback
    - Exception: plain-text generic message, logged at ERROR with traceback

    Internal exception detail never reaches the response body.
    """
    logger = get_logger(logger_name)

    async def _app_error_handler(request: Request, exc: Exception) -> Response:
        if not isinstance(exc, AppError):
            return await _unhandled_handler(request, exc)

        fields: dict[str, str] = {
            "error_code": exc.code.value,
            "request_id": request_id_for(request),
            "error_message": exc.message,
            "path": request.url.path,
            "method": request.method,
        }
        if exc.http_status < 500:
            if log_user_errors:
                if isinstance(exc, ValidationError):
                    fields["field"] = exc.field
                logger.info("user_error", extra=fields)
            return JSONResponse(content=error_body(exc.message), status_code=exc.http_status)

        logger.error("system_error", extra=fields, exc_info=True)
        return PlainTextResponse(content=exc.message, status_code=exc.http_status)

    async def _unhandled_handler(request: Request, exc: Exception) -> Response:
        rid = request_id_for(request)
        logger.error(
            "unhandled_exception",
            extra={
                "error_type": type(exc).__name__,
                "request_id": rid,
                "path": request.url.path,
                "method": request.method,
                "error_message": str(exc),
            },
            exc_info=True,
        )
        # Built outside the request-id middleware, so the header is set here.
        headers = {"x-request-id": rid} if rid != "" else None
        return PlainTextResponse(content="Internal server error", status_code=500, headers=headers)

    app.add_exception_handler(AppError, _app_error_handler)
    app.add_exception_handler(Exception, _unhandled_handler)


__all__ = [
    "AppError",
    "EncodingFailure",
    "ErrorCode",
    "RenderFailure",
    "ValidationError",
    "error_body",
    "install_exception_handlers",
]
