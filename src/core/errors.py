"""Error classification and HTTP translation.

Services raise built-in exceptions (PermissionError, ValueError, KeyError) or the
db client's typed errors; this module maps them onto a structured ErrorResponse
and registers the FastAPI handlers that do the translation.
"""

import logging
from enum import Enum

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.core.config import constants
from src.core.db_client import RecordNotFoundError


logger = logging.getLogger(__name__)


class ConcurrentUpdateError(RuntimeError):
    """Raised when a conditional write keeps losing to concurrent writers."""


class ErrorSeverity(Enum):
    """Severity levels for errors."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class ErrorCode:
    """Error codes for specific error conditions."""

    ERR_AUTHENTICATION_REQUIRED = "ERR_AUTHENTICATION_REQUIRED"
    ERR_PERMISSION_DENIED = "ERR_PERMISSION_DENIED"
    ERR_NOT_FOUND = "ERR_NOT_FOUND"
    ERR_VALIDATION_FAILED = "ERR_VALIDATION_FAILED"
    ERR_CONCURRENT_UPDATE = "ERR_CONCURRENT_UPDATE"

    # Generic errors
    ERR_UNKNOWN = "ERR_UNKNOWN"


class ErrorResponse(BaseModel):
    """Structured error response with user-friendly messaging."""

    code: str
    message: str
    suggestion: str
    severity: ErrorSeverity


_STATUS_BY_CODE: dict[str, int] = {
    ErrorCode.ERR_AUTHENTICATION_REQUIRED: constants.HTTP_UNAUTHORIZED,
    ErrorCode.ERR_PERMISSION_DENIED: constants.HTTP_FORBIDDEN,
    ErrorCode.ERR_NOT_FOUND: constants.HTTP_NOT_FOUND,
    ErrorCode.ERR_VALIDATION_FAILED: constants.HTTP_BAD_REQUEST,
    ErrorCode.ERR_CONCURRENT_UPDATE: constants.HTTP_CONFLICT,
    ErrorCode.ERR_UNKNOWN: constants.HTTP_SERVER_ERROR,
}


def status_for(response: ErrorResponse) -> int:
    """HTTP status code for a classified error."""
    return _STATUS_BY_CODE.get(response.code, constants.HTTP_SERVER_ERROR)


def classify_error_with_response(exception: Exception) -> ErrorResponse:  # noqa: PLR0911
    """Classify an error and return a structured response with recovery suggestions.

    Service-level messages are user-facing and passed through; anything
    unrecognized gets a generic message so internals never leak.

    Args:
        exception: The exception raised during execution

    Returns:
        ErrorResponse with code, message, suggestion, and severity
    """
    if isinstance(exception, PermissionError):
        return ErrorResponse(
            code=ErrorCode.ERR_PERMISSION_DENIED,
            message=str(exception) or "You don't have permission for this action.",
            suggestion="Only the owner or assignee can do this.",
            severity=ErrorSeverity.MEDIUM,
        )

    if isinstance(exception, RecordNotFoundError):
        return ErrorResponse(
            code=ErrorCode.ERR_NOT_FOUND,
            message=str(exception),
            suggestion="Refresh the list; the item may have been deleted.",
            severity=ErrorSeverity.LOW,
        )

    if isinstance(exception, RequestValidationError):
        first = exception.errors()[0] if exception.errors() else {}
        field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        detail = first.get("msg", "Invalid request")
        return ErrorResponse(
            code=ErrorCode.ERR_VALIDATION_FAILED,
            message=f"{field}: {detail}" if field else detail,
            suggestion="Check the request fields and try again.",
            severity=ErrorSeverity.LOW,
        )

    if isinstance(exception, ValueError):
        return ErrorResponse(
            code=ErrorCode.ERR_VALIDATION_FAILED,
            message=str(exception),
            suggestion="Check the request fields and try again.",
            severity=ErrorSeverity.LOW,
        )

    if isinstance(exception, ConcurrentUpdateError):
        return ErrorResponse(
            code=ErrorCode.ERR_CONCURRENT_UPDATE,
            message="This item was changed by someone else.",
            suggestion="Reload and try again.",
            severity=ErrorSeverity.LOW,
        )

    if isinstance(exception, StarletteHTTPException) and exception.status_code == constants.HTTP_UNAUTHORIZED:
        return ErrorResponse(
            code=ErrorCode.ERR_AUTHENTICATION_REQUIRED,
            message=str(exception.detail) or "Unauthorized",
            suggestion="Log in and try again.",
            severity=ErrorSeverity.MEDIUM,
        )

    return ErrorResponse(
        code=ErrorCode.ERR_UNKNOWN,
        message="An unexpected error occurred.",
        suggestion="Please try again later. If the problem persists, contact support.",
        severity=ErrorSeverity.HIGH,
    )


def _error_json(response: ErrorResponse, status_code: int) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=response.model_dump(mode="json"))


async def _handle_classified(request: Request, exc: Exception) -> JSONResponse:
    response = classify_error_with_response(exc)
    status_code = status_for(response)
    if status_code >= constants.HTTP_SERVER_ERROR:
        logger.exception(
            "Unhandled error",
            extra={"path": request.url.path, "method": request.method, "error_type": type(exc).__name__},
            exc_info=exc,
        )
    else:
        logger.info(
            "Request failed",
            extra={"path": request.url.path, "code": response.code, "error": response.message},
        )
    return _error_json(response, status_code)


async def _handle_http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == constants.HTTP_UNAUTHORIZED:
        return await _handle_classified(request, exc)
    response = ErrorResponse(
        code=ErrorCode.ERR_NOT_FOUND if exc.status_code == constants.HTTP_NOT_FOUND else ErrorCode.ERR_UNKNOWN,
        message=str(exc.detail),
        suggestion="Check the request and try again.",
        severity=ErrorSeverity.LOW,
    )
    return JSONResponse(status_code=exc.status_code, content=response.model_dump(mode="json"), headers=exc.headers)


def register_exception_handlers(app: FastAPI) -> None:
    """Install handlers translating service exceptions into ErrorResponse bodies."""
    app.add_exception_handler(StarletteHTTPException, _handle_http_exception)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, _handle_classified)
    app.add_exception_handler(PermissionError, _handle_classified)
    app.add_exception_handler(RecordNotFoundError, _handle_classified)
    app.add_exception_handler(ValueError, _handle_classified)
    app.add_exception_handler(ConcurrentUpdateError, _handle_classified)
    app.add_exception_handler(Exception, _handle_classified)
