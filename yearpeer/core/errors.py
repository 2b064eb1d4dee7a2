"""Error taxonomy and classification for planner API failures."""

from enum import Enum

from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel, ValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from yearpeer.core.config import constants


UNEXPECTED_ERROR_MESSAGE = "An unexpected error occurred."


class ErrorCategory(Enum):
    """Categories of errors surfaced to API clients."""

    NOT_FOUND = "not_found"
    VALIDATION = "validation"
    UNAUTHORIZED = "unauthorized"
    UNEXPECTED = "unexpected"


class ErrorCode:
    """Error codes for specific error conditions."""

    ERR_NOT_FOUND = "ERR_NOT_FOUND"
    ERR_VALIDATION = "ERR_VALIDATION"
    ERR_GOAL_OVERLAP = "ERR_GOAL_OVERLAP"
    ERR_GOAL_LIMIT = "ERR_GOAL_LIMIT"
    ERR_TASK_LIMIT = "ERR_TASK_LIMIT"
    ERR_UNAUTHORIZED = "ERR_UNAUTHORIZED"
    ERR_METHOD_NOT_ALLOWED = "ERR_METHOD_NOT_ALLOWED"
    ERR_UNKNOWN = "ERR_UNKNOWN"


class PlannerError(Exception):
    """Base class for errors that map onto a client-visible HTTP status."""

    status_code: int = constants.HTTP_SERVER_ERROR
    category: ErrorCategory = ErrorCategory.UNEXPECTED
    default_code: str = ErrorCode.ERR_UNKNOWN

    def __init__(self, message: str, *, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code


class NotFoundError(PlannerError):
    """Entity is absent or not owned by the caller."""

    status_code = constants.HTTP_NOT_FOUND
    category = ErrorCategory.NOT_FOUND
    default_code = ErrorCode.ERR_NOT_FOUND


class DomainValidationError(PlannerError):
    """Field constraint, goal overlap, or task limit violation."""

    status_code = constants.HTTP_BAD_REQUEST
    category = ErrorCategory.VALIDATION
    default_code = ErrorCode.ERR_VALIDATION


class UnauthorizedError(PlannerError):
    """Missing or invalid caller identity."""

    status_code = constants.HTTP_UNAUTHORIZED
    category = ErrorCategory.UNAUTHORIZED
    default_code = ErrorCode.ERR_UNAUTHORIZED


class ApiResponse(BaseModel):
    """JSON envelope returned for every failed request."""

    success: bool
    message: str
    code: str | None = None


_HTTP_ERROR_CODES = {
    constants.HTTP_BAD_REQUEST: ErrorCode.ERR_VALIDATION,
    constants.HTTP_UNAUTHORIZED: ErrorCode.ERR_UNAUTHORIZED,
    constants.HTTP_NOT_FOUND: ErrorCode.ERR_NOT_FOUND,
    constants.HTTP_METHOD_NOT_ALLOWED: ErrorCode.ERR_METHOD_NOT_ALLOWED,
}


def _format_validation_errors(exception: RequestValidationError | ValidationError) -> str:
    """Join pydantic error entries into one human-readable message."""
    parts = []
    for error in exception.errors():
        location = ".".join(str(item) for item in error.get("loc", ()) if item not in ("body", "query", "path"))
        message = str(error.get("msg", "Invalid value"))
        parts.append(f"{location}: {message}" if location else message)
    return "; ".join(parts) or "Invalid request"


def classify_error(exception: Exception, *, debug: bool = False) -> tuple[int, ApiResponse]:
    """Map an exception onto an HTTP status code and response envelope.

    Args:
        exception: The exception raised while handling a request
        debug: Whether to expose the raw message of unexpected errors

    Returns:
        Tuple of (status_code, ApiResponse)
    """
    if isinstance(exception, PlannerError):
        return exception.status_code, ApiResponse(success=False, message=exception.message, code=exception.code)

    # Routing failures raised by the framework itself (unknown path, wrong method)
    if isinstance(exception, StarletteHTTPException):
        code = _HTTP_ERROR_CODES.get(exception.status_code, ErrorCode.ERR_UNKNOWN)
        return exception.status_code, ApiResponse(success=False, message=str(exception.detail), code=code)

    if isinstance(exception, RequestValidationError | ValidationError):
        return constants.HTTP_BAD_REQUEST, ApiResponse(
            success=False,
            message=_format_validation_errors(exception),
            code=ErrorCode.ERR_VALIDATION,
        )

    message = str(exception) if debug and str(exception) else UNEXPECTED_ERROR_MESSAGE
    return constants.HTTP_SERVER_ERROR, ApiResponse(success=False, message=message, code=ErrorCode.ERR_UNKNOWN)
