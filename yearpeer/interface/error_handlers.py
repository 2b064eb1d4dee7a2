"""Exception handlers translating failures into the JSON error envelope."""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from yearpeer.core.config import settings
from yearpeer.core.errors import PlannerError, classify_error


logger = logging.getLogger(__name__)


def _error_response(exception: Exception) -> JSONResponse:
    status_code, body = classify_error(exception, debug=settings.is_development)
    return JSONResponse(status_code=status_code, content=body.model_dump())


async def planner_error_handler(request: Request, exc: PlannerError) -> JSONResponse:
    logger.info(
        "Request rejected",
        extra={"path": request.url.path, "code": exc.code, "status_code": exc.status_code},
    )
    return _error_response(exc)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    logger.info(
        "Request not routed",
        extra={"path": request.url.path, "method": request.method, "status_code": exc.status_code},
    )
    response = _error_response(exc)
    if exc.headers:
        response.headers.update(exc.headers)
    return response


async def request_validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.info("Request payload invalid", extra={"path": request.url.path})
    return _error_response(exc)


async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error", extra={"path": request.url.path, "method": request.method})
    return _error_response(exc)


def register_error_handlers(app: FastAPI) -> None:
    """Attach the planner exception handlers to an application."""
    app.add_exception_handler(PlannerError, planner_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, unexpected_error_handler)
