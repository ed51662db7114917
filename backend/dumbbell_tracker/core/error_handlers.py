"""Global exception handlers for FastAPI application."""

import logging
from typing import Union

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError as PydanticValidationError

from dumbbell_tracker.core.exceptions import TrackerException

logger = logging.getLogger(__name__)


async def tracker_exception_handler(request: Request, exc: TrackerException) -> JSONResponse:
    """Handle all TrackerException subclasses."""
    logger.error(
        "TrackerException: %s - %s",
        exc.code,
        exc.message,
        extra={
            "error_code": exc.code,
            "status_code": exc.status_code,
            "details": exc.details,
            "path": request.url.path,
            "method": request.method,
        },
    )
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": {
                "code": exc.code,
                "message": exc.message,
                "details": exc.details,
            }
        },
    )


async def pydantic_validation_handler(
    request: Request, exc: Union[PydanticValidationError, RequestValidationError]
) -> JSONResponse:
    """Handle Pydantic and request-body validation errors with consistent format."""
    errors = []
    for error in exc.errors():
        # Drop the "body"/"query" prefix FastAPI adds so the field name stands alone
        loc = [str(part) for part in error["loc"] if part not in ("body", "query", "path")]
        field = ".".join(loc) or "body"
        errors.append({"field": field, "message": error["msg"]})

    logger.warning(
        "Validation error: %s",
        errors,
        extra={"path": request.url.path, "method": request.method},
    )

    return JSONResponse(
        status_code=422,
        content={
            "error": {
                "code": "VALIDATION_ERROR",
                "message": "Request validation failed",
                "details": {
                    "fields": sorted({e["field"] for e in errors}),
                    "errors": errors,
                },
            }
        },
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions."""
    logger.exception(
        "Unhandled exception: %s",
        str(exc),
        extra={"path": request.url.path, "method": request.method},
    )
    return JSONResponse(
        status_code=500,
        content={
            "error": {
                "code": "INTERNAL_ERROR",
                "message": "An unexpected error occurred",
                "details": {},
            }
        },
    )
