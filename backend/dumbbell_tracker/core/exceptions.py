"""Custom exception classes for the Dumbbell Tracker application."""

from collections.abc import Sequence
from typing import Any, Optional, Union


class TrackerException(Exception):
    """Base exception for Dumbbell Tracker application."""

    def __init__(
        self,
        message: str,
        code: str = "INTERNAL_ERROR",
        status_code: int = 500,
        details: Optional[dict[str, Any]] = None,
    ):
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)


class NotFoundError(TrackerException):
    """Resource not found error."""

    def __init__(self, resource: str, identifier: Any):
        super().__init__(
            message=f"{resource} not found: {identifier}",
            code="NOT_FOUND",
            status_code=404,
            details={"resource": resource, "identifier": str(identifier)},
        )


class ValidationError(TrackerException):
    """Input validation error naming one or more offending fields."""

    def __init__(self, field: Union[str, Sequence[str]], message: str):
        fields = [field] if isinstance(field, str) else list(field)
        super().__init__(
            message=f"Validation error on {', '.join(fields)}: {message}",
            code="VALIDATION_ERROR",
            status_code=422,
            details={"fields": fields},
        )
        self.fields = fields


class ConflictError(TrackerException):
    """Resource already exists."""

    def __init__(self, resource: str, identifier: Any):
        super().__init__(
            message=f"{resource} already exists: {identifier}",
            code="CONFLICT",
            status_code=409,
            details={"resource": resource, "identifier": str(identifier)},
        )


class PersistenceError(TrackerException):
    """The data store rejected a write."""

    def __init__(self, operation: str, message: str):
        super().__init__(
            message=f"Failed to {operation}: {message}",
            code="PERSISTENCE_ERROR",
            status_code=500,
            details={"operation": operation},
        )


class RateLimitError(TrackerException):
    """Rate limit exceeded error."""

    def __init__(self, message: str = "Rate limit exceeded", retry_after: Optional[int] = None):
        super().__init__(
            message=message,
            code="RATE_LIMIT_ERROR",
            status_code=429,
            details={"retry_after": retry_after},
        )
