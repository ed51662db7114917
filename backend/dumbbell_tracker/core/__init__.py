from dumbbell_tracker.core.exceptions import (
    TrackerException,
    NotFoundError,
    ValidationError,
    ConflictError,
    PersistenceError,
    RateLimitError,
)

__all__ = [
    "TrackerException",
    "NotFoundError",
    "ValidationError",
    "ConflictError",
    "PersistenceError",
    "RateLimitError",
]
