"""Rate limiting configuration using SlowAPI."""

from fastapi import Request
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from dumbbell_tracker.config import get_settings
from dumbbell_tracker.core.exceptions import RateLimitError

settings = get_settings()


def get_request_identifier(request: Request) -> str:
    """Get identifier for rate limiting.

    Uses IP address; the sensor bridge and the dashboard usually share one host.
    """
    return get_remote_address(request)


limiter = Limiter(
    key_func=get_request_identifier,
    default_limits=[settings.rate_limit_default],
    enabled=settings.rate_limit_enabled,
)


async def rate_limit_exceeded_handler(
    request: Request,
    exc: RateLimitExceeded,
) -> JSONResponse:
    """Render slowapi's rejection in the shared error envelope."""
    error = RateLimitError(
        message=f"Rate limit exceeded: {exc.detail}",
        retry_after=getattr(exc, "retry_after", None),
    )
    return JSONResponse(
        status_code=error.status_code,
        content={
            "error": {
                "code": error.code,
                "message": error.message,
                "details": error.details,
            }
        },
    )
