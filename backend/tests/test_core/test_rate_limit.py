"""Tests for the rate limit error response."""

import asyncio
import json

from dumbbell_tracker.core.exceptions import RateLimitError
from dumbbell_tracker.core.rate_limit import rate_limit_exceeded_handler


class TestRateLimitExceededHandler:
    """Tests for the slowapi rejection handler."""

    def test_uses_error_envelope(self, mocker):
        """Should answer 429 in the shared error envelope."""
        exc = mocker.Mock(detail="100 per 1 minute", retry_after=42)
        response = asyncio.run(rate_limit_exceeded_handler(mocker.Mock(), exc))

        assert response.status_code == 429
        assert json.loads(response.body) == {
            "error": {
                "code": "RATE_LIMIT_ERROR",
                "message": "Rate limit exceeded: 100 per 1 minute",
                "details": {"retry_after": 42},
            }
        }

    def test_rate_limit_error_defaults(self):
        """Should carry the 429 status and an empty retry hint."""
        error = RateLimitError()
        assert error.status_code == 429
        assert error.code == "RATE_LIMIT_ERROR"
        assert error.details == {"retry_after": None}
