"""Local wall-clock helpers.

Timestamps are stored naive, in the configured local timezone, the same way the
sensor bridge and dashboard report them.
"""

from datetime import date, datetime

from dumbbell_tracker.config import get_settings


def local_now() -> datetime:
    """Current local time, truncated to whole seconds, without tzinfo."""
    settings = get_settings()
    return datetime.now(settings.tz).replace(tzinfo=None, microsecond=0)


def local_today() -> date:
    """Get today's date in the configured local timezone."""
    return local_now().date()


def to_local_naive(value: datetime) -> datetime:
    """Convert an aware datetime to naive local time; naive values pass through."""
    if value.tzinfo is None:
        return value
    return value.astimezone(get_settings().tz).replace(tzinfo=None)
