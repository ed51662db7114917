"""Consecutive-day workout streak."""
from collections.abc import Iterable
from datetime import date, timedelta


def calculate_streak(dates: Iterable[date], today: date) -> int:
    """
    Count consecutive workout days ending today or yesterday.

    A most recent workout older than yesterday means the streak is broken.
    Repeated dates are ignored and the walk stops at the first gap.
    """
    ordered = sorted(set(dates), reverse=True)
    if not ordered:
        return 0

    yesterday = today - timedelta(days=1)
    if ordered[0] < yesterday:
        return 0

    streak = 1
    previous = ordered[0]
    for current in ordered[1:]:
        gap = (previous - current).days
        if gap == 1:
            streak += 1
            previous = current
        elif gap > 1:
            break
    return streak
