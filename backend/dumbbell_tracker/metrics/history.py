"""
Per-day history buckets over a user's sessions.

Sessions that carry workout entries are spread across the calendar days of the
entries' own timestamps. Sessions without entries fall back to the day of their
start time and contribute their session-level totals. The two paths count reps
differently: an entry contributes reps x sets, while a session fallback
contributes its cached reps total as-is.
"""
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta
from typing import Any, Optional, Union

from dumbbell_tracker.core.exceptions import ValidationError


@dataclass
class EntrySnapshot:
    timestamp: Optional[datetime]
    duration: int = 0
    calories: float = 0.0
    reps: int = 0
    sets: int = 1
    weight: float = 0.0

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "EntrySnapshot":
        return cls(
            timestamp=_coerce_datetime(data.get("timestamp")),
            duration=int(data.get("duration") or 0),
            calories=float(data.get("calories") or 0.0),
            reps=int(data.get("reps") or 0),
            sets=int(data.get("sets") or 1),
            weight=float(data.get("weight") or 0.0),
        )


@dataclass
class SessionSnapshot:
    start_time: Optional[datetime]
    duration: int = 0
    calories: float = 0.0
    reps: int = 0
    weight: float = 0.0
    entries: list[EntrySnapshot] = field(default_factory=list)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "SessionSnapshot":
        """Build from a session payload, accepting the startTime / workout_data shapes."""
        start = data.get("start_time") or data.get("startTime")
        entries = data.get("workout_data") or data.get("entries") or []
        return cls(
            start_time=_coerce_datetime(start),
            duration=int(data.get("duration") or 0),
            calories=float(data.get("calories") or 0.0),
            reps=int(data.get("reps") or 0),
            weight=float(data.get("weight") or 0.0),
            entries=[
                e if isinstance(e, EntrySnapshot) else EntrySnapshot.from_mapping(e) for e in entries
            ],
        )


@dataclass
class DateBucket:
    date: date
    duration: int = 0
    calories: float = 0.0
    reps: int = 0
    total_weight: float = 0.0
    session_count: int = 0

    def add(self, duration: int, calories: float, reps: int, total_weight: float) -> None:
        self.duration += duration
        self.calories += calories
        self.reps += reps
        self.total_weight += total_weight
        self.session_count += 1


@dataclass
class HistoryTotals:
    duration: int = 0
    calories: float = 0.0
    reps: int = 0
    total_weight: float = 0.0
    session_count: int = 0


@dataclass
class LatestSnapshot:
    date: datetime
    duration: int
    reps: int
    calories: float
    weight: float


@dataclass
class HistorySummary:
    start_date: date
    end_date: date
    buckets: list[DateBucket]
    totals: HistoryTotals
    latest: Optional[LatestSnapshot] = None


def _coerce_datetime(value: Union[str, datetime, date, None]) -> Optional[datetime]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime.combine(value, time.min)
    try:
        return datetime.fromisoformat(str(value))
    except ValueError:
        return None


def date_range(start_date: date, end_date: date) -> list[date]:
    """Every calendar day from start_date to end_date, both inclusive."""
    if start_date > end_date:
        raise ValidationError(["start_date", "end_date"], "start_date must not be after end_date")
    days = (end_date - start_date).days
    return [start_date + timedelta(days=offset) for offset in range(days + 1)]


def aggregate_history(
    sessions: Iterable[Union[SessionSnapshot, Mapping[str, Any]]],
    start_date: date,
    end_date: date,
) -> HistorySummary:
    """Bucket sessions per calendar day over [start_date, end_date], with totals and the latest item."""
    buckets = {day: DateBucket(date=day) for day in date_range(start_date, end_date)}
    latest: Optional[LatestSnapshot] = None

    def attribute(
        when: Optional[datetime],
        duration: int,
        calories: float,
        reps: int,
        weight: float,
        total_weight: float,
    ) -> None:
        nonlocal latest
        if when is None:
            return
        bucket = buckets.get(when.date())
        if bucket is None:
            return
        bucket.add(duration, calories, reps, total_weight)
        if latest is None or when > latest.date:
            latest = LatestSnapshot(date=when, duration=duration, reps=reps, calories=calories, weight=weight)

    for session in sessions:
        if not isinstance(session, SessionSnapshot):
            session = SessionSnapshot.from_mapping(session)

        if session.entries:
            for entry in session.entries:
                attribute(
                    entry.timestamp,
                    entry.duration,
                    entry.calories,
                    entry.reps * entry.sets,
                    entry.weight,
                    entry.weight * entry.reps * entry.sets,
                )
        else:
            attribute(
                session.start_time,
                session.duration,
                session.calories,
                session.reps,
                session.weight,
                session.weight * session.reps,
            )

    ordered = [buckets[day] for day in sorted(buckets)]
    totals = HistoryTotals()
    for bucket in ordered:
        totals.duration += bucket.duration
        totals.calories += bucket.calories
        totals.reps += bucket.reps
        totals.total_weight += bucket.total_weight
        totals.session_count += bucket.session_count

    return HistorySummary(
        start_date=start_date,
        end_date=end_date,
        buckets=ordered,
        totals=totals,
        latest=latest,
    )
