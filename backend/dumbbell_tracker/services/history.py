"""
Read models for the dashboard: per-day history and workout streaks.
"""
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Optional

from sqlalchemy.orm import Session

from dumbbell_tracker.config import get_settings
from dumbbell_tracker.core.clock import local_today
from dumbbell_tracker.core.exceptions import NotFoundError
from dumbbell_tracker.core.logging import get_logger
from dumbbell_tracker.metrics.history import (
    EntrySnapshot,
    HistorySummary,
    SessionSnapshot,
    aggregate_history,
)
from dumbbell_tracker.metrics.streak import calculate_streak
from dumbbell_tracker.models import WorkoutSession
from dumbbell_tracker.services.store import WorkoutStore

logger = get_logger(__name__)


@dataclass
class StreakResult:
    streak: int
    has_data: bool
    last_workout_date: Optional[date] = None


def session_snapshot(session: WorkoutSession) -> SessionSnapshot:
    """Detach a stored session and its entries into plain history input."""
    return SessionSnapshot(
        start_time=session.start_time,
        duration=sum(entry.duration for entry in session.entries),
        calories=session.total_calories or 0.0,
        reps=session.total_reps or 0,
        weight=session.dumbbell_weight or 0.0,
        entries=[
            EntrySnapshot(
                timestamp=entry.timestamp,
                duration=entry.duration,
                calories=entry.calories,
                reps=entry.reps,
                sets=entry.sets,
                weight=entry.weight,
            )
            for entry in session.entries
        ],
    )


class HistoryService:
    def __init__(self, db: Session):
        self.db = db
        self.store = WorkoutStore(db)
        self.settings = get_settings()

    def _require_user(self, user_id: int) -> None:
        if self.store.find_user(user_id) is None:
            raise NotFoundError("User", user_id)

    def history(
        self,
        user_id: int,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> HistorySummary:
        """Bucket a user's workouts per day; the range defaults to the last N days ending today."""
        self._require_user(user_id)
        if end_date is None:
            end_date = local_today()
        if start_date is None:
            start_date = end_date - timedelta(days=self.settings.default_history_days - 1)

        sessions = self.store.list_sessions_for_user(user_id, start_date, end_date)
        summary = aggregate_history(
            (session_snapshot(session) for session in sessions), start_date, end_date
        )
        logger.debug(
            "history_aggregated",
            user_id=user_id,
            start_date=start_date.isoformat(),
            end_date=end_date.isoformat(),
            sessions=len(sessions),
        )
        return summary

    def workout_dates(self, user_id: int) -> list[date]:
        self._require_user(user_id)
        return self.store.list_workout_dates_for_user(user_id)

    def streak(self, user_id: int, today: Optional[date] = None) -> StreakResult:
        """Current streak, or has_data=False when the user never logged a workout."""
        dates = self.workout_dates(user_id)
        if not dates:
            return StreakResult(streak=0, has_data=False)
        today = today or local_today()
        return StreakResult(
            streak=calculate_streak(dates, today),
            has_data=True,
            last_workout_date=dates[0],
        )
