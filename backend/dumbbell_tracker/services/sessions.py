"""
Workout session lifecycle and cached aggregate maintenance.
"""
from datetime import date, timedelta
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from dumbbell_tracker.config import get_settings
from dumbbell_tracker.core.clock import local_now, local_today
from dumbbell_tracker.core.exceptions import ConflictError, NotFoundError, ValidationError
from dumbbell_tracker.core.logging import get_logger
from dumbbell_tracker.metrics.aggregation import recompute
from dumbbell_tracker.models import WorkoutSession
from dumbbell_tracker.services.store import WorkoutStore, transaction

logger = get_logger(__name__)


class SessionService:
    """Start, resolve, recompute and end workout sessions."""

    def __init__(self, db: Session):
        self.db = db
        self.store = WorkoutStore(db)

    def get_session(self, session_id: str) -> WorkoutSession:
        session = self.store.find_session_by_id(session_id)
        if session is None:
            raise NotFoundError("Session", session_id)
        return session

    def list_sessions(
        self,
        user_id: int,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> list[WorkoutSession]:
        """
        A user's sessions, newest first.

        With no dates every session is returned. With only one bound the other
        is filled in: the end defaults to today, the start to the history
        window before the end.
        """
        if start_date is not None and end_date is None:
            end_date = max(local_today(), start_date)
        elif end_date is not None and start_date is None:
            start_date = end_date - timedelta(days=get_settings().default_history_days - 1)
        if start_date is not None and end_date is not None and start_date > end_date:
            raise ValidationError(["start_date", "end_date"], "start_date must not be after end_date")
        return self.store.list_sessions_for_user(user_id, start_date, end_date)

    def start_session(self, session_id: str, user_id: int, weight: float) -> WorkoutSession:
        """Open a session at RFID tap + weight entry."""
        session_id = (session_id or "").strip()
        invalid = []
        if not session_id:
            invalid.append("session_id")
        if weight is None or weight <= 0:
            invalid.append("weight")
        if invalid:
            raise ValidationError(invalid, "must be present and positive")

        if self.store.find_user(user_id) is None:
            raise NotFoundError("User", user_id)
        if self.store.find_session_by_id(session_id) is not None:
            raise ConflictError("Session", session_id)

        with transaction(self.db, "start session"):
            session = self.store.create_session(session_id, user_id, weight, local_now())

        logger.info("session_started", session_id=session_id, user_id=user_id, weight=weight)
        return session

    def resolve_session(
        self, session_id: str, user_id: Optional[int], weight: float
    ) -> tuple[WorkoutSession, bool]:
        """
        Find a session, creating it on the fly when a valid owner is supplied.

        Returns the session and whether it was created by this call. Must run
        before any other write in the caller's transaction: losing a creation
        race rolls back the pending insert and re-reads the winner's row.
        """
        session = self.store.find_session_by_id(session_id)
        if session is not None:
            return session, False

        if user_id is None or user_id <= 0 or self.store.find_user(user_id) is None:
            raise NotFoundError("Session", session_id)

        try:
            session = self.store.create_session(session_id, user_id, weight, local_now())
        except IntegrityError:
            self.db.rollback()
            session = self.store.find_session_by_id(session_id)
            if session is None:
                raise
            logger.info("session_create_race_lost", session_id=session_id)
            return session, False

        logger.info("session_auto_created", session_id=session_id, user_id=user_id)
        return session, True

    def recompute_aggregates(self, session_id: str) -> WorkoutSession:
        """
        Rewrite the session's four cached totals from its current entries.

        Holds a row lock on the session while folding. Does not commit.
        """
        session = self.store.lock_session(session_id)
        if session is None:
            raise NotFoundError("Session", session_id)

        aggregates = recompute(self.store.list_entries(session_id))
        self.store.update_session_aggregates(session, aggregates)
        logger.debug("session_aggregates_recomputed", session_id=session_id, **aggregates.to_dict())
        return session

    def end_session(self, session_id: str) -> WorkoutSession:
        """Stamp the end time and recompute the totals from stored entries."""
        with transaction(self.db, "end session"):
            session = self.recompute_aggregates(session_id)
            session.end_time = local_now()

        logger.info(
            "session_ended",
            session_id=session_id,
            total_reps=session.total_reps,
            total_calories=session.total_calories,
        )
        return session
