"""
Data access for users, sessions, workout entries and rep captures.

The store never commits. Callers own the transaction boundary and commit (or
roll back) once per operation.
"""
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import date, datetime, time, timedelta
from typing import Optional

from sqlalchemy import func, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from dumbbell_tracker.core.exceptions import PersistenceError
from dumbbell_tracker.core.logging import get_logger
from dumbbell_tracker.metrics.aggregation import SessionAggregates
from dumbbell_tracker.models import RepCapture, User, WorkoutEntry, WorkoutSession

logger = get_logger(__name__)


def _day_bounds(start_date: date, end_date: date) -> tuple[datetime, datetime]:
    # Half-open interval covering end_date through 23:59:59.999999
    return datetime.combine(start_date, time.min), datetime.combine(end_date + timedelta(days=1), time.min)


@contextmanager
def transaction(db: Session, operation: str) -> Iterator[None]:
    """
    Run a block of store calls as one unit of work.

    Commits when the block finishes. Any failure rolls everything back, and
    database errors surface as PersistenceError carrying the driver message.
    """
    try:
        yield
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("transaction_failed", operation=operation, error=str(e))
        raise PersistenceError(operation, str(e)) from e
    except Exception:
        db.rollback()
        raise


class WorkoutStore:
    """SQLAlchemy-backed persistence operations used by the services."""

    def __init__(self, db: Session):
        self.db = db

    # =========================================================================
    # Users
    # =========================================================================

    def find_user(self, user_id: int) -> Optional[User]:
        return self.db.get(User, user_id)

    def find_user_by_rfid(self, rfid_tag: str) -> Optional[User]:
        return self.db.execute(select(User).where(User.rfid_tag == rfid_tag)).scalar_one_or_none()

    def create_user(self, name: str, rfid_tag: str) -> User:
        user = User(name=name, rfid_tag=rfid_tag)
        self.db.add(user)
        self.db.flush()
        return user

    # =========================================================================
    # Sessions
    # =========================================================================

    def find_session_by_id(self, session_id: str) -> Optional[WorkoutSession]:
        return self.db.execute(
            select(WorkoutSession).where(WorkoutSession.session_id == session_id)
        ).scalar_one_or_none()

    def lock_session(self, session_id: str) -> Optional[WorkoutSession]:
        """Load a session with a row lock held until the transaction ends."""
        return self.db.execute(
            select(WorkoutSession)
            .where(WorkoutSession.session_id == session_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        ).scalar_one_or_none()

    def create_session(
        self, session_id: str, user_id: int, weight: float, start_time: datetime
    ) -> WorkoutSession:
        session = WorkoutSession(
            session_id=session_id,
            user_id=user_id,
            dumbbell_weight=weight,
            start_time=start_time,
            total_reps=0,
            total_sets=0,
            total_calories=0.0,
            avg_form_score=0.0,
        )
        self.db.add(session)
        self.db.flush()
        return session

    def update_session_aggregates(
        self, session: WorkoutSession, aggregates: SessionAggregates
    ) -> WorkoutSession:
        """Overwrite all four cached totals together."""
        session.total_reps = aggregates.total_reps
        session.total_sets = aggregates.total_sets
        session.total_calories = aggregates.total_calories
        session.avg_form_score = aggregates.avg_form_score
        self.db.flush()
        return session

    def list_sessions_for_user(
        self,
        user_id: int,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> list[WorkoutSession]:
        """
        Sessions of a user with their entries eagerly loaded.

        With a date range, a session qualifies if it started inside the range
        or owns at least one entry timestamped inside it.
        """
        query = (
            select(WorkoutSession)
            .where(WorkoutSession.user_id == user_id)
            .options(selectinload(WorkoutSession.entries))
            .order_by(WorkoutSession.start_time.desc())
        )
        if start_date is not None and end_date is not None:
            lo, hi = _day_bounds(start_date, end_date)
            in_range_entries = (
                select(WorkoutEntry.session_id)
                .where(WorkoutEntry.timestamp >= lo, WorkoutEntry.timestamp < hi)
                .distinct()
            )
            query = query.where(
                or_(
                    (WorkoutSession.start_time >= lo) & (WorkoutSession.start_time < hi),
                    WorkoutSession.session_id.in_(in_range_entries),
                )
            )
        return list(self.db.execute(query).scalars().all())

    # =========================================================================
    # Workout entries
    # =========================================================================

    def list_entries(self, session_id: str) -> list[WorkoutEntry]:
        return list(
            self.db.execute(
                select(WorkoutEntry)
                .where(WorkoutEntry.session_id == session_id)
                .order_by(WorkoutEntry.timestamp, WorkoutEntry.id)
            )
            .scalars()
            .all()
        )

    def find_entry(self, entry_id: int) -> Optional[WorkoutEntry]:
        return self.db.get(WorkoutEntry, entry_id)

    def insert_entry(self, entry: WorkoutEntry) -> WorkoutEntry:
        self.db.add(entry)
        self.db.flush()
        return entry

    def delete_entry(self, entry: WorkoutEntry) -> None:
        self.db.delete(entry)
        self.db.flush()

    def find_duplicate_entry(
        self, session_id: str, reps: int, sets: int, timestamp: datetime, window_seconds: int
    ) -> Optional[WorkoutEntry]:
        """An entry with the same reps and sets strictly within window_seconds of timestamp."""
        window = timedelta(seconds=window_seconds)
        return (
            self.db.execute(
                select(WorkoutEntry)
                .where(
                    WorkoutEntry.session_id == session_id,
                    WorkoutEntry.reps == reps,
                    WorkoutEntry.sets == sets,
                    WorkoutEntry.timestamp > timestamp - window,
                    WorkoutEntry.timestamp < timestamp + window,
                )
                .order_by(WorkoutEntry.id)
                .limit(1)
            )
            .scalars()
            .first()
        )

    def list_entries_for_user(self, user_id: int, offset: int, limit: int) -> tuple[list[WorkoutEntry], int]:
        """Page through a user's entries, newest first, with the total count."""
        base = (
            select(WorkoutEntry)
            .join(WorkoutSession, WorkoutEntry.session_id == WorkoutSession.session_id)
            .where(WorkoutSession.user_id == user_id)
        )
        total = self.db.execute(select(func.count()).select_from(base.subquery())).scalar_one()
        rows = (
            self.db.execute(
                base.order_by(WorkoutEntry.timestamp.desc(), WorkoutEntry.id.desc())
                .offset(offset)
                .limit(limit)
            )
            .scalars()
            .all()
        )
        return list(rows), total

    def list_workout_dates_for_user(self, user_id: int) -> list[date]:
        """Distinct calendar days with at least one entry, newest first."""
        timestamps = self.db.execute(
            select(WorkoutEntry.timestamp)
            .join(WorkoutSession, WorkoutEntry.session_id == WorkoutSession.session_id)
            .where(WorkoutSession.user_id == user_id)
        ).scalars()
        return sorted({ts.date() for ts in timestamps if ts is not None}, reverse=True)

    def user_entry_totals(self, user_id: int) -> dict:
        """Lifetime totals over a user's entries."""
        row = self.db.execute(
            select(
                func.count(WorkoutEntry.id),
                func.coalesce(func.sum(WorkoutEntry.reps * WorkoutEntry.sets), 0),
                func.coalesce(func.sum(WorkoutEntry.sets), 0),
                func.coalesce(func.sum(WorkoutEntry.calories), 0.0),
                func.coalesce(func.sum(WorkoutEntry.duration), 0),
                func.coalesce(func.sum(WorkoutEntry.weight * WorkoutEntry.reps * WorkoutEntry.sets), 0.0),
                func.max(WorkoutEntry.weight),
            )
            .join(WorkoutSession, WorkoutEntry.session_id == WorkoutSession.session_id)
            .where(WorkoutSession.user_id == user_id)
        ).one()
        return {
            "total_workouts": row[0],
            "total_reps": int(row[1]),
            "total_sets": int(row[2]),
            "total_calories": float(row[3]),
            "total_duration": int(row[4]),
            "total_weight": float(row[5]),
            "max_weight": float(row[6]) if row[6] is not None else 0.0,
        }

    def count_sessions_for_user(self, user_id: int) -> int:
        return self.db.execute(
            select(func.count(WorkoutSession.id)).where(WorkoutSession.user_id == user_id)
        ).scalar_one()

    # =========================================================================
    # Rep captures
    # =========================================================================

    def insert_rep_capture(self, capture: RepCapture) -> RepCapture:
        self.db.add(capture)
        self.db.flush()
        return capture

    def sum_rep_calories(self, session_id: str) -> float:
        return float(
            self.db.execute(
                select(func.coalesce(func.sum(RepCapture.calories), 0.0)).where(
                    RepCapture.session_id == session_id
                )
            ).scalar_one()
        )
