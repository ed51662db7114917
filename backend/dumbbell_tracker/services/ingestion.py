"""
Workout ingestion: validation, session auto-creation and duplicate suppression.
"""
from dataclasses import dataclass
from datetime import datetime
from numbers import Real
from typing import Optional

from sqlalchemy.orm import Session

from dumbbell_tracker.config import get_settings
from dumbbell_tracker.core.clock import local_now, to_local_naive
from dumbbell_tracker.core.exceptions import ValidationError
from dumbbell_tracker.core.logging import get_logger
from dumbbell_tracker.metrics.calories import ManualBulk, estimate_calories
from dumbbell_tracker.models import WorkoutEntry, WorkoutSession
from dumbbell_tracker.services.sessions import SessionService
from dumbbell_tracker.services.store import WorkoutStore, transaction

logger = get_logger(__name__)


@dataclass
class WorkoutSubmission:
    """One workout entry as submitted by the dashboard or sensor bridge."""

    session_id: str
    reps: int
    sets: int
    weight: float
    duration: int
    user_id: Optional[int] = None
    form_score: Optional[float] = None
    workout_date: Optional[str] = None


@dataclass
class IngestionResult:
    entry: WorkoutEntry
    session: WorkoutSession
    duplicate: bool = False
    session_created: bool = False


def parse_workout_date(value: Optional[str]) -> Optional[datetime]:
    """
    Parse an ISO 8601 date or datetime ("T" or space separated).

    Aware values are converted to local wall time. Returns None for blank or
    unparseable input.
    """
    if value is None:
        return None
    value = str(value).strip()
    if not value:
        return None
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        return None
    return to_local_naive(parsed).replace(microsecond=0)


def validate_submission(submission: WorkoutSubmission) -> None:
    """Reject the submission, naming every offending field at once."""
    invalid = []
    if not (submission.session_id or "").strip():
        invalid.append("session_id")
    for field in ("reps", "sets", "duration", "weight"):
        value = getattr(submission, field)
        if isinstance(value, bool) or not isinstance(value, Real) or not value > 0:
            invalid.append(field)
    if invalid:
        raise ValidationError(invalid, "required and must be greater than zero")

    if submission.form_score is not None and not 0 <= submission.form_score <= 5:
        raise ValidationError("form_score", "must be between 0 and 5")


class IngestionService:
    """Accepts workout submissions and keeps session totals in step."""

    def __init__(self, db: Session):
        self.db = db
        self.store = WorkoutStore(db)
        self.sessions = SessionService(db)
        self.settings = get_settings()

    def resolve_timestamp(self, workout_date: Optional[str]) -> datetime:
        if workout_date:
            parsed = parse_workout_date(workout_date)
            if parsed is not None:
                return parsed
            logger.warning("workout_date_unparseable", workout_date=workout_date)
        return local_now()

    def ingest(self, submission: WorkoutSubmission) -> IngestionResult:
        """
        Persist one workout entry and recompute its session.

        A submission matching an entry of the same session with identical reps
        and sets inside the duplicate window is treated as already applied: the
        existing entry is returned with duplicate=True and nothing is written.
        """
        validate_submission(submission)
        session_id = submission.session_id.strip()
        form_score = (
            submission.form_score
            if submission.form_score is not None
            else self.settings.default_form_score
        )
        calories = estimate_calories(
            submission.weight, ManualBulk(reps=submission.reps, sets=submission.sets)
        )
        timestamp = self.resolve_timestamp(submission.workout_date)

        with transaction(self.db, "ingest workout"):
            session, created = self.sessions.resolve_session(
                session_id, submission.user_id, submission.weight
            )

            existing = self.store.find_duplicate_entry(
                session_id,
                submission.reps,
                submission.sets,
                timestamp,
                self.settings.duplicate_window_seconds,
            )
            if existing is not None:
                logger.info(
                    "duplicate_submission",
                    session_id=session_id,
                    entry_id=existing.id,
                    reps=submission.reps,
                    sets=submission.sets,
                )
                return IngestionResult(
                    entry=existing, session=session, duplicate=True, session_created=created
                )

            entry = self.store.insert_entry(
                WorkoutEntry(
                    session_id=session_id,
                    weight=submission.weight,
                    reps=submission.reps,
                    sets=submission.sets,
                    duration=submission.duration,
                    calories=calories,
                    form_score=form_score,
                    timestamp=timestamp,
                )
            )
            session = self.sessions.recompute_aggregates(session_id)

        logger.info(
            "workout_ingested",
            session_id=session_id,
            entry_id=entry.id,
            reps=entry.reps,
            sets=entry.sets,
            calories=round(entry.calories, 2),
        )
        return IngestionResult(entry=entry, session=session, session_created=created)
