"""
Editing, deleting and paging through stored workout entries.
"""
from dataclasses import dataclass
from numbers import Real
from typing import Any

from sqlalchemy.orm import Session

from dumbbell_tracker.core.exceptions import NotFoundError, ValidationError
from dumbbell_tracker.core.logging import get_logger
from dumbbell_tracker.metrics.calories import ManualBulk, estimate_calories
from dumbbell_tracker.models import WorkoutEntry, WorkoutSession
from dumbbell_tracker.services.ingestion import parse_workout_date
from dumbbell_tracker.services.sessions import SessionService
from dumbbell_tracker.services.store import WorkoutStore, transaction

logger = get_logger(__name__)

POSITIVE_FIELDS = ("weight", "reps", "sets", "duration")


@dataclass
class EntryPage:
    entries: list[WorkoutEntry]
    total: int
    page: int
    limit: int

    @property
    def pages(self) -> int:
        return (self.total + self.limit - 1) // self.limit if self.limit else 0


def _is_number(value: Any) -> bool:
    return not isinstance(value, bool) and isinstance(value, Real)


class WorkoutService:
    """Entry-level operations; every mutation recomputes the owning session."""

    def __init__(self, db: Session):
        self.db = db
        self.store = WorkoutStore(db)
        self.sessions = SessionService(db)

    def get_entry(self, entry_id: int) -> WorkoutEntry:
        entry = self.store.find_entry(entry_id)
        if entry is None:
            raise NotFoundError("Workout", entry_id)
        return entry

    def list_for_user(self, user_id: int, page: int = 1, limit: int = 10) -> EntryPage:
        if page < 1 or limit < 1:
            raise ValidationError(["page", "limit"], "must be at least 1")
        entries, total = self.store.list_entries_for_user(user_id, (page - 1) * limit, limit)
        return EntryPage(entries=entries, total=total, page=page, limit=limit)

    def update_entry(self, entry_id: int, changes: dict[str, Any]) -> tuple[WorkoutEntry, WorkoutSession]:
        """
        Apply a partial edit.

        An explicit calories value is stored as a manual correction. Without
        one, changing weight, reps or sets re-derives calories from the
        fixed-distance estimate.
        """
        changes = {key: value for key, value in changes.items() if value is not None}

        invalid = [
            field
            for field in POSITIVE_FIELDS
            if field in changes and (not _is_number(changes[field]) or not changes[field] > 0)
        ]
        if "calories" in changes and (not _is_number(changes["calories"]) or changes["calories"] < 0):
            invalid.append("calories")
        if "form_score" in changes and (
            not _is_number(changes["form_score"]) or not 0 <= changes["form_score"] <= 5
        ):
            invalid.append("form_score")
        timestamp = None
        if "workout_date" in changes:
            timestamp = parse_workout_date(changes["workout_date"])
            if timestamp is None:
                invalid.append("workout_date")
        if invalid:
            raise ValidationError(invalid, "invalid value")

        with transaction(self.db, "update workout"):
            entry = self.get_entry(entry_id)
            for field in (*POSITIVE_FIELDS, "form_score"):
                if field in changes:
                    setattr(entry, field, changes[field])
            if timestamp is not None:
                entry.timestamp = timestamp

            if "calories" in changes:
                entry.calories = float(changes["calories"])
            elif any(field in changes for field in ("weight", "reps", "sets")):
                entry.calories = estimate_calories(entry.weight, ManualBulk(reps=entry.reps, sets=entry.sets))

            self.db.flush()
            session = self.sessions.recompute_aggregates(entry.session_id)

        logger.info("workout_updated", entry_id=entry_id, fields=sorted(changes))
        return entry, session

    def delete_entry(self, entry_id: int) -> WorkoutSession:
        with transaction(self.db, "delete workout"):
            entry = self.get_entry(entry_id)
            session_id = entry.session_id
            self.store.delete_entry(entry)
            session = self.sessions.recompute_aggregates(session_id)

        logger.info("workout_deleted", entry_id=entry_id, session_id=session_id)
        return session
