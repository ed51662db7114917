"""
User registration, RFID lookup and lifetime statistics.
"""
from typing import Any, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from dumbbell_tracker.core.exceptions import (
    ConflictError,
    NotFoundError,
    PersistenceError,
    ValidationError,
)
from dumbbell_tracker.core.logging import get_logger
from dumbbell_tracker.models import User
from dumbbell_tracker.services.store import WorkoutStore, transaction

logger = get_logger(__name__)


class UserService:
    def __init__(self, db: Session):
        self.db = db
        self.store = WorkoutStore(db)

    def register(self, name: str, rfid_tag: str) -> User:
        name = (name or "").strip()
        rfid_tag = (rfid_tag or "").strip()
        missing = [field for field, value in (("name", name), ("rfid_tag", rfid_tag)) if not value]
        if missing:
            raise ValidationError(missing, "is required")

        if self.store.find_user_by_rfid(rfid_tag) is not None:
            raise ConflictError("User", rfid_tag)

        try:
            with transaction(self.db, "register user"):
                user = self.store.create_user(name, rfid_tag)
        except PersistenceError as e:
            # Another registration for the same tag won the race
            if isinstance(e.__cause__, IntegrityError):
                raise ConflictError("User", rfid_tag) from e
            raise

        logger.info("user_registered", user_id=user.id)
        return user

    def scan(self, rfid_tag: str) -> Optional[User]:
        """Look up the user for a tapped tag; None for an unknown tag."""
        rfid_tag = (rfid_tag or "").strip()
        if not rfid_tag:
            raise ValidationError("rfid_tag", "is required")
        user = self.store.find_user_by_rfid(rfid_tag)
        logger.info("rfid_scanned", known=user is not None)
        return user

    def get_user(self, user_id: int) -> User:
        user = self.store.find_user(user_id)
        if user is None:
            raise NotFoundError("User", user_id)
        return user

    def get_stats(self, user_id: int) -> dict[str, Any]:
        """Lifetime totals; reps count every rep of every set."""
        self.get_user(user_id)
        stats = self.store.user_entry_totals(user_id)
        stats["total_sessions"] = self.store.count_sessions_for_user(user_id)
        return stats
