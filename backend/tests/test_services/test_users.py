"""Tests for user registration and statistics."""

import pytest
from sqlalchemy.orm import Session

from dumbbell_tracker.core.exceptions import ConflictError, NotFoundError, ValidationError
from dumbbell_tracker.models import User, WorkoutSession
from dumbbell_tracker.services.users import UserService


class TestRegister:
    """Tests for UserService.register."""

    def test_register(self, test_db: Session):
        """Should create a user for a new tag."""
        user = UserService(test_db).register("Sari", " 99AABB ")
        assert user.id is not None
        assert user.rfid_tag == "99AABB"

    def test_duplicate_tag(self, test_db: Session, user: User):
        """Should refuse a tag that is already registered."""
        with pytest.raises(ConflictError):
            UserService(test_db).register("Other", user.rfid_tag)

    def test_missing_fields(self, test_db: Session):
        """Should name every missing field."""
        with pytest.raises(ValidationError) as exc_info:
            UserService(test_db).register("", "")
        assert exc_info.value.fields == ["name", "rfid_tag"]


class TestScan:
    """Tests for UserService.scan."""

    def test_known_tag(self, test_db: Session, user: User):
        """Should resolve a registered tag."""
        assert UserService(test_db).scan(user.rfid_tag).id == user.id

    def test_unknown_tag(self, test_db: Session):
        """Should return None for an unknown tag."""
        assert UserService(test_db).scan("FFFF") is None


class TestStats:
    """Tests for UserService.get_stats."""

    def test_lifetime_totals(self, test_db: Session, workout_session: WorkoutSession, user: User, add_entry):
        """Should count every rep of every set and the lifted volume."""
        add_entry(workout_session.session_id, weight=5.0, reps=10, sets=3, calories=2.0, duration=10)
        add_entry(workout_session.session_id, weight=8.0, reps=6, sets=2, calories=1.5, duration=5)

        stats = UserService(test_db).get_stats(user.id)

        assert stats["total_workouts"] == 2
        assert stats["total_reps"] == 42
        assert stats["total_sets"] == 5
        assert stats["total_calories"] == pytest.approx(3.5)
        assert stats["total_duration"] == 15
        assert stats["total_weight"] == pytest.approx(150.0 + 96.0)
        assert stats["max_weight"] == 8.0
        assert stats["total_sessions"] == 1

    def test_no_workouts(self, test_db: Session, user: User):
        """Should report zeros for a new user."""
        stats = UserService(test_db).get_stats(user.id)
        assert stats["total_workouts"] == 0
        assert stats["total_reps"] == 0
        assert stats["max_weight"] == 0.0

    def test_unknown_user(self, test_db: Session):
        """Should raise NotFoundError."""
        with pytest.raises(NotFoundError):
            UserService(test_db).get_stats(404)
