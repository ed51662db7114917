"""Tests for sensor rep uploads."""

import pytest
from sqlalchemy.orm import Session

from dumbbell_tracker.core.exceptions import NotFoundError, ValidationError
from dumbbell_tracker.metrics.calories import SensorDerived, sensor_calories
from dumbbell_tracker.metrics.motion import RepCaptureWindow, RepSample
from dumbbell_tracker.models import User, WorkoutSession
from dumbbell_tracker.services.rep_capture import RepCaptureService


def window(rep_number: int, angles: list[float]) -> RepCaptureWindow:
    return RepCaptureWindow(
        rep_number=rep_number,
        samples=[RepSample(ax=0.1, ay=0.2, az=1.1, angle=a) for a in angles],
        rep_duration=1.8,
    )


class TestRecordRep:
    """Tests for RepCaptureService.record_rep."""

    def test_records_angle_based_energy(self, test_db: Session, workout_session: WorkoutSession):
        """Should store the angle-based estimate using the session weight."""
        result = RepCaptureService(test_db).record_rep(workout_session.session_id, window(1, [5.0, 60.0, 95.0]))

        capture = result.capture
        assert capture.rep_number == 1
        assert capture.angle_range == pytest.approx(90.0)
        assert capture.calories == pytest.approx(sensor_calories(5.0, SensorDerived(angle_range=90.0)))
        assert capture.duration == 1.8
        assert result.session_rep_calories == pytest.approx(capture.calories)

    def test_explicit_weight(self, test_db: Session, workout_session: WorkoutSession):
        """Should prefer the uploaded weight over the session's nominal weight."""
        result = RepCaptureService(test_db).record_rep(
            workout_session.session_id, window(1, [0.0, 90.0]), weight=10.0
        )
        assert result.capture.calories == pytest.approx(sensor_calories(10.0, SensorDerived(angle_range=90.0)))

    def test_empty_samples(self, test_db: Session, workout_session: WorkoutSession):
        """Should record zero work for a rep without samples."""
        result = RepCaptureService(test_db).record_rep(workout_session.session_id, window(1, []))
        assert result.capture.angle_range == 0.0
        assert result.capture.work_done == 0.0
        assert result.capture.calories == 0.0

    def test_sums_session_rep_calories(self, test_db: Session, workout_session: WorkoutSession):
        """Should report the running sensor calorie total for the session."""
        service = RepCaptureService(test_db)
        first = service.record_rep(workout_session.session_id, window(1, [0.0, 90.0]))
        second = service.record_rep(workout_session.session_id, window(2, [0.0, 45.0]))
        assert second.session_rep_calories == pytest.approx(first.capture.calories + second.capture.calories)

    def test_leaves_session_totals_alone(self, test_db: Session, workout_session: WorkoutSession):
        """Should not overwrite the cached totals with rep counts."""
        service = RepCaptureService(test_db)
        for rep in range(1, 4):
            service.record_rep(workout_session.session_id, window(rep, [0.0, 80.0]))

        test_db.expire_all()
        session = test_db.get(WorkoutSession, workout_session.id)
        assert session.total_reps == 0
        assert session.total_calories == 0.0

    def test_auto_creates_with_owner_and_weight(self, test_db: Session, user: User):
        """Should open an unknown session when owner and weight are given."""
        result = RepCaptureService(test_db).record_rep("S-rep", window(1, [0.0, 30.0]), weight=4.0, user_id=user.id)
        assert result.session_created is True

    def test_unknown_session_without_weight(self, test_db: Session, user: User):
        """Should not auto-create without a dumbbell weight."""
        with pytest.raises(NotFoundError):
            RepCaptureService(test_db).record_rep("S-rep", window(1, [0.0, 30.0]), user_id=user.id)

    def test_invalid_rep_number(self, test_db: Session, workout_session: WorkoutSession):
        """Should require a positive rep number."""
        with pytest.raises(ValidationError) as exc_info:
            RepCaptureService(test_db).record_rep(workout_session.session_id, window(0, [0.0]))
        assert exc_info.value.fields == ["rep_number"]
