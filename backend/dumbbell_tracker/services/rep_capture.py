"""
Sensor rep uploads: reduce the samples and record the rep's physical work.
"""
from dataclasses import dataclass
from typing import Optional

from sqlalchemy.orm import Session

from dumbbell_tracker.core.clock import local_now
from dumbbell_tracker.core.exceptions import ValidationError
from dumbbell_tracker.core.logging import get_logger
from dumbbell_tracker.metrics.calories import SensorDerived, sensor_rep_energy
from dumbbell_tracker.metrics.motion import RepCaptureWindow, RepMotionSummary
from dumbbell_tracker.models import RepCapture
from dumbbell_tracker.services.sessions import SessionService
from dumbbell_tracker.services.store import WorkoutStore, transaction

logger = get_logger(__name__)


@dataclass
class RepCaptureResult:
    capture: RepCapture
    summary: RepMotionSummary
    session_rep_calories: float
    session_created: bool = False


class RepCaptureService:
    """
    Records one sensor-captured rep per call.

    Rep rows are an audit trail of the sensor path. They never touch the
    session's cached totals, which only fold workout entries.
    """

    def __init__(self, db: Session):
        self.db = db
        self.store = WorkoutStore(db)
        self.sessions = SessionService(db)

    def record_rep(
        self,
        session_id: str,
        window: RepCaptureWindow,
        weight: Optional[float] = None,
        user_id: Optional[int] = None,
    ) -> RepCaptureResult:
        session_id = (session_id or "").strip()
        invalid = []
        if not session_id:
            invalid.append("session_id")
        if window.rep_number is None or window.rep_number < 1:
            invalid.append("rep_number")
        if weight is not None and weight <= 0:
            invalid.append("weight")
        if invalid:
            raise ValidationError(invalid, "required and must be greater than zero")

        summary = window.summarize()

        with transaction(self.db, "record rep"):
            # Auto-creation needs the dumbbell weight as well as the owner
            owner = user_id if weight is not None else None
            session, created = self.sessions.resolve_session(session_id, owner, weight)
            lifted = weight if weight is not None else session.dumbbell_weight
            energy = sensor_rep_energy(lifted, SensorDerived.from_summary(summary))

            capture = self.store.insert_rep_capture(
                RepCapture(
                    session_id=session_id,
                    rep_number=window.rep_number,
                    angle_range=summary.angle_range,
                    max_accel=summary.peak_acceleration,
                    displacement=energy.displacement,
                    work_done=energy.work,
                    calories=energy.calories,
                    duration=window.duration,
                    timestamp=local_now(),
                )
            )
            session_rep_calories = self.store.sum_rep_calories(session_id)

        logger.info(
            "rep_recorded",
            session_id=session_id,
            rep_number=window.rep_number,
            angle_range=round(summary.angle_range, 2),
            calories=round(energy.calories, 4),
        )
        return RepCaptureResult(
            capture=capture,
            summary=summary,
            session_rep_calories=session_rep_calories,
            session_created=created,
        )
