from sqlalchemy import (
    Column,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
)
from sqlalchemy.orm import declarative_base, relationship

from dumbbell_tracker.core.clock import local_now

Base = declarative_base()


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    rfid_tag = Column(String(50), nullable=False, unique=True, index=True)
    created_at = Column(DateTime, default=local_now)

    sessions = relationship("WorkoutSession", back_populates="user")


class WorkoutSession(Base):
    __tablename__ = "sessions"

    id = Column(Integer, primary_key=True, index=True)
    session_id = Column(String(64), nullable=False, unique=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    dumbbell_weight = Column(Float, nullable=False)
    start_time = Column(DateTime, nullable=False, default=local_now)
    end_time = Column(DateTime)  # null while the session is active

    # Cached fold over this session's entries, rewritten by every recompute
    total_reps = Column(Integer, nullable=False, default=0)
    total_sets = Column(Integer, nullable=False, default=0)
    total_calories = Column(Float, nullable=False, default=0.0)
    avg_form_score = Column(Float, nullable=False, default=0.0)

    user = relationship("User", back_populates="sessions")
    entries = relationship(
        "WorkoutEntry",
        back_populates="session",
        order_by="WorkoutEntry.timestamp",
        cascade="all, delete-orphan",
    )
    rep_captures = relationship(
        "RepCapture",
        back_populates="session",
        order_by="RepCapture.rep_number",
        cascade="all, delete-orphan",
    )

    @property
    def is_active(self) -> bool:
        return self.end_time is None


class WorkoutEntry(Base):
    __tablename__ = "workout_data"

    id = Column(Integer, primary_key=True, index=True)
    session_id = Column(
        String(64), ForeignKey("sessions.session_id", ondelete="CASCADE"), nullable=False, index=True
    )
    weight = Column(Float, nullable=False)
    reps = Column(Integer, nullable=False)
    sets = Column(Integer, nullable=False)
    duration = Column(Integer, nullable=False)  # minutes
    calories = Column(Float, nullable=False, default=0.0)
    form_score = Column(Float, nullable=False, default=4.5)
    timestamp = Column(DateTime, nullable=False, default=local_now, index=True)

    session = relationship("WorkoutSession", back_populates="entries")

    @property
    def total_weight(self) -> float:
        return self.weight * self.reps * self.sets


class RepCapture(Base):
    __tablename__ = "rep_data"

    id = Column(Integer, primary_key=True, index=True)
    session_id = Column(
        String(64), ForeignKey("sessions.session_id", ondelete="CASCADE"), nullable=False, index=True
    )
    rep_number = Column(Integer, nullable=False)
    angle_range = Column(Float, nullable=False, default=0.0)  # degrees
    max_accel = Column(Float, nullable=False, default=0.0)  # g, gravity removed
    displacement = Column(Float, nullable=False, default=0.0)  # metres
    work_done = Column(Float, nullable=False, default=0.0)  # joules
    calories = Column(Float, nullable=False, default=0.0)
    duration = Column(Float)  # seconds
    timestamp = Column(DateTime, nullable=False, default=local_now)

    session = relationship("WorkoutSession", back_populates="rep_captures")
