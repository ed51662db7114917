"""Pytest fixtures for Dumbbell Tracker backend tests."""

import os
from collections.abc import Generator
from datetime import datetime

# Settings are read at import time by the app modules
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from dumbbell_tracker.database import get_db
from dumbbell_tracker.main import app
from dumbbell_tracker.models import Base, User, WorkoutEntry, WorkoutSession

# Use SQLite in-memory for tests
TEST_DATABASE_URL = "sqlite:///:memory:"


@pytest.fixture(scope="function")
def test_db() -> Generator[Session, None, None]:
    """Create a fresh test database for each test."""
    engine = create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    TestingSessionLocal = sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=engine,
    )

    # Create all tables
    Base.metadata.create_all(bind=engine)

    # Override the get_db dependency
    def override_get_db():
        db = TestingSessionLocal()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db

    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)
        app.dependency_overrides.clear()


@pytest.fixture
def client(test_db: Session) -> TestClient:
    """Create a test client with test database."""
    return TestClient(app)


@pytest.fixture
def user(test_db: Session) -> User:
    """A registered user."""
    user = User(name="Budi", rfid_tag="A1B2C3D4")
    test_db.add(user)
    test_db.commit()
    test_db.refresh(user)
    return user


@pytest.fixture
def workout_session(test_db: Session, user: User) -> WorkoutSession:
    """An active session for the registered user with a 5 kg dumbbell."""
    session = WorkoutSession(
        session_id="S1700000000",
        user_id=user.id,
        dumbbell_weight=5.0,
        start_time=datetime(2024, 3, 1, 7, 30),
    )
    test_db.add(session)
    test_db.commit()
    test_db.refresh(session)
    return session


@pytest.fixture
def add_entry(test_db: Session):
    """Insert a workout entry directly, bypassing ingestion."""

    def _add(session_id: str, **fields) -> WorkoutEntry:
        values = {
            "weight": 5.0,
            "reps": 10,
            "sets": 3,
            "duration": 10,
            "calories": 20.0,
            "form_score": 4.5,
            "timestamp": datetime(2024, 3, 1, 8, 0),
        }
        values.update(fields)
        entry = WorkoutEntry(session_id=session_id, **values)
        test_db.add(entry)
        test_db.commit()
        test_db.refresh(entry)
        return entry

    return _add


@pytest.fixture
def sample_workout_data(workout_session: WorkoutSession, user: User) -> dict:
    """Sample ingestion payload for an existing session."""
    return {
        "session_id": workout_session.session_id,
        "user_id": user.id,
        "reps": 12,
        "sets": 3,
        "weight": 7.5,
        "duration": 15,
        "form_score": 4.0,
        "workout_date": "2024-03-01T08:00:00",
    }
