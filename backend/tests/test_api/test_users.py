"""Tests for user API endpoints."""

from datetime import datetime, timedelta

from fastapi.testclient import TestClient

from dumbbell_tracker.core.clock import local_now
from dumbbell_tracker.models import User, WorkoutSession


class TestRegisterUser:
    """Tests for POST /api/users endpoint."""

    def test_register(self, client: TestClient):
        """Should create a user."""
        response = client.post("/api/users", json={"name": "Sari", "rfid_tag": "0F1E2D3C"})
        assert response.status_code == 201
        assert response.json()["data"]["rfid_tag"] == "0F1E2D3C"

    def test_duplicate_tag(self, client: TestClient, user: User):
        """Should return 409 for a tag already in use."""
        response = client.post("/api/users", json={"name": "Other", "rfid_tag": user.rfid_tag})
        assert response.status_code == 409

    def test_blank_name(self, client: TestClient):
        """Should return 422 for a blank name."""
        response = client.post("/api/users", json={"name": " ", "rfid_tag": "X1"})
        assert response.status_code == 422
        assert response.json()["error"]["details"]["fields"] == ["name"]


class TestRfidScan:
    """Tests for POST /api/users/rfid-scan endpoint."""

    def test_known(self, client: TestClient, user: User):
        """Should resolve a registered tag."""
        response = client.post("/api/users/rfid-scan", json={"rfid_tag": user.rfid_tag})
        data = response.json()
        assert data["user_exists"] is True
        assert data["user"]["id"] == user.id

    def test_unknown(self, client: TestClient):
        """Should report an unknown tag without failing."""
        response = client.post("/api/users/rfid-scan", json={"rfid_tag": "NOPE"})
        assert response.status_code == 200
        assert response.json()["user_exists"] is False


class TestUserProfile:
    """Tests for GET /api/users/{id} endpoints."""

    def test_profile_with_stats(self, client: TestClient, workout_session: WorkoutSession, user: User, add_entry):
        """Should include lifetime stats."""
        add_entry(workout_session.session_id, reps=10, sets=3)
        response = client.get(f"/api/users/{user.id}")
        assert response.status_code == 200
        stats = response.json()["stats"]
        assert stats["total_workouts"] == 1
        assert stats["total_reps"] == 30

    def test_profile_missing(self, client: TestClient):
        """Should return 404 for an unknown user."""
        response = client.get("/api/users/404")
        assert response.status_code == 404
        assert response.json()["error"]["details"]["resource"] == "User"

    def test_workout_dates(self, client: TestClient, workout_session: WorkoutSession, user: User, add_entry):
        """Should list distinct dates newest first."""
        add_entry(workout_session.session_id, timestamp=datetime(2024, 3, 1, 8, 0))
        add_entry(workout_session.session_id, timestamp=datetime(2024, 3, 1, 18, 0))
        add_entry(workout_session.session_id, timestamp=datetime(2024, 3, 4, 8, 0))

        response = client.get(f"/api/users/{user.id}/workout-dates")
        assert response.json()["dates"] == ["2024-03-04", "2024-03-01"]

    def test_streak_without_data(self, client: TestClient, user: User):
        """Should say there is no data rather than invent a streak."""
        response = client.get(f"/api/users/{user.id}/streak")
        data = response.json()
        assert data["streak"] == 0
        assert data["has_data"] is False

    def test_streak_today_and_yesterday(
        self, client: TestClient, workout_session: WorkoutSession, user: User, add_entry
    ):
        """Should count workouts logged today and yesterday."""
        now = local_now()
        add_entry(workout_session.session_id, timestamp=now)
        add_entry(workout_session.session_id, timestamp=now - timedelta(days=1))

        data = client.get(f"/api/users/{user.id}/streak").json()
        assert data["streak"] == 2
        assert data["has_data"] is True
