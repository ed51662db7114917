"""Tests for the dashboard history endpoint."""

from datetime import datetime

from fastapi.testclient import TestClient

from dumbbell_tracker.models import User, WorkoutSession


class TestHistory:
    """Tests for GET /api/history endpoint."""

    def test_zero_filled(self, client: TestClient, user: User):
        """Should return a zeroed bucket for every day in range."""
        response = client.get(f"/api/history?user_id={user.id}&start_date=2024-01-01&end_date=2024-01-03")
        assert response.status_code == 200
        data = response.json()
        assert [b["date"] for b in data["buckets"]] == ["2024-01-01", "2024-01-02", "2024-01-03"]
        assert all(b["reps"] == 0 and b["session_count"] == 0 for b in data["buckets"])
        assert data["latest"] is None

    def test_buckets_and_latest(self, client: TestClient, workout_session: WorkoutSession, user: User, add_entry):
        """Should bucket entries per day and report the latest one."""
        add_entry(
            workout_session.session_id,
            timestamp=datetime(2024, 3, 1, 8, 0),
            duration=10,
            calories=50.0,
            reps=8,
            sets=3,
            weight=5.0,
        )
        add_entry(
            workout_session.session_id,
            timestamp=datetime(2024, 3, 2, 8, 0),
            duration=15,
            calories=70.0,
            reps=10,
            sets=2,
            weight=5.0,
        )

        data = client.get(
            f"/api/history?user_id={user.id}&start_date=2024-03-01&end_date=2024-03-02"
        ).json()

        assert data["buckets"][0]["reps"] == 24
        assert data["buckets"][1]["reps"] == 20
        assert data["buckets"][0]["total_weight"] == 120.0
        assert data["totals"]["reps"] == 44
        assert data["totals"]["calories"] == 120.0
        assert data["latest"]["date"] == "2024-03-02 08:00:00"
        assert data["latest"]["reps"] == 20

    def test_reversed_range(self, client: TestClient, user: User):
        """Should return 422 when start_date is after end_date."""
        response = client.get(f"/api/history?user_id={user.id}&start_date=2024-03-05&end_date=2024-03-01")
        assert response.status_code == 422
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    def test_bad_date(self, client: TestClient, user: User):
        """Should reject a malformed date parameter."""
        response = client.get(f"/api/history?user_id={user.id}&start_date=March")
        assert response.status_code == 422
        assert response.json()["error"]["details"]["fields"] == ["start_date"]

    def test_unknown_user(self, client: TestClient):
        """Should return 404 for an unknown user."""
        response = client.get("/api/history?user_id=404&start_date=2024-03-01&end_date=2024-03-02")
        assert response.status_code == 404
