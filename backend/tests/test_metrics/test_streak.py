"""Tests for the consecutive-day streak."""

from datetime import date

from dumbbell_tracker.metrics.streak import calculate_streak

TODAY = date(2024, 5, 10)


class TestCalculateStreak:
    """Tests for calculate_streak."""

    def test_no_dates(self):
        """Should be zero without any workout."""
        assert calculate_streak([], TODAY) == 0

    def test_three_days_ending_today(self):
        """Should count today and the two days before."""
        dates = {date(2024, 5, 10), date(2024, 5, 9), date(2024, 5, 8)}
        assert calculate_streak(dates, TODAY) == 3

    def test_old_workout_breaks_streak(self):
        """Should be zero when the last workout is more than a day old."""
        assert calculate_streak({date(2024, 5, 1)}, TODAY) == 0

    def test_yesterday_keeps_streak_alive(self):
        """Should still count a run that ended yesterday."""
        dates = [date(2024, 5, 9), date(2024, 5, 8)]
        assert calculate_streak(dates, TODAY) == 2

    def test_two_days_ago_breaks_streak(self):
        """Should treat a two-day gap from today as broken."""
        assert calculate_streak([date(2024, 5, 8), date(2024, 5, 7)], TODAY) == 0

    def test_stops_at_first_gap(self):
        """Should stop counting at the first missing day."""
        dates = [date(2024, 5, 10), date(2024, 5, 9), date(2024, 5, 7), date(2024, 5, 6)]
        assert calculate_streak(dates, TODAY) == 2

    def test_duplicates_ignored(self):
        """Should not count the same day twice."""
        dates = [date(2024, 5, 10), date(2024, 5, 10), date(2024, 5, 9), date(2024, 5, 9)]
        assert calculate_streak(dates, TODAY) == 2

    def test_unsorted_input(self):
        """Should sort before walking."""
        dates = [date(2024, 5, 8), date(2024, 5, 10), date(2024, 5, 9)]
        assert calculate_streak(dates, TODAY) == 3
