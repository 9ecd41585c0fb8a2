"""Tests for spaced review bookkeeping."""

from datetime import datetime, timedelta

from flashdeck_core.review import (
    MAX_INTERVAL,
    RELEARN_INTERVAL,
    ReviewState,
    ReviewStatus,
    calculate_status,
    next_interval,
    record_review,
)

NOW = datetime(2024, 3, 1, 9, 0, 0)


class TestCalculateStatus:
    """Tests for status derivation."""

    def test_no_attempts(self) -> None:
        assert calculate_status(0, 0) == ReviewStatus.NOT_STARTED

    def test_completed_needs_five_attempts(self) -> None:
        """Test that perfect accuracy alone is not enough."""
        assert calculate_status(4, 4) == ReviewStatus.IN_PROGRESS
        assert calculate_status(5, 5) == ReviewStatus.COMPLETED

    def test_completed_needs_ninety_percent(self) -> None:
        assert calculate_status(8, 10) == ReviewStatus.IN_PROGRESS
        assert calculate_status(9, 10) == ReviewStatus.COMPLETED


class TestRecordReview:
    """Tests for applying review answers."""

    def test_first_correct_answer(self) -> None:
        """Test a first correct review."""
        state = record_review(ReviewState(), correct=True, now=NOW)

        assert state.correct_attempts == 1
        assert state.total_attempts == 1
        assert state.status == ReviewStatus.IN_PROGRESS
        assert state.last_reviewed_at == NOW
        assert state.next_review_at == NOW + timedelta(days=1)

    def test_interval_doubles_with_streak(self) -> None:
        """Consecutive correct answers double the interval."""
        state = ReviewState()
        intervals = []
        for _ in range(4):
            state = record_review(state, correct=True, now=NOW)
            intervals.append(state.next_review_at - NOW)

        assert intervals == [timedelta(days=d) for d in (1, 2, 4, 8)]

    def test_incorrect_answer_resets_streak(self) -> None:
        """Test that a miss schedules a quick relearn."""
        state = ReviewState(correct_attempts=3, total_attempts=3, streak=3)

        state = record_review(state, correct=False, now=NOW)

        assert state.streak == 0
        assert state.correct_attempts == 3
        assert state.total_attempts == 4
        assert state.next_review_at == NOW + RELEARN_INTERVAL

    def test_interval_is_capped(self) -> None:
        assert next_interval(20) == MAX_INTERVAL
