"""Spaced review bookkeeping for flashcards."""

from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from enum import Enum


class ReviewStatus(str, Enum):
    """Learning status of a flashcard."""

    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


# A card counts as learned after this many reviews at this accuracy
COMPLETION_MIN_ATTEMPTS = 5
COMPLETION_MIN_RATIO = 0.9

FIRST_INTERVAL = timedelta(days=1)
MAX_INTERVAL = timedelta(days=60)
RELEARN_INTERVAL = timedelta(minutes=10)


@dataclass(frozen=True)
class ReviewState:
    """Review counters and schedule for one flashcard."""

    correct_attempts: int = 0
    total_attempts: int = 0
    streak: int = 0
    status: ReviewStatus = ReviewStatus.NOT_STARTED
    last_reviewed_at: datetime | None = None
    next_review_at: datetime | None = None


def calculate_status(correct: int, total: int) -> ReviewStatus:
    """Derive the learning status from answer counts."""
    if total == 0:
        return ReviewStatus.NOT_STARTED
    if correct / total >= COMPLETION_MIN_RATIO and total >= COMPLETION_MIN_ATTEMPTS:
        return ReviewStatus.COMPLETED
    return ReviewStatus.IN_PROGRESS


def next_interval(streak: int) -> timedelta:
    """Interval before the next review given the current correct streak."""
    if streak <= 0:
        return RELEARN_INTERVAL
    return min(FIRST_INTERVAL * (2 ** (streak - 1)), MAX_INTERVAL)


def record_review(state: ReviewState, correct: bool, now: datetime) -> ReviewState:
    """Apply one review answer and schedule the next review.

    Args:
        state: Current review state
        correct: Whether the card was answered correctly
        now: Review timestamp

    Returns:
        New review state
    """
    correct_attempts = state.correct_attempts + (1 if correct else 0)
    total_attempts = state.total_attempts + 1
    streak = state.streak + 1 if correct else 0

    return replace(
        state,
        correct_attempts=correct_attempts,
        total_attempts=total_attempts,
        streak=streak,
        status=calculate_status(correct_attempts, total_attempts),
        last_reviewed_at=now,
        next_review_at=now + next_interval(streak),
    )
