"""
Domain models for scheduling and progress.

These are pure data structures with no I/O or external dependencies.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum

from .constants import AGAIN_EASE_QUALITY, INITIAL_EASE
from .exceptions import ValidationError


class Grade(str, Enum):
    """Recall quality reported by the learner for one review."""

    AGAIN = "again"
    HARD = "hard"
    GOOD = "good"
    EASY = "easy"

    @property
    def quality(self) -> int:
        """SM-2 quality score (0, 3, 4, 5)."""
        return _QUALITY[self]

    @property
    def ease_quality(self) -> int:
        """Quality used by the ease update. Again counts as 2 here."""
        if self is Grade.AGAIN:
            return AGAIN_EASE_QUALITY
        return self.quality

    @classmethod
    def parse(cls, value: "Grade | str") -> "Grade":
        """Resolve a grade name (case-insensitive). Anything else is rejected."""
        if isinstance(value, Grade):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        raise ValidationError(
            f"Invalid grade {value!r}. Expected one of: {', '.join(g.value for g in cls)}."
        )

    @classmethod
    def from_quality(cls, quality: int) -> "Grade":
        if isinstance(quality, int) and not isinstance(quality, bool):
            for grade, q in _QUALITY.items():
                if q == quality:
                    return grade
        raise ValidationError(f"Invalid quality {quality!r}. Expected 0, 3, 4 or 5.")


_QUALITY = {Grade.AGAIN: 0, Grade.HARD: 3, Grade.GOOD: 4, Grade.EASY: 5}


@dataclass(frozen=True)
class CardState:
    """
    Scheduling state of one vocabulary item.

    Attributes:
        ease_factor: Interval growth multiplier, never below 1.3.
        repetitions: Consecutive non-Again reviews.
        interval_days: Days between the review that produced this state and due_date.
        due_date: Local calendar day on which the card becomes reviewable.
    """

    ease_factor: float
    repetitions: int
    interval_days: int
    due_date: date

    @classmethod
    def fresh(cls, today: date) -> "CardState":
        """A newly seeded card, due immediately."""
        return cls(ease_factor=INITIAL_EASE, repetitions=0, interval_days=0, due_date=today)

    def is_due(self, today: date) -> bool:
        return self.due_date <= today


@dataclass(frozen=True)
class ReviewEvent:
    """
    A single entry of the append-only review log.

    Attributes:
        item_id: The vocabulary item that was reviewed.
        grade: Grade given by the learner.
        timestamp: Local time of the review.
        session_id: Review session that produced the event, if any.
    """

    item_id: str
    grade: Grade
    timestamp: datetime
    session_id: str | None = None


@dataclass(frozen=True)
class DailyProgress:
    """
    Distinct items reviewed on one calendar day versus the daily target.

    ``done`` is derived from ``counted_ids`` so the two can never disagree.
    """

    day: date
    target: int = 0
    counted_ids: tuple[str, ...] = field(default_factory=tuple)

    @property
    def done(self) -> int:
        return len(self.counted_ids)

    @classmethod
    def fresh(cls, today: date) -> "DailyProgress":
        return cls(day=today, target=0, counted_ids=())


@dataclass(frozen=True)
class LearnLog:
    """Best quality per word recorded by learning exercises on one day."""

    day: date
    items: dict[str, int] = field(default_factory=dict)
