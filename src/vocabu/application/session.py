"""ReviewSession: consumes one due queue card by card, independent of any UI."""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date, datetime

from vocabu.domain.models import Grade, ReviewEvent

from .id_service import generate_session_id
from .learn_log import LearnLogSummary
from .progress import DailyProgressTracker
from .queue_builder import DueQueue
from .review_log import ReviewHistory
from .scheduler import CardScheduler

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GradeFeedback:
    item_id: str
    grade: Grade
    new_due_date: date
    new_interval: int


class ReviewSession:
    """
    Working set of one review sitting.

    Grading a card removes it from ``remaining``; it does not come back in
    the same session even if it is still due.
    """

    def __init__(
        self,
        queue: DueQueue,
        scheduler: CardScheduler,
        tracker: DailyProgressTracker,
        history: ReviewHistory,
        first_touch_preset: str | None = None,
        learn_summary: LearnLogSummary | None = None,
        clock: Callable[[], datetime] = lambda: datetime.now().astimezone(),
    ):
        self.session_id = generate_session_id()
        self.is_fallback = queue.is_fallback
        self.total = len(queue)
        self.remaining: list[str] = list(queue.item_ids)
        self.reviewed: list[str] = []
        self.learn_summary = learn_summary or LearnLogSummary()
        self.first_touch_preset = first_touch_preset
        self._scheduler = scheduler
        self._tracker = tracker
        self._history = history
        self._clock = clock

    @property
    def current(self) -> str | None:
        return self.remaining[0] if self.remaining else None

    @property
    def finished(self) -> bool:
        return not self.remaining

    def grade_current_card(self, item_id: str, grade: Grade | str) -> GradeFeedback:
        """
        Grade ``item_id``, count it toward today's progress and log the review.

        Raises:
            ValidationError: invalid grade; nothing is changed.
            NotFoundError: item was never seeded; nothing is changed.
        """
        grade = Grade.parse(grade)
        card = self._scheduler.grade(item_id, grade, first_touch_preset=self.first_touch_preset)
        self._tracker.increment(item_id)
        self._history.append(
            ReviewEvent(
                item_id=item_id,
                grade=grade,
                timestamp=self._clock(),
                session_id=self.session_id,
            )
        )

        if item_id in self.remaining:
            self.remaining.remove(item_id)
        self.reviewed.append(item_id)
        return GradeFeedback(
            item_id=item_id,
            grade=grade,
            new_due_date=card.due_date,
            new_interval=card.interval_days,
        )

    def progress_label(self) -> str:
        """Position within the session, e.g. '3/10'."""
        position = min(len(self.reviewed) + 1, self.total)
        return f"{position}/{self.total or 1}"
