"""
Learning-exercise log.

Exercises record the best quality reached per word during the day. When a
review session starts, today's log is replayed into the scheduler so words
practiced in exercises are rescheduled without a separate review.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date

from vocabu.domain.exceptions import ValidationError
from vocabu.domain.models import Grade, LearnLog
from vocabu.infrastructure.repository import StateRepository

from .scheduler import CardScheduler

logger = logging.getLogger(__name__)


@dataclass
class LearnLogSummary:
    applied: int = 0
    due_today: int = 0
    later: int = 0


class LearnLogService:
    def __init__(self, repo: StateRepository, today: Callable[[], date] = date.today):
        self._repo = repo
        self._today = today

    def record(self, word: str, quality: int) -> LearnLog:
        """
        Keep the highest quality seen today for ``word``.

        Raises:
            ValidationError: ``quality`` is not 0, 3, 4 or 5.
        """
        Grade.from_quality(quality)
        today = self._today()
        log = self._repo.load_learn_log()
        if log is None or log.day != today:
            log = LearnLog(day=today, items={})

        key = word.strip().lower()
        items = dict(log.items)
        items[key] = max(items.get(key, -1), quality)
        log = LearnLog(day=today, items=items)
        self._repo.save_learn_log(log)
        return log

    def apply(
        self,
        pool: list[str],
        scheduler: CardScheduler,
        first_touch_preset: str | None = None,
    ) -> LearnLogSummary:
        """
        Grade every logged word that belongs to ``pool``.

        ``first_touch_preset`` applies to never-graded words, as in a review.

        A log from another day is ignored. The log is cleared once anything
        was applied.
        """
        log = self._repo.load_learn_log()
        today = self._today()
        if log is None or log.day != today:
            return LearnLogSummary()

        members = set(pool)
        summary = LearnLogSummary()
        for word, quality in log.items.items():
            if word not in members:
                continue
            try:
                grade = Grade.from_quality(quality)
            except ValidationError:
                logger.debug(f"Skipping {word!r}: unusable quality {quality!r}")
                continue
            scheduler.seed(word)
            card = scheduler.grade(word, grade, first_touch_preset=first_touch_preset)
            summary.applied += 1
            if card.is_due(today):
                summary.due_today += 1
            else:
                summary.later += 1

        if summary.applied:
            self._repo.clear_learn_log()
            logger.info(
                f"Applied {summary.applied} exercise results "
                f"({summary.due_today} due today, {summary.later} later)"
            )
        return summary
