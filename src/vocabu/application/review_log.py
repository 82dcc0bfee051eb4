"""
Review history: the append-only ReviewEvent log and its aggregates.

Events are never edited or removed except by a full reset.
"""

import logging
from collections import Counter
from dataclasses import dataclass, field
from datetime import date

from vocabu.domain.models import Grade, ReviewEvent
from vocabu.infrastructure.repository import StateRepository

logger = logging.getLogger(__name__)


@dataclass
class HistoryStats:
    """
    Aggregates over the review log.
    """

    today_count: int
    total_count: int
    by_grade: dict[str, int] = field(default_factory=dict)
    distinct_items: int = 0


class ReviewHistory:
    def __init__(self, repo: StateRepository):
        self._repo = repo
        self._events: list[ReviewEvent] = repo.load_review_log()

    @property
    def events(self) -> list[ReviewEvent]:
        return list(self._events)

    def append(self, event: ReviewEvent) -> None:
        self._events.append(event)
        self._repo.save_review_log(self._events)

    def count_on(self, day: date) -> int:
        """Number of events whose local timestamp falls on ``day``."""
        return sum(1 for e in self._events if e.timestamp.date() == day)

    def stats(self, today: date) -> HistoryStats:
        counts = Counter(e.grade for e in self._events)
        return HistoryStats(
            today_count=self.count_on(today),
            total_count=len(self._events),
            by_grade={g.value: counts.get(g, 0) for g in Grade},
            distinct_items=len({e.item_id for e in self._events}),
        )

    def reset(self) -> None:
        self._events = []
