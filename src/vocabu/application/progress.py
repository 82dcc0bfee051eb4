"""
Daily Progress Tracker: distinct items reviewed today versus the target.

The record rolls over lazily: whenever the stored day is not today, a fresh
zeroed record replaces it (the target is not carried over).
"""

import logging
import math
from collections.abc import Callable
from dataclasses import replace
from datetime import date

from vocabu.domain.models import DailyProgress
from vocabu.infrastructure.repository import StateRepository

logger = logging.getLogger(__name__)


class DailyProgressTracker:
    def __init__(self, repo: StateRepository, today: Callable[[], date] = date.today):
        self._repo = repo
        self._today = today
        self._current: DailyProgress | None = None

    def read_today(self) -> DailyProgress:
        """Return today's record, rolling over to a fresh one if the stored day is stale."""
        today = self._today()
        current = self._current if self._current is not None else self._repo.load_progress()

        if current is None or current.day != today:
            if current is not None:
                logger.info(f"Progress rollover {current.day} -> {today} (done {current.done})")
            current = DailyProgress.fresh(today)
            self._repo.save_progress(current)

        self._current = current
        return current

    def set_target(self, n: float) -> DailyProgress:
        """Set today's target to max(0, floor(n)). Done and counted ids are kept."""
        target = max(0, math.floor(n)) if math.isfinite(n) else 0
        current = self.read_today()
        if current.target == target:
            return current
        return self._store(replace(current, target=target))

    def increment(self, item_id: str) -> DailyProgress:
        """Count ``item_id`` for today. A second call for the same id on the same day is a no-op."""
        current = self.read_today()
        if not item_id or item_id in current.counted_ids:
            return current
        return self._store(replace(current, counted_ids=(*current.counted_ids, item_id)))

    def reset(self) -> None:
        self._current = None

    def _store(self, progress: DailyProgress) -> DailyProgress:
        self._current = progress
        self._repo.save_progress(progress)
        return progress
