"""
Plan/Pool Synchronizer: reconciles a Plan with the card pool and daily target.

Seeding only ever adds cards: items dropped by a newer plan keep their state.
"""

import logging
from dataclasses import dataclass, field

from vocabu.domain.models import CardState
from vocabu.domain.plan import Plan

from .progress import DailyProgressTracker
from .scheduler import CardScheduler

logger = logging.getLogger(__name__)


@dataclass
class SyncResult:
    """Outcome of one sync pass."""

    pool: list[str]  # today_set ids then pool ids, first-seen order
    cards: dict[str, CardState]  # card map after seeding
    seeded: list[str] = field(default_factory=list)
    target: int = 0


class PlanSynchronizer:
    def __init__(self, scheduler: CardScheduler, tracker: DailyProgressTracker):
        self._scheduler = scheduler
        self._tracker = tracker

    def sync(self, plan: Plan) -> SyncResult:
        """
        Seed unknown items and set today's target from the plan.

        Safe to repeat: an unchanged plan seeds nothing and leaves the target as is.
        """
        pool = plan.all_item_ids()
        seeded = self._scheduler.seed_many(pool)
        target = plan.daily_target()
        self._tracker.set_target(target)

        if seeded:
            logger.info(
                f"Plan {plan.created_at} ({plan.context}): "
                f"seeded {len(seeded)} of {len(pool)} items"
            )
        return SyncResult(pool=pool, cards=self._scheduler.cards, seeded=seeded, target=target)
