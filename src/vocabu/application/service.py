"""
Learning Service: Application layer orchestrator.

Wires the scheduler, progress tracker, synchronizer, review history and
learn log around one KeyValueStore, and exposes the operations the CLI (or
any other front end) drives. There is no module-level state: every front
end holds its own service instance.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any

from vocabu.domain.constants import DEFAULT_FALLBACK_SIZE, DEFAULT_SESSION_LIMIT
from vocabu.domain.plan import Plan
from vocabu.domain.ports import KeyValueStore
from vocabu.infrastructure.repository import StateRepository

from .learn_log import LearnLogService
from .progress import DailyProgressTracker
from .queue_builder import DueQueue, build_due_queue
from .review_log import ReviewHistory
from .scheduler import CardScheduler
from .session import GradeFeedback, ReviewSession
from .synchronizer import PlanSynchronizer, SyncResult

logger = logging.getLogger(__name__)

PlanListener = Callable[[Plan, SyncResult], None]


@dataclass(frozen=True)
class ProgressSnapshot:
    done: int
    target: int
    due_count: int
    today_review_count: int
    total_review_count: int


class LearningService:
    """
    Application service for plan sync, review sessions and progress.

    Follows Dependency Inversion: depends on the KeyValueStore abstraction,
    not a concrete storage adapter.
    """

    def __init__(
        self,
        store: KeyValueStore,
        fallback_size: int = DEFAULT_FALLBACK_SIZE,
        session_limit: int = DEFAULT_SESSION_LIMIT,
        first_touch_preset: str | None = None,
        today: Callable[[], date] = date.today,
        clock: Callable[[], datetime] = lambda: datetime.now().astimezone(),
    ):
        """
        Args:
            store: Durable store shared by all entities.
            fallback_size: Pool prefix shown when nothing is due.
            session_limit: Maximum cards in one review session.
            first_touch_preset: Default first-grade interval table; a plan in
                comfort mode always uses "comfort".
            today: Provider of the current local date.
            clock: Provider of the current local time, for review timestamps.
        """
        self.repo = StateRepository(store)
        self.fallback_size = fallback_size
        self.session_limit = session_limit
        self.default_preset = first_touch_preset
        self._today = today
        self._clock = clock

        self.scheduler = CardScheduler(
            self.repo, today=today, first_touch_preset=first_touch_preset
        )
        self.tracker = DailyProgressTracker(self.repo, today=today)
        self.synchronizer = PlanSynchronizer(self.scheduler, self.tracker)
        self.history = ReviewHistory(self.repo)
        self.learn_log = LearnLogService(self.repo, today=today)

        self._plan: Plan | None = self.repo.load_plan()
        self._listeners: list[PlanListener] = []
        self.session: ReviewSession | None = None

    # ---------- plan ----------

    @property
    def plan(self) -> Plan | None:
        return self._plan

    @property
    def pool(self) -> list[str]:
        return self._plan.all_item_ids() if self._plan else []

    @property
    def first_touch_preset(self) -> str | None:
        if self._plan and self._plan.comfort_mode:
            return "comfort"
        return self.default_preset

    def subscribe(self, listener: PlanListener) -> Callable[[], None]:
        """Call ``listener(plan, result)`` after every applied plan. Returns an unsubscriber."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def apply_plan(self, plan: Plan | dict[str, Any]) -> SyncResult:
        """
        Accept a new or updated plan: persist it, merge its pool, notify subscribers.

        Raises:
            ValidationError: the plan is malformed; nothing is changed.
        """
        if not isinstance(plan, Plan):
            plan = Plan.parse(plan)

        previous = self._plan
        if previous is None or previous.created_at != plan.created_at:
            logger.info(f"New plan {plan.created_at} for context '{plan.context}'")

        self._plan = plan
        self.repo.save_plan(plan)
        result = self.synchronizer.sync(plan)
        self.session = None

        for listener in list(self._listeners):
            try:
                listener(plan, result)
            except Exception as e:
                logger.error(f"Plan listener failed: {e}", exc_info=True)
        return result

    def resync(self) -> SyncResult | None:
        """Re-run the synchronizer against the current plan, if any."""
        if self._plan is None:
            return None
        return self.synchronizer.sync(self._plan)

    # ---------- queue & session ----------

    def get_due_queue(self) -> DueQueue:
        return build_due_queue(
            self.pool, self.scheduler.cards, self._today(), fallback_size=self.fallback_size
        )

    def start_session(self) -> ReviewSession:
        """
        Open a review session.

        Re-syncs the plan (restoring today's target after a rollover), replays
        today's exercise log, then takes the first ``session_limit`` queued ids.
        """
        self.resync()
        learn_summary = self.learn_log.apply(
            self.pool, self.scheduler, first_touch_preset=self.first_touch_preset
        )
        queue = self.get_due_queue()
        limited = DueQueue(
            item_ids=queue.item_ids[: max(0, self.session_limit)],
            is_fallback=queue.is_fallback,
        )
        self.session = ReviewSession(
            limited,
            self.scheduler,
            self.tracker,
            self.history,
            first_touch_preset=self.first_touch_preset,
            learn_summary=learn_summary,
            clock=self._clock,
        )
        logger.info(
            f"Session {self.session.session_id}: {len(limited)} cards"
            + (" (nothing due, showing early items)" if limited.is_fallback else "")
        )
        return self.session

    def grade_current_card(self, item_id: str, grade: str) -> GradeFeedback:
        """Grade a card in the active session, opening one if needed."""
        session = self.session or self.start_session()
        return session.grade_current_card(item_id, grade)

    # ---------- progress ----------

    def get_progress_snapshot(self) -> ProgressSnapshot:
        progress = self.tracker.read_today()
        today = self._today()
        cards = self.scheduler.cards
        due_count = sum(1 for i in self.pool if i in cards and cards[i].is_due(today))
        return ProgressSnapshot(
            done=progress.done,
            target=progress.target,
            due_count=due_count,
            today_review_count=self.history.count_on(today),
            total_review_count=len(self.history.events),
        )

    # ---------- ui ----------

    def get_ui_step(self) -> str | None:
        return self.repo.load_ui_step()

    def set_ui_step(self, step: str) -> None:
        self.repo.save_ui_step(step)

    # ---------- reset ----------

    def reset_all(self) -> bool:
        """
        Clear every persisted entity and all in-memory state.

        Returns False if the store could not remove everything.
        """
        ok = self.repo.clear_all()
        self.scheduler.reset()
        self.tracker.reset()
        self.history.reset()
        self._plan = None
        self.session = None
        logger.warning("All persisted state cleared")
        return ok
