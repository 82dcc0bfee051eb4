"""
Card Scheduler: owns the CardState of every vocabulary item.

Applies SM-2 transitions and persists the whole card map after each change.
"""

import logging
from collections.abc import Callable, Iterable
from datetime import date

from vocabu.domain.exceptions import NotFoundError
from vocabu.domain.models import CardState, Grade
from vocabu.domain.sm2 import advance
from vocabu.infrastructure.repository import StateRepository

logger = logging.getLogger(__name__)


class CardScheduler:
    """
    In-memory card map backed by a StateRepository.

    The in-memory map is authoritative for the lifetime of the object; a
    failed write is logged by the repository and the session carries on.
    """

    def __init__(
        self,
        repo: StateRepository,
        today: Callable[[], date] = date.today,
        first_touch_preset: str | None = None,
    ):
        """
        Args:
            repo: Persistence for the card map.
            today: Provider of the current local date.
            first_touch_preset: Interval table for a card's first grade, if any.
        """
        self._repo = repo
        self._today = today
        self.first_touch_preset = first_touch_preset
        self._cards: dict[str, CardState] = repo.load_cards()

    @property
    def cards(self) -> dict[str, CardState]:
        """Snapshot of the card map."""
        return dict(self._cards)

    def get(self, item_id: str) -> CardState | None:
        return self._cards.get(item_id)

    def seed(self, item_id: str) -> bool:
        """Create a fresh, immediately due card unless one exists. Returns True if created."""
        return bool(self.seed_many([item_id]))

    def seed_many(self, item_ids: Iterable[str]) -> list[str]:
        """
        Seed every id that has no state yet, with a single write.

        Returns the ids that were newly seeded, in input order.
        """
        today = self._today()
        seeded: list[str] = []
        for item_id in item_ids:
            if item_id and item_id not in self._cards:
                self._cards[item_id] = CardState.fresh(today)
                seeded.append(item_id)
        if seeded:
            logger.debug(f"Seeded {len(seeded)} new cards")
            self._repo.save_cards(self._cards)
        return seeded

    def grade(
        self,
        item_id: str,
        grade: Grade | str,
        first_touch_preset: str | None = None,
    ) -> CardState:
        """
        Apply a review grade to a seeded card and persist the result.

        Raises:
            ValidationError: ``grade`` is not one of again/hard/good/easy.
            NotFoundError: ``item_id`` was never seeded.
        """
        grade = Grade.parse(grade)
        card = self._cards.get(item_id)
        if card is None:
            raise NotFoundError(item_id)

        preset = first_touch_preset or self.first_touch_preset
        updated = advance(card, grade, self._today(), first_touch_preset=preset)
        self._cards[item_id] = updated
        self._repo.save_cards(self._cards)
        logger.debug(
            f"Graded {item_id} {grade.value}: interval {updated.interval_days}d, "
            f"ease {updated.ease_factor:.2f}, due {updated.due_date}"
        )
        return updated

    def reset(self) -> None:
        """Forget every card in memory. Persistence is cleared by the caller."""
        self._cards = {}
