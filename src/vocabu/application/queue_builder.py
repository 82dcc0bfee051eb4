"""
Queue builder for review sessions.

Builds the ordered working set by:
1. Keeping pool items whose card is due on or before today
2. Falling back to a bounded prefix of the pool when nothing is due
3. Preserving pool order (shuffling is an exercise concern, not scheduling)
"""

import logging
from dataclasses import dataclass, field
from datetime import date

from vocabu.domain.constants import DEFAULT_FALLBACK_SIZE
from vocabu.domain.models import CardState

logger = logging.getLogger(__name__)


@dataclass
class DueQueue:
    """Result of queue building operation."""

    item_ids: list[str] = field(default_factory=list)
    is_fallback: bool = False  # True when nothing was due and early items are shown

    def __len__(self) -> int:
        return len(self.item_ids)

    def __iter__(self):
        return iter(self.item_ids)


def build_due_queue(
    pool: list[str],
    cards: dict[str, CardState],
    today: date,
    fallback_size: int = DEFAULT_FALLBACK_SIZE,
) -> DueQueue:
    """
    Build the review queue for ``today``.

    Args:
        pool: Item ids in plan order.
        cards: Card state per item id. Items without state are never due.
        today: Local calendar date.
        fallback_size: Pool prefix length used when nothing is due.

    Returns:
        DueQueue with the due ids, or a tagged fallback prefix.
    """
    due = [item_id for item_id in pool if item_id in cards and cards[item_id].is_due(today)]
    if due or not pool:
        return DueQueue(item_ids=due, is_fallback=False)

    prefix = pool[: max(0, fallback_size)]
    logger.debug(f"Nothing due on {today}, falling back to {len(prefix)} early items")
    return DueQueue(item_ids=prefix, is_fallback=True)
