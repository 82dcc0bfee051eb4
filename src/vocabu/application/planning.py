"""
Plan production: pace recommendation and plan assembly.

This is the producer side of the Plan contract; the scheduling core only
consumes what it builds.
"""

import logging
import time

from vocabu.domain.constants import (
    COMFORT_PER_DAY_RANGE,
    DEFAULT_HORIZON_FACTOR,
    HORIZON_FACTORS,
    LEVEL_BASE_PER_DAY,
    MIN_PER_DAY,
)
from vocabu.domain.exceptions import ValidationError
from vocabu.domain.plan import Plan, Recommendation, VocabItem
from vocabu.domain.sm2 import round_half_up

from .utils.text import extract_words

logger = logging.getLogger(__name__)


def compute_recommendation(level: str, horizon_days: int, comfort: bool = False) -> Recommendation:
    """
    Suggested pace for a placement level and horizon.

    per_day = max(5, round(base[level] * factor[horizon])); comfort mode keeps
    it within 5..8.
    """
    if level not in LEVEL_BASE_PER_DAY:
        raise ValidationError(
            f"Unknown level {level!r}. Expected one of: {', '.join(LEVEL_BASE_PER_DAY)}."
        )
    if horizon_days < 1:
        raise ValidationError(f"Horizon must be at least 1 day, got {horizon_days}.")

    factor = HORIZON_FACTORS.get(horizon_days, DEFAULT_HORIZON_FACTOR)
    per_day = max(MIN_PER_DAY, round_half_up(LEVEL_BASE_PER_DAY[level] * factor))
    if comfort:
        low, high = COMFORT_PER_DAY_RANGE
        per_day = max(low, min(high, per_day))
    return Recommendation(per_day=per_day, per_week=per_day * 7, total=per_day * horizon_days)


def build_plan(
    words: list[VocabItem],
    recommendation: Recommendation,
    context: str = "travel",
    style: str = "simple",
    horizon: int | None = None,
    user_text: str | None = None,
    comfort_mode: bool = False,
    name: str | None = None,
    created_at: int | None = None,
) -> Plan:
    """
    Assemble a Plan.

    Words extracted from ``user_text`` come first, then ``words``; duplicates
    are dropped by id. ``today_set`` is the first ``per_day`` items of the pool.
    """
    from_text = [
        VocabItem(id=w, term=w, origin="userText") for w in extract_words(user_text or "")
    ]
    pool: dict[str, VocabItem] = {}
    for item in [*from_text, *words]:
        pool.setdefault(item.id, item)
    items = list(pool.values())

    if created_at is None:
        created_at = int(time.time() * 1000)

    plan = Plan.parse(
        {
            "context": context,
            "style": style,
            "created_at": created_at,
            "name": name,
            "horizon": horizon,
            "recommendation": recommendation.model_dump(),
            "today_set": [i.model_dump() for i in items[: recommendation.per_day]],
            "pool": [i.model_dump() for i in items],
            "comfort_mode": comfort_mode,
        }
    )
    logger.debug(
        f"Built plan {created_at}: {len(items)} items ({len(from_text)} from text), "
        f"{recommendation.per_day}/day"
    )
    return plan
