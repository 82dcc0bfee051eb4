"""
SM-2 transition rules for a single card.

This is a pure computation module with no I/O. ``today`` is always passed in.
"""

import math
from datetime import date, timedelta

from .constants import (
    AGAIN_INTERVAL_DAYS,
    EASE_FLOOR,
    FIRST_INTERVAL_DAYS,
    INTERVAL_PRESETS,
    SECOND_INTERVAL_DAYS,
)
from .exceptions import ValidationError
from .models import CardState, Grade


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def next_ease(ease_factor: float, grade: Grade) -> float:
    """
    EF' = EF + (0.1 - (5 - q) * (0.08 + (5 - q) * 0.02)), floored at 1.3.
    """
    q = grade.ease_quality
    updated = ease_factor + (0.1 - (5 - q) * (0.08 + (5 - q) * 0.02))
    return max(EASE_FLOOR, updated)


def is_first_touch(card: CardState) -> bool:
    """True for a seeded card that has never been graded."""
    return card.repetitions == 0 and card.interval_days == 0


def preset_interval_days(preset: str, grade: Grade) -> int:
    """
    Whole-day interval from a fixed first-touch table.

    Sub-day delays round up to one day since due dates are calendar days.
    """
    table = INTERVAL_PRESETS.get(preset)
    if table is None:
        raise ValidationError(
            f"Unknown interval preset {preset!r}. Expected one of: {', '.join(INTERVAL_PRESETS)}."
        )
    delay: timedelta = table[grade.value]
    return max(1, math.ceil(delay.total_seconds() / 86400))


def advance(
    card: CardState,
    grade: Grade,
    today: date,
    first_touch_preset: str | None = None,
) -> CardState:
    """
    Apply one review to ``card`` and return the new state.

    The ease factor is updated first and the updated value drives interval growth.
    When ``first_touch_preset`` is given and the card was never graded, the
    interval comes from that preset table instead of the SM-2 ladder.
    """
    ease = next_ease(card.ease_factor, grade)

    if grade is Grade.AGAIN:
        repetitions = 0
        interval = AGAIN_INTERVAL_DAYS
    else:
        if card.repetitions == 0:
            interval = FIRST_INTERVAL_DAYS
        elif card.repetitions == 1:
            interval = SECOND_INTERVAL_DAYS
        else:
            interval = max(1, round_half_up(card.interval_days * ease))
        repetitions = card.repetitions + 1

    if first_touch_preset and is_first_touch(card):
        interval = preset_interval_days(first_touch_preset, grade)

    return CardState(
        ease_factor=ease,
        repetitions=repetitions,
        interval_days=interval,
        due_date=today + timedelta(days=interval),
    )
