"""Centralized constants for the Vocabu application.

All magic numbers and configuration defaults live here so every layer
imports from a single source of truth.
"""

from datetime import timedelta

# ---------- SM-2 ----------
INITIAL_EASE = 2.5
EASE_FLOOR = 1.3
FIRST_INTERVAL_DAYS = 1
SECOND_INTERVAL_DAYS = 6
AGAIN_INTERVAL_DAYS = 1
AGAIN_EASE_QUALITY = 2  # Again is scored as q=2 for the ease update only

# ---------- First-touch presets ----------
# Fixed grade -> delay tables. Only used for the first grade of a card that
# has never been reviewed, and only when a preset is selected.
INTERVAL_PRESETS: dict[str, dict[str, timedelta]] = {
    "standard": {
        "again": timedelta(minutes=10),
        "hard": timedelta(days=1),
        "good": timedelta(days=3),
        "easy": timedelta(days=7),
    },
    "comfort": {
        "again": timedelta(minutes=15),
        "hard": timedelta(hours=12),
        "good": timedelta(days=2),
        "easy": timedelta(days=5),
    },
}

# ---------- Due queue / session ----------
DEFAULT_FALLBACK_SIZE = 5
DEFAULT_SESSION_LIMIT = 10

# ---------- Recommendation ----------
LEVEL_BASE_PER_DAY = {"A2": 8, "B1": 12, "B2": 16}
HORIZON_FACTORS = {30: 1.2, 60: 1.0}
DEFAULT_HORIZON_FACTOR = 0.85
MIN_PER_DAY = 5
COMFORT_PER_DAY_RANGE = (5, 8)

# ---------- Persistence ----------
STORE_KEY_PLAN = "plan"
STORE_KEY_CARDS = "card-states"
STORE_KEY_REVIEW_LOG = "review-log"
STORE_KEY_PROGRESS = "daily-progress"
STORE_KEY_LEARN_LOG = "learn-log"
STORE_KEY_UI_STEP = "ui-last-step"

ALL_STORE_KEYS = [
    STORE_KEY_PLAN,
    STORE_KEY_CARDS,
    STORE_KEY_REVIEW_LOG,
    STORE_KEY_PROGRESS,
    STORE_KEY_LEARN_LOG,
    STORE_KEY_UI_STEP,
]

EXPORT_VERSION = "vocabu-export-1"
