# Domain Package
from .exceptions import (
    CorruptDataError,
    NotFoundError,
    StorageError,
    ValidationError,
    VocabuError,
)
from .models import CardState, DailyProgress, Grade, ReviewEvent
from .plan import Plan, Recommendation, VocabItem
from .ports import KeyValueStore

__all__ = [
    "CardState",
    "CorruptDataError",
    "DailyProgress",
    "Grade",
    "KeyValueStore",
    "NotFoundError",
    "Plan",
    "Recommendation",
    "ReviewEvent",
    "StorageError",
    "ValidationError",
    "VocabItem",
    "VocabuError",
]
