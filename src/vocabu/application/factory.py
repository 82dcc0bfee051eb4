"""
Service Factory
Centralizes the wiring of the store and the learning service from config.
"""

from vocabu.application.config import AppConfig
from vocabu.application.service import LearningService
from vocabu.domain.ports import KeyValueStore
from vocabu.infrastructure.storage import FileKeyValueStore


def get_store(config: AppConfig) -> KeyValueStore:
    """
    Returns the durable store rooted at config.data_dir.
    """
    return FileKeyValueStore(config.data_dir)


def get_learning_service(config: AppConfig, store: KeyValueStore | None = None) -> LearningService:
    """
    Returns a LearningService configured from ``config``.
    """
    return LearningService(
        store or get_store(config),
        fallback_size=config.fallback_size,
        session_limit=config.session_limit,
        first_touch_preset=config.preset,
    )
