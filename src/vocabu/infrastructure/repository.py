"""
State Repository: JSON persistence of every entity over a KeyValueStore.

Reads fail open: an absent, unreadable or malformed payload yields the
entity's default and is logged, and never affects the other entities.
Writes are best effort: storage failures are logged and reported as False.
"""

import json
import logging
from collections.abc import Callable
from typing import Any, TypeVar

from vocabu.domain.constants import (
    ALL_STORE_KEYS,
    STORE_KEY_CARDS,
    STORE_KEY_LEARN_LOG,
    STORE_KEY_PLAN,
    STORE_KEY_PROGRESS,
    STORE_KEY_REVIEW_LOG,
    STORE_KEY_UI_STEP,
)
from vocabu.domain.exceptions import CorruptDataError, StorageError, ValidationError
from vocabu.domain.models import CardState, DailyProgress, LearnLog, ReviewEvent
from vocabu.domain.plan import Plan
from vocabu.domain.ports import KeyValueStore

from .serialization import (
    card_state_from_dict,
    card_state_to_dict,
    learn_log_from_dict,
    learn_log_to_dict,
    progress_from_dict,
    progress_to_dict,
    review_event_from_dict,
    review_event_to_dict,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

_DECODE_ERRORS = (ValueError, KeyError, TypeError, ValidationError)


class StateRepository:
    """
    Loads and saves each persisted entity independently.

    Card states and review events are decoded entry by entry, so one bad
    entry is dropped without discarding its neighbours.
    """

    def __init__(self, store: KeyValueStore):
        self.store = store

    # ---------- raw access ----------

    def _read_json(self, key: str) -> Any | None:
        try:
            raw = self.store.get(key)
        except StorageError as e:
            logger.warning(f"Read failed, using default: {e}")
            return None
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError as e:
            logger.warning(f"Discarding {CorruptDataError(key, str(e))}")
            return None

    def _write_json(self, key: str, payload: Any) -> bool:
        try:
            self.store.set(key, json.dumps(payload, ensure_ascii=False))
            return True
        except StorageError as e:
            logger.warning(f"Write dropped: {e}")
            return False

    def _decode(self, key: str, payload: Any, decoder: Callable[[Any], T]) -> T | None:
        try:
            return decoder(payload)
        except _DECODE_ERRORS as e:
            logger.warning(f"Discarding {CorruptDataError(key, str(e))}")
            return None

    # ---------- card states ----------

    def load_cards(self) -> dict[str, CardState]:
        payload = self._read_json(STORE_KEY_CARDS)
        if payload is None:
            return {}
        if not isinstance(payload, dict):
            logger.warning(f"Discarding {CorruptDataError(STORE_KEY_CARDS, 'not a mapping')}")
            return {}
        cards: dict[str, CardState] = {}
        for item_id, entry in payload.items():
            card = self._decode(f"{STORE_KEY_CARDS}[{item_id}]", entry, card_state_from_dict)
            if card is not None:
                cards[item_id] = card
        return cards

    def save_cards(self, cards: dict[str, CardState]) -> bool:
        return self._write_json(
            STORE_KEY_CARDS, {item_id: card_state_to_dict(c) for item_id, c in cards.items()}
        )

    # ---------- review log ----------

    def load_review_log(self) -> list[ReviewEvent]:
        payload = self._read_json(STORE_KEY_REVIEW_LOG)
        if payload is None:
            return []
        if not isinstance(payload, list):
            logger.warning(f"Discarding {CorruptDataError(STORE_KEY_REVIEW_LOG, 'not a list')}")
            return []
        events = []
        for i, entry in enumerate(payload):
            event = self._decode(f"{STORE_KEY_REVIEW_LOG}[{i}]", entry, review_event_from_dict)
            if event is not None:
                events.append(event)
        return events

    def save_review_log(self, events: list[ReviewEvent]) -> bool:
        return self._write_json(STORE_KEY_REVIEW_LOG, [review_event_to_dict(e) for e in events])

    # ---------- daily progress ----------

    def load_progress(self) -> DailyProgress | None:
        payload = self._read_json(STORE_KEY_PROGRESS)
        if payload is None:
            return None
        return self._decode(STORE_KEY_PROGRESS, payload, progress_from_dict)

    def save_progress(self, progress: DailyProgress) -> bool:
        return self._write_json(STORE_KEY_PROGRESS, progress_to_dict(progress))

    # ---------- plan ----------

    def load_plan(self) -> Plan | None:
        payload = self._read_json(STORE_KEY_PLAN)
        if payload is None:
            return None
        return self._decode(STORE_KEY_PLAN, payload, Plan.parse)

    def save_plan(self, plan: Plan) -> bool:
        return self._write_json(STORE_KEY_PLAN, plan.to_dict())

    # ---------- learn log ----------

    def load_learn_log(self) -> LearnLog | None:
        payload = self._read_json(STORE_KEY_LEARN_LOG)
        if payload is None:
            return None
        return self._decode(STORE_KEY_LEARN_LOG, payload, learn_log_from_dict)

    def save_learn_log(self, log: LearnLog) -> bool:
        return self._write_json(STORE_KEY_LEARN_LOG, learn_log_to_dict(log))

    def clear_learn_log(self) -> bool:
        return self._remove(STORE_KEY_LEARN_LOG)

    # ---------- ui ----------

    def load_ui_step(self) -> str | None:
        payload = self._read_json(STORE_KEY_UI_STEP)
        if payload is None or isinstance(payload, (dict, list)):
            return None
        return str(payload)

    def save_ui_step(self, step: str) -> bool:
        return self._write_json(STORE_KEY_UI_STEP, step)

    # ---------- maintenance ----------

    def _remove(self, key: str) -> bool:
        try:
            self.store.remove(key)
            return True
        except StorageError as e:
            logger.warning(f"Remove dropped: {e}")
            return False

    def clear_all(self) -> bool:
        """Remove every entity. Returns False if any removal failed."""
        results = [self._remove(key) for key in ALL_STORE_KEYS]
        return all(results)
