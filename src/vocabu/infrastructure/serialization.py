"""
JSON-ready dict conversions for persisted entities.

The ``*_from_dict`` functions raise ValueError, KeyError or TypeError on
malformed input; callers decide whether that is fatal.
The card and progress shapes match what the web client stored, so data
exported from it can be imported as is.
"""

from datetime import date, datetime
from typing import Any

from vocabu.domain.constants import EASE_FLOOR
from vocabu.domain.models import CardState, DailyProgress, Grade, LearnLog, ReviewEvent


def _require_mapping(data: Any) -> dict[str, Any]:
    if not isinstance(data, dict):
        raise TypeError(f"expected an object, got {type(data).__name__}")
    return data


def card_state_to_dict(card: CardState) -> dict[str, Any]:
    return {
        "ef": card.ease_factor,
        "reps": card.repetitions,
        "interval": card.interval_days,
        "due": card.due_date.isoformat(),
    }


def card_state_from_dict(data: dict[str, Any]) -> CardState:
    data = _require_mapping(data)
    ease = float(data["ef"])
    reps = int(data["reps"])
    interval = int(data["interval"])
    if reps < 0 or interval < 0 or ease < EASE_FLOOR:
        raise ValueError(f"out of range card state: {data}")
    return CardState(
        ease_factor=ease,
        repetitions=reps,
        interval_days=interval,
        due_date=date.fromisoformat(data["due"]),
    )


def review_event_to_dict(event: ReviewEvent) -> dict[str, Any]:
    d: dict[str, Any] = {
        "itemId": event.item_id,
        "grade": event.grade.value,
        "timestamp": event.timestamp.isoformat(),
    }
    if event.session_id:
        d["sessionId"] = event.session_id
    return d


def review_event_from_dict(data: dict[str, Any]) -> ReviewEvent:
    data = _require_mapping(data)
    item_id = data["itemId"]
    if not isinstance(item_id, str) or not item_id:
        raise ValueError(f"bad item id: {item_id!r}")
    return ReviewEvent(
        item_id=item_id,
        grade=Grade(data["grade"]),
        timestamp=datetime.fromisoformat(data["timestamp"]),
        session_id=data.get("sessionId"),
    )


def progress_to_dict(progress: DailyProgress) -> dict[str, Any]:
    return {
        "date": progress.day.isoformat(),
        "done": progress.done,
        "target": progress.target,
        "countedIds": list(progress.counted_ids),
    }


def progress_from_dict(data: dict[str, Any]) -> DailyProgress:
    data = _require_mapping(data)
    counted = data.get("countedIds", [])
    if not isinstance(counted, list) or not all(isinstance(i, str) for i in counted):
        raise ValueError("countedIds must be a list of strings")
    target = int(data.get("target", 0))
    return DailyProgress(
        day=date.fromisoformat(data["date"]),
        target=max(0, target),
        counted_ids=tuple(dict.fromkeys(counted)),
    )


def learn_log_to_dict(log: LearnLog) -> dict[str, Any]:
    return {"date": log.day.isoformat(), "items": dict(log.items)}


def learn_log_from_dict(data: dict[str, Any]) -> LearnLog:
    data = _require_mapping(data)
    items = data.get("items", {})
    if not isinstance(items, dict):
        raise ValueError("items must be a mapping")
    return LearnLog(
        day=date.fromisoformat(data["date"]),
        items={str(k): int(v) for k, v in items.items()},
    )
