"""
Export and import of persisted state.

JSON packages carry every entity and can be imported back; CSV exports are
one-way dumps for spreadsheets.
"""

import csv
import io
import logging
from datetime import datetime, timezone
from typing import Any

from vocabu.domain.constants import EXPORT_VERSION
from vocabu.domain.exceptions import ValidationError
from vocabu.domain.models import CardState, ReviewEvent
from vocabu.domain.plan import Plan

from .repository import StateRepository
from .serialization import (
    card_state_from_dict,
    card_state_to_dict,
    progress_from_dict,
    progress_to_dict,
    review_event_from_dict,
    review_event_to_dict,
)

logger = logging.getLogger(__name__)

PLAN_CSV_FIELDS = [
    "id",
    "term",
    "translation",
    "origin",
    "today",
    "due",
    "interval",
    "ease",
    "reps",
]
HISTORY_CSV_FIELDS = ["itemId", "grade", "timestamp", "sessionId"]


def dump_package(repo: StateRepository, exported_at: datetime | None = None) -> dict[str, Any]:
    """Collect every entity into one JSON-ready package."""
    exported_at = exported_at or datetime.now(timezone.utc)
    plan = repo.load_plan()
    progress = repo.load_progress()
    return {
        "version": EXPORT_VERSION,
        "exportedAt": exported_at.isoformat(),
        "plan": plan.to_dict() if plan else None,
        "cards": {k: card_state_to_dict(v) for k, v in repo.load_cards().items()},
        "reviewLog": [review_event_to_dict(e) for e in repo.load_review_log()],
        "progress": progress_to_dict(progress) if progress else None,
        "ui": {"step": repo.load_ui_step()},
    }


def import_package(repo: StateRepository, package: Any) -> list[str]:
    """
    Write the entities found in ``package`` back to the store.

    Everything is validated before the first write, so a bad package changes nothing.
    Missing or null entities are left untouched.

    Returns:
        Names of the entities written.

    Raises:
        ValidationError: the package or one of its entities is malformed.
    """
    if not isinstance(package, dict):
        raise ValidationError("Export package must be a mapping.")
    version = package.get("version")
    if version != EXPORT_VERSION:
        logger.warning(f"Unknown package version {version!r}, importing anyway")

    try:
        plan = Plan.parse(package["plan"]) if package.get("plan") is not None else None
        cards = (
            {str(k): card_state_from_dict(v) for k, v in package["cards"].items()}
            if package.get("cards") is not None
            else None
        )
        events = (
            [review_event_from_dict(e) for e in package["reviewLog"]]
            if package.get("reviewLog") is not None
            else None
        )
        progress = (
            progress_from_dict(package["progress"])
            if package.get("progress") is not None
            else None
        )
    except (ValueError, KeyError, TypeError, AttributeError) as e:
        raise ValidationError(f"Malformed export package: {e}") from e
    ui = package.get("ui") or {}
    step = ui.get("step") if isinstance(ui, dict) else None

    written = []
    if plan is not None:
        repo.save_plan(plan)
        written.append("plan")
    if cards is not None:
        repo.save_cards(cards)
        written.append("cards")
    if events is not None:
        repo.save_review_log(events)
        written.append("reviewLog")
    if progress is not None:
        repo.save_progress(progress)
        written.append("progress")
    if step is not None:
        repo.save_ui_step(str(step))
        written.append("ui")
    logger.info(f"Imported: {', '.join(written) or 'nothing'}")
    return written


def plan_to_csv(plan: Plan, cards: dict[str, CardState]) -> str:
    """One row per plan item with its current scheduling state."""
    today_ids = {item.id for item in plan.today_set}
    buf = io.StringIO()
    writer = csv.DictWriter(buf, fieldnames=PLAN_CSV_FIELDS, lineterminator="\n")
    writer.writeheader()
    for item_id, item in plan.items_by_id().items():
        card = cards.get(item_id)
        writer.writerow(
            {
                "id": item_id,
                "term": item.term,
                "translation": item.translation,
                "origin": item.origin,
                "today": "yes" if item_id in today_ids else "no",
                "due": card.due_date.isoformat() if card else "",
                "interval": card.interval_days if card else "",
                "ease": f"{card.ease_factor:.2f}" if card else "",
                "reps": card.repetitions if card else "",
            }
        )
    return buf.getvalue()


def history_to_csv(events: list[ReviewEvent]) -> str:
    buf = io.StringIO()
    writer = csv.DictWriter(buf, fieldnames=HISTORY_CSV_FIELDS, lineterminator="\n")
    writer.writeheader()
    for event in events:
        row = review_event_to_dict(event)
        row.setdefault("sessionId", "")
        writer.writerow(row)
    return buf.getvalue()
