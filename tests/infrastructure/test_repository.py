"""Fail-open persistence behaviour of StateRepository."""

import json
from datetime import date, datetime

import pytest

from vocabu.domain.exceptions import StorageError
from vocabu.domain.models import CardState, DailyProgress, Grade, LearnLog, ReviewEvent
from vocabu.infrastructure.repository import StateRepository
from vocabu.infrastructure.storage import MemoryKeyValueStore

DAY = date(2024, 3, 1)


class BrokenStore(MemoryKeyValueStore):
    def get(self, key):
        raise StorageError(key, "disk on fire")

    def set(self, key, value):
        raise StorageError(key, "disk on fire")

    def remove(self, key):
        raise StorageError(key, "disk on fire")


def test_empty_store_gives_defaults(repo):
    assert repo.load_cards() == {}
    assert repo.load_review_log() == []
    assert repo.load_progress() is None
    assert repo.load_plan() is None
    assert repo.load_learn_log() is None
    assert repo.load_ui_step() is None


def test_round_trip(repo, sample_plan):
    cards = {"a": CardState(ease_factor=2.36, repetitions=2, interval_days=6, due_date=DAY)}
    events = [
        ReviewEvent("a", Grade.HARD, datetime(2024, 3, 1, 10, 30), session_id="session_1"),
        ReviewEvent("a", Grade.EASY, datetime(2024, 3, 2, 8, 0)),
    ]
    progress = DailyProgress(day=DAY, target=5, counted_ids=("a",))
    log = LearnLog(day=DAY, items={"a": 4})

    repo.save_cards(cards)
    repo.save_review_log(events)
    repo.save_progress(progress)
    repo.save_plan(sample_plan)
    repo.save_learn_log(log)
    repo.save_ui_step("review")

    assert repo.load_cards() == cards
    assert repo.load_review_log() == events
    assert repo.load_progress() == progress
    assert repo.load_plan() == sample_plan
    assert repo.load_learn_log() == log
    assert repo.load_ui_step() == "review"


@pytest.mark.parametrize(
    "key,raw",
    [
        ("card-states", "{not json"),
        ("card-states", "[1, 2]"),
        ("review-log", '{"a": 1}'),
        ("daily-progress", '{"date": "yesterday"}'),
        ("plan", '{"createdAt": "soon"}'),
        ("learn-log", '{"date": "2024-03-01", "items": ["a"]}'),
        ("daily-progress", "[]"),
        ("daily-progress", '"garbage"'),
        ("daily-progress", "42"),
        ("learn-log", '"x"'),
        ("learn-log", "[]"),
        ("card-states", '{"a": [2.5, 0, 0]}'),
        ("review-log", '["event"]'),
    ],
)
def test_corrupt_entity_falls_back(key, raw):
    store = MemoryKeyValueStore({key: raw})
    repo = StateRepository(store)
    assert not repo.load_cards()
    assert not repo.load_review_log()
    assert repo.load_progress() is None
    assert repo.load_plan() is None
    assert repo.load_learn_log() is None


def test_bad_entries_dropped_individually():
    good = {"ef": 2.5, "reps": 0, "interval": 0, "due": "2024-03-01"}
    store = MemoryKeyValueStore(
        {
            "card-states": json.dumps(
                {
                    "a": good,
                    "b": {"ef": "x"},
                    "c": {**good, "reps": -1},
                    "d": {**good, "ef": 0.5},
                }
            ),
            "review-log": json.dumps(
                [
                    {"itemId": "a", "grade": "good", "timestamp": "2024-03-01T10:00:00"},
                    {"itemId": "a", "grade": "perfect", "timestamp": "2024-03-01T10:00:00"},
                ]
            ),
        }
    )
    repo = StateRepository(store)
    assert list(repo.load_cards()) == ["a"]
    assert len(repo.load_review_log()) == 1


def test_corruption_does_not_affect_other_entities(sample_plan):
    store = MemoryKeyValueStore({"card-states": "garbage"})
    repo = StateRepository(store)
    repo.save_plan(sample_plan)
    assert repo.load_plan() == sample_plan


def test_storage_failures_are_absorbed(sample_plan):
    repo = StateRepository(BrokenStore())
    assert repo.load_cards() == {}
    assert repo.save_plan(sample_plan) is False
    assert repo.clear_all() is False


def test_clear_all(repo, memory_store, sample_plan):
    repo.save_plan(sample_plan)
    repo.save_ui_step("review")
    memory_store.set("unrelated", "keep")

    assert repo.clear_all()

    assert memory_store.data == {"unrelated": "keep"}
