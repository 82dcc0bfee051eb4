import json

import pytest

from vocabu.application.learn_log import LearnLogService
from vocabu.application.scheduler import CardScheduler
from vocabu.domain.exceptions import ValidationError


@pytest.fixture
def learn_log(repo, clock):
    return LearnLogService(repo, today=clock.today)


@pytest.fixture
def scheduler(repo, clock):
    return CardScheduler(repo, today=clock.today)


def test_record_keeps_best_quality(learn_log):
    learn_log.record("Ticket", 3)
    learn_log.record("ticket", 5)
    log = learn_log.record("ticket ", 0)
    assert log.items == {"ticket": 5}


def test_record_rejects_bad_quality(learn_log, memory_store):
    with pytest.raises(ValidationError):
        learn_log.record("ticket", 2)
    assert memory_store.get("learn-log") is None


def test_apply_grades_pool_words_and_clears(learn_log, scheduler, memory_store, clock):
    learn_log.record("ticket", 0)
    learn_log.record("visa", 5)
    learn_log.record("unknown", 4)

    summary = learn_log.apply(["ticket", "visa"], scheduler)

    assert summary.applied == 2
    assert summary.due_today == 0
    assert summary.later == 2
    assert scheduler.get("ticket").repetitions == 0
    assert scheduler.get("visa").repetitions == 1
    assert scheduler.get("unknown") is None
    assert memory_store.get("learn-log") is None


def test_apply_ignores_stale_log(learn_log, scheduler, clock):
    learn_log.record("ticket", 5)
    clock.advance()
    summary = learn_log.apply(["ticket"], scheduler)
    assert summary.applied == 0
    assert scheduler.get("ticket") is None


def test_apply_skips_unusable_quality(learn_log, scheduler, memory_store, clock):
    memory_store.set(
        "learn-log",
        json.dumps({"date": clock.day.isoformat(), "items": {"ticket": 2, "visa": 4}}),
    )
    summary = learn_log.apply(["ticket", "visa"], scheduler)
    assert summary.applied == 1
    assert scheduler.get("ticket") is None


def test_apply_forwards_first_touch_preset(learn_log, scheduler):
    learn_log.record("visa", 4)
    summary = learn_log.apply(["visa"], scheduler, first_touch_preset="comfort")
    assert summary.later == 1
    assert scheduler.get("visa").interval_days == 2
