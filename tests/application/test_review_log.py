from datetime import datetime

from vocabu.application.review_log import ReviewHistory
from vocabu.domain.models import Grade, ReviewEvent


def event(item_id, grade, day, hour=9):
    return ReviewEvent(item_id=item_id, grade=grade, timestamp=datetime(2024, 3, day, hour))


def test_append_persists_in_order(repo):
    history = ReviewHistory(repo)
    history.append(event("a", Grade.GOOD, 1))
    history.append(event("b", Grade.AGAIN, 1))

    reloaded = ReviewHistory(repo)
    assert [e.item_id for e in reloaded.events] == ["a", "b"]


def test_stats(repo):
    history = ReviewHistory(repo)
    history.append(event("a", Grade.GOOD, 1))
    history.append(event("a", Grade.AGAIN, 2))
    history.append(event("b", Grade.GOOD, 2, hour=23))

    stats = history.stats(datetime(2024, 3, 2).date())

    assert stats.today_count == 2
    assert stats.total_count == 3
    assert stats.by_grade == {"again": 1, "hard": 0, "good": 2, "easy": 0}
    assert stats.distinct_items == 2
