from datetime import date, datetime, timedelta

import pytest

from vocabu.application.service import LearningService
from vocabu.domain.plan import Plan
from vocabu.infrastructure.repository import StateRepository
from vocabu.infrastructure.storage import MemoryKeyValueStore


class FakeClock:
    """Settable stand-in for date.today / datetime.now."""

    def __init__(self, day: date):
        self.day = day

    def today(self) -> date:
        return self.day

    def now(self) -> datetime:
        return datetime(self.day.year, self.day.month, self.day.day, 12, 0)

    def advance(self, days: int = 1) -> None:
        self.day += timedelta(days=days)


@pytest.fixture
def clock():
    return FakeClock(date(2024, 3, 1))


@pytest.fixture
def memory_store():
    return MemoryKeyValueStore()


@pytest.fixture
def repo(memory_store):
    return StateRepository(memory_store)


@pytest.fixture
def make_service(memory_store, clock):
    def _make(**kwargs):
        return LearningService(memory_store, today=clock.today, clock=clock.now, **kwargs)

    return _make


@pytest.fixture
def sample_plan():
    return Plan.parse(
        {
            "contextId": "travel",
            "createdAt": 1709280000000,
            "recommendation": {"perDay": 3, "perWeek": 21, "total": 90},
            "todaySet": [
                {"term": "Airport", "translation": "аэропорт"},
                {"term": "ticket", "translation": "билет"},
            ],
            "pool": [
                {"term": "ticket"},
                {"term": "luggage"},
                {"term": "passport"},
            ],
        }
    )


@pytest.fixture
def mock_home(tmp_path, monkeypatch):
    """Mocks Path.home() to point to a temp dir."""
    home = tmp_path / "home"
    home.mkdir()

    # Mocking HOME to a temp directory to isolate config and data
    monkeypatch.setenv("HOME", str(home))
    for var in (
        "VOCABU_DATA_DIR",
        "VOCABU_FALLBACK_SIZE",
        "VOCABU_SESSION_LIMIT",
        "VOCABU_FIRST_TOUCH_PRESET",
        "VOCABU_VERBOSE",
    ):
        monkeypatch.delenv(var, raising=False)
    return home
