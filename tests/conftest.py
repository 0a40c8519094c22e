"""Global test fixtures and utilities for questboard tests"""
import pytest
from datetime import date, datetime, timezone
from typing import List

from questboard.db.local_store import LocalStore
from questboard.models.activity import ActivityEntry, ActivityRecord
from questboard.models.quest import Quest
from questboard.remote.activity_log import RemoteActivityLog
from questboard.services.profile_service import ProfileStore


# ============================================================================
# Store Fixtures
# ============================================================================

@pytest.fixture
def local_store():
    """Opened in-memory local store"""
    store = LocalStore(":memory:")
    store.open()
    yield store
    store.close()


class RecordingActivityLog(RemoteActivityLog):
    """In-memory activity log that keeps every written record"""

    enabled = True

    def __init__(self):
        self.records: List[ActivityRecord] = []
        self.signed_in = False
        self.closed = False

    async def sign_in(self) -> None:
        self.signed_in = True

    async def write(self, record: ActivityRecord) -> None:
        self.records.append(record)

    async def query_since(self, start_date: str) -> List[ActivityRecord]:
        return sorted(
            (r for r in self.records if r.date >= start_date),
            key=lambda r: r.date
        )

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def activity_log():
    """Recording activity log"""
    return RecordingActivityLog()


@pytest.fixture
def profile_store(local_store, activity_log):
    """ProfileStore over the in-memory store"""
    return ProfileStore(local_store, activity_log, prefix="test-", tz_name="UTC")


# ============================================================================
# Domain Fixtures
# ============================================================================

@pytest.fixture
def test_today():
    """Fixed calendar day for deterministic tests"""
    return date(2024, 3, 15)


@pytest.fixture
def big_quest():
    """Quest worth exactly one daily goal"""
    return Quest(id="offer-accepted", title="Offer accepted", points=100, category="Recruitment", icon="🤝")


@pytest.fixture
def small_quest():
    return Quest(id="prospecting-call", title="Prospecting call", points=5, category="Sales", icon="📞")


@pytest.fixture
def entry_factory():
    """Factory for ActivityEntry objects"""
    counter = {"n": 0}

    def _create(day: date, points: int = 10, title: str = "Prospecting call",
                category: str = "Sales", hour: int = 12, minute: int = 0):
        counter["n"] += 1
        return ActivityEntry(
            id=f"entry-{counter['n']}",
            date=day,
            quest_id="prospecting-call",
            title=title,
            points=points,
            category=category,
            timestamp=datetime(day.year, day.month, day.day, hour, minute, tzinfo=timezone.utc),
        )

    return _create
