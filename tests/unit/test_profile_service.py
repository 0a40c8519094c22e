"""Unit tests for ProfileStore (questboard/services/profile_service.py)"""
import pytest
from datetime import date, datetime, timedelta, timezone

from questboard.exceptions import RecordNotFoundError, ValidationError
from questboard.models.profile import make_fresh_state
from questboard.remote.activity_log import LocalOnlyActivityLog
from questboard.services.profile_service import ProfileStore


# ============================================================================
# Profile List Tests
# ============================================================================

def test_list_profiles_empty(profile_store):
    assert profile_store.list_profiles() == []


def test_add_profile_creates_fresh_state(profile_store, local_store):
    state = profile_store.add_profile("Alice")

    assert state.name == "Alice"
    assert state.xp == 0
    assert state.level == 1
    assert profile_store.list_profiles() == ["Alice"]
    assert local_store.contains("test-Alice")
    assert local_store.get("test-profiles") == '["Alice"]'


def test_add_profile_sorted_and_deduplicated(profile_store):
    for name in ("carol", "Bob", "alice", "Bob"):
        profile_store.add_profile(name)

    assert profile_store.list_profiles() == ["alice", "Bob", "carol"]


def test_add_profile_strips_whitespace(profile_store):
    state = profile_store.add_profile("  Dana  ")

    assert state.name == "Dana"
    assert profile_store.list_profiles() == ["Dana"]


@pytest.mark.parametrize("name", ["", "   ", "profiles"])
def test_add_profile_rejects_empty_and_reserved(profile_store, name):
    with pytest.raises(ValidationError):
        profile_store.add_profile(name)

    assert profile_store.list_profiles() == []


def test_remove_profile_keeps_state(profile_store, local_store):
    profile_store.add_profile("Alice")
    profile_store.add_profile("Bob")

    remaining = profile_store.remove_profile("Alice")

    assert remaining == ["Bob"]
    assert profile_store.list_profiles() == ["Bob"]
    assert local_store.contains("test-Alice")


def test_remove_unknown_profile(profile_store):
    with pytest.raises(RecordNotFoundError):
        profile_store.remove_profile("Ghost")


@pytest.mark.asyncio
async def test_readding_profile_restores_state(profile_store, test_today):
    profile_store.add_profile("Alice")
    await profile_store.complete_quest("Alice", "close-deal", today=test_today)
    profile_store.remove_profile("Alice")

    state = profile_store.add_profile("Alice")

    assert state.xp == 75
    assert len(state.history) == 1


def test_corrupt_profile_list_reads_as_empty(profile_store, local_store):
    local_store.put("test-profiles", "{not json")
    assert profile_store.list_profiles() == []

    local_store.put("test-profiles", '{"a": 1}')
    assert profile_store.list_profiles() == []


# ============================================================================
# State Persistence Tests
# ============================================================================

def test_load_missing_state_is_fresh(profile_store):
    state = profile_store.load_state("Nobody")

    assert state == make_fresh_state("Nobody")


def test_load_corrupt_state_is_fresh(profile_store, local_store):
    local_store.put("test-Alice", "garbage")
    assert profile_store.load_state("Alice") == make_fresh_state("Alice")

    local_store.put("test-Alice", '{"name": "Alice", "xp": -5}')
    assert profile_store.load_state("Alice").xp == 0


def test_save_and_load_round_trip(profile_store, entry_factory, test_today):
    state = make_fresh_state("Alice").model_copy(update={
        "history": [entry_factory(test_today, 20)],
        "xp": 20,
        "streak": 3,
        "last_goal_date": test_today - timedelta(days=1),
    })
    profile_store.save_state(state)

    assert profile_store.load_state("Alice") == state


def test_load_state_corrects_stored_name(profile_store, local_store):
    local_store.put("test-Alice", make_fresh_state("Someone").model_dump_json())

    assert profile_store.load_state("Alice").name == "Alice"


# ============================================================================
# Completion Tests
# ============================================================================

@pytest.mark.asyncio
async def test_complete_quest_updates_and_persists(profile_store, activity_log, test_today):
    profile_store.add_profile("Alice")
    now = datetime(2024, 3, 15, 10, 0, tzinfo=timezone.utc)

    result = await profile_store.complete_quest("Alice", "offer-accepted", today=test_today, now=now)

    assert result["xp_awarded"] == 100
    assert result["new_total_xp"] == 100
    assert result["old_level"] == 1
    assert result["new_level"] == 2
    assert result["leveled_up"] is True
    assert result["streak"] == 1
    assert result["total_today"] == 100
    assert result["goal_met_today"] is True
    assert result["entry"].timestamp == now

    stored = profile_store.load_state("Alice")
    assert stored.xp == 100
    assert stored.level == 2
    assert stored.history[0].quest_id == "offer-accepted"


@pytest.mark.asyncio
async def test_complete_quest_writes_remote_record(profile_store, activity_log, test_today):
    profile_store.add_profile("Alice")

    await profile_store.complete_quest("Alice", "prospecting-call", today=test_today)

    assert len(activity_log.records) == 1
    record = activity_log.records[0]
    assert record.name == "Alice"
    assert record.title == "Prospecting call"
    assert record.points == 5
    assert record.category == "Sales"
    assert record.date == "2024-03-15"


@pytest.mark.asyncio
async def test_complete_quest_below_goal(profile_store, test_today):
    profile_store.add_profile("Alice")

    result = await profile_store.complete_quest("Alice", "prospecting-call", today=test_today)

    assert result["leveled_up"] is False
    assert result["goal_met_today"] is False
    assert result["streak"] == 0


@pytest.mark.asyncio
async def test_complete_quest_unknown_profile(profile_store, activity_log, test_today):
    with pytest.raises(RecordNotFoundError):
        await profile_store.complete_quest("Ghost", "close-deal", today=test_today)

    assert activity_log.records == []


@pytest.mark.asyncio
async def test_complete_quest_unknown_quest(profile_store, activity_log, test_today):
    profile_store.add_profile("Alice")

    with pytest.raises(RecordNotFoundError):
        await profile_store.complete_quest("Alice", "no-such-quest", today=test_today)

    assert profile_store.load_state("Alice").history == []
    assert activity_log.records == []


@pytest.mark.asyncio
async def test_complete_quest_local_only(local_store, test_today):
    """Without a remote log, completion still updates local state"""
    store = ProfileStore(local_store, prefix="solo-", tz_name="UTC")
    assert isinstance(store.activity_log, LocalOnlyActivityLog)
    store.add_profile("Alice")

    result = await store.complete_quest("Alice", "close-deal", today=test_today)

    assert result["new_total_xp"] == 75


@pytest.mark.asyncio
async def test_profiles_are_isolated(profile_store, test_today):
    profile_store.add_profile("Alice")
    profile_store.add_profile("Bob")

    await profile_store.complete_quest("Alice", "close-deal", today=test_today)

    assert profile_store.load_state("Alice").xp == 75
    assert profile_store.load_state("Bob").xp == 0


# ============================================================================
# Settings Tests
# ============================================================================

def test_update_settings_clamps(profile_store):
    profile_store.add_profile("Alice")

    state = profile_store.update_settings(
        "Alice",
        daily_goal=5,
        pomodoro_minutes=500,
        short_break_minutes="abc",
        long_break_minutes="20",
    )

    assert state.settings.daily_goal == 10
    assert state.settings.pomodoro_minutes == 180
    assert state.settings.short_break_minutes == 1
    assert state.settings.long_break_minutes == 20
    assert profile_store.load_state("Alice").settings == state.settings


def test_update_settings_ignores_none(profile_store):
    profile_store.add_profile("Alice")

    state = profile_store.update_settings("Alice", daily_goal=250, pomodoro_minutes=None)

    assert state.settings.daily_goal == 250
    assert state.settings.pomodoro_minutes == 25


def test_update_settings_daily_goal_upper_bound(profile_store):
    profile_store.add_profile("Alice")

    assert profile_store.update_settings("Alice", daily_goal=99999).settings.daily_goal == 10000


# ============================================================================
# Stats Tests
# ============================================================================

@pytest.mark.asyncio
async def test_stats(profile_store, test_today):
    profile_store.add_profile("Alice")
    await profile_store.complete_quest("Alice", "close-deal", today=test_today - timedelta(days=1))
    await profile_store.complete_quest(
        "Alice", "book-meeting", today=test_today,
        now=datetime(2024, 3, 15, 9, 0, tzinfo=timezone.utc)
    )
    await profile_store.complete_quest(
        "Alice", "prospecting-call", today=test_today,
        now=datetime(2024, 3, 15, 11, 0, tzinfo=timezone.utc)
    )

    stats = profile_store.stats("Alice", today=test_today)

    assert stats["name"] == "Alice"
    assert stats["date"] == test_today
    assert stats["total_today"] == 20
    assert stats["daily_goal"] == 100
    assert stats["goal_progress"] == 20
    assert stats["xp"] == 95
    assert stats["level"].level == 1
    assert stats["level"].xp_to_next_level == 5
    assert stats["last_7_days_points"] == 95
    assert [e.quest_id for e in stats["today_entries"]] == ["prospecting-call", "book-meeting"]
    earned = {b.id for b in stats["badges"] if b.earned}
    assert earned == {"starter", "closer1"}


def test_stats_unknown_profile_is_fresh(profile_store):
    stats = profile_store.stats("Nobody", today=date(2024, 1, 1))

    assert stats["xp"] == 0
    assert stats["total_today"] == 0
    assert stats["today_entries"] == []
