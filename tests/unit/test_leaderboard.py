"""Unit tests for leaderboard aggregation (questboard/gamification/leaderboard.py)"""
import pytest
from datetime import date

from questboard.gamification.leaderboard import (
    ANONYMOUS_NAME,
    aggregate_leaderboard,
    range_start,
)
from questboard.models.activity import ActivityRecord, LeaderboardRow


# ============================================================================
# Aggregation Tests
# ============================================================================

def test_aggregate_example_records():
    """Points are summed per name and ordered descending"""
    records = [
        ActivityRecord(name="A", points=50, date="2024-01-02"),
        ActivityRecord(name="B", points=30, date="2024-01-03"),
        ActivityRecord(name="A", points=20, date="2024-01-05"),
    ]

    rows = aggregate_leaderboard(records, "2024-01-01")

    assert rows == [LeaderboardRow(name="A", points=70), LeaderboardRow(name="B", points=30)]


def test_aggregate_filters_by_start_date_inclusive():
    records = [
        {"name": "A", "points": 10, "date": "2023-12-31"},
        {"name": "A", "points": 20, "date": "2024-01-01"},
        {"name": "B", "points": 5, "date": "2024-01-10"},
    ]

    rows = aggregate_leaderboard(records, "2024-01-01")

    assert [(r.name, r.points) for r in rows] == [("A", 20), ("B", 5)]


def test_aggregate_missing_name_bucketed_as_anonymous():
    records = [
        {"name": "", "points": 10, "date": "2024-02-01"},
        {"points": 15, "date": "2024-02-02"},
        {"name": None, "points": 5, "date": "2024-02-03"},
    ]

    rows = aggregate_leaderboard(records, "2024-01-01")

    assert rows == [LeaderboardRow(name=ANONYMOUS_NAME, points=30)]


def test_aggregate_missing_points_count_as_zero():
    records = [{"name": "A", "date": "2024-02-01"}, {"name": "A", "points": None, "date": "2024-02-01"}]

    assert aggregate_leaderboard(records, "2024-01-01") == [LeaderboardRow(name="A", points=0)]


def test_aggregate_ties_broken_by_name():
    records = [
        ActivityRecord(name="Zoe", points=40, date="2024-03-01"),
        ActivityRecord(name="Adam", points=40, date="2024-03-02"),
        ActivityRecord(name="Mia", points=60, date="2024-03-02"),
    ]

    rows = aggregate_leaderboard(records, "2024-03-01")

    assert [r.name for r in rows] == ["Mia", "Adam", "Zoe"]


def test_aggregate_empty():
    assert aggregate_leaderboard([], "2024-01-01") == []


# ============================================================================
# Range Tests
# ============================================================================

def test_range_start_week():
    assert range_start("week", date(2024, 3, 15)) == date(2024, 3, 8)
    assert range_start("week", date(2024, 1, 3)) == date(2023, 12, 27)


def test_range_start_month():
    assert range_start("month", date(2024, 3, 15)) == date(2024, 2, 15)
    assert range_start("month", date(2024, 1, 10)) == date(2023, 12, 10)


def test_range_start_month_clamps_to_month_end():
    assert range_start("month", date(2024, 3, 31)) == date(2024, 2, 29)
    assert range_start("month", date(2023, 3, 31)) == date(2023, 2, 28)


def test_range_start_unknown():
    with pytest.raises(ValueError):
        range_start("year", date(2024, 3, 15))

