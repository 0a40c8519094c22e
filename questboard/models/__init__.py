"""Pydantic models for quests, activity and profiles"""

from questboard.models.quest import Quest, DEFAULT_QUESTS, default_quests, categories
from questboard.models.activity import ActivityEntry, ActivityRecord, LeaderboardRow
from questboard.models.profile import ProfileSettings, ProfileState, make_fresh_state

__all__ = [
    "Quest",
    "DEFAULT_QUESTS",
    "default_quests",
    "categories",
    "ActivityEntry",
    "ActivityRecord",
    "LeaderboardRow",
    "ProfileSettings",
    "ProfileState",
    "make_fresh_state",
]
