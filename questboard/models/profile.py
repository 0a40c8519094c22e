"""Profile state models"""
from datetime import date
from typing import Optional
from pydantic import BaseModel, Field

from questboard.models.activity import ActivityEntry
from questboard.models.quest import Quest, default_quests


class ProfileSettings(BaseModel):
    """Per-profile settings"""
    daily_goal: int = 100
    pomodoro_minutes: int = 25
    short_break_minutes: int = 5
    long_break_minutes: int = 15


class ProfileState(BaseModel):
    """
    A named person's persisted state bundle

    Invariants:
    - xp equals the sum of points over history
    - level is derived from xp (see gamification.progression)
    - history is newest-first
    """
    name: str = ""
    settings: ProfileSettings = Field(default_factory=ProfileSettings)
    quests: list[Quest] = Field(default_factory=default_quests)
    history: list[ActivityEntry] = Field(default_factory=list)
    xp: int = Field(default=0, ge=0)
    level: int = Field(default=1, ge=1)
    streak: int = Field(default=0, ge=0)
    last_goal_date: Optional[date] = None


def make_fresh_state(name: str = "") -> ProfileState:
    """Fresh state for a profile that has never been stored"""
    return ProfileState(name=name)
