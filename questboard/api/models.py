"""Pydantic models for API request/response validation"""
import datetime as dt
from typing import Optional, List, Union
from pydantic import BaseModel, Field

from questboard.models.activity import ActivityEntry, LeaderboardRow
from questboard.models.quest import Quest

# Settings accept raw form input; values are clamped, not rejected
NumericInput = Optional[Union[int, float, str]]


class QuestListResponse(BaseModel):
    """Quest catalog, optionally filtered by category"""
    quests: List[Quest]
    categories: List[str] = Field(..., description="All categories, catalog order")


class ProfileCreateRequest(BaseModel):
    """Request to add a profile"""
    name: str = Field(..., description="Profile (person) name")


class ProfileListResponse(BaseModel):
    """Known profile names"""
    profiles: List[str]


class SettingsUpdateRequest(BaseModel):
    """Request to update profile settings"""
    daily_goal: NumericInput = Field(default=None, description="Daily point goal (clamped to 10-10000)")
    pomodoro_minutes: NumericInput = Field(default=None, description="Work timer minutes (clamped to 1-180)")
    short_break_minutes: NumericInput = None
    long_break_minutes: NumericInput = None


class CompletionRequest(BaseModel):
    """Request to complete a quest"""
    quest_id: str = Field(..., description="Quest ID from the profile's catalog")


class CompletionResponse(BaseModel):
    """Result of a quest completion"""
    entry: ActivityEntry
    xp_awarded: int
    xp: int
    level: int
    leveled_up: bool
    streak: int
    total_today: int
    goal_met_today: bool


class ActivityResponse(BaseModel):
    """One day's activity, newest first"""
    date: dt.date
    entries: List[ActivityEntry]
    total: int


class BadgeResponse(BaseModel):
    id: str
    label: str
    icon: str
    earned: bool


class StatsResponse(BaseModel):
    """Dashboard numbers for a profile"""
    name: str
    date: dt.date
    total_today: int
    daily_goal: int
    goal_progress: int = Field(..., description="Percent of daily goal, 0-100")
    streak: int
    xp: int
    level: int
    xp_into_level: int
    xp_to_next_level: int
    last_7_days_points: int = Field(..., description="Points over the last 7 active days")
    badges: List[BadgeResponse]


class LeaderboardResponse(BaseModel):
    """Leaderboard for a range preset"""
    range: str
    start_date: dt.date
    remote_enabled: bool
    rows: List[LeaderboardRow]


class HealthCheckResponse(BaseModel):
    """Health check response"""
    status: str
    version: str
    remote_enabled: bool
