"""Activity history and leaderboard models"""
import datetime as dt
from typing import Optional
from pydantic import BaseModel, ConfigDict


class ActivityEntry(BaseModel):
    """
    One quest completion in a profile's history

    Title, points, category and icon are copied from the quest when the entry
    is created so later catalog edits don't rewrite history.
    """
    model_config = ConfigDict(frozen=True)

    id: str
    date: dt.date
    quest_id: str
    title: str
    points: int
    category: str = ""
    icon: str = "🎯"
    timestamp: dt.datetime


class ActivityRecord(BaseModel):
    """Completion record in the shared remote activity log"""
    name: str = "Anonymous"
    title: str = ""
    points: int = 0
    category: str = ""
    date: str  # ISO YYYY-MM-DD
    created_at: Optional[dt.datetime] = None  # assigned by the remote store


class LeaderboardRow(BaseModel):
    """Aggregated points for one name, recomputed per query"""
    name: str
    points: int
