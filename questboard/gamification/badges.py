"""
Badge evaluation

Badges are derived from a profile's history and level on every read; nothing
is stored.
"""

import re
from dataclasses import dataclass
from typing import Callable

from questboard.gamification.activity_log import totals_by_date
from questboard.models.profile import ProfileState

HUNDRED_DAY_POINTS = 100


@dataclass(frozen=True)
class BadgeDefinition:
    """Badge definition"""
    id: str
    label: str
    icon: str
    is_earned: Callable[[ProfileState], bool]


@dataclass(frozen=True)
class Badge:
    """Badge with its earned flag for one profile"""
    id: str
    label: str
    icon: str
    earned: bool


def _count_titles(state: ProfileState, pattern: str) -> int:
    regex = re.compile(pattern, re.IGNORECASE)
    return sum(1 for entry in state.history if regex.search(entry.title))


def _hit_hundred_day(state: ProfileState) -> bool:
    return any(total >= HUNDRED_DAY_POINTS for total in totals_by_date(state.history).values())


BADGES: tuple[BadgeDefinition, ...] = (
    BadgeDefinition("starter", "Getting Started", "🚀", lambda s: len(s.history) >= 1),
    BadgeDefinition("caller10", "Call Cadet (10 calls)", "📞", lambda s: _count_titles(s, r"call") >= 10),
    BadgeDefinition("closer1", "Closer (1 deal)", "🏆", lambda s: _count_titles(s, r"close a deal") >= 1),
    BadgeDefinition("content5", "Content Creator (5 posts)", "📝", lambda s: _count_titles(s, r"linkedin post") >= 5),
    BadgeDefinition("level5", "Level 5+", "🥇", lambda s: s.level >= 5),
    BadgeDefinition("hundred", "Hit 100+ day", "💯", _hit_hundred_day),
)


def evaluate_badges(state: ProfileState) -> list[Badge]:
    """All badges in display order, flagged earned or not"""
    return [
        Badge(id=b.id, label=b.label, icon=b.icon, earned=b.is_earned(state))
        for b in BADGES
    ]


def earned_badges(state: ProfileState) -> list[Badge]:
    return [badge for badge in evaluate_badges(state) if badge.earned]
