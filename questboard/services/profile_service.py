"""
ProfileStore - Profile Persistence and Quest Completion

Maps profile names to persisted state bundles in the local store and runs
quest completions through the progression engine. Completions are mirrored
to the shared activity log on a best-effort basis; local state is never
rolled back if that write fails.
"""

import json
import logging
from datetime import date, datetime
from typing import Any, Dict, List, Optional

from pydantic import ValidationError as PydanticValidationError

from questboard.config import STORAGE_PREFIX
from questboard.db.local_store import LocalStore
from questboard.exceptions import RecordNotFoundError, ValidationError
from questboard.gamification.activity_log import (
    entries_for_date,
    goal_progress,
    total_for_date,
    total_for_last_n_days,
)
from questboard.gamification.badges import evaluate_badges
from questboard.gamification.progression import apply_completion, level_progress
from questboard.models.activity import ActivityEntry, ActivityRecord
from questboard.models.profile import ProfileState, make_fresh_state
from questboard.models.quest import Quest
from questboard.observability.metrics import (
    level_ups_total,
    quest_points_awarded_total,
    quests_completed_total,
)
from questboard.remote.activity_log import LocalOnlyActivityLog, RemoteActivityLog
from questboard.utils.datetime_helpers import today_local
from questboard.validators import clamp_daily_goal, clamp_timer_minutes

logger = logging.getLogger(__name__)

PROFILES_SUFFIX = "profiles"
STATS_WINDOW_DAYS = 7

TIMER_FIELDS = ("pomodoro_minutes", "short_break_minutes", "long_break_minutes")


class ProfileStore:
    """
    Service for profile state.

    Responsibilities:
    - Known-profile list (add, remove, list)
    - Loading and saving ProfileState bundles
    - Quest completion (XP, level, streak) and remote sync
    - Settings edits with clamping
    - Stats for the dashboard
    """

    def __init__(
        self,
        store: LocalStore,
        activity_log: Optional[RemoteActivityLog] = None,
        prefix: str = STORAGE_PREFIX,
        tz_name: Optional[str] = None
    ):
        """
        Initialize ProfileStore.

        Args:
            store: Opened LocalStore handle
            activity_log: Shared activity log (local-only when omitted)
            prefix: Key namespace for this application
            tz_name: Timezone used to assign calendar days
        """
        self.store = store
        self.activity_log = activity_log or LocalOnlyActivityLog()
        self.prefix = prefix
        self.tz_name = tz_name
        logger.debug("ProfileStore initialized")

    @property
    def profiles_key(self) -> str:
        return self.prefix + PROFILES_SUFFIX

    def state_key(self, name: str) -> str:
        return self.prefix + name

    def today(self) -> date:
        return today_local(self.tz_name)

    # =========================================================================
    # Profile list
    # =========================================================================

    def list_profiles(self) -> List[str]:
        """Known profile names; corrupt or missing list reads as empty"""
        raw = self.store.get(self.profiles_key)
        if raw is None:
            return []
        try:
            names = json.loads(raw)
        except ValueError:
            logger.warning(f"Corrupt profile list under {self.profiles_key}, ignoring")
            return []
        if not isinstance(names, list):
            return []
        return [name for name in names if isinstance(name, str)]

    def _save_profiles(self, names: List[str]) -> None:
        self.store.put(self.profiles_key, json.dumps(names))

    def _clean_name(self, name: str) -> str:
        cleaned = (name or "").strip()
        if not cleaned:
            raise ValidationError(message="Profile name cannot be empty", field="name", value=name)
        if cleaned == PROFILES_SUFFIX:
            # Would share a key with the profile list
            raise ValidationError(message=f"'{cleaned}' is a reserved name", field="name", value=name)
        return cleaned

    def add_profile(self, name: str) -> ProfileState:
        """
        Add a name to the profile list and make sure it has a stored state

        Returns:
            The profile's state (existing or freshly created)
        """
        name = self._clean_name(name)

        profiles = self.list_profiles()
        if name not in profiles:
            profiles = sorted([*profiles, name], key=lambda n: (n.casefold(), n))
            self._save_profiles(profiles)
            logger.info(f"Added profile {name}")

        if not self.store.contains(self.state_key(name)):
            state = make_fresh_state(name)
            self.save_state(state)
            return state

        return self.load_state(name)

    def remove_profile(self, name: str) -> List[str]:
        """
        Detach a name from the profile list

        The stored state is left in place, so re-adding the name restores it.

        Returns:
            Remaining profile names
        """
        profiles = self.list_profiles()
        if name not in profiles:
            raise RecordNotFoundError(
                message=f"Profile {name} not found",
                record_type="Profile",
                record_id=name
            )

        remaining = [p for p in profiles if p != name]
        self._save_profiles(remaining)
        logger.info(f"Removed profile {name} from list (state kept)")
        return remaining

    def require_profile(self, name: str) -> None:
        if name not in self.list_profiles():
            raise RecordNotFoundError(
                message=f"Profile {name} not found",
                record_type="Profile",
                record_id=name
            )

    # =========================================================================
    # State persistence
    # =========================================================================

    def load_state(self, name: str) -> ProfileState:
        """
        Load a profile's state

        Missing or corrupt values fall back to a fresh default state.
        """
        raw = self.store.get(self.state_key(name))
        if raw is None:
            return make_fresh_state(name)

        try:
            state = ProfileState.model_validate_json(raw)
        except (PydanticValidationError, ValueError) as e:
            logger.warning(f"Corrupt state for profile {name}, starting fresh: {e}")
            return make_fresh_state(name)

        if state.name != name:
            state = state.model_copy(update={"name": name})
        return state

    def save_state(self, state: ProfileState) -> None:
        self.store.put(self.state_key(state.name), state.model_dump_json())

    # =========================================================================
    # Quest completion
    # =========================================================================

    @staticmethod
    def find_quest(state: ProfileState, quest_id: str) -> Quest:
        for quest in state.quests:
            if quest.id == quest_id:
                return quest
        raise RecordNotFoundError(
            message=f"Quest {quest_id} not in catalog of {state.name}",
            record_type="Quest",
            record_id=quest_id,
            profile=state.name
        )

    async def complete_quest(
        self,
        name: str,
        quest_id: str,
        today: Optional[date] = None,
        now: Optional[datetime] = None
    ) -> Dict[str, Any]:
        """
        Complete a quest for a profile

        Args:
            name: Profile name (must be in the profile list)
            quest_id: Quest ID from the profile's catalog
            today: Calendar day to log on (defaults to today in the configured timezone)
            now: Completion instant (defaults to now)

        Returns:
            {
                'state': ProfileState,
                'entry': ActivityEntry,
                'xp_awarded': int,
                'new_total_xp': int,
                'old_level': int,
                'new_level': int,
                'leveled_up': bool,
                'streak': int,
                'total_today': int,
                'goal_met_today': bool
            }
        """
        self.require_profile(name)
        today = today or self.today()

        state = self.load_state(name)
        quest = self.find_quest(state, quest_id)

        new_state = apply_completion(state, quest, today, now=now)
        self.save_state(new_state)

        entry: ActivityEntry = new_state.history[0]
        leveled_up = new_state.level > state.level
        total_today = total_for_date(new_state.history, today)

        quests_completed_total.labels(category=quest.category or "none").inc()
        quest_points_awarded_total.inc(quest.points)
        if leveled_up:
            level_ups_total.inc()

        logger.info(
            f"{name} completed '{quest.title}' (+{quest.points}). "
            f"Total: {new_state.xp} XP, Level: {new_state.level}, Streak: {new_state.streak}"
        )

        await self.activity_log.write(ActivityRecord(
            name=name,
            title=quest.title,
            points=quest.points,
            category=quest.category,
            date=today.isoformat(),
        ))

        return {
            "state": new_state,
            "entry": entry,
            "xp_awarded": quest.points,
            "new_total_xp": new_state.xp,
            "old_level": state.level,
            "new_level": new_state.level,
            "leveled_up": leveled_up,
            "streak": new_state.streak,
            "total_today": total_today,
            "goal_met_today": new_state.last_goal_date == today,
        }

    # =========================================================================
    # Settings
    # =========================================================================

    def update_settings(self, name: str, **changes: Any) -> ProfileState:
        """
        Update settings, clamping numeric values into range

        Accepts daily_goal and the timer durations; None values are ignored.
        """
        state = self.load_state(name)
        updates: Dict[str, int] = {}

        if changes.get("daily_goal") is not None:
            updates["daily_goal"] = clamp_daily_goal(changes["daily_goal"])
        for field in TIMER_FIELDS:
            if changes.get(field) is not None:
                updates[field] = clamp_timer_minutes(changes[field])

        unknown = set(changes) - {"daily_goal", *TIMER_FIELDS}
        if unknown:
            logger.debug(f"Ignoring unknown settings {sorted(unknown)}")

        if not updates:
            return state

        settings = state.settings.model_copy(update=updates)
        new_state = state.model_copy(update={"settings": settings})
        self.save_state(new_state)
        logger.info(f"Updated settings for {name}: {updates}")
        return new_state

    # =========================================================================
    # Stats
    # =========================================================================

    def stats(self, name: str, today: Optional[date] = None) -> Dict[str, Any]:
        """
        Dashboard numbers for a profile

        Returns:
            {
                'name': str,
                'date': date,
                'total_today': int,
                'daily_goal': int,
                'goal_progress': int (percent, 0-100),
                'streak': int,
                'xp': int,
                'level': LevelProgress,
                'last_7_days_points': int,
                'today_entries': list[ActivityEntry],
                'badges': list[Badge]
            }
        """
        today = today or self.today()
        state = self.load_state(name)
        total_today = total_for_date(state.history, today)

        return {
            "name": name,
            "date": today,
            "total_today": total_today,
            "daily_goal": state.settings.daily_goal,
            "goal_progress": goal_progress(total_today, state.settings.daily_goal),
            "streak": state.streak,
            "xp": state.xp,
            "level": level_progress(state.xp),
            "last_7_days_points": total_for_last_n_days(state.history, STATS_WINDOW_DAYS, as_of=today),
            "today_entries": entries_for_date(state.history, today),
            "badges": evaluate_badges(state),
        }
