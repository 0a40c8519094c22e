"""API routes for questboard"""
import logging
from datetime import date
from typing import Optional
from urllib.parse import quote

from fastapi import APIRouter, Depends, Query, Request, status
from fastapi.responses import Response

from questboard import __version__
from questboard.api.middleware import limiter
from questboard.api.models import (
    QuestListResponse,
    ProfileCreateRequest, ProfileListResponse,
    SettingsUpdateRequest,
    CompletionRequest, CompletionResponse,
    ActivityResponse, StatsResponse, BadgeResponse,
    LeaderboardResponse, HealthCheckResponse,
)
from questboard.gamification.activity_log import entries_for_date
from questboard.gamification.leaderboard import RANGE_WEEK, range_start
from questboard.models.profile import ProfileState
from questboard.models.quest import categories, default_quests
from questboard.observability.metrics import leaderboard_queries_total
from questboard.remote.activity_log import RemoteActivityLog
from questboard.services.export_service import export_csv, export_filename
from questboard.services.profile_service import ProfileStore

logger = logging.getLogger(__name__)

router = APIRouter()


def get_profile_store(request: Request) -> ProfileStore:
    """ProfileStore handle created by the application lifespan"""
    return request.app.state.profile_store


def get_activity_log(request: Request) -> RemoteActivityLog:
    return request.app.state.activity_log


@router.get("/health", response_model=HealthCheckResponse)
async def health_check(activity_log: RemoteActivityLog = Depends(get_activity_log)):
    """Liveness check"""
    return HealthCheckResponse(
        status="ok",
        version=__version__,
        remote_enabled=activity_log.enabled
    )


# =============================================================================
# Quests
# =============================================================================

@router.get("/api/v1/quests", response_model=QuestListResponse)
async def list_quests(category: Optional[str] = None):
    """Quest catalog; `category` filters, "All" or empty means no filter"""
    quests = default_quests()
    filtered = [
        q for q in quests
        if not category or category == "All" or q.category == category
    ]
    return QuestListResponse(quests=filtered, categories=categories(quests))


# =============================================================================
# Profiles
# =============================================================================

@router.get("/api/v1/profiles", response_model=ProfileListResponse)
async def list_profiles(profiles: ProfileStore = Depends(get_profile_store)):
    """Known profile names"""
    return ProfileListResponse(profiles=profiles.list_profiles())


@router.post("/api/v1/profiles", response_model=ProfileState, status_code=status.HTTP_201_CREATED)
@limiter.limit("30/minute")
async def add_profile(
    request: Request,
    body: ProfileCreateRequest,
    profiles: ProfileStore = Depends(get_profile_store)
):
    """Add a profile (Rate limit: 30/minute)"""
    return profiles.add_profile(body.name)


@router.delete("/api/v1/profiles/{name}", response_model=ProfileListResponse)
async def remove_profile(name: str, profiles: ProfileStore = Depends(get_profile_store)):
    """Remove a profile from the list; its saved data stays in the store"""
    return ProfileListResponse(profiles=profiles.remove_profile(name))


@router.get("/api/v1/profiles/{name}", response_model=ProfileState)
async def get_profile(name: str, profiles: ProfileStore = Depends(get_profile_store)):
    """Profile state (fresh defaults if never stored)"""
    return profiles.load_state(name)


@router.patch("/api/v1/profiles/{name}/settings", response_model=ProfileState)
async def update_settings(
    name: str,
    body: SettingsUpdateRequest,
    profiles: ProfileStore = Depends(get_profile_store)
):
    """Update settings; numeric values are clamped into range"""
    profiles.require_profile(name)
    return profiles.update_settings(name, **body.model_dump(exclude_none=True))


@router.post(
    "/api/v1/profiles/{name}/completions",
    response_model=CompletionResponse,
    status_code=status.HTTP_201_CREATED
)
@limiter.limit("120/minute")
async def complete_quest(
    request: Request,
    name: str,
    body: CompletionRequest,
    profiles: ProfileStore = Depends(get_profile_store)
):
    """Complete a quest (Rate limit: 120/minute)"""
    result = await profiles.complete_quest(name, body.quest_id)
    return CompletionResponse(
        entry=result["entry"],
        xp_awarded=result["xp_awarded"],
        xp=result["new_total_xp"],
        level=result["new_level"],
        leveled_up=result["leveled_up"],
        streak=result["streak"],
        total_today=result["total_today"],
        goal_met_today=result["goal_met_today"],
    )


@router.get("/api/v1/profiles/{name}/activity", response_model=ActivityResponse)
async def get_activity(
    name: str,
    day: Optional[date] = Query(default=None, alias="date"),
    profiles: ProfileStore = Depends(get_profile_store)
):
    """Activity for one day (default today), newest first"""
    day = day or profiles.today()
    state = profiles.load_state(name)
    entries = entries_for_date(state.history, day)
    return ActivityResponse(date=day, entries=entries, total=sum(e.points for e in entries))


@router.get("/api/v1/profiles/{name}/stats", response_model=StatsResponse)
async def get_stats(name: str, profiles: ProfileStore = Depends(get_profile_store)):
    """Today's progress, streak, level and badges"""
    stats = profiles.stats(name)
    level = stats["level"]
    return StatsResponse(
        name=stats["name"],
        date=stats["date"],
        total_today=stats["total_today"],
        daily_goal=stats["daily_goal"],
        goal_progress=stats["goal_progress"],
        streak=stats["streak"],
        xp=stats["xp"],
        level=level.level,
        xp_into_level=level.xp_into_level,
        xp_to_next_level=level.xp_to_next_level,
        last_7_days_points=stats["last_7_days_points"],
        badges=[
            BadgeResponse(id=b.id, label=b.label, icon=b.icon, earned=b.earned)
            for b in stats["badges"]
        ],
    )


@router.get("/api/v1/profiles/{name}/export.csv")
async def export_profile_csv(name: str, profiles: ProfileStore = Depends(get_profile_store)):
    """Download history as CSV"""
    profiles.require_profile(name)
    state = profiles.load_state(name)
    filename = export_filename(name, profiles.today())
    return Response(
        content=export_csv(state, profiles.tz_name),
        media_type="text/csv",
        headers={"Content-Disposition": f"attachment; filename*=UTF-8''{quote(filename)}"}
    )


# =============================================================================
# Leaderboard
# =============================================================================

@router.get("/api/v1/leaderboard", response_model=LeaderboardResponse)
@limiter.limit("60/minute")
async def get_leaderboard(
    request: Request,
    range_name: str = Query(default=RANGE_WEEK, alias="range", pattern="^(week|month)$"),
    profiles: ProfileStore = Depends(get_profile_store),
    activity_log: RemoteActivityLog = Depends(get_activity_log)
):
    """Points per person over the last week or month (Rate limit: 60/minute)"""
    start = range_start(range_name, profiles.today())
    leaderboard_queries_total.labels(range=range_name).inc()
    rows = await activity_log.leaderboard_since(start.isoformat())
    return LeaderboardResponse(
        range=range_name,
        start_date=start,
        remote_enabled=activity_log.enabled,
        rows=rows
    )
