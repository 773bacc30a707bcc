"""Stats, completion history and leaderboard endpoints."""

from typing import Any

from fastapi import APIRouter

from src.interface.dependencies import CurrentUser
from src.services import stats_service, user_service
from src.services.user_service import LeaderboardPeriod


router = APIRouter(prefix="/api/stats", tags=["stats"])


@router.get("/history")
async def history(user: CurrentUser) -> dict[str, Any]:
    """Per-day completion counts for the contribution graph."""
    return {"success": True, "history": await stats_service.completion_history(user_id=user["id"])}


@router.get("/me")
async def my_stats(user: CurrentUser) -> dict[str, Any]:
    return await stats_service.get_my_stats(user_id=user["id"])


@router.get("/leaderboard")
async def leaderboard(user: CurrentUser, period: LeaderboardPeriod = "all") -> dict[str, Any]:
    entries = await user_service.get_leaderboard(team_id=user["team_id"], period=period)
    return {"period": period, "leaderboard": entries}
