"""
Dashboard router.

GET /dashboard/stats  profile plus the stats block shown on the home screen
"""
from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from aurashift.core.clock import isoformat
from aurashift.core.deps import get_current_user_id
from aurashift.db.base import get_db
from aurashift.schemas.common import ApiResponse, ErrorResponse
from aurashift.schemas.dashboard import DashboardData, DashboardStatsOut
from aurashift.schemas.onboarding import SmokingHistoryOut
from aurashift.services.dashboard import get_dashboard_stats

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get(
    "/stats",
    response_model=ApiResponse[DashboardData],
    summary="Dashboard snapshot",
    responses={
        401: {"model": ErrorResponse, "description": "Missing or invalid access token."},
        404: {"model": ErrorResponse, "description": "User not found."},
    },
)
def dashboard_stats(
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """
    Pure read. `moneySaved` and `cigarettesAvoided` are the counters
    persisted by the last activity mutation; `level` is
    `auraScore // 100 + 1`.
    """
    user, stats = get_dashboard_stats(db=db, user_id=user_id)
    return ApiResponse(data=DashboardData(
        id=user.id,
        email=user.email,
        display_name=user.display_name,
        onboarding_completed=user.onboarding_completed,
        smoking_history=SmokingHistoryOut.from_profile(user.smoking_history),
        aura_score=user.aura_score,
        cigarettes_avoided=user.cigarettes_avoided,
        total_money_saved=float(user.total_money_saved or 0),
        streak_start_time=isoformat(user.streak_start_time),
        last_smoked=isoformat(user.last_smoked),
        stats=DashboardStatsOut(
            smoke_free_time=stats.smoke_free_time,
            level=stats.level,
            money_saved=float(stats.money_saved),
            cigarettes_avoided=stats.cigarettes_avoided,
            days_smoke_free=stats.days_smoke_free,
        ),
    ))
