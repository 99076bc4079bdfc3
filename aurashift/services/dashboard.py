"""
Dashboard snapshot: a pure read of the persisted user counters.

Nothing is recomputed here: money_saved / cigarettes_avoided are whatever
the last activity mutation persisted (see services/scoring.py).
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy.orm import Session

from aurashift.core.clock import utcnow
from aurashift.core.errors import UserNotFoundError
from aurashift.models.user import User
from aurashift.services.scoring import calculate_level, whole_days_between


@dataclass
class DashboardStats:
    smoke_free_time: int
    level: int
    money_saved: Decimal
    cigarettes_avoided: int
    days_smoke_free: int


def smoke_free_days(user: User, now: datetime) -> int:
    if user.streak_start_time is None:
        return 0
    return max(0, whole_days_between(user.streak_start_time, now))


def get_dashboard_stats(
    db: Session,
    user_id: int,
    now: Optional[datetime] = None,
) -> tuple[User, DashboardStats]:
    user = db.get(User, user_id)
    if user is None:
        raise UserNotFoundError(user_id)

    days = smoke_free_days(user, now or utcnow())
    stats = DashboardStats(
        smoke_free_time=days,
        level=calculate_level(user.aura_score),
        money_saved=Decimal(user.total_money_saved or 0),
        cigarettes_avoided=user.cigarettes_avoided,
        days_smoke_free=days,
    )
    return user, stats
