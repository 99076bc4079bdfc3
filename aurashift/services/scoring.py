"""
Scoring engine: aura score and since-start savings counters.

Definitions
-----------
  aura_score          = max(0, sum of points over every activity of the user)
  level               = aura_score // 100 + 1
  days_since_start    = max(1, whole days between streak start and now)
  cigarettes_avoided  = max(0, days * cigarettes_per_day - cigarettes consumed since start)
  money_saved         = max(0, days * daily_expected - consumed * cost_per_cigarette)

"Start" is the user's streak_start_time, falling back to the account's
created_at. Money is rounded to 2 decimals with ROUND_HALF_UP.

Every persisted value here is a full recompute from the activity history.
Nothing is ever patched incrementally, so repeated calls with no writes in
between are idempotent and racing recomputes converge on the last read.

Public API
----------
total_points(points)                                   -> int      (pure)
calculate_level(aura_score)                            -> int      (pure)
calculate_savings(profile, start, now, consumed)       -> SavingsSnapshot (pure)
recalculate_score(db, user_id)                         -> int
recalculate_avoidance_and_savings(db, user_id, type)   -> SavingsSnapshot | None
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from aurashift.core.clock import as_utc, utcnow
from aurashift.core.errors import UserNotFoundError
from aurashift.models.activity import Activity, ActivityType
from aurashift.models.user import SmokingProfile, User

logger = logging.getLogger(__name__)

POINTS_PER_LEVEL = 100
_CENT = Decimal("0.01")
_ONE_DAY = timedelta(days=1)


# ---------------------------------------------------------------------------
# Result type
# ---------------------------------------------------------------------------

@dataclass
class SavingsSnapshot:
    days_since_start: int
    cigarettes_consumed: int
    cigarettes_avoided: int
    money_saved: Decimal


# ---------------------------------------------------------------------------
# Pure helpers
# ---------------------------------------------------------------------------

def round_money(value: Decimal | int | float) -> Decimal:
    return Decimal(str(value)).quantize(_CENT, rounding=ROUND_HALF_UP)


def total_points(points: Iterable[int]) -> int:
    """Floored sum of activity points."""
    return max(0, sum(points))


def calculate_level(aura_score: int) -> int:
    return aura_score // POINTS_PER_LEVEL + 1


def whole_days_between(start: datetime, now: datetime) -> int:
    return (as_utc(now) - as_utc(start)) // _ONE_DAY


def calculate_savings(
    profile: SmokingProfile,
    start: datetime,
    now: datetime,
    cigarettes_consumed: int,
) -> SavingsSnapshot:
    days = max(1, whole_days_between(start, now))
    cost = Decimal(profile.cost_per_cigarette)
    daily_expected = profile.cigarettes_per_day * cost

    expected_spend = days * daily_expected
    actual_spend = cigarettes_consumed * cost
    money_saved = max(Decimal(0), expected_spend - actual_spend)
    avoided = max(0, days * profile.cigarettes_per_day - cigarettes_consumed)

    return SavingsSnapshot(
        days_since_start=days,
        cigarettes_consumed=cigarettes_consumed,
        cigarettes_avoided=avoided,
        money_saved=round_money(money_saved),
    )


# ---------------------------------------------------------------------------
# Recomputes (read full history, overwrite derived fields)
# ---------------------------------------------------------------------------

def _get_user(db: Session, user_id: int) -> User:
    user = db.get(User, user_id)
    if user is None:
        raise UserNotFoundError(user_id)
    return user


def recalculate_score(db: Session, user_id: int) -> int:
    """
    Recompute and stage the user's aura score. The caller owns the commit so
    the triggering mutation and the recompute land in one transaction.
    """
    user = _get_user(db, user_id)
    points = db.query(Activity.points).filter(Activity.user_id == user_id).all()
    score = total_points(p for (p,) in points)
    user.aura_score = score
    db.flush()
    logger.debug("Recomputed aura score user=%s score=%s", user_id, score)
    return score


def recalculate_avoidance_and_savings(
    db: Session,
    user_id: int,
    activity_type: Optional[ActivityType] = None,
    now: Optional[datetime] = None,
) -> Optional[SavingsSnapshot]:
    """
    Recompute cigarettes_avoided / total_money_saved since the streak start.
    No-op (returns None) for users without a smoking profile. `activity_type`
    only annotates the log line: the computation always reads full history.
    """
    user = _get_user(db, user_id)
    profile = user.smoking_history
    if profile is None:
        return None

    now = now or utcnow()
    start = as_utc(user.streak_start_time or user.created_at)
    consumed = (
        db.query(func.count(Activity.id))
        .filter(
            Activity.user_id == user_id,
            Activity.type == ActivityType.cigarette_consumed,
            Activity.created_at >= start,
        )
        .scalar()
    ) or 0

    snapshot = calculate_savings(profile, start, now, consumed)
    user.cigarettes_avoided = snapshot.cigarettes_avoided
    user.total_money_saved = snapshot.money_saved
    db.flush()
    logger.debug(
        "Recomputed savings user=%s trigger=%s avoided=%s saved=%s",
        user_id,
        activity_type.value if activity_type else None,
        snapshot.cigarettes_avoided,
        snapshot.money_saved,
    )
    return snapshot
