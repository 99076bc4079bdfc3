"""
Activity service: CRUD over the activity store plus recompute triggers.

Every mutation (create / update / delete) is followed, inside the same
transaction, by a full aura-score recompute and a full savings recompute.
db.commit() is called once per mutation; any store error rolls the whole
unit back, so persisted counters never disagree with persisted activities.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from aurashift.core.clock import utcnow
from aurashift.core.errors import (
    ActivityNotFoundError,
    InvalidActivityTypeError,
    StoreFailureError,
    UserNotFoundError,
)
from aurashift.models.activity import Activity, ActivityType
from aurashift.models.user import User
from aurashift.services.scoring import recalculate_avoidance_and_savings, recalculate_score

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100


@dataclass
class Pagination:
    page: int
    limit: int
    total: int
    pages: int


def parse_activity_type(value: str | ActivityType) -> ActivityType:
    try:
        return ActivityType(value)
    except ValueError:
        raise InvalidActivityTypeError(value, [t.value for t in ActivityType])


def _recompute(db: Session, user_id: int, activity_type: ActivityType, now: datetime) -> int:
    score = recalculate_score(db, user_id)
    recalculate_avoidance_and_savings(db, user_id, activity_type, now=now)
    return score


def _commit(db: Session, operation: str) -> None:
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Store failure during %s", operation)
        raise StoreFailureError(operation)


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------

def get_activity(db: Session, user_id: int, activity_id: int) -> Activity:
    """Fetch by id and owner. Activities of other users look exactly like missing ones."""
    activity = (
        db.query(Activity)
        .filter(Activity.id == activity_id, Activity.user_id == user_id)
        .first()
    )
    if activity is None:
        raise ActivityNotFoundError(activity_id)
    return activity


def list_activities(
    db: Session,
    user_id: int,
    page: int = 1,
    limit: int = DEFAULT_PAGE_SIZE,
    activity_type: Optional[str | ActivityType] = None,
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
) -> tuple[list[Activity], Pagination]:
    """Newest first. Date bounds are inclusive on both ends."""
    q = db.query(Activity).filter(Activity.user_id == user_id)
    if activity_type:
        q = q.filter(Activity.type == parse_activity_type(activity_type))
    if start_date:
        q = q.filter(Activity.created_at >= start_date)
    if end_date:
        q = q.filter(Activity.created_at <= end_date)

    total = q.count()
    items = (
        q.order_by(Activity.created_at.desc(), Activity.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return items, Pagination(
        page=page,
        limit=limit,
        total=total,
        pages=math.ceil(total / limit) if limit else 0,
    )


# ---------------------------------------------------------------------------
# Mutations
# ---------------------------------------------------------------------------

def create_activity(
    db: Session,
    user_id: int,
    activity_type: str | ActivityType,
    metadata: Optional[dict[str, Any]] = None,
    now: Optional[datetime] = None,
) -> tuple[Activity, int]:
    activity_type = parse_activity_type(activity_type)
    user = db.get(User, user_id)
    if user is None:
        raise UserNotFoundError(user_id)

    now = now or utcnow()
    activity = Activity(user_id=user_id, type=activity_type, created_at=now)
    activity.metadata_dict = metadata or {}
    db.add(activity)
    if activity_type == ActivityType.cigarette_consumed:
        user.last_smoked = now
    db.flush()

    score = _recompute(db, user_id, activity_type, now)
    _commit(db, "create activity")
    db.refresh(activity)
    logger.info(
        "Activity created id=%s user=%s type=%s score=%s",
        activity.id, user_id, activity_type.value, score,
    )
    return activity, score


def update_activity(
    db: Session,
    user_id: int,
    activity_id: int,
    activity_type: Optional[str | ActivityType] = None,
    metadata: Optional[dict[str, Any]] = None,
    now: Optional[datetime] = None,
) -> tuple[Activity, int]:
    """Change type (points re-derive) and/or shallow-merge metadata."""
    activity = get_activity(db, user_id, activity_id)
    if activity_type is not None:
        activity.type = parse_activity_type(activity_type)
    if metadata:
        activity.metadata_dict = {**activity.metadata_dict, **metadata}
    db.flush()

    score = _recompute(db, user_id, activity.type, now or utcnow())
    _commit(db, "update activity")
    db.refresh(activity)
    logger.info(
        "Activity updated id=%s user=%s type=%s score=%s",
        activity.id, user_id, activity.type.value, score,
    )
    return activity, score


def delete_activity(
    db: Session,
    user_id: int,
    activity_id: int,
    now: Optional[datetime] = None,
) -> int:
    activity = get_activity(db, user_id, activity_id)
    activity_type = activity.type
    db.delete(activity)
    db.flush()

    score = _recompute(db, user_id, activity_type, now or utcnow())
    _commit(db, "delete activity")
    logger.info("Activity deleted id=%s user=%s score=%s", activity_id, user_id, score)
    return score
