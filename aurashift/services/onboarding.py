"""
Onboarding service: captures the smoking profile and starts the streak.

complete_onboarding  first-time only; starts the streak
update_onboarding    replaces the profile; completes onboarding if needed
get_onboarding_status

Starting the streak does not delete history: aura_score is recomputed
from every activity in the same transaction, like any other mutation.
"""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from aurashift.core.clock import utcnow
from aurashift.core.errors import (
    OnboardingAlreadyCompletedError,
    StoreFailureError,
    UserNotFoundError,
)
from aurashift.models.user import SmokingProfile, User
from aurashift.services.scoring import recalculate_avoidance_and_savings, recalculate_score

logger = logging.getLogger(__name__)


def _get_user(db: Session, user_id: int) -> User:
    user = db.get(User, user_id)
    if user is None:
        raise UserNotFoundError(user_id)
    return user


def _apply(db: Session, user: User, profile: SmokingProfile, now: datetime, operation: str) -> User:
    user.set_smoking_history(profile)
    if not user.onboarding_completed:
        user.onboarding_completed = True
        user.streak_start_time = now
    db.flush()
    recalculate_score(db, user.id)
    recalculate_avoidance_and_savings(db, user.id, now=now)
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Store failure during %s", operation)
        raise StoreFailureError(operation)
    db.refresh(user)
    logger.info("Onboarding saved user=%s op=%s", user.id, operation)
    return user


def complete_onboarding(
    db: Session,
    user_id: int,
    profile: SmokingProfile,
    now: Optional[datetime] = None,
) -> User:
    user = _get_user(db, user_id)
    if user.onboarding_completed:
        raise OnboardingAlreadyCompletedError()
    return _apply(db, user, profile, now or utcnow(), "complete onboarding")


def update_onboarding(
    db: Session,
    user_id: int,
    profile: SmokingProfile,
    now: Optional[datetime] = None,
) -> User:
    user = _get_user(db, user_id)
    return _apply(db, user, profile, now or utcnow(), "update onboarding")


def get_onboarding_status(db: Session, user_id: int) -> tuple[bool, Optional[SmokingProfile]]:
    user = _get_user(db, user_id)
    return user.onboarding_completed, user.smoking_history
