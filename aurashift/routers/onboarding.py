"""
Onboarding router.

POST /onboarding/complete  first-time profile; starts the streak
PUT  /onboarding/update  replace the profile
GET  /onboarding/status
"""
from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from aurashift.core.deps import get_current_user_id
from aurashift.db.base import get_db
from aurashift.models.user import User
from aurashift.schemas.common import ApiResponse, ErrorResponse
from aurashift.schemas.onboarding import (
    OnboardingRequest,
    OnboardingStatusOut,
    OnboardingUserOut,
    SmokingHistoryOut,
)
from aurashift.services import onboarding as onboarding_service

router = APIRouter(prefix="/onboarding", tags=["onboarding"])

_ERRORS = {
    400: {"model": ErrorResponse, "description": "Invalid profile, or onboarding already completed."},
    401: {"model": ErrorResponse, "description": "Missing or invalid access token."},
}


def _user_to_response(user: User) -> OnboardingUserOut:
    return OnboardingUserOut(
        id=user.id,
        email=user.email,
        display_name=user.display_name,
        smoking_history=SmokingHistoryOut.from_profile(user.smoking_history),
        onboarding_completed=user.onboarding_completed,
    )


@router.post(
    "/complete",
    response_model=ApiResponse[OnboardingUserOut],
    summary="Complete onboarding",
    responses=_ERRORS,
)
def complete_onboarding(
    body: OnboardingRequest,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """
    Store the smoking profile, mark onboarding complete and start the
    streak timer. `costPerPack` is converted to a per-cigarette cost
    (pack of 20).
    """
    user = onboarding_service.complete_onboarding(db=db, user_id=user_id, profile=body.to_profile())
    return ApiResponse(data=_user_to_response(user))


@router.put(
    "/update",
    response_model=ApiResponse[OnboardingUserOut],
    summary="Update the smoking profile",
    responses=_ERRORS,
)
def update_onboarding(
    body: OnboardingRequest,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    user = onboarding_service.update_onboarding(db=db, user_id=user_id, profile=body.to_profile())
    return ApiResponse(data=_user_to_response(user))


@router.get(
    "/status",
    response_model=ApiResponse[OnboardingStatusOut],
    summary="Onboarding status",
    responses={401: _ERRORS[401]},
)
def onboarding_status(
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    completed, profile = onboarding_service.get_onboarding_status(db=db, user_id=user_id)
    return ApiResponse(data=OnboardingStatusOut(
        onboarding_completed=completed,
        smoking_history=SmokingHistoryOut.from_profile(profile),
    ))
