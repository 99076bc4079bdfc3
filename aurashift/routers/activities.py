"""
Activities router.

POST   /activities  log an activity
GET    /activities  list (paginated, newest first, filterable)
GET    /activities/{id}  fetch one
PUT    /activities/{id}  change type and/or merge metadata
DELETE /activities/{id}  delete

Every mutation returns the freshly recomputed aura score.
"""
from __future__ import annotations

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from aurashift.core.clock import as_utc, isoformat
from aurashift.core.deps import get_current_user_id
from aurashift.db.base import get_db
from aurashift.models.activity import Activity, ActivityType
from aurashift.schemas.activity import (
    ActivityCreate,
    ActivityDeleteData,
    ActivityDetailData,
    ActivityListData,
    ActivityMutationData,
    ActivityOut,
    ActivityUpdate,
    PaginationOut,
)
from aurashift.schemas.common import ApiResponse, ErrorResponse
from aurashift.services import activities as activity_service

router = APIRouter(prefix="/activities", tags=["activities"])

_ERRORS = {
    400: {"model": ErrorResponse, "description": "Invalid activity type or body shape."},
    401: {"model": ErrorResponse, "description": "Missing or invalid access token."},
}
_NOT_FOUND = {404: {"model": ErrorResponse, "description": "Activity not found for this user."}}


# ---------------------------------------------------------------------------
# Serialization helper
# ---------------------------------------------------------------------------

def _activity_to_response(activity: Activity) -> ActivityOut:
    return ActivityOut(
        id=activity.id,
        user_id=activity.user_id,
        type=activity.type,
        points=activity.points,
        metadata=activity.metadata_dict,
        created_at=isoformat(activity.created_at) or "",
        updated_at=isoformat(activity.updated_at) or "",
    )


# ---------------------------------------------------------------------------
# POST /activities
# ---------------------------------------------------------------------------

@router.post(
    "",
    response_model=ApiResponse[ActivityMutationData],
    status_code=status.HTTP_201_CREATED,
    summary="Log an activity",
    responses=_ERRORS,
)
def create_activity(
    body: ActivityCreate,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """
    Store the activity with points derived from its type, then recompute
    the aura score and the since-start savings counters.

    | type | points |
    |---|---|
    | `cigarette_consumed` | -10 |
    | `gym_workout` | +5 |
    | `healthy_meal` | +3 |
    | `skin_care` | +2 |
    | `social_event` | +1 |
    """
    activity, score = activity_service.create_activity(
        db=db,
        user_id=user_id,
        activity_type=body.type,
        metadata=body.metadata.to_dict() if body.metadata else None,
    )
    return ApiResponse(data=ActivityMutationData(
        activity=_activity_to_response(activity),
        new_aura_score=score,
    ))


# ---------------------------------------------------------------------------
# GET /activities
# ---------------------------------------------------------------------------

@router.get(
    "",
    response_model=ApiResponse[ActivityListData],
    summary="List activities (newest first)",
    responses=_ERRORS,
)
def list_activities(
    page: int = Query(default=1, ge=1, description="1-based page number."),
    limit: int = Query(
        default=activity_service.DEFAULT_PAGE_SIZE,
        ge=1,
        le=activity_service.MAX_PAGE_SIZE,
        description="Page size.",
    ),
    type: Optional[str] = Query(
        default=None,
        description=f"Filter by type: {', '.join(t.value for t in ActivityType)}.",
        examples=["cigarette_consumed"],
    ),
    start_date: Optional[datetime] = Query(
        default=None, alias="startDate", description="Inclusive lower bound on createdAt."
    ),
    end_date: Optional[datetime] = Query(
        default=None, alias="endDate", description="Inclusive upper bound on createdAt."
    ),
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    items, pagination = activity_service.list_activities(
        db=db,
        user_id=user_id,
        page=page,
        limit=limit,
        activity_type=type,
        start_date=as_utc(start_date),
        end_date=as_utc(end_date),
    )
    return ApiResponse(data=ActivityListData(
        activities=[_activity_to_response(a) for a in items],
        pagination=PaginationOut(
            page=pagination.page,
            limit=pagination.limit,
            total=pagination.total,
            pages=pagination.pages,
        ),
    ))


# ---------------------------------------------------------------------------
# GET /activities/{activity_id}
# ---------------------------------------------------------------------------

@router.get(
    "/{activity_id}",
    response_model=ApiResponse[ActivityDetailData],
    summary="Fetch one activity",
    responses={**_ERRORS, **_NOT_FOUND},
)
def get_activity(
    activity_id: int,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    activity = activity_service.get_activity(db=db, user_id=user_id, activity_id=activity_id)
    return ApiResponse(data=ActivityDetailData(activity=_activity_to_response(activity)))


# ---------------------------------------------------------------------------
# PUT /activities/{activity_id}
# ---------------------------------------------------------------------------

@router.put(
    "/{activity_id}",
    response_model=ApiResponse[ActivityMutationData],
    summary="Update an activity",
    responses={**_ERRORS, **_NOT_FOUND},
)
def update_activity(
    activity_id: int,
    body: ActivityUpdate,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """
    A new `type` re-derives `points`; `metadata` is merged key by key over
    what is stored. The score and savings counters are recomputed.
    """
    activity, score = activity_service.update_activity(
        db=db,
        user_id=user_id,
        activity_id=activity_id,
        activity_type=body.type,
        metadata=body.metadata.to_dict() if body.metadata else None,
    )
    return ApiResponse(data=ActivityMutationData(
        activity=_activity_to_response(activity),
        new_aura_score=score,
    ))


# ---------------------------------------------------------------------------
# DELETE /activities/{activity_id}
# ---------------------------------------------------------------------------

@router.delete(
    "/{activity_id}",
    response_model=ApiResponse[ActivityDeleteData],
    summary="Delete an activity",
    responses={**_ERRORS, **_NOT_FOUND},
)
def delete_activity(
    activity_id: int,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    score = activity_service.delete_activity(db=db, user_id=user_id, activity_id=activity_id)
    return ApiResponse(data=ActivityDeleteData(
        deleted_activity_id=activity_id,
        new_aura_score=score,
    ))
