"""
Chart router.

GET /chart/data?timeRange=4d|30d|90d  bucketed progress series
"""
from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from aurashift.core.deps import get_current_user_id
from aurashift.db.base import get_db
from aurashift.schemas.common import ApiResponse, ErrorResponse
from aurashift.schemas.dashboard import ChartData, ChartSeriesOut
from aurashift.services.chart import TimeRange, get_chart_series

router = APIRouter(prefix="/chart", tags=["chart"])


@router.get(
    "/data",
    response_model=ApiResponse[ChartData],
    summary="Chart series for a time range",
    responses={
        400: {"model": ErrorResponse, "description": "timeRange is not 4d, 30d or 90d."},
        401: {"model": ErrorResponse, "description": "Missing or invalid access token."},
    },
)
def chart_data(
    time_range: str = Query(
        default=TimeRange.four_days.value,
        alias="timeRange",
        description="One of 4d, 30d, 90d. Anything else is rejected.",
        examples=["30d"],
    ),
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """
    ### Buckets
    | timeRange | buckets | width | labels |
    |---|---|---|---|
    | `4d`  | 4 | 1 day   | Day 1..Day 4 |
    | `30d` | 4 | 7 days  | Week 1..Week 4 |
    | `90d` | 3 | 30 days | Month 1..Month 3 |

    `aura_score` is cumulative (baseline before the window plus every bucket
    so far, floored at 0); the other series are per bucket.
    """
    series = get_chart_series(db=db, user_id=user_id, time_range=time_range)
    return ApiResponse(data=ChartData(
        labels=series.labels,
        series=ChartSeriesOut(
            aura_score=series.aura_score,
            cigarettes_avoided=series.cigarettes_avoided,
            cigarettes_consumed=series.cigarettes_consumed,
            money_saved=[float(m) for m in series.money_saved],
        ),
    ))
