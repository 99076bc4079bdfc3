"""
Dashboard and chart response schemas.

GET /dashboard/stats → DashboardData
GET /chart/data      → ChartData  (series keys stay snake_case, as the
                                   mobile chart component reads them)
"""
from typing import Optional

from pydantic import BaseModel, Field

from aurashift.schemas.common import CamelModel
from aurashift.schemas.onboarding import SmokingHistoryOut


class DashboardStatsOut(CamelModel):
    smoke_free_time: int = Field(description="Whole days since the streak started.")
    level: int = Field(description="aura_score // 100 + 1")
    money_saved: float
    cigarettes_avoided: int
    days_smoke_free: int


class DashboardData(CamelModel):
    id: int
    email: str
    display_name: str
    onboarding_completed: bool
    smoking_history: Optional[SmokingHistoryOut] = None
    aura_score: int
    cigarettes_avoided: int
    total_money_saved: float
    streak_start_time: Optional[str] = None
    last_smoked: Optional[str] = None
    stats: DashboardStatsOut


class ChartSeriesOut(BaseModel):
    aura_score: list[int]
    cigarettes_avoided: list[int]
    cigarettes_consumed: list[int]
    money_saved: list[float]


class ChartData(BaseModel):
    labels: list[str]
    series: ChartSeriesOut
