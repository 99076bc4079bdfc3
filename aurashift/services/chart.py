"""
Chart series: time-bucketed progress for the dashboard graph.

Periods (fixed)
---------------
  | range | window  | buckets | width   | labels            |
  |-------|---------|---------|---------|-------------------|
  | 4d    | 4 days  | 4       | 1 day   | Day 1..Day 4      |
  | 30d   | 30 days | 4       | 7 days  | Week 1..Week 4    |
  | 90d   | 90 days | 3       | 30 days | Month 1..Month 3  |

Bucket i covers [window_start + i*width, window_start + (i+1)*width).
An activity sitting exactly on a boundary belongs to the later bucket.

Series
------
  aura_score          cumulative: floored baseline (all points before the
                      window) plus every bucket so far, floored at 0
  cigarettes_consumed per-bucket count
  cigarettes_avoided  max(0, cigarettes_per_day * period_days - consumed)
  money_saved         same expectation priced at cost_per_cigarette, 2dp

The avoided / saved figures use a period-local expectation (one day, week
or month of the user's habit), not the since-start counters shown on the
dashboard.
"""
from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Iterable, Optional, Sequence

from sqlalchemy import func
from sqlalchemy.orm import Session

from aurashift.core.clock import as_utc, utcnow
from aurashift.core.errors import InvalidTimeRangeError, UserNotFoundError
from aurashift.models.activity import Activity, ActivityType
from aurashift.models.user import User
from aurashift.services.scoring import round_money

DEFAULT_CIGARETTES_PER_DAY = 20
DEFAULT_COST_PER_CIGARETTE = Decimal("5")


class TimeRange(str, enum.Enum):
    four_days = "4d"
    thirty_days = "30d"
    ninety_days = "90d"


@dataclass(frozen=True)
class PeriodSpec:
    window_days: int
    bucket_days: int
    bucket_count: int
    label: str

    @property
    def labels(self) -> list[str]:
        return [f"{self.label} {i + 1}" for i in range(self.bucket_count)]


PERIODS: dict[TimeRange, PeriodSpec] = {
    TimeRange.four_days: PeriodSpec(window_days=4, bucket_days=1, bucket_count=4, label="Day"),
    TimeRange.thirty_days: PeriodSpec(window_days=30, bucket_days=7, bucket_count=4, label="Week"),
    TimeRange.ninety_days: PeriodSpec(window_days=90, bucket_days=30, bucket_count=3, label="Month"),
}


# ---------------------------------------------------------------------------
# Result types
# ---------------------------------------------------------------------------

@dataclass
class ChartSeries:
    labels: list[str]
    aura_score: list[int] = field(default_factory=list)
    cigarettes_avoided: list[int] = field(default_factory=list)
    cigarettes_consumed: list[int] = field(default_factory=list)
    money_saved: list[Decimal] = field(default_factory=list)


@dataclass(frozen=True)
class ChartEvent:
    type: ActivityType
    points: int
    created_at: datetime


# ---------------------------------------------------------------------------
# Pure core
# ---------------------------------------------------------------------------

def parse_time_range(value: str | TimeRange) -> TimeRange:
    try:
        return TimeRange(value)
    except ValueError:
        raise InvalidTimeRangeError(value, [t.value for t in TimeRange])


def bucket_bounds(spec: PeriodSpec, now: datetime) -> list[tuple[datetime, datetime]]:
    window_start = now - timedelta(days=spec.window_days)
    width = timedelta(days=spec.bucket_days)
    return [
        (window_start + i * width, window_start + (i + 1) * width)
        for i in range(spec.bucket_count)
    ]


def build_series(
    time_range: TimeRange,
    events: Iterable[ChartEvent],
    baseline_points: int,
    now: datetime,
    cigarettes_per_day: int = DEFAULT_CIGARETTES_PER_DAY,
    cost_per_cigarette: Decimal = DEFAULT_COST_PER_CIGARETTE,
) -> ChartSeries:
    spec = PERIODS[time_range]
    now = as_utc(now)
    bounds = bucket_bounds(spec, now)
    buckets: list[list[ChartEvent]] = [[] for _ in bounds]
    for ev in events:
        ts = as_utc(ev.created_at)
        if ts > now:
            continue
        for i, (start, end) in enumerate(bounds):
            if start <= ts < end:
                buckets[i].append(ev)
                break

    cost = Decimal(cost_per_cigarette)
    expected = cigarettes_per_day * spec.bucket_days
    series = ChartSeries(labels=spec.labels)
    running = max(0, baseline_points)
    for bucket in buckets:
        running += sum(ev.points for ev in bucket)
        consumed = sum(1 for ev in bucket if ev.type == ActivityType.cigarette_consumed)
        series.aura_score.append(max(0, running))
        series.cigarettes_consumed.append(consumed)
        series.cigarettes_avoided.append(max(0, expected - consumed))
        series.money_saved.append(
            round_money(max(Decimal(0), expected * cost - consumed * cost))
        )
    return series


# ---------------------------------------------------------------------------
# Public  DB-backed entry point
# ---------------------------------------------------------------------------

def _habit(user: User) -> tuple[int, Decimal]:
    profile = user.smoking_history
    cigarettes_per_day = (profile.cigarettes_per_day if profile else 0) or DEFAULT_CIGARETTES_PER_DAY
    cost = (profile.cost_per_cigarette if profile else 0) or DEFAULT_COST_PER_CIGARETTE
    return cigarettes_per_day, Decimal(cost)


def get_chart_series(
    db: Session,
    user_id: int,
    time_range: str | TimeRange,
    now: Optional[datetime] = None,
) -> ChartSeries:
    tr = parse_time_range(time_range)
    user = db.get(User, user_id)
    if user is None:
        raise UserNotFoundError(user_id)

    now = as_utc(now) if now else utcnow()
    window_start = now - timedelta(days=PERIODS[tr].window_days)

    rows: Sequence = (
        db.query(Activity.type, Activity.points, Activity.created_at)
        .filter(
            Activity.user_id == user_id,
            Activity.created_at >= window_start,
            Activity.created_at <= now,
        )
        .order_by(Activity.created_at.asc())
        .all()
    )
    baseline = (
        db.query(func.coalesce(func.sum(Activity.points), 0))
        .filter(Activity.user_id == user_id, Activity.created_at < window_start)
        .scalar()
    )

    cigarettes_per_day, cost = _habit(user)
    return build_series(
        tr,
        (ChartEvent(type=t, points=p, created_at=c) for t, p, c in rows),
        baseline_points=int(baseline or 0),
        now=now,
        cigarettes_per_day=cigarettes_per_day,
        cost_per_cigarette=cost,
    )
