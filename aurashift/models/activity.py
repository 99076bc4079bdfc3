"""
Activity: one logged user event (a cigarette or a wellness action).

`points` is never written by clients: it is derived from `type` through
ACTIVITY_POINTS every time `type` is assigned, including on construction.

metadata: JSON-encoded dict stored as Text (note, location, duration,
intensity, plus free-form keys).
"""
import enum
import json
from datetime import datetime
from typing import Any

from sqlalchemy import Integer, Text, DateTime, Enum, ForeignKey, Index
from sqlalchemy.orm import Mapped, mapped_column, validates

from aurashift.core.clock import utcnow
from aurashift.db.base import Base


class ActivityType(str, enum.Enum):
    cigarette_consumed = "cigarette_consumed"
    gym_workout = "gym_workout"
    healthy_meal = "healthy_meal"
    skin_care = "skin_care"
    social_event = "social_event"


ACTIVITY_POINTS: dict[ActivityType, int] = {
    ActivityType.cigarette_consumed: -10,
    ActivityType.gym_workout: 5,
    ActivityType.healthy_meal: 3,
    ActivityType.skin_care: 2,
    ActivityType.social_event: 1,
}

_missing = set(ActivityType) - set(ACTIVITY_POINTS)
if _missing:
    raise RuntimeError(f"ACTIVITY_POINTS has no entry for {sorted(t.value for t in _missing)}")


def points_for(activity_type: ActivityType) -> int:
    return ACTIVITY_POINTS[ActivityType(activity_type)]


class Activity(Base):
    __tablename__ = "activities"
    __table_args__ = (
        Index("ix_activities_user_created", "user_id", "created_at"),
        Index("ix_activities_user_type_created", "user_id", "type", "created_at"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id"), nullable=False, index=True
    )
    type: Mapped[ActivityType] = mapped_column(
        Enum(ActivityType, name="activity_type_enum"), nullable=False, index=True
    )
    points: Mapped[int] = mapped_column(Integer, nullable=False)
    activity_metadata: Mapped[str | None] = mapped_column(
        "metadata", Text, nullable=True,
        comment="JSON-encoded dict (note, location, duration, intensity, ...)",
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False, index=True
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False
    )

    @validates("type")
    def _derive_points(self, key: str, value: ActivityType) -> ActivityType:
        value = ActivityType(value)
        self.points = points_for(value)
        return value

    @property
    def metadata_dict(self) -> dict[str, Any]:
        if not self.activity_metadata:
            return {}
        try:
            value = json.loads(self.activity_metadata)
        except (ValueError, TypeError):
            return {}
        return value if isinstance(value, dict) else {}

    @metadata_dict.setter
    def metadata_dict(self, value: dict[str, Any] | None) -> None:
        self.activity_metadata = json.dumps(value or {}, default=str)
