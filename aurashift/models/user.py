"""
User: the aggregate that owns activities and carries derived counters.

aura_score, cigarettes_avoided and total_money_saved are always written by
full recomputes in aurashift/services/scoring.py, never incremented.

The smoking profile is stored flat (all-or-nothing); `smoking_history`
assembles it into a SmokingProfile or returns None when onboarding has not
provided one. motivations: JSON-encoded list stored as Text.
"""
import json
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import Integer, String, Text, Numeric, DateTime, Boolean
from sqlalchemy.orm import Mapped, mapped_column

from aurashift.core.clock import utcnow
from aurashift.db.base import Base


@dataclass(frozen=True)
class SmokingProfile:
    years_smoked: Decimal
    cigarettes_per_day: int
    cost_per_cigarette: Decimal
    motivations: list[str]


class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True, index=True)
    display_name: Mapped[str] = mapped_column(String(100), nullable=False)

    onboarding_completed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    # Smoking profile
    years_smoked: Mapped[Decimal | None] = mapped_column(Numeric(5, 1), nullable=True)
    cigarettes_per_day: Mapped[int | None] = mapped_column(Integer, nullable=True)
    cost_per_cigarette: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)
    motivations: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Derived
    aura_score: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    cigarettes_avoided: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total_money_saved: Mapped[Decimal] = mapped_column(
        Numeric(12, 2), nullable=False, default=Decimal("0.00")
    )

    streak_start_time: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    last_smoked: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False
    )

    @property
    def smoking_history(self) -> Optional[SmokingProfile]:
        if self.cigarettes_per_day is None or self.cost_per_cigarette is None:
            return None
        return SmokingProfile(
            years_smoked=Decimal(self.years_smoked or 0),
            cigarettes_per_day=self.cigarettes_per_day,
            cost_per_cigarette=Decimal(self.cost_per_cigarette),
            motivations=json.loads(self.motivations) if self.motivations else [],
        )

    def set_smoking_history(self, profile: SmokingProfile) -> None:
        self.years_smoked = profile.years_smoked
        self.cigarettes_per_day = profile.cigarettes_per_day
        self.cost_per_cigarette = profile.cost_per_cigarette
        self.motivations = json.dumps(list(profile.motivations))
