"""
Onboarding schemas.

The engine works in cost per cigarette. Clients may send either
`costPerCigarette` or `costPerPack` (exactly one); a pack price is
converted here, at the boundary, assuming PACK_SIZE cigarettes per pack.
"""
from __future__ import annotations

import enum
from decimal import Decimal
from typing import Optional

from pydantic import Field, model_validator

from aurashift.models.user import SmokingProfile
from aurashift.schemas.common import CamelModel
from aurashift.services.scoring import round_money

PACK_SIZE = 20


class Motivation(str, enum.Enum):
    health = "Health & Wellness"
    money = "Save Money"
    family = "Family & Relationships"
    appearance = "Physical Appearance"
    fitness = "Fitness & Performance"
    social = "Social Reasons"
    self_control = "Self-Control"
    medical = "Medical Advice"


class OnboardingRequest(CamelModel):
    years_smoked: Decimal = Field(ge=0, le=100, examples=[5])
    cigarettes_per_day: int = Field(ge=0, le=200, examples=[20])
    cost_per_cigarette: Optional[Decimal] = Field(default=None, ge=0, examples=[5])
    cost_per_pack: Optional[Decimal] = Field(default=None, ge=0, examples=[100])
    motivations: list[Motivation] = Field(min_length=1, examples=[["Save Money"]])

    @model_validator(mode="after")
    def exactly_one_cost(self) -> "OnboardingRequest":
        if (self.cost_per_cigarette is None) == (self.cost_per_pack is None):
            raise ValueError("provide exactly one of costPerCigarette or costPerPack")
        return self

    def to_profile(self) -> SmokingProfile:
        if self.cost_per_cigarette is not None:
            cost = round_money(self.cost_per_cigarette)
        else:
            cost = round_money(self.cost_per_pack / PACK_SIZE)
        return SmokingProfile(
            years_smoked=self.years_smoked,
            cigarettes_per_day=self.cigarettes_per_day,
            cost_per_cigarette=cost,
            motivations=list(dict.fromkeys(m.value for m in self.motivations)),
        )


class SmokingHistoryOut(CamelModel):
    years_smoked: float
    cigarettes_per_day: int
    cost_per_cigarette: float
    motivations: list[str]

    @classmethod
    def from_profile(cls, profile: Optional[SmokingProfile]) -> Optional["SmokingHistoryOut"]:
        if profile is None:
            return None
        return cls(
            years_smoked=float(profile.years_smoked),
            cigarettes_per_day=profile.cigarettes_per_day,
            cost_per_cigarette=float(profile.cost_per_cigarette),
            motivations=profile.motivations,
        )


class OnboardingUserOut(CamelModel):
    id: int
    email: str
    display_name: str
    smoking_history: Optional[SmokingHistoryOut]
    onboarding_completed: bool


class OnboardingStatusOut(CamelModel):
    onboarding_completed: bool
    smoking_history: Optional[SmokingHistoryOut] = None
