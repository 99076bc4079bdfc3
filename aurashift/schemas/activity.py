"""
Activity request / response schemas.

POST   /activities        → ActivityCreate → ActivityMutationData
GET    /activities        →                  ActivityListData
GET    /activities/{id}   →                  ActivityDetailData
PUT    /activities/{id}   → ActivityUpdate → ActivityMutationData
DELETE /activities/{id}   →                  ActivityDeleteData

`points` is not part of any request schema: a client-supplied value is
dropped during validation and the stored value always comes from the type.
"""
from __future__ import annotations

from typing import Any, Literal, Optional

from pydantic import ConfigDict, Field

from aurashift.models.activity import ActivityType
from aurashift.schemas.common import CamelModel


class ActivityMetadata(CamelModel):
    """Known keys are typed; any extra key is kept as-is."""
    model_config = ConfigDict(extra="allow")

    note: Optional[str] = Field(default=None, max_length=1_000)
    location: Optional[str] = Field(default=None, max_length=255)
    duration: Optional[float] = Field(default=None, ge=0, description="Minutes.")
    intensity: Optional[Literal["low", "medium", "high"]] = None

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(exclude_none=True)


class ActivityCreate(CamelModel):
    type: ActivityType = Field(examples=["gym_workout"])
    metadata: Optional[ActivityMetadata] = None


class ActivityUpdate(CamelModel):
    type: Optional[ActivityType] = Field(default=None, examples=["cigarette_consumed"])
    metadata: Optional[ActivityMetadata] = Field(
        default=None,
        description="Shallow-merged over the stored metadata.",
    )


class ActivityOut(CamelModel):
    id: int
    user_id: int
    type: ActivityType
    points: int
    metadata: dict[str, Any] = Field(default_factory=dict)
    created_at: str = Field(description="UTC timestamp of creation.")
    updated_at: str


class PaginationOut(CamelModel):
    page: int
    limit: int
    total: int
    pages: int


class ActivityMutationData(CamelModel):
    activity: ActivityOut
    new_aura_score: int


class ActivityDetailData(CamelModel):
    activity: ActivityOut


class ActivityDeleteData(CamelModel):
    deleted_activity_id: int
    new_aura_score: int


class ActivityListData(CamelModel):
    activities: list[ActivityOut]
    pagination: PaginationOut
