from .user import User, SmokingProfile
from .activity import Activity, ActivityType, ACTIVITY_POINTS

__all__ = [
    "User",
    "SmokingProfile",
    "Activity",
    "ActivityType",
    "ACTIVITY_POINTS",
]
