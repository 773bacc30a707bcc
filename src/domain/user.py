"""User, team and gamification stats models."""

from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, Field


class BadgeTier(StrEnum):
    """Badge rarity tier."""

    BRONZE = "bronze"
    SILVER = "silver"
    GOLD = "gold"
    PLATINUM = "platinum"


class EarnedBadge(BaseModel):
    """A catalog badge copied into a user's stats at the moment it was earned."""

    id: str
    name: str
    description: str
    icon: str
    tier: BadgeTier
    earned_at: datetime


class UserStats(BaseModel):
    """Gamification counters embedded in the user record."""

    total_points: int = 0
    level: int = 0
    current_streak: int = 0
    longest_streak: int = 0
    total_completed: int = 0
    badges: list[EarnedBadge] = Field(default_factory=list)
    weekly_points: int = 0
    monthly_points: int = 0
    last_completed_date: datetime | None = None

    def has_badge(self, badge_id: str) -> bool:
        return any(badge.id == badge_id for badge in self.badges)


class User(BaseModel):
    """User data transfer object (never carries the password hash)."""

    id: str = Field(..., description="Unique user ID")
    name: str = Field(..., description="Display name")
    email: str = Field(..., description="Lower-cased, unique e-mail address")
    team_id: str | None = Field(default=None, description="Team the user belongs to")
    stats: UserStats = Field(default_factory=UserStats, description="Gamification counters")
    created: datetime | None = Field(default=None, description="Signup timestamp")


class Team(BaseModel):
    """Household team sharing chores and a grocery list."""

    id: str = Field(..., description="Unique team ID")
    name: str = Field(..., description="Team display name")
    invite_code: str = Field(..., description="6-character upper-case code used to join")
    created_by: str | None = Field(default=None, description="User ID of the creator")
    created: datetime | None = Field(default=None, description="Creation timestamp")
