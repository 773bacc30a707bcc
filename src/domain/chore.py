"""Chore domain models and enums."""

from datetime import datetime
from enum import StrEnum
from typing import Annotated

from pydantic import BaseModel, Field


# 0 = Sunday through 6 = Saturday
Weekday = Annotated[int, Field(ge=0, le=6)]


class ChoreFrequency(StrEnum):
    """How often a chore recurs."""

    DAILY = "daily"
    WEEKLY = "weekly"
    BIWEEKLY = "biweekly"
    MONTHLY = "monthly"


class CompletionRecord(BaseModel):
    """One completion of a chore by one member on one calendar day."""

    date: str = Field(..., description="Calendar day of the completion (YYYY-MM-DD, household timezone)")
    completed_at: datetime = Field(..., description="Exact completion timestamp")
    completed_by: str = Field(..., description="User ID of the member who completed the chore")


class Chore(BaseModel):
    """Chore data transfer object."""

    id: str = Field(..., description="Unique chore ID")
    title: str = Field(..., description="Chore title (e.g., 'Wash Dishes')")
    description: str = Field(default="", description="Detailed chore description")
    frequency: ChoreFrequency = Field(..., description="Recurrence frequency")
    day_of_week: int | None = Field(default=None, ge=0, le=6, description="Single weekday, 0 = Sunday")
    days_of_week: list[Weekday] | None = Field(default=None, description="Weekday set, overrides day_of_week")
    day_of_month: int | None = Field(default=None, ge=1, le=31, description="Day of month for monthly chores")
    start_date: datetime | None = Field(default=None, description="Chore is never due before this date")
    is_completed: bool = Field(default=False, description="Completed within the current period")
    last_completed: datetime | None = Field(default=None, description="Most recent completion timestamp")
    completion_history: list[CompletionRecord] = Field(default_factory=list, description="Append-only log")
    owner_id: str = Field(..., description="User ID of the creator")
    team_id: str = Field(..., description="Team the chore belongs to")
    assigned_to: str | None = Field(default=None, description="User ID of the assignee, if any")
    points: int = Field(..., description="Points awarded per completion, fixed at creation")
    position: int = Field(default=0, description="Manual ordering key")
    created: datetime = Field(..., description="Creation timestamp")
    version: int = Field(default=0, description="Optimistic concurrency counter")

    @property
    def responsible_user_id(self) -> str:
        """The member allowed to toggle completion: the assignee, else the owner."""
        return self.assigned_to or self.owner_id
