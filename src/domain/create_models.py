"""Request payloads for creating records."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

from src.domain.chore import ChoreFrequency, Weekday
from src.domain.fitness import Difficulty, RoutineExercise


class SignupRequest(BaseModel):
    """New account, either founding a team or joining one by invite code."""

    name: str
    email: str
    password: str
    team_option: Literal["create", "join"]
    team_name_or_code: str = Field(..., description="Team name when creating, invite code when joining")


class LoginRequest(BaseModel):
    email: str
    password: str


class ChoreCreate(BaseModel):
    """Payload for creating a chore."""

    title: str
    description: str = ""
    frequency: ChoreFrequency
    day_of_week: int | None = Field(default=None, ge=0, le=6)
    days_of_week: list[Weekday] | None = None
    day_of_month: int | None = Field(default=None, ge=1, le=31)
    start_date: datetime | None = None
    assigned_to: str | None = None


class GroceryItemCreate(BaseModel):
    name: str
    quantity: str | None = None
    category: str | None = None


class ExerciseCreate(BaseModel):
    """Payload for logging an exercise."""

    name: str
    sets: int = Field(..., ge=1)
    reps: int = Field(..., ge=1)
    duration: int | None = Field(default=None, ge=0)
    notes: str | None = None
    completed_at: datetime | None = Field(default=None, description="Defaults to now")


class RoutineCreate(BaseModel):
    """Payload for creating a workout routine."""

    name: str
    description: str | None = None
    category: str
    difficulty: Difficulty = Difficulty.INTERMEDIATE
    exercises: list[RoutineExercise]
    is_template: bool = False
