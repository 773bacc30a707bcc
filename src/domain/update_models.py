"""Update payloads; only fields present in the request are applied."""

from datetime import datetime

from pydantic import BaseModel, Field

from src.domain.chore import ChoreFrequency, Weekday
from src.domain.fitness import Difficulty, RoutineExercise


class ChoreUpdate(BaseModel):
    """Editable chore fields. Points are fixed at creation and are not editable."""

    title: str | None = None
    description: str | None = None
    frequency: ChoreFrequency | None = None
    day_of_week: int | None = Field(default=None, ge=0, le=6)
    days_of_week: list[Weekday] | None = None
    day_of_month: int | None = Field(default=None, ge=1, le=31)
    start_date: datetime | None = None
    assigned_to: str | None = None


class PositionUpdate(BaseModel):
    position: int


class GroceryItemUpdate(BaseModel):
    name: str | None = None
    quantity: str | None = None
    category: str | None = None


class ExerciseUpdate(BaseModel):
    name: str | None = None
    sets: int | None = Field(default=None, ge=1)
    reps: int | None = Field(default=None, ge=1)
    duration: int | None = Field(default=None, ge=0)
    notes: str | None = None


class RoutineUpdate(BaseModel):
    """Editable routine fields; ``mark_as_used`` records a workout with this routine."""

    name: str | None = None
    description: str | None = None
    category: str | None = None
    difficulty: Difficulty | None = None
    exercises: list[RoutineExercise] | None = None
    mark_as_used: bool = False
