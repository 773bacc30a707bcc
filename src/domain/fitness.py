"""Exercise log and workout routine models."""

from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, Field


class Difficulty(StrEnum):
    """Workout routine difficulty."""

    BEGINNER = "Beginner"
    INTERMEDIATE = "Intermediate"
    ADVANCED = "Advanced"


class Exercise(BaseModel):
    """A logged exercise session."""

    id: str
    name: str
    user_id: str
    team_id: str
    sets: int
    reps: int
    duration: int | None = Field(default=None, description="Duration in seconds for timed exercises")
    notes: str | None = None
    completed_at: datetime
    created: datetime | None = None
    updated: datetime | None = None


class RoutineExercise(BaseModel):
    """One exercise inside a routine."""

    name: str = Field(..., min_length=1)
    sets: int = Field(default=3, ge=1)
    reps: int = Field(default=10, ge=1)
    rest_time: int | None = Field(default=None, ge=0, description="Rest between sets in seconds")
    notes: str | None = None


class WorkoutRoutine(BaseModel):
    """A reusable list of exercises."""

    id: str
    name: str
    description: str | None = None
    category: str = Field(..., description="e.g., 'Upper Body', 'Cardio'")
    difficulty: Difficulty = Difficulty.INTERMEDIATE
    exercises: list[RoutineExercise] = Field(default_factory=list)
    user_id: str
    team_id: str
    is_template: bool = False
    last_used: datetime | None = None
    times_used: int = 0
    created: datetime | None = None
    updated: datetime | None = None
