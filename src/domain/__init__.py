"""Domain models and DTOs."""

from src.domain.chore import Chore, ChoreFrequency, CompletionRecord
from src.domain.fitness import Difficulty, Exercise, RoutineExercise, WorkoutRoutine
from src.domain.grocery import GroceryItem
from src.domain.user import BadgeTier, EarnedBadge, Team, User, UserStats


__all__ = [
    "BadgeTier",
    "Chore",
    "ChoreFrequency",
    "CompletionRecord",
    "Difficulty",
    "EarnedBadge",
    "Exercise",
    "GroceryItem",
    "RoutineExercise",
    "Team",
    "User",
    "UserStats",
    "WorkoutRoutine",
]
