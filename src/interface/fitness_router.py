"""Exercise log and workout routine endpoints."""

from datetime import date
from typing import Any

from fastapi import APIRouter, Query, status

from src.domain.create_models import ExerciseCreate, RoutineCreate
from src.domain.update_models import ExerciseUpdate, RoutineUpdate
from src.interface.dependencies import CurrentUser
from src.modules.fitness import exercise_service, routine_service


exercise_router = APIRouter(prefix="/api/exercise", tags=["fitness"])
routine_router = APIRouter(prefix="/api/routines", tags=["fitness"])


@exercise_router.get("")
async def list_exercises(
    user: CurrentUser,
    day: date | None = Query(default=None, alias="date"),
) -> dict[str, Any]:
    """The current member's exercises for ``?date=YYYY-MM-DD`` (default today)."""
    return {"exercises": await exercise_service.list_exercises(user_id=user["id"], day=day)}


@exercise_router.post("", status_code=status.HTTP_201_CREATED)
async def log_exercise(payload: ExerciseCreate, user: CurrentUser) -> dict[str, Any]:
    exercise = await exercise_service.log_exercise(user_id=user["id"], **payload.model_dump())
    return {"exercise": exercise}


@exercise_router.patch("/{exercise_id}")
async def update_exercise(exercise_id: str, payload: ExerciseUpdate, user: CurrentUser) -> dict[str, Any]:
    exercise = await exercise_service.update_exercise(
        exercise_id=exercise_id,
        user_id=user["id"],
        updates=payload.model_dump(exclude_unset=True),
    )
    return {"exercise": exercise}


@exercise_router.delete("/{exercise_id}")
async def delete_exercise(exercise_id: str, user: CurrentUser) -> dict[str, Any]:
    await exercise_service.delete_exercise(exercise_id=exercise_id, user_id=user["id"])
    return {"success": True}


@routine_router.get("")
async def list_routines(user: CurrentUser) -> dict[str, Any]:
    return {"routines": await routine_service.list_routines(user_id=user["id"])}


@routine_router.get("/suggest")
async def suggest_routine(user: CurrentUser) -> dict[str, Any]:
    """Today's suggested routine."""
    return await routine_service.suggest_routine(user_id=user["id"])


@routine_router.post("", status_code=status.HTTP_201_CREATED)
async def create_routine(payload: RoutineCreate, user: CurrentUser) -> dict[str, Any]:
    routine = await routine_service.create_routine(user_id=user["id"], **payload.model_dump())
    return {"routine": routine}


@routine_router.patch("/{routine_id}")
async def update_routine(routine_id: str, payload: RoutineUpdate, user: CurrentUser) -> dict[str, Any]:
    updates = payload.model_dump(exclude_unset=True, exclude={"mark_as_used"})
    routine = await routine_service.update_routine(
        routine_id=routine_id,
        user_id=user["id"],
        updates=updates,
        mark_as_used=payload.mark_as_used,
    )
    return {"routine": routine}


@routine_router.delete("/{routine_id}")
async def delete_routine(routine_id: str, user: CurrentUser) -> dict[str, Any]:
    await routine_service.delete_routine(routine_id=routine_id, user_id=user["id"])
    return {"success": True}
