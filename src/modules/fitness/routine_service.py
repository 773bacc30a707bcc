"""Workout routines and the daily routine suggestion."""

import logging
from datetime import datetime
from typing import Any

from src.core import clock, db_client
from src.core.config import constants
from src.core.db_client import sanitize_param
from src.core.logging import span
from src.domain.fitness import Difficulty, RoutineExercise, WorkoutRoutine
from src.modules.fitness import exercise_service


logger = logging.getLogger(__name__)

NO_ROUTINES_MESSAGE = "No routines available. Create your first routine to get started!"
FRESH_DAY_REASON = "Start your day with this routine!"
NEW_CATEGORY_REASON = "Try this to work different muscle groups"

_EDITABLE_FIELDS = ("name", "description", "category", "difficulty", "exercises")


def _exercises_payload(exercises: list[RoutineExercise | dict[str, Any]]) -> list[dict[str, Any]]:
    return [RoutineExercise.model_validate(exercise).model_dump(mode="json") for exercise in exercises]


async def _get_own_routine(*, routine_id: str, user_id: str) -> dict[str, Any]:
    routine = await db_client.get_record(collection="workout_routines", record_id=routine_id)
    if routine["user_id"] != user_id:
        msg = "You can only change your own routines"
        raise PermissionError(msg)
    return routine


async def list_routines(*, user_id: str) -> list[dict[str, Any]]:
    """The user's routines, most used first, then newest."""
    with span("routine_service.list_routines"):
        return await db_client.list_records(
            collection="workout_routines",
            filter_query=f'user_id = "{sanitize_param(user_id)}"',
            sort="-times_used,-created,-id",
            per_page=constants.DEFAULT_PER_PAGE_LIMIT,
        )


async def create_routine(
    *,
    user_id: str,
    name: str,
    category: str,
    exercises: list[RoutineExercise | dict[str, Any]],
    description: str | None = None,
    difficulty: Difficulty | str = Difficulty.INTERMEDIATE,
    is_template: bool = False,
) -> dict[str, Any]:
    """Create a routine.

    Raises:
        ValueError: If name or category is missing or there are no exercises
    """
    with span("routine_service.create_routine"):
        name = (name or "").strip()
        category = (category or "").strip()
        if not name or not category or not exercises:
            msg = "Name, category, and at least one exercise are required"
            raise ValueError(msg)

        user = await db_client.get_record(collection="users", record_id=user_id)
        now = clock.now()
        record = await db_client.create_record(
            collection="workout_routines",
            data={
                "name": name,
                "description": description,
                "category": category,
                "difficulty": Difficulty(difficulty).value,
                "exercises": _exercises_payload(exercises),
                "user_id": user_id,
                "team_id": user["team_id"],
                "is_template": is_template,
                "created": clock.utc_timestamp(now),
                "updated": clock.utc_timestamp(now),
            },
        )
        logger.info("Created routine", extra={"routine_id": record["id"], "user_id": user_id, "category": category})
        return record


async def update_routine(
    *,
    routine_id: str,
    user_id: str,
    updates: dict[str, Any],
    mark_as_used: bool = False,
    now: datetime | None = None,
) -> dict[str, Any]:
    """Edit a routine; ``mark_as_used`` stamps ``last_used`` and bumps ``times_used``."""
    with span("routine_service.update_routine"):
        unknown = set(updates) - set(_EDITABLE_FIELDS)
        if unknown:
            msg = f"Fields cannot be edited: {', '.join(sorted(unknown))}"
            raise ValueError(msg)

        routine = await _get_own_routine(routine_id=routine_id, user_id=user_id)

        data = dict(updates)
        for field in ("name", "category"):
            if field in data:
                data[field] = (data[field] or "").strip()
                if not data[field]:
                    msg = f"{field.capitalize()} cannot be empty"
                    raise ValueError(msg)
        if "exercises" in data:
            if not data["exercises"]:
                msg = "A routine needs at least one exercise"
                raise ValueError(msg)
            data["exercises"] = _exercises_payload(data["exercises"])
        if "difficulty" in data:
            data["difficulty"] = Difficulty(data["difficulty"]).value
        if mark_as_used:
            data["last_used"] = now or clock.now()
            data["times_used"] = routine["times_used"] + 1

        if not data:
            return routine

        updated = await db_client.update_record(collection="workout_routines", record_id=routine_id, data=data)
        logger.info(
            "Updated routine",
            extra={"routine_id": routine_id, "fields": sorted(data), "mark_as_used": mark_as_used},
        )
        return updated


async def delete_routine(*, routine_id: str, user_id: str) -> None:
    """Delete one of the user's own routines."""
    with span("routine_service.delete_routine"):
        await _get_own_routine(routine_id=routine_id, user_id=user_id)
        await db_client.delete_record(collection="workout_routines", record_id=routine_id)
        logger.info("Deleted routine", extra={"routine_id": routine_id, "user_id": user_id})


def _least_recently_used_key(routine: WorkoutRoutine) -> tuple[int, float]:
    """Never-used routines first (newest of those first), then oldest ``last_used``."""
    if routine.last_used is None:
        created = routine.created.timestamp() if routine.created else 0.0
        return (0, -created)
    return (1, routine.last_used.timestamp())


def pick_routine(routines: list[WorkoutRoutine], *, exercised_today: bool, now: datetime) -> WorkoutRoutine:
    """Choose today's routine.

    With nothing logged today the least recently used routine wins. Otherwise
    routines in a category not used today are preferred, least recently used
    first, falling back to the least recently used overall.
    """
    if not exercised_today:
        return min(routines, key=_least_recently_used_key)

    today = clock.local_date(now)
    done_categories = {
        routine.category
        for routine in routines
        if routine.last_used is not None and clock.local_date(routine.last_used) == today
    }
    fresh = [routine for routine in routines if routine.category not in done_categories]
    return min(fresh or routines, key=_least_recently_used_key)


async def suggest_routine(*, user_id: str, now: datetime | None = None) -> dict[str, Any]:
    """Suggest a routine for today.

    Returns:
        Dict with ``suggestion`` (routine plus ``reason``) or None and a ``message``
    """
    with span("routine_service.suggest_routine"):
        now = now or clock.now()
        records = await list_routines(user_id=user_id)
        if not records:
            return {"suggestion": None, "message": NO_ROUTINES_MESSAGE}

        routines = [WorkoutRoutine.model_validate(record) for record in records]
        todays = await exercise_service.list_exercises(user_id=user_id, day=clock.local_date(now))
        exercised_today = bool(todays)

        chosen = pick_routine(routines, exercised_today=exercised_today, now=now)
        suggestion = next(record for record in records if record["id"] == chosen.id)
        logger.info(
            "Suggested routine",
            extra={"user_id": user_id, "routine_id": chosen.id, "exercised_today": exercised_today},
        )
        return {
            "suggestion": {**suggestion, "reason": NEW_CATEGORY_REASON if exercised_today else FRESH_DAY_REASON},
            "message": None,
        }
