"""Exercise log: what a member trained and when."""

import logging
from datetime import date, datetime, time, timedelta
from typing import Any

from src.core import clock, db_client
from src.core.config import constants, settings
from src.core.db_client import sanitize_param
from src.core.logging import span
from src.domain.fitness import Exercise


logger = logging.getLogger(__name__)

_EDITABLE_FIELDS = ("name", "sets", "reps", "duration", "notes")


def _day_bounds(day: date) -> tuple[str, str]:
    start = datetime.combine(day, time.min, tzinfo=settings.tzinfo)
    return clock.utc_timestamp(start), clock.utc_timestamp(start + timedelta(days=1))


async def _get_own_exercise(*, exercise_id: str, user_id: str) -> dict[str, Any]:
    exercise = await db_client.get_record(collection="exercises", record_id=exercise_id)
    if Exercise.model_validate(exercise).user_id != user_id:
        msg = "You can only change your own exercises"
        raise PermissionError(msg)
    return exercise


async def list_exercises(*, user_id: str, day: date | None = None) -> list[dict[str, Any]]:
    """The user's exercises on a calendar day (default today), newest first."""
    with span("exercise_service.list_exercises"):
        day = day or clock.local_date(clock.now())
        start, end = _day_bounds(day)
        return await db_client.list_records(
            collection="exercises",
            filter_query=(
                f'user_id = "{sanitize_param(user_id)}" && completed_at >= "{start}" && completed_at < "{end}"'
            ),
            sort="-completed_at,-id",
            per_page=constants.DEFAULT_PER_PAGE_LIMIT,
        )


async def log_exercise(
    *,
    user_id: str,
    name: str,
    sets: int,
    reps: int,
    duration: int | None = None,
    notes: str | None = None,
    completed_at: datetime | None = None,
) -> dict[str, Any]:
    """Record an exercise session.

    Raises:
        ValueError: If name, sets or reps are missing
    """
    with span("exercise_service.log_exercise"):
        name = (name or "").strip()
        if not name or not sets or not reps:
            msg = "Name, sets, and reps are required"
            raise ValueError(msg)

        user = await db_client.get_record(collection="users", record_id=user_id)
        now = clock.now()
        record = await db_client.create_record(
            collection="exercises",
            data={
                "name": name,
                "user_id": user_id,
                "team_id": user["team_id"],
                "sets": sets,
                "reps": reps,
                "duration": duration,
                "notes": notes,
                "completed_at": clock.utc_timestamp(completed_at or now),
                "created": clock.utc_timestamp(now),
                "updated": clock.utc_timestamp(now),
            },
        )
        logger.info("Logged exercise", extra={"exercise_id": record["id"], "user_id": user_id, "name": name})
        return record


async def update_exercise(*, exercise_id: str, user_id: str, updates: dict[str, Any]) -> dict[str, Any]:
    """Edit one of the user's own exercises."""
    with span("exercise_service.update_exercise"):
        unknown = set(updates) - set(_EDITABLE_FIELDS)
        if unknown:
            msg = f"Fields cannot be edited: {', '.join(sorted(unknown))}"
            raise ValueError(msg)

        exercise = await _get_own_exercise(exercise_id=exercise_id, user_id=user_id)
        data = dict(updates)
        if "name" in data:
            data["name"] = (data["name"] or "").strip()
            if not data["name"]:
                msg = "Name cannot be empty"
                raise ValueError(msg)
        for field in ("sets", "reps"):
            if field in data and data[field] is None:
                msg = f"{field.capitalize()} cannot be empty"
                raise ValueError(msg)
        if not data:
            return exercise
        return await db_client.update_record(collection="exercises", record_id=exercise_id, data=data)


async def delete_exercise(*, exercise_id: str, user_id: str) -> None:
    """Delete one of the user's own exercises."""
    with span("exercise_service.delete_exercise"):
        await _get_own_exercise(exercise_id=exercise_id, user_id=user_id)
        await db_client.delete_record(collection="exercises", record_id=exercise_id)
        logger.info("Deleted exercise", extra={"exercise_id": exercise_id, "user_id": user_id})
