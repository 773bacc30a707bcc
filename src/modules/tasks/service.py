"""Chore service: CRUD, due-today filtering and completion toggling."""

import logging
from datetime import datetime
from typing import Any

from src.core import clock, db_client
from src.core.config import constants, settings
from src.core.db_client import sanitize_param
from src.core.errors import ConcurrentUpdateError
from src.core.logging import log_with_user_context, span
from src.domain.chore import Chore, ChoreFrequency
from src.domain.user import EarnedBadge, UserStats
from src.modules.tasks import completion, gamification, schedule


logger = logging.getLogger(__name__)

_EDITABLE_FIELDS = (
    "title",
    "description",
    "frequency",
    "day_of_week",
    "days_of_week",
    "day_of_month",
    "start_date",
    "assigned_to",
)


async def _get_actor(actor_id: str) -> dict[str, Any]:
    return await db_client.get_record(collection="users", record_id=actor_id)


def _ensure_same_team(chore: dict[str, Any], actor: dict[str, Any]) -> None:
    if chore["team_id"] != actor.get("team_id"):
        msg = "This chore belongs to another team"
        raise PermissionError(msg)


async def _validate_assignee(*, assigned_to: str | None, team_id: str) -> None:
    if not assigned_to:
        return
    try:
        assignee = await db_client.get_record(collection="users", record_id=assigned_to)
    except db_client.RecordNotFoundError as e:
        msg = f"Assignee {assigned_to} does not exist"
        raise ValueError(msg) from e
    if assignee.get("team_id") != team_id:
        msg = "Chores can only be assigned to members of your team"
        raise ValueError(msg)


def _check_weekdays(days_of_week: list[int] | None) -> None:
    if any(not 0 <= day <= 6 for day in days_of_week or []):
        msg = "Weekdays must be between 0 (Sunday) and 6 (Saturday)"
        raise ValueError(msg)


async def team_size(team_id: str) -> int:
    """Number of members in a team."""
    return await db_client.count_records(
        collection="users",
        filter_query=f'team_id = "{sanitize_param(team_id)}"',
    )


async def create_chore(
    *,
    owner_id: str,
    title: str,
    frequency: ChoreFrequency | str,
    description: str = "",
    day_of_week: int | None = None,
    days_of_week: list[int] | None = None,
    day_of_month: int | None = None,
    start_date: datetime | None = None,
    assigned_to: str | None = None,
) -> dict[str, Any]:
    """Create a chore in the owner's team.

    Points are fixed from the frequency at creation time. An empty weekday set
    is stored as absent.

    Raises:
        ValueError: If title or frequency is missing or invalid, or the assignee is not a teammate
    """
    with span("chore_service.create_chore"):
        title = (title or "").strip()
        if not title:
            msg = "Title is required"
            raise ValueError(msg)
        if not frequency:
            msg = "Frequency is required"
            raise ValueError(msg)
        frequency = ChoreFrequency(frequency)
        _check_weekdays(days_of_week)

        owner = await _get_actor(owner_id)
        team_id = owner["team_id"]
        await _validate_assignee(assigned_to=assigned_to, team_id=team_id)

        position = await db_client.count_records(
            collection="chores",
            filter_query=f'team_id = "{sanitize_param(team_id)}"',
        )

        chore_data: dict[str, Any] = {
            "title": title,
            "description": description or "",
            "frequency": frequency.value,
            "day_of_week": day_of_week,
            "days_of_week": days_of_week or None,
            "day_of_month": day_of_month,
            "start_date": start_date,
            "owner_id": owner_id,
            "team_id": team_id,
            "assigned_to": assigned_to or None,
            "points": gamification.points_for(frequency),
            "position": position,
            "created": clock.utc_timestamp(clock.now()),
        }

        record = await db_client.create_record(collection="chores", data=chore_data)
        logger.info(
            "Created chore",
            extra={"chore_id": record["id"], "title": title, "frequency": frequency.value, "team_id": team_id},
        )
        return record


async def _reset_if_expired(record: dict[str, Any], now: datetime) -> dict[str, Any]:
    chore = Chore.model_validate(record)
    if not schedule.should_reset_completion(chore, now):
        return record

    updated = await db_client.compare_and_update(
        collection="chores",
        record_id=chore.id,
        expected_version=chore.version,
        data={"is_completed": False},
    )
    if updated is None:
        # Someone else wrote it since we read; their state is newer
        return await db_client.get_record(collection="chores", record_id=chore.id)

    logger.info("Reset expired completion", extra={"chore_id": chore.id, "frequency": chore.frequency})
    return updated


async def list_chores(
    *,
    user_id: str,
    include_all: bool = False,
    now: datetime | None = None,
) -> list[dict[str, Any]]:
    """List the team's chores, newest first.

    Completions from an elapsed period are cleared (and persisted) on the way
    out. Unless ``include_all`` is set, only chores due today are returned.
    """
    with span("chore_service.list_chores"):
        now = now or clock.now()
        actor = await _get_actor(user_id)

        records = await db_client.list_records(
            collection="chores",
            filter_query=f'team_id = "{sanitize_param(actor["team_id"])}"',
            sort="-created,-id",
            per_page=constants.DEFAULT_PER_PAGE_LIMIT,
        )

        today = clock.local_date(now)
        chores = []
        for record in records:
            fresh = await _reset_if_expired(record, now)
            if include_all or schedule.is_due_today(Chore.model_validate(fresh), today):
                chores.append(fresh)

        logger.debug(
            "Listed chores",
            extra={"user_id": user_id, "total": len(records), "returned": len(chores), "include_all": include_all},
        )
        return chores


async def get_chore(*, chore_id: str, actor_id: str) -> dict[str, Any]:
    """Fetch a chore belonging to the actor's team.

    Raises:
        RecordNotFoundError: If the chore does not exist
        PermissionError: If it belongs to another team
    """
    with span("chore_service.get_chore"):
        record = await db_client.get_record(collection="chores", record_id=chore_id)
        _ensure_same_team(record, await _get_actor(actor_id))
        return record


async def update_chore(*, chore_id: str, actor_id: str, updates: dict[str, Any]) -> dict[str, Any]:
    """Apply plain field updates to a chore. Points are left unchanged.

    Raises:
        ValueError: If an update is invalid or names a non-editable field
    """
    with span("chore_service.update_chore"):
        record = await get_chore(chore_id=chore_id, actor_id=actor_id)

        unknown = set(updates) - set(_EDITABLE_FIELDS)
        if unknown:
            msg = f"Fields cannot be edited: {', '.join(sorted(unknown))}"
            raise ValueError(msg)

        data = dict(updates)
        if "title" in data:
            data["title"] = (data["title"] or "").strip()
            if not data["title"]:
                msg = "Title cannot be empty"
                raise ValueError(msg)
        if "frequency" in data:
            if not data["frequency"]:
                msg = "Frequency cannot be empty"
                raise ValueError(msg)
            data["frequency"] = ChoreFrequency(data["frequency"]).value
        if "description" in data:
            data["description"] = data["description"] or ""
        if "days_of_week" in data:
            _check_weekdays(data["days_of_week"])
            data["days_of_week"] = data["days_of_week"] or None
        if "assigned_to" in data:
            data["assigned_to"] = data["assigned_to"] or None
            await _validate_assignee(assigned_to=data["assigned_to"], team_id=record["team_id"])

        if not data:
            return record

        updated = await db_client.update_record(collection="chores", record_id=chore_id, data=data)
        logger.info("Updated chore", extra={"chore_id": chore_id, "fields": sorted(data)})
        return updated


async def reorder_chore(*, chore_id: str, actor_id: str, position: int) -> dict[str, Any]:
    """Set a chore's manual ordering position."""
    with span("chore_service.reorder_chore"):
        await get_chore(chore_id=chore_id, actor_id=actor_id)
        return await db_client.update_record(collection="chores", record_id=chore_id, data={"position": position})


async def delete_chore(*, chore_id: str, actor_id: str) -> None:
    """Delete a chore belonging to the actor's team."""
    with span("chore_service.delete_chore"):
        await get_chore(chore_id=chore_id, actor_id=actor_id)
        await db_client.delete_record(collection="chores", record_id=chore_id)
        logger.info("Deleted chore", extra={"chore_id": chore_id, "actor_id": actor_id})


def _chore_completion_state(chore: Chore) -> dict[str, Any]:
    return {
        "is_completed": chore.is_completed,
        "last_completed": chore.last_completed,
        "completion_history": [entry.model_dump(mode="json") for entry in chore.completion_history],
    }


async def _write_stats(
    *,
    actor: dict[str, Any],
    result: completion.ToggleResult,
    points: int,
    now: datetime,
    size: int,
) -> tuple[UserStats, list[EarnedBadge]]:
    """Persist the actor's new stats, re-applying the delta to fresh stats if another write won.

    Returns the written stats and the badges newly awarded by that write.
    """
    stats = result.stats
    new_badges = result.new_badges
    for _ in range(settings.toggle_max_attempts):
        written = await db_client.compare_and_update(
            collection="users",
            record_id=actor["id"],
            expected_version=actor["version"],
            data={"stats": stats.model_dump(mode="json")},
        )
        if written is not None:
            return stats, new_badges

        actor = await _get_actor(actor["id"])
        fresh = UserStats.model_validate(actor["stats"])
        if result.points_delta > 0:
            stats, new_badges = completion.award_completion(fresh, points, now, size)
        else:
            stats = completion.revoke_completion(fresh, points)

    logger.error(
        "Stats update lost every attempt after chore write",
        extra={"user_id": actor["id"], "points_delta": result.points_delta},
    )
    msg = "User stats were updated concurrently"
    raise ConcurrentUpdateError(msg)


async def _restore_chore(*, written: dict[str, Any], previous: Chore) -> None:
    """Put back the completion state a toggle overwrote when its stats write failed."""
    restored = await db_client.compare_and_update(
        collection="chores",
        record_id=written["id"],
        expected_version=written["version"],
        data=_chore_completion_state(previous),
    )
    if restored is None:
        logger.error(
            "Could not restore chore after failed stats write",
            extra={"chore_id": written["id"], "version": written["version"]},
        )


async def toggle_chore(*, chore_id: str, actor_id: str, now: datetime | None = None) -> dict[str, Any]:
    """Flip a chore's completion for the acting member and settle points, streak and badges.

    Each document is written with a version-checked conditional update. If the
    chore changed since it was read, everything is re-read and re-evaluated, so
    two simultaneous completions on the same day award points only once.

    Returns:
        Dict with the updated chore, points_earned, new_badges, user_stats and message

    Raises:
        RecordNotFoundError: If the chore or actor does not exist
        PermissionError: If the actor is not responsible for the chore
        ConcurrentUpdateError: If every attempt lost to a concurrent writer; the chore
            is restored when its stats write is the one that lost
    """
    with span("chore_service.toggle_chore"):
        now = now or clock.now()

        for attempt in range(1, settings.toggle_max_attempts + 1):
            record = await db_client.get_record(collection="chores", record_id=chore_id)
            actor = await _get_actor(actor_id)
            _ensure_same_team(record, actor)

            chore = Chore.model_validate(record)
            stats = UserStats.model_validate(actor["stats"])
            size = await team_size(actor["team_id"])

            result = completion.toggle_completion(chore, stats, actor_id, now, size)

            written = await db_client.compare_and_update(
                collection="chores",
                record_id=chore_id,
                expected_version=chore.version,
                data=_chore_completion_state(result.chore),
            )
            if written is None:
                logger.info("Toggle lost race, retrying", extra={"chore_id": chore_id, "attempt": attempt})
                continue

            final_stats, new_badges = stats, result.new_badges
            if result.stats_changed:
                try:
                    final_stats, new_badges = await _write_stats(
                        actor=actor, result=result, points=chore.points, now=now, size=size
                    )
                except ConcurrentUpdateError:
                    await _restore_chore(written=written, previous=chore)
                    raise

            log_with_user_context(
                logger,
                "info",
                "Toggled chore",
                user_id=actor_id,
                chore_id=chore_id,
                is_completed=result.chore.is_completed,
                points_delta=result.points_delta,
                new_badges=[badge.id for badge in new_badges],
            )
            return {
                "chore": written,
                "points_earned": result.points_delta,
                "new_badges": [badge.model_dump(mode="json") for badge in new_badges],
                "user_stats": final_stats.model_dump(mode="json"),
                "message": result.message,
            }

        logger.warning("Toggle gave up after repeated conflicts", extra={"chore_id": chore_id, "user_id": actor_id})
        msg = "Chore was updated concurrently"
        raise ConcurrentUpdateError(msg)
