"""Completion history and personal stats."""

import logging
from collections import Counter
from typing import Any

from src.core import db_client
from src.core.config import constants
from src.core.db_client import sanitize_param
from src.core.logging import span
from src.domain.user import UserStats
from src.modules.tasks.gamification import level_name, level_progress


logger = logging.getLogger(__name__)


async def completion_history(*, user_id: str) -> list[dict[str, Any]]:
    """Per-day completion counts by the user, for a contribution graph.

    Covers chores the user owns or is assigned to and counts only entries the
    user completed. Sorted by date ascending.
    """
    with span("stats_service.completion_history"):
        uid = sanitize_param(user_id)
        chores = await db_client.list_records(
            collection="chores",
            filter_query=f'(owner_id = "{uid}" || assigned_to = "{uid}")',
            per_page=constants.DEFAULT_PER_PAGE_LIMIT,
        )

        counts: Counter[str] = Counter()
        for chore in chores:
            for entry in chore.get("completion_history") or []:
                if entry.get("completed_by") == user_id:
                    counts[entry["date"]] += 1

        history = [{"date": day, "count": count} for day, count in sorted(counts.items())]
        logger.debug("Built completion history", extra={"user_id": user_id, "days": len(history)})
        return history


async def get_my_stats(*, user_id: str) -> dict[str, Any]:
    """The user's stats with level name and progress toward the next level."""
    with span("stats_service.get_my_stats"):
        record = await db_client.get_record(collection="users", record_id=user_id)
        stats = UserStats.model_validate(record.get("stats") or {})
        return {
            "stats": stats.model_dump(mode="json"),
            "level_name": level_name(stats.level),
            "level_progress": level_progress(stats.total_points).model_dump(),
        }
