"""Completion toggle engine.

``toggle_completion`` is pure: it takes the current chore and the actor's
stats and returns the new versions of both. Persisting them is the service's
job, which may re-run the engine on fresh data when a conditional write loses.
"""

from datetime import datetime

from pydantic import BaseModel, Field

from src.core.clock import local_date
from src.domain.chore import Chore, CompletionRecord
from src.domain.user import EarnedBadge, UserStats
from src.modules.tasks.gamification import BadgeContext, calculate_level, evaluate_badges, update_streak


ALREADY_COMPLETED_MESSAGE = "Already completed today, no additional points"
NOT_RESPONSIBLE_MESSAGE = "Only the assigned person can mark this chore as complete"


class ToggleResult(BaseModel):
    """Outcome of flipping a chore's completion state."""

    chore: Chore
    stats: UserStats
    points_delta: int = 0
    new_badges: list[EarnedBadge] = Field(default_factory=list)
    message: str

    @property
    def stats_changed(self) -> bool:
        """Whether the user document needs to be written."""
        return self.points_delta != 0


def award_completion(
    stats: UserStats, points: int, now: datetime, team_size: int
) -> tuple[UserStats, list[EarnedBadge]]:
    """Apply one completion worth ``points`` to ``stats`` and collect newly earned badges."""
    total = stats.total_points + points
    updated = stats.model_copy(
        update={
            "total_points": total,
            "weekly_points": stats.weekly_points + points,
            "monthly_points": stats.monthly_points + points,
            "total_completed": stats.total_completed + 1,
        }
    )
    updated = update_streak(updated, now)
    updated = updated.model_copy(update={"last_completed_date": now, "level": calculate_level(total)})

    new_badges = evaluate_badges(BadgeContext(stats=updated, now=now, team_size=team_size))
    if new_badges:
        updated = updated.model_copy(update={"badges": [*updated.badges, *new_badges]})
    return updated, new_badges


def revoke_completion(stats: UserStats, points: int) -> UserStats:
    """Take back one same-day completion. Counters floor at zero; the streak is left alone."""
    total = max(0, stats.total_points - points)
    return stats.model_copy(
        update={
            "total_points": total,
            "weekly_points": max(0, stats.weekly_points - points),
            "monthly_points": max(0, stats.monthly_points - points),
            "total_completed": max(0, stats.total_completed - 1),
            "level": calculate_level(total),
        }
    )


def toggle_completion(
    chore: Chore,
    stats: UserStats,
    actor_id: str,
    now: datetime,
    team_size: int,
) -> ToggleResult:
    """Flip ``chore`` between completed and not completed on behalf of ``actor_id``.

    Raises:
        PermissionError: If the actor is neither the assignee nor, for an
            unassigned chore, its owner
    """
    if actor_id != chore.responsible_user_id:
        raise PermissionError(NOT_RESPONSIBLE_MESSAGE)

    today = local_date(now).isoformat()
    has_today_entry = any(
        record.date == today and record.completed_by == actor_id for record in chore.completion_history
    )

    if not chore.is_completed:
        if has_today_entry:
            return ToggleResult(
                chore=chore.model_copy(update={"is_completed": True}),
                stats=stats,
                message=ALREADY_COMPLETED_MESSAGE,
            )

        record = CompletionRecord(date=today, completed_at=now, completed_by=actor_id)
        updated_chore = chore.model_copy(
            update={
                "is_completed": True,
                "last_completed": now,
                "completion_history": [*chore.completion_history, record],
            }
        )
        updated_stats, new_badges = award_completion(stats, chore.points, now, team_size)
        return ToggleResult(
            chore=updated_chore,
            stats=updated_stats,
            points_delta=chore.points,
            new_badges=new_badges,
            message=f"Chore completed! +{chore.points} points",
        )

    if not has_today_entry:
        return ToggleResult(
            chore=chore.model_copy(update={"is_completed": False}),
            stats=stats,
            message="Chore marked as not completed",
        )

    remaining = [
        record
        for record in chore.completion_history
        if not (record.date == today and record.completed_by == actor_id)
    ]
    return ToggleResult(
        chore=chore.model_copy(update={"is_completed": False, "completion_history": remaining}),
        stats=revoke_completion(stats, chore.points),
        points_delta=-chore.points,
        message=f"Chore marked as not completed, -{chore.points} points",
    )
