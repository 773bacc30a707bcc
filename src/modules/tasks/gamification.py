"""Points, levels, streaks and badges."""

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime

from pydantic import BaseModel

from src.core.clock import local, local_date
from src.domain.chore import ChoreFrequency
from src.domain.user import BadgeTier, EarnedBadge, UserStats


POINTS_BY_FREQUENCY: dict[ChoreFrequency, int] = {
    ChoreFrequency.DAILY: 10,
    ChoreFrequency.WEEKLY: 25,
    ChoreFrequency.BIWEEKLY: 35,
    ChoreFrequency.MONTHLY: 50,
}

LEVEL_THRESHOLDS: list[int] = [0, 100, 250, 500, 1000, 2000, 3500, 5500, 8000, 12000, 18000, 25000]

LEVEL_NAMES: list[str] = [
    "Rookie",
    "Helper",
    "Contributor",
    "Achiever",
    "Star",
    "Champion",
    "Hero",
    "Legend",
    "Master",
    "Grand Master",
    "Elite",
    "Ultimate",
]

EARLY_BIRD_HOUR = 8
NIGHT_OWL_HOUR = 22
TEAM_PLAYER_SIZE = 3


def points_for(frequency: ChoreFrequency) -> int:
    return POINTS_BY_FREQUENCY[frequency]


def calculate_level(total_points: int) -> int:
    """Highest level whose threshold does not exceed ``total_points``."""
    level = 0
    for index, threshold in enumerate(LEVEL_THRESHOLDS):
        if total_points >= threshold:
            level = index
        else:
            break
    return level


def level_name(level: int) -> str:
    return LEVEL_NAMES[min(max(level, 0), len(LEVEL_NAMES) - 1)]


class LevelProgress(BaseModel):
    """Where a points total sits between two level thresholds."""

    level: int
    level_name: str
    current_threshold: int
    next_threshold: int | None
    progress: float


def level_progress(total_points: int) -> LevelProgress:
    """Current and next threshold plus percent progress toward the next level (capped at 100)."""
    level = calculate_level(total_points)
    current = LEVEL_THRESHOLDS[level]
    if level + 1 >= len(LEVEL_THRESHOLDS):
        return LevelProgress(
            level=level,
            level_name=level_name(level),
            current_threshold=current,
            next_threshold=None,
            progress=100.0,
        )
    upcoming = LEVEL_THRESHOLDS[level + 1]
    progress = (total_points - current) / (upcoming - current) * 100
    return LevelProgress(
        level=level,
        level_name=level_name(level),
        current_threshold=current,
        next_threshold=upcoming,
        progress=round(min(progress, 100.0), 2),
    )


def update_streak(stats: UserStats, now: datetime) -> UserStats:
    """Advance the streak for a completion at ``now``.

    Consecutive calendar days extend the streak, a gap restarts it at 1 and a
    second completion on the same day leaves it unchanged.
    """
    if stats.last_completed_date is None:
        current = 1
    else:
        diff_days = (local_date(now) - local_date(stats.last_completed_date)).days
        if diff_days == 1:
            current = stats.current_streak + 1
        elif diff_days > 1:
            current = 1
        else:
            current = stats.current_streak
    return stats.model_copy(
        update={
            "current_streak": current,
            "longest_streak": max(stats.longest_streak, current),
        }
    )


@dataclass(frozen=True)
class BadgeContext:
    """Everything a badge predicate may look at."""

    stats: UserStats
    now: datetime
    team_size: int


@dataclass(frozen=True)
class BadgeDefinition:
    id: str
    name: str
    description: str
    icon: str
    tier: BadgeTier

    def earn(self, earned_at: datetime) -> EarnedBadge:
        return EarnedBadge(
            id=self.id,
            name=self.name,
            description=self.description,
            icon=self.icon,
            tier=self.tier,
            earned_at=earned_at,
        )


BadgeRule = tuple[BadgeDefinition, Callable[[BadgeContext], bool]]


def _hour(ctx: BadgeContext) -> int:
    return local(ctx.now).hour


BADGE_RULES: list[BadgeRule] = [
    (
        BadgeDefinition("first_chore", "First Step", "Complete your first chore", "🎯", BadgeTier.BRONZE),
        lambda ctx: ctx.stats.total_completed >= 1,
    ),
    (
        BadgeDefinition("streak_3", "On a Roll", "Maintain a 3-day streak", "🔥", BadgeTier.BRONZE),
        lambda ctx: ctx.stats.current_streak >= 3,
    ),
    (
        BadgeDefinition("streak_7", "Week Warrior", "Maintain a 7-day streak", "⚡", BadgeTier.SILVER),
        lambda ctx: ctx.stats.current_streak >= 7,
    ),
    (
        BadgeDefinition("streak_30", "Monthly Master", "Maintain a 30-day streak", "🏆", BadgeTier.GOLD),
        lambda ctx: ctx.stats.current_streak >= 30,
    ),
    (
        BadgeDefinition("complete_10", "Getting Started", "Complete 10 chores", "✨", BadgeTier.BRONZE),
        lambda ctx: ctx.stats.total_completed >= 10,
    ),
    (
        BadgeDefinition("complete_50", "Dedicated", "Complete 50 chores", "💪", BadgeTier.SILVER),
        lambda ctx: ctx.stats.total_completed >= 50,
    ),
    (
        BadgeDefinition("complete_100", "Centurion", "Complete 100 chores", "🌟", BadgeTier.GOLD),
        lambda ctx: ctx.stats.total_completed >= 100,
    ),
    (
        BadgeDefinition("complete_500", "Legend", "Complete 500 chores", "👑", BadgeTier.PLATINUM),
        lambda ctx: ctx.stats.total_completed >= 500,
    ),
    (
        BadgeDefinition("level_5", "Rising Star", "Reach level 5", "⭐", BadgeTier.SILVER),
        lambda ctx: ctx.stats.level >= 5,
    ),
    (
        BadgeDefinition("level_10", "Top Performer", "Reach level 10", "🚀", BadgeTier.GOLD),
        lambda ctx: ctx.stats.level >= 10,
    ),
    (
        BadgeDefinition("early_bird", "Early Bird", "Complete a chore before 8 AM", "🌅", BadgeTier.BRONZE),
        lambda ctx: _hour(ctx) < EARLY_BIRD_HOUR,
    ),
    (
        BadgeDefinition("night_owl", "Night Owl", "Complete a chore after 10 PM", "🦉", BadgeTier.BRONZE),
        lambda ctx: _hour(ctx) >= NIGHT_OWL_HOUR,
    ),
    (
        BadgeDefinition(
            "team_player", "Team Player", "Be part of a team with 3+ members", "🤝", BadgeTier.SILVER
        ),
        lambda ctx: ctx.team_size >= TEAM_PLAYER_SIZE,
    ),
]


def badge_catalog() -> list[BadgeDefinition]:
    return [definition for definition, _ in BADGE_RULES]


def evaluate_badges(ctx: BadgeContext) -> list[EarnedBadge]:
    """Badges whose predicate now holds and that the user does not hold yet."""
    return [
        definition.earn(ctx.now)
        for definition, predicate in BADGE_RULES
        if not ctx.stats.has_badge(definition.id) and predicate(ctx)
    ]
