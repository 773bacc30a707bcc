"""Accounts module: teams, users and periodic points rollover."""

from src.core.config import constants
from src.core.module import ScheduledJob


_TIMESTAMP_DEFAULT = "(strftime('%Y-%m-%dT%H:%M:%fZ', 'now'))"


async def reset_weekly_points() -> None:
    from src.services import user_service

    await user_service.reset_period_points(period="weekly")


async def reset_monthly_points() -> None:
    from src.services import user_service

    await user_service.reset_period_points(period="monthly")


class AccountsModule:
    """Accounts module for household membership.

    Provides:
    - Teams with invite codes
    - Users with embedded gamification stats
    - Weekly and monthly points rollover jobs
    """

    @property
    def name(self) -> str:
        """Module name (unique identifier)."""
        return "accounts"

    @property
    def description(self) -> str:
        """Module description (human-readable)."""
        return "Teams, members and leaderboard accumulators"

    def get_table_schemas(self) -> dict[str, str]:
        """Return table schemas for this module."""
        return {
            "teams": f"""CREATE TABLE IF NOT EXISTS teams (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        created TEXT NOT NULL DEFAULT {_TIMESTAMP_DEFAULT},
        updated TEXT NOT NULL DEFAULT {_TIMESTAMP_DEFAULT},
        name TEXT NOT NULL,
        invite_code TEXT NOT NULL UNIQUE,
        created_by INTEGER
    )""",
            "users": f"""CREATE TABLE IF NOT EXISTS users (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        created TEXT NOT NULL DEFAULT {_TIMESTAMP_DEFAULT},
        updated TEXT NOT NULL DEFAULT {_TIMESTAMP_DEFAULT},
        name TEXT NOT NULL,
        email TEXT NOT NULL UNIQUE,
        password_hash TEXT NOT NULL,
        team_id INTEGER REFERENCES teams(id),
        stats TEXT NOT NULL DEFAULT '{{}}',
        version INTEGER NOT NULL DEFAULT 0
    )""",
        }

    def get_indexes(self) -> list[str]:
        """Return indexes for this module's tables."""
        return [
            "CREATE INDEX IF NOT EXISTS idx_users_team_id ON users (team_id)",
        ]

    def get_scheduled_jobs(self) -> list[ScheduledJob]:
        """Return the points rollover jobs."""
        return [
            ScheduledJob(
                id="weekly_points_rollover",
                name="Reset Weekly Points",
                cron=constants.WEEKLY_ROLLOVER_CRON,
                func=reset_weekly_points,
            ),
            ScheduledJob(
                id="monthly_points_rollover",
                name="Reset Monthly Points",
                cron=constants.MONTHLY_ROLLOVER_CRON,
                func=reset_monthly_points,
            ),
        ]
