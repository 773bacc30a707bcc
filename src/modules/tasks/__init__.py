"""Tasks module for chore management."""

from src.core.module import ScheduledJob


_TIMESTAMP_DEFAULT = "(strftime('%Y-%m-%dT%H:%M:%fZ', 'now'))"


class TasksModule:
    """Tasks module for household chore management.

    Provides:
    - Chore CRUD and manual ordering
    - Schedule evaluation (daily, weekly, biweekly, monthly)
    - Completion toggling with points, streaks, badges and levels
    """

    @property
    def name(self) -> str:
        """Module name (unique identifier)."""
        return "tasks"

    @property
    def description(self) -> str:
        """Module description (human-readable)."""
        return "Recurring household chores with gamified completion"

    def get_table_schemas(self) -> dict[str, str]:
        """Return table schemas for this module."""
        return {
            "chores": f"""CREATE TABLE IF NOT EXISTS chores (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        created TEXT NOT NULL DEFAULT {_TIMESTAMP_DEFAULT},
        updated TEXT NOT NULL DEFAULT {_TIMESTAMP_DEFAULT},
        title TEXT NOT NULL,
        description TEXT NOT NULL DEFAULT '',
        frequency TEXT NOT NULL CHECK (frequency IN ('daily', 'weekly', 'biweekly', 'monthly')),
        day_of_week INTEGER CHECK (day_of_week BETWEEN 0 AND 6),
        days_of_week TEXT,
        day_of_month INTEGER CHECK (day_of_month BETWEEN 1 AND 31),
        start_date TEXT,
        is_completed INTEGER NOT NULL DEFAULT 0,
        last_completed TEXT,
        completion_history TEXT NOT NULL DEFAULT '[]',
        owner_id INTEGER NOT NULL REFERENCES users(id),
        team_id INTEGER NOT NULL REFERENCES teams(id),
        assigned_to INTEGER REFERENCES users(id),
        points INTEGER NOT NULL,
        position INTEGER NOT NULL DEFAULT 0,
        version INTEGER NOT NULL DEFAULT 0
    )""",
        }

    def get_indexes(self) -> list[str]:
        """Return indexes for this module's tables."""
        return [
            "CREATE INDEX IF NOT EXISTS idx_chores_team_id ON chores (team_id)",
            "CREATE INDEX IF NOT EXISTS idx_chores_assigned_to ON chores (assigned_to)",
            "CREATE INDEX IF NOT EXISTS idx_chores_owner_id ON chores (owner_id)",
        ]

    def get_scheduled_jobs(self) -> list[ScheduledJob]:
        """Return scheduled jobs for this module."""
        return []
