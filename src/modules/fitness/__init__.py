"""Fitness module: exercise log and workout routines."""

from src.core.module import ScheduledJob


_TIMESTAMP_DEFAULT = "(strftime('%Y-%m-%dT%H:%M:%fZ', 'now'))"


class FitnessModule:
    """Personal exercise tracking with reusable routines."""

    @property
    def name(self) -> str:
        """Module name (unique identifier)."""
        return "fitness"

    @property
    def description(self) -> str:
        """Module description (human-readable)."""
        return "Exercise log, workout routines and daily routine suggestions"

    def get_table_schemas(self) -> dict[str, str]:
        """Return table schemas for this module."""
        return {
            "exercises": f"""CREATE TABLE IF NOT EXISTS exercises (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        created TEXT NOT NULL DEFAULT {_TIMESTAMP_DEFAULT},
        updated TEXT NOT NULL DEFAULT {_TIMESTAMP_DEFAULT},
        name TEXT NOT NULL,
        user_id INTEGER NOT NULL REFERENCES users(id),
        team_id INTEGER NOT NULL REFERENCES teams(id),
        sets INTEGER NOT NULL DEFAULT 1,
        reps INTEGER NOT NULL DEFAULT 1,
        duration INTEGER,
        notes TEXT,
        completed_at TEXT NOT NULL
    )""",
            "workout_routines": f"""CREATE TABLE IF NOT EXISTS workout_routines (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        created TEXT NOT NULL DEFAULT {_TIMESTAMP_DEFAULT},
        updated TEXT NOT NULL DEFAULT {_TIMESTAMP_DEFAULT},
        name TEXT NOT NULL,
        description TEXT,
        category TEXT NOT NULL,
        difficulty TEXT NOT NULL DEFAULT 'Intermediate'
            CHECK (difficulty IN ('Beginner', 'Intermediate', 'Advanced')),
        exercises TEXT NOT NULL DEFAULT '[]',
        user_id INTEGER NOT NULL REFERENCES users(id),
        team_id INTEGER NOT NULL REFERENCES teams(id),
        is_template INTEGER NOT NULL DEFAULT 0,
        last_used TEXT,
        times_used INTEGER NOT NULL DEFAULT 0
    )""",
        }

    def get_indexes(self) -> list[str]:
        """Return indexes for this module's tables."""
        return [
            "CREATE INDEX IF NOT EXISTS idx_exercises_user_id ON exercises (user_id, completed_at)",
            "CREATE INDEX IF NOT EXISTS idx_workout_routines_user_id ON workout_routines (user_id, category)",
        ]

    def get_scheduled_jobs(self) -> list[ScheduledJob]:
        """Return scheduled jobs for this module."""
        return []
