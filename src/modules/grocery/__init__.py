"""Grocery module: the team shopping list."""

from src.core.module import ScheduledJob


_TIMESTAMP_DEFAULT = "(strftime('%Y-%m-%dT%H:%M:%fZ', 'now'))"


class GroceryModule:
    """Shared shopping list per team."""

    @property
    def name(self) -> str:
        """Module name (unique identifier)."""
        return "grocery"

    @property
    def description(self) -> str:
        """Module description (human-readable)."""
        return "Team grocery list with purchase tracking"

    def get_table_schemas(self) -> dict[str, str]:
        """Return table schemas for this module."""
        return {
            "grocery_items": f"""CREATE TABLE IF NOT EXISTS grocery_items (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        created TEXT NOT NULL DEFAULT {_TIMESTAMP_DEFAULT},
        updated TEXT NOT NULL DEFAULT {_TIMESTAMP_DEFAULT},
        name TEXT NOT NULL,
        quantity TEXT,
        category TEXT,
        is_purchased INTEGER NOT NULL DEFAULT 0,
        added_by INTEGER NOT NULL REFERENCES users(id),
        purchased_by INTEGER REFERENCES users(id),
        team_id INTEGER NOT NULL REFERENCES teams(id)
    )""",
        }

    def get_indexes(self) -> list[str]:
        """Return indexes for this module's tables."""
        return [
            "CREATE INDEX IF NOT EXISTS idx_grocery_items_team_id ON grocery_items (team_id, is_purchased)",
        ]

    def get_scheduled_jobs(self) -> list[ScheduledJob]:
        """Return scheduled jobs for this module."""
        return []
