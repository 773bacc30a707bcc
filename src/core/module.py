"""Module Protocol: the plugin interface each feature area implements."""

from collections.abc import Awaitable, Callable
from typing import Protocol

from pydantic import BaseModel


class ScheduledJob(BaseModel):
    """Scheduled job definition, run on a cron expression in the household timezone."""

    id: str
    name: str
    cron: str
    func: Callable[[], Awaitable[None]]


class Module(Protocol):
    """A self-contained feature area owning its tables, indexes and scheduled jobs."""

    @property
    def name(self) -> str:
        """Module name (unique identifier)."""
        ...

    @property
    def description(self) -> str:
        """Module description (human-readable)."""
        ...

    def get_table_schemas(self) -> dict[str, str]:
        """Return table schemas for this module.

        Returns:
            Dictionary mapping table names to CREATE TABLE SQL statements
        """
        ...

    def get_indexes(self) -> list[str]:
        """Return indexes for this module's tables.

        Returns:
            List of CREATE INDEX SQL statements
        """
        ...

    def get_scheduled_jobs(self) -> list[ScheduledJob]:
        """Return scheduled jobs for this module.

        Returns:
            List of ScheduledJob definitions
        """
        ...
