"""Calendar helpers in the household timezone."""

from datetime import UTC, date, datetime

from src.core.config import settings


def now() -> datetime:
    """Current time as an aware datetime in the household timezone."""
    return datetime.now(settings.tzinfo)


def local(moment: datetime) -> datetime:
    """Convert a timestamp to the household timezone; naive values are taken as UTC."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=UTC)
    return moment.astimezone(settings.tzinfo)


def local_date(moment: datetime) -> date:
    """Calendar day of a timestamp in the household timezone."""
    return local(moment).date()


def day_of_week(day: date) -> int:
    """Weekday number with 0 = Sunday through 6 = Saturday."""
    return (day.weekday() + 1) % 7


def utc_timestamp(moment: datetime) -> str:
    """Fixed-width UTC ISO timestamp, so stored values sort and compare as strings."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=UTC)
    return moment.astimezone(UTC).isoformat(timespec="microseconds")
