"""Schedule evaluation: is a chore due today, and has its completion expired."""

from datetime import date, datetime, timedelta

from src.core.clock import day_of_week, local, local_date
from src.domain.chore import Chore, ChoreFrequency


def _weekdays(chore: Chore) -> set[int]:
    if chore.days_of_week:
        return set(chore.days_of_week)
    if chore.day_of_week is not None:
        return {chore.day_of_week}
    return set()


def is_due_today(chore: Chore, today: date) -> bool:
    """Whether ``chore`` is scheduled on the calendar day ``today``.

    Daily chores are always due. Other frequencies are never due before their
    start date. Weekly chores use the weekday set, falling back to the single
    weekday; biweekly chores additionally require an even number of whole
    weeks since the start date (or creation date). Monthly chores match the
    day of month, with no adjustment for short months.
    """
    if chore.frequency == ChoreFrequency.DAILY:
        return True

    if chore.start_date is not None and local_date(chore.start_date) > today:
        return False

    if chore.frequency == ChoreFrequency.WEEKLY:
        return day_of_week(today) in _weekdays(chore)

    if chore.frequency == ChoreFrequency.BIWEEKLY:
        if day_of_week(today) not in _weekdays(chore):
            return False
        anchor = local_date(chore.start_date or chore.created)
        weeks_elapsed = (today - anchor).days // 7
        return weeks_elapsed % 2 == 0

    if chore.frequency == ChoreFrequency.MONTHLY:
        return chore.day_of_month == today.day

    return False


def should_reset_completion(chore: Chore, now: datetime) -> bool:
    """Whether a completed chore's flag belongs to a period that has ended."""
    if not chore.is_completed or chore.last_completed is None:
        return False

    last = local(chore.last_completed)
    current = local(now)

    if chore.frequency == ChoreFrequency.DAILY:
        return last.date() != current.date()
    if chore.frequency == ChoreFrequency.WEEKLY:
        return last < current - timedelta(days=7)
    if chore.frequency == ChoreFrequency.BIWEEKLY:
        return last < current - timedelta(days=14)
    if chore.frequency == ChoreFrequency.MONTHLY:
        return (last.year, last.month) != (current.year, current.month)
    return False
