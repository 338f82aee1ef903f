"""
Calendar helpers for the weekly settlement cycle.

Weeks run Monday through Sunday and are identified by their Monday.
"""

from datetime import date, timedelta
from typing import List

from django.utils import timezone

DAYS_PER_WEEK = 7


def today() -> date:
    """Current date in the project's time zone."""
    return timezone.localdate()


def week_start_for(day: date) -> date:
    """Monday of the week containing ``day``."""
    return day - timedelta(days=day.weekday())


def week_end_for(week_start: date) -> date:
    """Sunday of the week starting on ``week_start``."""
    return week_start + timedelta(days=DAYS_PER_WEEK - 1)


def week_days(week_start: date) -> List[date]:
    return [week_start + timedelta(days=offset) for offset in range(DAYS_PER_WEEK)]


def is_week_completed(week_start: date, as_of: date) -> bool:
    """A week is completed once its Sunday lies strictly before ``as_of``."""
    return week_end_for(week_start) < as_of


def completed_week_starts(as_of: date, count: int) -> List[date]:
    """
    Mondays of the ``count`` most recent completed weeks, newest first.

    The current week is never included, and neither is any week whose Sunday
    has not yet passed.
    """
    current = week_start_for(as_of)
    starts = []
    for weeks_ago in range(1, count + 1):
        start = current - timedelta(weeks=weeks_ago)
        if is_week_completed(start, as_of):
            starts.append(start)
    return starts


def recent_week_starts(as_of: date, count: int) -> List[date]:
    """Mondays of the current week and the ``count - 1`` before it, oldest first."""
    current = week_start_for(as_of)
    return [current - timedelta(weeks=weeks_ago) for weeks_ago in reversed(range(count))]
