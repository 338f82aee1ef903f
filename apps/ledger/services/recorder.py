"""
Workout recorder.

A workout write changes every pot the user shares by the same delta, which
depends only on the transition from the previously recorded status.
"""

import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import List, Optional

from django.conf import settings
from django.contrib.auth import get_user_model
from django.db import transaction

from apps.buddies.models import Pair
from apps.ledger import weeks
from apps.ledger.models import Workout, WorkoutStatus

from . import store
from .exceptions import InvalidWorkoutError, UserNotFoundError

logger = logging.getLogger(__name__)

User = get_user_model()


@dataclass
class WorkoutRecord:
    """Result of recording a workout."""
    workout: Workout
    previous_status: Optional[str]
    delta: int
    pairs: List[Pair] = field(default_factory=list)

    @property
    def created(self) -> bool:
        return self.previous_status is None


def calculate_pot_delta(previous_status: Optional[str], new_status: str, penalty: Optional[int] = None) -> int:
    """
    Pot change caused by moving from ``previous_status`` to ``new_status``.

    ``previous_status`` is None when the day had no workout yet.
    """
    if penalty is None:
        penalty = settings.BUDDY_POT_PENALTY

    if previous_status == new_status:
        return 0
    if new_status == WorkoutStatus.MISSED:
        return penalty
    if previous_status == WorkoutStatus.MISSED:
        return -penalty
    return 0


def validate_status(status) -> str:
    if status not in WorkoutStatus.values:
        raise InvalidWorkoutError(
            f"Invalid status '{status}', expected one of: {', '.join(WorkoutStatus.values)}"
        )
    return str(status)


def parse_workout_date(value) -> date:
    """
    Coerce a workout date given as ``date`` or ISO ``YYYY-MM-DD`` string.

    Raises:
        InvalidWorkoutError: If the value is not a valid calendar date
    """
    if value is None or value == '':
        raise InvalidWorkoutError("A date is required")
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value))
    except ValueError:
        raise InvalidWorkoutError(f"Invalid date '{value}', expected YYYY-MM-DD")


def record_workout(*, user_id, status: str, date=None) -> WorkoutRecord:
    """
    Record a user's outcome for a day and apply the pot delta to every pair.

    Args:
        user_id: ID of the user
        status: 'worked' or 'missed'
        date: Day of the workout (``date`` or ``YYYY-MM-DD``), today when omitted

    Returns:
        WorkoutRecord with the stored workout, previous status and delta

    Raises:
        InvalidWorkoutError: If status or date is invalid
        UserNotFoundError: If user doesn't exist
    """
    status = validate_status(status)
    day = weeks.today() if date in (None, '') else parse_workout_date(date)

    if not User.objects.filter(pk=user_id).exists():
        raise UserNotFoundError(f"User with ID {user_id} not found")

    with transaction.atomic():
        workout, previous_status = store.upsert_workout(user_id=user_id, day=day, status=status)
        delta = calculate_pot_delta(previous_status, status)

        pairs = list(store.get_pairs_for_user(user_id=user_id))
        if delta:
            pairs = [
                store.increment_pot_balance(pair_id=pair.id, delta=delta)
                for pair in pairs
            ]
            logger.info(
                "Workout %s -> %s for user %s on %s changed %d pot(s) by %+d",
                previous_status, status, user_id, day, len(pairs), delta,
            )

    return WorkoutRecord(workout=workout, previous_status=previous_status, delta=delta, pairs=pairs)


def get_workout_for_day(*, user_id, day: Optional[date] = None) -> Optional[Workout]:
    """Workout recorded for ``day`` (today when omitted)."""
    return store.get_workout(user_id=user_id, day=day or weeks.today())


def get_workout_history(*, user_id, week_count: int, today: Optional[date] = None) -> List[dict]:
    """
    Workouts of the current week and the ``week_count - 1`` before it.

    Returns:
        One dict per week, oldest first, with every day of the week and
        its status (None for days with nothing recorded)
    """
    today = today or weeks.today()
    starts = weeks.recent_week_starts(today, week_count)
    if not starts:
        return []

    workouts = store.get_workouts_between(
        user_id=user_id,
        start=starts[0],
        end=weeks.week_end_for(starts[-1]),
    )
    status_by_day = {workout.date: workout.status for workout in workouts}

    history = []
    for week_start in starts:
        days = [
            {'date': day, 'status': status_by_day.get(day)}
            for day in weeks.week_days(week_start)
        ]
        history.append({
            'week_start': week_start,
            'week_end': weeks.week_end_for(week_start),
            'days': days,
            'worked_count': sum(1 for d in days if d['status'] == WorkoutStatus.WORKED),
        })
    return history
