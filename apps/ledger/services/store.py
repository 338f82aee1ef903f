"""
Ledger store operations.

Every operation the recorder, evaluator and recalculator need from
persistence lives here. Pot changes are single UPDATE statements so that
concurrent requests never lose each other's writes:

- increments use ``F('pot_balance') + delta``
- the settlement reset is a conditional update that only zeroes the pot
  if it still holds the balance that was read, retried on contention
"""

import logging
from datetime import date
from typing import Iterable, Optional, Tuple
from uuid import UUID

from django.conf import settings
from django.db import transaction, IntegrityError
from django.db.models import F, QuerySet
from django.utils import timezone

from apps.buddies.models import Pair
from apps.ledger.models import Workout, WorkoutStatus, Settlement

from .exceptions import PairNotFoundError, SettlementConflictError, PotContentionError

logger = logging.getLogger(__name__)


# =============================================================================
# Workouts
# =============================================================================

def get_workout(*, user_id, day: date) -> Optional[Workout]:
    return Workout.objects.filter(user_id=user_id, date=day).first()


@transaction.atomic
def upsert_workout(*, user_id, day: date, status: str) -> Tuple[Workout, Optional[str]]:
    """
    Create or overwrite the workout for (user, day).

    The existing row is locked while its previous status is read, so two
    submissions for the same day cannot both see the same previous status.

    Returns:
        Tuple of (Workout, previous status or None when newly created)
    """
    workout, created = (
        Workout.objects
        .select_for_update()
        .get_or_create(user_id=user_id, date=day, defaults={'status': status})
    )
    if created:
        return workout, None

    previous_status = workout.status
    if previous_status != status:
        workout.status = status
        workout.save(update_fields=['status', 'updated_at'])
    return workout, previous_status


def count_worked_workouts(*, user_id, week_start: date, week_end: date) -> int:
    """Worked days of the user within [week_start, week_end]."""
    return Workout.objects.filter(
        user_id=user_id,
        status=WorkoutStatus.WORKED,
        date__gte=week_start,
        date__lte=week_end,
    ).count()


def count_missed_workouts(*, user_ids: Iterable, since: date) -> int:
    """Missed days of any of the users on or after ``since``."""
    return Workout.objects.filter(
        user_id__in=list(user_ids),
        status=WorkoutStatus.MISSED,
        date__gte=since,
    ).count()


def get_workouts_between(*, user_id, start: date, end: date) -> QuerySet[Workout]:
    return Workout.objects.filter(user_id=user_id, date__gte=start, date__lte=end).order_by('date')


# =============================================================================
# Pots
# =============================================================================

def get_pairs_for_user(*, user_id) -> QuerySet[Pair]:
    return Pair.objects.for_user(user_id).order_by('created_at')


def increment_pot_balance(*, pair_id: UUID, delta: int) -> Pair:
    """
    Atomically add ``delta`` to the pair's pot.

    Raises:
        PairNotFoundError: If the pair doesn't exist
    """
    updated = Pair.objects.filter(id=pair_id).update(
        pot_balance=F('pot_balance') + delta,
        updated_at=timezone.now(),
    )
    if not updated:
        raise PairNotFoundError(f"Pair with ID {pair_id} not found")
    return Pair.objects.get(id=pair_id)


def _read_pot_balance(pair_id: UUID) -> int:
    try:
        return Pair.objects.values_list('pot_balance', flat=True).get(id=pair_id)
    except Pair.DoesNotExist:
        raise PairNotFoundError(f"Pair with ID {pair_id} not found")


def atomic_reset_pot(*, pair_id: UUID, max_retries: Optional[int] = None) -> Tuple[int, Pair]:
    """
    Zero the pot and return the balance it held.

    The zeroing UPDATE is conditioned on the balance just read. If an
    increment lands in between, the update matches no row and the read is
    retried, so the returned amount always equals what was actually removed.

    Args:
        pair_id: UUID of the pair
        max_retries: Attempts before giving up (defaults to settings)

    Returns:
        Tuple of (previous balance, refreshed Pair)

    Raises:
        PairNotFoundError: If the pair doesn't exist
        PotContentionError: If every attempt lost to a concurrent update
    """
    if max_retries is None:
        max_retries = settings.BUDDY_POT_RESET_MAX_RETRIES

    for attempt in range(max_retries):
        balance = _read_pot_balance(pair_id)

        swapped = Pair.objects.filter(id=pair_id, pot_balance=balance).update(
            pot_balance=0,
            updated_at=timezone.now(),
        )
        if swapped:
            return balance, Pair.objects.get(id=pair_id)

        logger.warning(
            "Pot of pair %s changed during reset (attempt %d/%d), retrying",
            pair_id, attempt + 1, max_retries,
        )

    raise PotContentionError(
        f"Failed to reset pot of pair {pair_id} after {max_retries} attempts"
    )


def set_pot_balance(*, pair_id: UUID, balance: int) -> Pair:
    """Overwrite the pot with a recomputed balance."""
    updated = Pair.objects.filter(id=pair_id).update(
        pot_balance=balance,
        updated_at=timezone.now(),
    )
    if not updated:
        raise PairNotFoundError(f"Pair with ID {pair_id} not found")
    return Pair.objects.get(id=pair_id)


# =============================================================================
# Settlements
# =============================================================================

def get_settlement(*, pair_id: UUID, week_start: date) -> Optional[Settlement]:
    return Settlement.objects.filter(pair_id=pair_id, week_start=week_start).first()


def get_latest_settlement(*, pair_id: UUID) -> Optional[Settlement]:
    return Settlement.objects.filter(pair_id=pair_id).order_by('-week_start').first()


def get_pair_settlements(*, pair_id: UUID) -> QuerySet[Settlement]:
    return (
        Settlement.objects
        .filter(pair_id=pair_id)
        .select_related('winner', 'loser')
        .order_by('-week_start')
    )


def create_settlement(*, pair_id: UUID, week_start: date, winner_id, loser_id, amount: int) -> Settlement:
    """
    Record a settlement.

    Raises:
        SettlementConflictError: If the pair already has a settlement for the week
    """
    try:
        with transaction.atomic():
            return Settlement.objects.create(
                pair_id=pair_id,
                week_start=week_start,
                winner_id=winner_id,
                loser_id=loser_id,
                amount=amount,
            )
    except IntegrityError:
        raise SettlementConflictError(
            f"Pair {pair_id} is already settled for the week of {week_start}"
        )
