"""
Pot recalculator.

Rebuilds a pot from the workout and settlement history alone, ignoring the
incrementally maintained balance. Running it twice gives the same result.
"""

import logging
from dataclasses import dataclass
from datetime import date
from typing import List, Optional
from uuid import UUID

from django.conf import settings
from django.db import transaction
from django.utils import timezone

from apps.buddies.models import Pair

from . import store
from .exceptions import PairNotFoundError

logger = logging.getLogger(__name__)


@dataclass
class PotRecalculation:
    pair: Pair
    reference_date: date
    missed_count: int
    previous_balance: int
    balance: int

    @property
    def changed(self) -> bool:
        return self.previous_balance != self.balance


def get_reference_date(pair: Pair) -> date:
    """
    Day from which misses count towards the pot.

    The later of the pair's creation day and the start of the last settled
    week, so misses from before the pair existed never count.
    """
    reference_date = timezone.localdate(pair.created_at)
    latest = store.get_latest_settlement(pair_id=pair.id)
    if latest is not None and latest.week_start > reference_date:
        reference_date = latest.week_start
    return reference_date


def calculate_pot_balance(pair: Pair, penalty: Optional[int] = None):
    """Return (reference_date, missed_count, balance) for the pair."""
    if penalty is None:
        penalty = settings.BUDDY_POT_PENALTY

    reference_date = get_reference_date(pair)
    missed_count = store.count_missed_workouts(user_ids=pair.user_ids, since=reference_date)
    return reference_date, missed_count, missed_count * penalty


def recalculate_pot(*, pair_id: UUID, dry_run: bool = False) -> PotRecalculation:
    """
    Recompute and store a pair's pot balance.

    The pair row is locked for the duration so no increment is applied
    between counting and writing.

    Raises:
        PairNotFoundError: If the pair doesn't exist
    """
    with transaction.atomic():
        try:
            pair = Pair.objects.select_for_update().get(id=pair_id)
        except Pair.DoesNotExist:
            raise PairNotFoundError(f"Pair with ID {pair_id} not found")

        reference_date, missed_count, balance = calculate_pot_balance(pair)
        result = PotRecalculation(
            pair=pair,
            reference_date=reference_date,
            missed_count=missed_count,
            previous_balance=pair.pot_balance,
            balance=balance,
        )

        if not dry_run and result.changed:
            result.pair = store.set_pot_balance(pair_id=pair.id, balance=balance)
            logger.info(
                "Recalculated pot of pair %s: %d -> %d (%d missed since %s)",
                pair.id, result.previous_balance, balance, missed_count, reference_date,
            )
    return result


def recalculate_user_pots(*, user) -> List[PotRecalculation]:
    """Recalculate every pot the user shares."""
    return [
        recalculate_pot(pair_id=pair.id)
        for pair in store.get_pairs_for_user(user_id=user.pk)
    ]
