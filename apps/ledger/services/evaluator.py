"""
Weekly evaluator.

Closes out completed weeks for each pair. When exactly one buddy misses the
quota the pot is paid out to the other: the pot is zeroed and a settlement
recorded in one transaction. The (pair, week_start) constraint makes this
exactly-once; a concurrent evaluation that loses the insert rolls back its
own reset and is treated as a no-op.
"""

import logging
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import List, Optional

from django.conf import settings
from django.db import DatabaseError, transaction
from django.utils import timezone

from apps.buddies.models import Pair
from apps.ledger import weeks
from apps.ledger.models import Settlement

from . import store
from .exceptions import LedgerServiceError, SettlementConflictError

logger = logging.getLogger(__name__)


class WeekOutcome(Enum):
    BOTH_MET = 'both_met'
    BOTH_FAILED = 'both_failed'
    USER_A_WON = 'user_a_won'
    USER_B_WON = 'user_b_won'

    @property
    def is_settled(self) -> bool:
        return self in (WeekOutcome.USER_A_WON, WeekOutcome.USER_B_WON)


def determine_outcome(user_a_worked: int, user_b_worked: int, quota: Optional[int] = None) -> WeekOutcome:
    """Compare both buddies' worked days against the weekly quota."""
    if quota is None:
        quota = settings.BUDDY_POT_WEEKLY_QUOTA

    user_a_met = user_a_worked >= quota
    user_b_met = user_b_worked >= quota

    if user_a_met and user_b_met:
        return WeekOutcome.BOTH_MET
    if not user_a_met and not user_b_met:
        return WeekOutcome.BOTH_FAILED
    return WeekOutcome.USER_A_WON if user_a_met else WeekOutcome.USER_B_WON


@dataclass
class WeekEvaluation:
    """Outcome of one pair-week, with the settlement it produced if any."""
    pair: Pair
    week_start: date
    user_a_worked: int
    user_b_worked: int
    outcome: WeekOutcome
    settlement: Optional[Settlement] = None

    @property
    def winner_id(self):
        if self.outcome == WeekOutcome.USER_A_WON:
            return self.pair.user_a_id
        if self.outcome == WeekOutcome.USER_B_WON:
            return self.pair.user_b_id
        return None

    @property
    def loser_id(self):
        if self.outcome == WeekOutcome.USER_A_WON:
            return self.pair.user_b_id
        if self.outcome == WeekOutcome.USER_B_WON:
            return self.pair.user_a_id
        return None


def settle_pair_week(*, pair: Pair, week_start: date, winner_id, loser_id) -> Optional[Settlement]:
    """
    Pay the pot out to the winner and record the settlement.

    Returns:
        The new Settlement, or None if the week was settled concurrently
    """
    try:
        with transaction.atomic():
            amount, _ = store.atomic_reset_pot(pair_id=pair.id)
            settlement = store.create_settlement(
                pair_id=pair.id,
                week_start=week_start,
                winner_id=winner_id,
                loser_id=loser_id,
                amount=amount,
            )
    except SettlementConflictError:
        logger.info("Week of %s for pair %s was already settled", week_start, pair.id)
        return None

    logger.info(
        "Settled week of %s for pair %s: %d to %s",
        week_start, pair.id, amount, winner_id,
    )
    return settlement


def evaluate_pair_week(*, pair: Pair, week_start: date, dry_run: bool = False) -> Optional[WeekEvaluation]:
    """
    Evaluate a single completed week of a pair.

    Returns:
        WeekEvaluation, or None when the week is already settled or ended
        before the pair existed or while settlement was paused
    """
    week_end = weeks.week_end_for(week_start)
    if week_end < timezone.localdate(pair.created_at):
        return None
    if pair.was_paused_during(week_start, week_end):
        return None
    if store.get_settlement(pair_id=pair.id, week_start=week_start) is not None:
        return None

    user_a_worked = store.count_worked_workouts(user_id=pair.user_a_id, week_start=week_start, week_end=week_end)
    user_b_worked = store.count_worked_workouts(user_id=pair.user_b_id, week_start=week_start, week_end=week_end)

    evaluation = WeekEvaluation(
        pair=pair,
        week_start=week_start,
        user_a_worked=user_a_worked,
        user_b_worked=user_b_worked,
        outcome=determine_outcome(user_a_worked, user_b_worked),
    )

    if evaluation.outcome.is_settled and not dry_run:
        evaluation.settlement = settle_pair_week(
            pair=pair,
            week_start=week_start,
            winner_id=evaluation.winner_id,
            loser_id=evaluation.loser_id,
        )
    return evaluation


def evaluate_pair(*, pair: Pair, today: Optional[date] = None, week_count: Optional[int] = None,
                  dry_run: bool = False) -> List[WeekEvaluation]:
    """
    Evaluate the most recent completed weeks of a pair, oldest first.

    Paused pairs are skipped, as are weeks that overlap an earlier pause.
    A failure in one week, database errors included, is logged and does
    not stop evaluation of the others.
    """
    if pair.is_paused:
        logger.debug("Skipping paused pair %s", pair.id)
        return []

    today = today or weeks.today()
    if week_count is None:
        week_count = settings.BUDDY_POT_EVALUATION_WEEKS

    evaluations = []
    for week_start in reversed(weeks.completed_week_starts(today, week_count)):
        try:
            evaluation = evaluate_pair_week(pair=pair, week_start=week_start, dry_run=dry_run)
        except (LedgerServiceError, DatabaseError):
            logger.exception("Failed to evaluate week of %s for pair %s", week_start, pair.id)
            continue
        if evaluation is not None:
            evaluations.append(evaluation)
    return evaluations


def evaluate_weeks(*, user, today: Optional[date] = None, week_count: Optional[int] = None) -> List[Settlement]:
    """
    Evaluate completed weeks for every pair of the user.

    Safe to call repeatedly: weeks that are already settled are skipped.

    Returns:
        Settlements created by this call
    """
    created = []
    for pair in store.get_pairs_for_user(user_id=user.pk):
        for evaluation in evaluate_pair(pair=pair, today=today, week_count=week_count):
            if evaluation.settlement is not None:
                created.append(evaluation.settlement)
    return created


def evaluate_all_pairs(*, today: Optional[date] = None, week_count: Optional[int] = None,
                       dry_run: bool = False) -> List[WeekEvaluation]:
    """
    Evaluate every pair. Used by the periodic management command.

    Returns:
        Evaluations with an asymmetric outcome, settled or (on a dry run)
        that would be settled
    """
    results = []
    for pair in Pair.objects.order_by('created_at'):
        for evaluation in evaluate_pair(pair=pair, today=today, week_count=week_count, dry_run=dry_run):
            if evaluation.outcome.is_settled:
                results.append(evaluation)
    return results
