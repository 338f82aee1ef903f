"""
Ledger store tests.

Tests cover:
- Workout upsert and counting
- Atomic pot increments
- Conditional pot reset under interleaved increments
- Settlement uniqueness
"""

import pytest
from datetime import date
from uuid import uuid4
from unittest.mock import patch

from apps.buddies.models import Pair
from apps.ledger.models import Workout, WorkoutStatus, Settlement
from apps.ledger.services import store
from apps.ledger.services.exceptions import (
    PairNotFoundError,
    SettlementConflictError,
    PotContentionError,
)

from .conftest import WEEK_1, WEEK_2


def set_pot(pair, balance):
    Pair.objects.filter(id=pair.id).update(pot_balance=balance)


def pot_of(pair):
    return Pair.objects.get(id=pair.id).pot_balance


# =============================================================================
# Workouts
# =============================================================================

@pytest.mark.django_db
class TestWorkoutStore:

    def test_upsert_creates(self, alice):
        workout, previous = store.upsert_workout(user_id=alice.pk, day=WEEK_1, status=WorkoutStatus.MISSED)

        assert previous is None
        assert workout.status == WorkoutStatus.MISSED

    def test_upsert_overwrites_and_returns_previous(self, alice):
        store.upsert_workout(user_id=alice.pk, day=WEEK_1, status=WorkoutStatus.MISSED)
        workout, previous = store.upsert_workout(user_id=alice.pk, day=WEEK_1, status=WorkoutStatus.WORKED)

        assert previous == WorkoutStatus.MISSED
        assert workout.status == WorkoutStatus.WORKED
        assert Workout.objects.filter(user=alice).count() == 1

    def test_get_workout(self, alice):
        assert store.get_workout(user_id=alice.pk, day=WEEK_1) is None

        store.upsert_workout(user_id=alice.pk, day=WEEK_1, status=WorkoutStatus.WORKED)

        assert store.get_workout(user_id=alice.pk, day=WEEK_1).status == WorkoutStatus.WORKED

    def test_count_worked_within_week(self, alice, log_week, worked_days):
        log_week(alice, WEEK_1, worked_days(3, missed=4))
        log_week(alice, WEEK_2, worked_days(7))

        count = store.count_worked_workouts(user_id=alice.pk, week_start=WEEK_1, week_end=date(2024, 1, 7))

        assert count == 3

    def test_count_missed_since(self, alice, bob, carol, log_week, worked_days):
        log_week(alice, WEEK_1, worked_days(5, missed=2))
        log_week(bob, WEEK_2, worked_days(4, missed=3))
        log_week(carol, WEEK_2, worked_days(0, missed=7))

        assert store.count_missed_workouts(user_ids=[alice.pk, bob.pk], since=WEEK_1) == 5
        assert store.count_missed_workouts(user_ids=[alice.pk, bob.pk], since=WEEK_2) == 3


# =============================================================================
# Pots
# =============================================================================

@pytest.mark.django_db
class TestPotIncrement:

    def test_increment(self, pair):
        store.increment_pot_balance(pair_id=pair.id, delta=20)
        updated = store.increment_pot_balance(pair_id=pair.id, delta=20)

        assert updated.pot_balance == 40

    def test_decrement(self, pair):
        set_pot(pair, 40)

        updated = store.increment_pot_balance(pair_id=pair.id, delta=-20)

        assert updated.pot_balance == 20

    def test_increment_missing_pair(self, db):
        with pytest.raises(PairNotFoundError):
            store.increment_pot_balance(pair_id=uuid4(), delta=20)


@pytest.mark.django_db
class TestAtomicResetPot:

    def test_reset_returns_previous_balance(self, pair):
        set_pot(pair, 60)

        amount, updated = store.atomic_reset_pot(pair_id=pair.id)

        assert amount == 60
        assert updated.pot_balance == 0

    def test_reset_missing_pair(self, db):
        with pytest.raises(PairNotFoundError):
            store.atomic_reset_pot(pair_id=uuid4())

    @pytest.mark.parametrize('position', ['before_read', 'between_read_and_reset', 'after_reset'])
    def test_interleaved_increment_is_never_lost(self, pair, position):
        """
        An increment landing anywhere around the reset is either paid out
        by it or left in the pot afterwards.
        """
        set_pot(pair, 60)
        real_read = store._read_pot_balance
        injected = []

        def read_with_concurrent_increment(pair_id):
            if position == 'before_read' and not injected:
                injected.append(True)
                store.increment_pot_balance(pair_id=pair_id, delta=20)
            balance = real_read(pair_id)
            if position == 'between_read_and_reset' and not injected:
                injected.append(True)
                store.increment_pot_balance(pair_id=pair_id, delta=20)
            return balance

        with patch.object(store, '_read_pot_balance', side_effect=read_with_concurrent_increment):
            amount, _ = store.atomic_reset_pot(pair_id=pair.id)

        if position == 'after_reset':
            store.increment_pot_balance(pair_id=pair.id, delta=20)

        assert amount + pot_of(pair) == 80
        if position == 'after_reset':
            assert (amount, pot_of(pair)) == (60, 20)
        else:
            assert (amount, pot_of(pair)) == (80, 0)

    def test_gives_up_under_constant_contention(self, pair, settings):
        settings.BUDDY_POT_RESET_MAX_RETRIES = 3
        set_pot(pair, 60)
        real_read = store._read_pot_balance

        def always_outpaced(pair_id):
            balance = real_read(pair_id)
            store.increment_pot_balance(pair_id=pair_id, delta=20)
            return balance

        with patch.object(store, '_read_pot_balance', side_effect=always_outpaced):
            with pytest.raises(PotContentionError):
                store.atomic_reset_pot(pair_id=pair.id)

        # Nothing was zeroed, every increment is still in the pot
        assert pot_of(pair) == 60 + 3 * 20


# =============================================================================
# Settlements
# =============================================================================

@pytest.mark.django_db
class TestSettlementStore:

    def test_create_and_get(self, pair, alice, bob):
        settlement = store.create_settlement(
            pair_id=pair.id, week_start=WEEK_1, winner_id=alice.pk, loser_id=bob.pk, amount=60,
        )

        assert store.get_settlement(pair_id=pair.id, week_start=WEEK_1) == settlement
        assert store.get_settlement(pair_id=pair.id, week_start=WEEK_2) is None

    def test_duplicate_week_conflicts(self, pair, alice, bob):
        store.create_settlement(pair_id=pair.id, week_start=WEEK_1, winner_id=alice.pk, loser_id=bob.pk, amount=60)

        with pytest.raises(SettlementConflictError):
            store.create_settlement(pair_id=pair.id, week_start=WEEK_1, winner_id=bob.pk, loser_id=alice.pk, amount=0)

        assert Settlement.objects.count() == 1

    def test_latest_and_history(self, pair, alice, bob):
        store.create_settlement(pair_id=pair.id, week_start=WEEK_1, winner_id=alice.pk, loser_id=bob.pk, amount=60)
        store.create_settlement(pair_id=pair.id, week_start=WEEK_2, winner_id=bob.pk, loser_id=alice.pk, amount=20)

        assert store.get_latest_settlement(pair_id=pair.id).week_start == WEEK_2
        assert [s.week_start for s in store.get_pair_settlements(pair_id=pair.id)] == [WEEK_2, WEEK_1]
