"""
Workout recorder tests.

Tests cover:
- Pot delta for every status transition
- Idempotent re-submission
- Delta applied to every pair of the user
- Validation before any write
- Weekly history buckets
"""

import pytest
from datetime import date

from apps.buddies.models import Pair
from apps.ledger.models import Workout, WorkoutStatus
from apps.ledger.services import (
    calculate_pot_delta,
    parse_workout_date,
    record_workout,
    get_workout_for_day,
    get_workout_history,
)
from apps.ledger.services.exceptions import InvalidWorkoutError, UserNotFoundError

from .conftest import WEEK_1, WEEK_4, TODAY

WORKED = WorkoutStatus.WORKED
MISSED = WorkoutStatus.MISSED


def pot_of(pair):
    return Pair.objects.get(id=pair.id).pot_balance


class TestCalculatePotDelta:

    @pytest.mark.parametrize('previous, new, expected', [
        (WORKED, MISSED, 20),
        (MISSED, WORKED, -20),
        (None, MISSED, 20),
        (None, WORKED, 0),
        (WORKED, WORKED, 0),
        (MISSED, MISSED, 0),
    ])
    def test_transitions(self, previous, new, expected, settings):
        settings.BUDDY_POT_PENALTY = 20

        assert calculate_pot_delta(previous, new) == expected

    def test_penalty_is_configurable(self, settings):
        settings.BUDDY_POT_PENALTY = 50

        assert calculate_pot_delta(None, MISSED) == 50
        assert calculate_pot_delta(MISSED, WORKED) == -50


class TestParseWorkoutDate:

    def test_iso_string(self):
        assert parse_workout_date('2024-01-08') == date(2024, 1, 8)

    def test_date_passthrough(self):
        assert parse_workout_date(date(2024, 1, 8)) == date(2024, 1, 8)

    @pytest.mark.parametrize('value', ['2024-02-30', 'yesterday', '08/01/2024', None, ''])
    def test_invalid(self, value):
        with pytest.raises(InvalidWorkoutError):
            parse_workout_date(value)


@pytest.mark.django_db
class TestRecordWorkout:
    """Tests for recorder.record_workout."""

    def test_first_miss_adds_penalty(self, pair, alice):
        record = record_workout(user_id=alice.pk, date=WEEK_1, status=MISSED)

        assert record.created
        assert record.previous_status is None
        assert record.delta == 20
        assert pot_of(pair) == 20

    def test_first_worked_leaves_pot(self, pair, alice):
        record = record_workout(user_id=alice.pk, date=WEEK_1, status=WORKED)

        assert record.delta == 0
        assert pot_of(pair) == 0

    def test_transition_sequence(self, pair, alice):
        """none -> missed -> worked -> missed ends one penalty above the start."""
        Pair.objects.filter(id=pair.id).update(pot_balance=100)

        record_workout(user_id=alice.pk, date=WEEK_1, status=MISSED)
        record_workout(user_id=alice.pk, date=WEEK_1, status=WORKED)
        record_workout(user_id=alice.pk, date=WEEK_1, status=MISSED)

        assert pot_of(pair) == 120
        assert Workout.objects.get(user=alice, date=WEEK_1).status == MISSED

    def test_resubmission_is_idempotent(self, pair, alice):
        record_workout(user_id=alice.pk, date=WEEK_1, status=MISSED)
        record = record_workout(user_id=alice.pk, date=WEEK_1, status=MISSED)

        assert record.delta == 0
        assert not record.created
        assert pot_of(pair) == 20
        assert Workout.objects.filter(user=alice).count() == 1

    def test_accepts_iso_date_string(self, pair, alice):
        record = record_workout(user_id=alice.pk, date='2024-01-08', status='missed')

        assert record.workout.date == date(2024, 1, 8)

    def test_delta_applied_to_every_pair(self, pair, alice, carol):
        other = Pair.objects.create(user_a=alice, user_b=carol)
        unrelated = Pair.objects.create(user_a=pair.user_b, user_b=carol)

        record = record_workout(user_id=alice.pk, date=WEEK_1, status=MISSED)

        assert len(record.pairs) == 2
        assert pot_of(pair) == 20
        assert pot_of(other) == 20
        assert pot_of(unrelated) == 0

    def test_paused_pair_still_accrues(self, pair, alice):
        Pair.objects.filter(id=pair.id).update(is_paused=True)

        record_workout(user_id=alice.pk, date=WEEK_1, status=MISSED)

        assert pot_of(pair) == 20

    def test_user_without_pairs(self, carol):
        record = record_workout(user_id=carol.pk, date=WEEK_1, status=MISSED)

        assert record.delta == 20
        assert record.pairs == []
        assert Workout.objects.filter(user=carol).count() == 1

    def test_invalid_status_writes_nothing(self, pair, alice):
        with pytest.raises(InvalidWorkoutError):
            record_workout(user_id=alice.pk, date=WEEK_1, status='skipped')

        assert not Workout.objects.exists()
        assert pot_of(pair) == 0

    def test_malformed_date_writes_nothing(self, pair, alice):
        with pytest.raises(InvalidWorkoutError):
            record_workout(user_id=alice.pk, date='2024-13-01', status=MISSED)

        assert not Workout.objects.exists()

    def test_unknown_user(self, db):
        with pytest.raises(UserNotFoundError):
            record_workout(user_id='provider|nobody', date=WEEK_1, status=MISSED)

        assert not Workout.objects.exists()


@pytest.mark.django_db
class TestWorkoutQueries:

    def test_workout_for_day(self, alice):
        assert get_workout_for_day(user_id=alice.pk, day=WEEK_1) is None

        record_workout(user_id=alice.pk, date=WEEK_1, status=WORKED)

        assert get_workout_for_day(user_id=alice.pk, day=WEEK_1).status == WORKED

    def test_history_buckets(self, alice, log_week, worked_days):
        log_week(alice, WEEK_4, worked_days(4, missed=1))
        record_workout(user_id=alice.pk, date=TODAY, status=WORKED)

        history = get_workout_history(user_id=alice.pk, week_count=2, today=TODAY)

        assert [week['week_start'] for week in history] == [WEEK_4, date(2024, 1, 29)]
        assert history[0]['worked_count'] == 4
        assert [day['status'] for day in history[0]['days']] == [
            WORKED, WORKED, WORKED, WORKED, MISSED, None, None,
        ]
        assert history[1]['worked_count'] == 1
        assert history[1]['week_end'] == date(2024, 2, 4)

    def test_history_ignores_older_weeks(self, alice, log_week, worked_days):
        log_week(alice, WEEK_1, worked_days(7))

        history = get_workout_history(user_id=alice.pk, week_count=1, today=TODAY)

        assert history[0]['worked_count'] == 0
