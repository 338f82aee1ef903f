import pytest
from datetime import date, datetime, timedelta, timezone as dt_timezone
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User
from apps.buddies.models import Pair
from apps.ledger.models import Workout, WorkoutStatus


# Monday. Four completed weeks precede TODAY: Jan 1, 8, 15 and 22.
WEEK_1 = date(2024, 1, 1)
WEEK_2 = date(2024, 1, 8)
WEEK_3 = date(2024, 1, 15)
WEEK_4 = date(2024, 1, 22)
TODAY = date(2024, 1, 31)

PAIR_CREATED = datetime(2023, 12, 1, 12, 0, tzinfo=dt_timezone.utc)


def backdate_pair(pair, created_at):
    """Move a pair's creation time; auto_now_add ignores values passed to create()."""
    Pair.objects.filter(id=pair.id).update(created_at=created_at)
    pair.refresh_from_db()
    return pair


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def alice(db):
    return User.objects.create_user(
        id='provider|alice',
        email='alice@example.com',
        display_name='Alice',
    )


@pytest.fixture
def bob(db):
    return User.objects.create_user(
        id='provider|bob',
        email='bob@example.com',
        display_name='Bob',
    )


@pytest.fixture
def carol(db):
    return User.objects.create_user(
        id='provider|carol',
        email='carol@example.com',
        display_name='Carol',
    )


@pytest.fixture
def pair(alice, bob):
    """Pair between alice and bob, created well before the test weeks."""
    pair = Pair.objects.create(user_a=alice, user_b=bob)
    return backdate_pair(pair, PAIR_CREATED)


@pytest.fixture
def log_week():
    """
    Store a week of workouts directly, bypassing the recorder.

    ``statuses`` lists one entry per day from Monday; None leaves a day empty.
    """
    def _log(user, week_start, statuses):
        for offset, status in enumerate(statuses):
            if status is None:
                continue
            Workout.objects.update_or_create(
                user=user,
                date=week_start + timedelta(days=offset),
                defaults={'status': status},
            )
    return _log


@pytest.fixture
def worked_days():
    """Build a week of statuses with ``count`` worked days and misses after."""
    def _days(count, missed=0):
        return [WorkoutStatus.WORKED] * count + [WorkoutStatus.MISSED] * missed
    return _days


@pytest.fixture
def authenticated_client(alice):
    """API client authenticated as alice."""
    client = APIClient()
    refresh = RefreshToken.for_user(alice)
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return client
