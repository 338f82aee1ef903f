import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User
from apps.buddies.models import Pair


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
    """Create and return a pair between alice and bob."""
    return Pair.objects.create(user_a=alice, user_b=bob)


@pytest.fixture
def client_for():
    """Return a factory for API clients authenticated as a given user."""
    def _client(user):
        client = APIClient()
        refresh = RefreshToken.for_user(user)
        client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
        return client
    return _client


@pytest.fixture
def alice_client(client_for, alice):
    return client_for(alice)


@pytest.fixture
def bob_client(client_for, bob):
    return client_for(bob)


@pytest.fixture
def carol_client(client_for, carol):
    return client_for(carol)
