import jwt
import pytest
from datetime import datetime, timedelta, timezone as dt_timezone
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def user(db):
    """Create and return a test user."""
    return User.objects.create_user(
        id='provider|testuser',
        email='testuser@example.com',
        display_name='Test User',
    )


@pytest.fixture
def user_inactive(db):
    """Create and return an inactive user."""
    return User.objects.create_user(
        id='provider|inactive',
        email='inactive@example.com',
        display_name='Inactive User',
        is_active=False,
    )


@pytest.fixture
def other_user(db):
    """Create and return another test user."""
    return User.objects.create_user(
        id='provider|otheruser',
        email='otheruser@example.com',
        display_name='Other User',
    )


@pytest.fixture
def authenticated_client(api_client, user):
    """Return an authenticated API client using JWT."""
    refresh = RefreshToken.for_user(user)
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return api_client


@pytest.fixture
def provider_token(settings):
    """Sign a token carrying only the claims the identity provider issues."""
    def _make(subject, email=None, name=None):
        issued_at = datetime.now(tz=dt_timezone.utc)
        payload = {
            'sub': subject,
            'iat': issued_at,
            'exp': issued_at + timedelta(minutes=5),
        }
        if email is not None:
            payload['email'] = email
        if name is not None:
            payload['name'] = name
        return jwt.encode(
            payload,
            settings.SIMPLE_JWT['SIGNING_KEY'],
            algorithm=settings.SIMPLE_JWT['ALGORITHM'],
        )
    return _make


@pytest.fixture(autouse=True)
def plain_static_storage(settings):
    """Tests run without collectstatic, so skip the manifest storage backend."""
    settings.STORAGES = {
        **settings.STORAGES,
        'staticfiles': {'BACKEND': 'django.contrib.staticfiles.storage.StaticFilesStorage'},
    }
