import jwt
import pytest
from django.urls import reverse
from rest_framework import status
from apps.accounts.models import User


# =============================================================================
# Current User Tests
# =============================================================================

@pytest.mark.django_db
class TestCurrentUser:
    """Tests for GET /api/auth/user/"""

    def test_get_current_user(self, authenticated_client, user):
        """Get the authenticated user's profile."""
        url = reverse('accounts:current-user')
        response = authenticated_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['id'] == user.id
        assert response.data['email'] == user.email
        assert response.data['display_name'] == 'Test User'

    def test_get_current_user_unauthenticated(self, api_client):
        """Cannot get profile without authentication."""
        url = reverse('accounts:current-user')
        response = api_client.get(url)

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_invalid_token_rejected(self, api_client):
        """A malformed bearer token is rejected."""
        api_client.credentials(HTTP_AUTHORIZATION='Bearer not-a-token')
        url = reverse('accounts:current-user')
        response = api_client.get(url)

        assert response.status_code == status.HTTP_401_UNAUTHORIZED


# =============================================================================
# Provisioning Tests
# =============================================================================

@pytest.mark.django_db
class TestProvisioningOnAuthentication:
    """Users are created from provider claims on first authentication."""

    def test_first_authentication_creates_user(self, api_client, provider_token):
        """A token with email for an unknown subject provisions the user."""
        token = provider_token('provider|new', email='New@Example.com', name='New Person')
        api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {token}')

        response = api_client.get(reverse('accounts:current-user'))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['id'] == 'provider|new'
        user = User.objects.get(id='provider|new')
        assert user.email == 'New@example.com'
        assert user.display_name == 'New Person'
        assert not user.has_usable_password()

    def test_token_without_type_or_id_claims_accepted(self, api_client, provider_token):
        """Provider tokens have no token_type or jti and still authenticate."""
        token = provider_token('provider|bare', email='bare@example.com')
        claims = jwt.decode(token, options={'verify_signature': False})
        assert set(claims) == {'sub', 'email', 'iat', 'exp'}
        api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {token}')

        response = api_client.get(reverse('accounts:current-user'))

        assert response.status_code == status.HTTP_200_OK
        assert User.objects.filter(id='provider|bare').exists()

    def test_repeat_authentication_updates_claims(self, api_client, provider_token, user):
        """Later tokens refresh email and name."""
        token = provider_token(user.id, email='renamed@example.com', name='Renamed')
        api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {token}')

        response = api_client.get(reverse('accounts:current-user'))

        assert response.status_code == status.HTTP_200_OK
        user.refresh_from_db()
        assert user.email == 'renamed@example.com'
        assert user.display_name == 'Renamed'
        assert User.objects.count() == 1

    def test_email_owned_by_other_subject(self, api_client, provider_token, user):
        """A new subject cannot take over an existing email."""
        token = provider_token('provider|intruder', email=user.email)
        api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {token}')

        response = api_client.get(reverse('accounts:current-user'))

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert not User.objects.filter(id='provider|intruder').exists()

    def test_unknown_subject_without_email(self, api_client, provider_token):
        """Without an email claim the user must already exist."""
        token = provider_token('provider|ghost')
        api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {token}')

        response = api_client.get(reverse('accounts:current-user'))

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_inactive_user_rejected(self, api_client, provider_token, user_inactive):
        token = provider_token(user_inactive.id, email=user_inactive.email)
        api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {token}')

        response = api_client.get(reverse('accounts:current-user'))

        assert response.status_code == status.HTTP_401_UNAUTHORIZED


# =============================================================================
# Profile Update Tests
# =============================================================================

@pytest.mark.django_db
class TestUpdateProfile:
    """Tests for PATCH /api/auth/user/update/"""

    def test_update_display_name(self, authenticated_client, user):
        url = reverse('accounts:update-profile')
        response = authenticated_client.patch(url, {'display_name': 'Updated Name'})

        assert response.status_code == status.HTTP_200_OK
        assert response.data['display_name'] == 'Updated Name'
        user.refresh_from_db()
        assert user.display_name == 'Updated Name'

    def test_update_requires_display_name(self, authenticated_client):
        url = reverse('accounts:update-profile')
        response = authenticated_client.patch(url, {})

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_update_unauthenticated(self, api_client):
        url = reverse('accounts:update-profile')
        response = api_client.patch(url, {'display_name': 'Nope'})

        assert response.status_code == status.HTTP_401_UNAUTHORIZED


# =============================================================================
# Health Check Tests
# =============================================================================

@pytest.mark.django_db
class TestHealthCheck:

    def test_health_check_is_public(self, api_client):
        response = api_client.get(reverse('health-check'))

        assert response.status_code == status.HTTP_200_OK
