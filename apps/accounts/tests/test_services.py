"""
Service layer unit tests for accounts app.

Tests cover:
- Provisioning users from identity provider claims
- Claim validation and identity conflicts
- Profile updates
"""

import pytest

from apps.accounts.models import User
from apps.accounts.services import (
    sync_user_from_claims,
    get_user_by_id,
    update_profile,
)
from apps.accounts.services.exceptions import (
    UserNotFoundError,
    IdentityConflictError,
    InvalidClaimsError,
)


@pytest.mark.django_db
class TestSyncUserFromClaims:
    """Tests for user_provisioning.sync_user_from_claims."""

    def test_creates_user_with_subject_as_id(self):
        user = sync_user_from_claims(subject='provider|1', email='first@example.com', display_name='First')

        assert user.id == 'provider|1'
        assert user.email == 'first@example.com'
        assert user.display_name == 'First'
        assert User.objects.count() == 1

    def test_second_sync_is_upsert(self):
        sync_user_from_claims(subject='provider|1', email='first@example.com')
        sync_user_from_claims(subject='provider|1', email='first@example.com')

        assert User.objects.count() == 1

    def test_empty_name_keeps_stored_name(self, user):
        synced = sync_user_from_claims(subject=user.id, email=user.email, display_name='')

        assert synced.display_name == 'Test User'

    def test_missing_claims(self):
        with pytest.raises(InvalidClaimsError):
            sync_user_from_claims(subject='', email='x@example.com')

        with pytest.raises(InvalidClaimsError):
            sync_user_from_claims(subject='provider|1', email='')

    def test_email_conflict(self, user):
        with pytest.raises(IdentityConflictError):
            sync_user_from_claims(subject='provider|other', email=user.email)

        assert not User.objects.filter(id='provider|other').exists()

    def test_email_change_conflict(self, user, other_user):
        with pytest.raises(IdentityConflictError):
            sync_user_from_claims(subject=user.id, email=other_user.email)

        user.refresh_from_db()
        assert user.email == 'testuser@example.com'


@pytest.mark.django_db
class TestProfile:
    """Tests for user lookup and profile updates."""

    def test_get_user_by_id(self, user):
        assert get_user_by_id(user_id=user.id) == user

    def test_get_user_by_id_not_found(self):
        with pytest.raises(UserNotFoundError):
            get_user_by_id(user_id='provider|missing')

    def test_update_profile(self, user):
        updated = update_profile(user_id=user.id, display_name='New Name')

        assert updated.display_name == 'New Name'
        assert updated.get_display_name() == 'New Name'

    def test_update_profile_not_found(self):
        with pytest.raises(UserNotFoundError):
            update_profile(user_id='provider|missing', display_name='Nobody')
