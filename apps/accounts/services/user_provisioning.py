"""
User provisioning service.

Users are never registered locally. They are created the first time the
identity provider authenticates them and kept in sync with the provider's
claims afterwards.
"""

import logging

from django.contrib.auth import get_user_model
from django.db import IntegrityError, transaction

from .exceptions import IdentityConflictError, InvalidClaimsError, UserNotFoundError

logger = logging.getLogger(__name__)

User = get_user_model()


@transaction.atomic
def sync_user_from_claims(*, subject: str, email: str, display_name: str = '') -> User:
    """
    Create or update the local user for a provider identity.

    Args:
        subject: Provider subject claim, used as the user's primary key
        email: Email claim
        display_name: Optional name claim; an empty value keeps the stored name

    Returns:
        The provisioned User

    Raises:
        InvalidClaimsError: If subject or email is missing
        IdentityConflictError: If the email already belongs to another subject
    """
    if not subject or not email:
        raise InvalidClaimsError("Token must carry both 'sub' and 'email' claims")

    email = User.objects.normalize_email(email)

    user = (
        User.objects
        .select_for_update()
        .filter(id=subject)
        .first()
    )

    try:
        if user is None:
            with transaction.atomic():
                user = User.objects.create_user(
                    id=subject,
                    email=email,
                    display_name=display_name,
                )
            logger.info("Provisioned user %s on first authentication", subject)
            return user

        changed = []
        if user.email != email:
            user.email = email
            changed.append('email')
        if display_name and user.display_name != display_name:
            user.display_name = display_name
            changed.append('display_name')

        if changed:
            with transaction.atomic():
                user.save(update_fields=changed + ['updated_at'])
    except IntegrityError:
        raise IdentityConflictError(f"Email {email} is already linked to another account")

    return user


def get_user_by_id(*, user_id: str) -> User:
    """
    Fetch a user by primary key.

    Raises:
        UserNotFoundError: If the user doesn't exist
    """
    try:
        return User.objects.get(id=user_id)
    except User.DoesNotExist:
        raise UserNotFoundError(f"User with ID {user_id} not found")


@transaction.atomic
def update_profile(*, user_id: str, display_name: str) -> User:
    """Update the user's display name."""
    try:
        user = (
            User.objects
            .select_for_update()
            .get(id=user_id)
        )
    except User.DoesNotExist:
        raise UserNotFoundError(f"User with ID {user_id} not found")

    user.display_name = display_name
    user.save(update_fields=['display_name', 'updated_at'])
    return user
