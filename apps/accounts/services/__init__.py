"""Services for accounts business logic."""

from .exceptions import (
    AccountsServiceError,
    UserNotFoundError,
    IdentityConflictError,
    InvalidClaimsError,
)
from .user_provisioning import sync_user_from_claims, get_user_by_id, update_profile

__all__ = [
    # Exceptions
    'AccountsServiceError',
    'UserNotFoundError',
    'IdentityConflictError',
    'InvalidClaimsError',
    # Services
    'sync_user_from_claims',
    'get_user_by_id',
    'update_profile',
]
