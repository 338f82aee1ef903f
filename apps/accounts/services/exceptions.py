"""Domain-specific exceptions for accounts services."""


class AccountsServiceError(Exception):
    """Base exception for accounts services."""
    pass


class UserNotFoundError(AccountsServiceError):
    """Raised when user does not exist."""
    pass


class IdentityConflictError(AccountsServiceError):
    """Raised when a provider identity claims an email owned by another user."""
    pass


class InvalidClaimsError(AccountsServiceError):
    """Raised when token claims lack the fields needed to provision a user."""
    pass
