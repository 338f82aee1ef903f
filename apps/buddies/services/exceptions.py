"""
Domain-specific exceptions for buddies app.

These exceptions represent business rule violations and should be
caught in views and converted to appropriate HTTP responses.
"""


class BuddiesServiceError(Exception):
    """Base exception for all buddies service errors."""
    pass


class PairNotFoundError(BuddiesServiceError):
    """Raised when a pair does not exist or is inaccessible."""
    pass


class NotPairMemberError(BuddiesServiceError):
    """Raised when a user acts on a pair they don't belong to."""
    pass


class CannotPairWithSelfError(BuddiesServiceError):
    """Raised when a user tries to become their own buddy."""
    pass


class AlreadyBuddiesError(BuddiesServiceError):
    """Raised when a pair between the two users already exists."""
    pass


class InvitationNotFoundError(BuddiesServiceError):
    """Raised when an invitation does not exist."""
    pass


class NotInviteeError(BuddiesServiceError):
    """Raised when a user responds to an invitation sent to someone else."""
    pass


class AlreadyRespondedError(BuddiesServiceError):
    """Raised when answering an invitation or request that was already answered."""
    pass


class DuplicateInvitationError(BuddiesServiceError):
    """Raised when a pending invitation to the same email already exists."""
    pass


class InsufficientPermissionsError(BuddiesServiceError):
    """Raised when a user lacks required permissions for an action."""
    pass


class PauseRequestNotFoundError(BuddiesServiceError):
    """Raised when a pause request does not exist."""
    pass


class DuplicatePauseRequestError(BuddiesServiceError):
    """Raised when the pair already has a pending pause request."""
    pass


class InvalidPauseRequestError(BuddiesServiceError):
    """Raised when the requested action doesn't change the pair's state."""
    pass


class CannotRespondToOwnRequestError(BuddiesServiceError):
    """Raised when the requester tries to accept their own request."""
    pass
