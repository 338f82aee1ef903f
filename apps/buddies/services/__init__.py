"""
Buddies app services layer.

Services contain business logic and orchestrate operations across models.
All state-changing operations use transactions and rely on database
constraints for uniqueness.
"""

from .exceptions import (
    BuddiesServiceError,
    PairNotFoundError,
    NotPairMemberError,
    CannotPairWithSelfError,
    AlreadyBuddiesError,
    InvitationNotFoundError,
    NotInviteeError,
    AlreadyRespondedError,
    DuplicateInvitationError,
    InsufficientPermissionsError,
    PauseRequestNotFoundError,
    DuplicatePauseRequestError,
    InvalidPauseRequestError,
    CannotRespondToOwnRequestError,
)

from .pair_management import (
    create_pair,
    get_user_pairs,
    get_pair_for_user,
    delete_pair,
    get_user_stats,
)

from .invitation_management import (
    AddBuddyResult,
    add_buddy,
    create_invitation,
    get_pending_invitations,
    get_received_invitations,
    accept_invitation,
    decline_invitation,
    delete_invitation,
)

from .pause_management import (
    request_pause_change,
    get_received_pause_requests,
    respond_to_pause_request,
)


__all__ = [
    # Exceptions
    'BuddiesServiceError',
    'PairNotFoundError',
    'NotPairMemberError',
    'CannotPairWithSelfError',
    'AlreadyBuddiesError',
    'InvitationNotFoundError',
    'NotInviteeError',
    'AlreadyRespondedError',
    'DuplicateInvitationError',
    'InsufficientPermissionsError',
    'PauseRequestNotFoundError',
    'DuplicatePauseRequestError',
    'InvalidPauseRequestError',
    'CannotRespondToOwnRequestError',

    # Pair Management
    'create_pair',
    'get_user_pairs',
    'get_pair_for_user',
    'delete_pair',
    'get_user_stats',

    # Invitations
    'AddBuddyResult',
    'add_buddy',
    'create_invitation',
    'get_pending_invitations',
    'get_received_invitations',
    'accept_invitation',
    'decline_invitation',
    'delete_invitation',

    # Pause Requests
    'request_pause_change',
    'get_received_pause_requests',
    'respond_to_pause_request',
]
