"""
Invitation management service.

Adding a buddy by email pairs immediately when the email belongs to a user
and otherwise leaves a pending invitation the invitee can answer after
signing in. At most one pending invitation exists per (inviter, email).
"""

import logging
from dataclasses import dataclass
from typing import Optional
from uuid import UUID

from django.contrib.auth import get_user_model
from django.db import transaction, IntegrityError
from django.db.models import QuerySet
from django.utils import timezone

from apps.buddies.models import Pair, Invitation, InvitationStatus

from .exceptions import (
    CannotPairWithSelfError,
    InvitationNotFoundError,
    NotInviteeError,
    AlreadyRespondedError,
    DuplicateInvitationError,
    InsufficientPermissionsError,
)
from .pair_management import create_pair

logger = logging.getLogger(__name__)

User = get_user_model()


@dataclass
class AddBuddyResult:
    """Outcome of adding a buddy: either a pair or an invitation."""
    pair: Optional[Pair] = None
    invitation: Optional[Invitation] = None


def add_buddy(*, user: User, email: str, name: str = '') -> AddBuddyResult:
    """
    Add a buddy by email.

    Args:
        user: User adding the buddy
        email: Buddy's email
        name: Name to address the invitee by, if they have no account yet

    Returns:
        AddBuddyResult with ``pair`` set when the buddy already has an
        account, ``invitation`` set otherwise

    Raises:
        CannotPairWithSelfError: If the email is the user's own
        AlreadyBuddiesError: If already paired with that user
        DuplicateInvitationError: If a pending invitation already exists
    """
    email = User.objects.normalize_email(email.strip())
    buddy = User.objects.filter(email__iexact=email).first()

    if buddy is not None:
        return AddBuddyResult(pair=create_pair(user=user, buddy=buddy))

    invitation = create_invitation(inviter=user, invitee_email=email, invitee_name=name)
    return AddBuddyResult(invitation=invitation)


@transaction.atomic
def create_invitation(*, inviter: User, invitee_email: str, invitee_name: str = '') -> Invitation:
    """
    Record a pending invitation.

    Raises:
        CannotPairWithSelfError: If the inviter invites their own email
        DuplicateInvitationError: If a pending invitation already exists
    """
    if invitee_email.lower() == inviter.email.lower():
        raise CannotPairWithSelfError("You cannot add yourself as a buddy")

    try:
        with transaction.atomic():
            invitation = Invitation.objects.create(
                inviter=inviter,
                invitee_email=invitee_email,
                invitee_name=invitee_name or invitee_email,
                status=InvitationStatus.PENDING,
            )
    except IntegrityError:
        raise DuplicateInvitationError(f"An invitation to {invitee_email} is already pending")

    logger.info("User %s invited %s", inviter.pk, invitee_email)
    return invitation


def get_pending_invitations(*, inviter: User) -> QuerySet[Invitation]:
    """Pending invitations sent by the user."""
    return (
        Invitation.objects
        .filter(inviter=inviter, status=InvitationStatus.PENDING)
        .select_related('inviter')
    )


def get_received_invitations(*, user: User) -> QuerySet[Invitation]:
    """Pending invitations addressed to the user's email."""
    return (
        Invitation.objects
        .filter(invitee_email__iexact=user.email, status=InvitationStatus.PENDING)
        .select_related('inviter')
    )


def _get_pending_for_invitee(invitation_id: UUID, user: User) -> Invitation:
    try:
        invitation = (
            Invitation.objects
            .select_for_update()
            .select_related('inviter')
            .get(id=invitation_id)
        )
    except Invitation.DoesNotExist:
        raise InvitationNotFoundError(f"Invitation with ID {invitation_id} not found")

    if not invitation.is_addressed_to(user):
        raise NotInviteeError("This invitation was sent to someone else")

    if invitation.status != InvitationStatus.PENDING:
        raise AlreadyRespondedError(f"Invitation was already {invitation.status}")

    return invitation


@transaction.atomic
def accept_invitation(*, invitation_id: UUID, user: User) -> tuple[Invitation, Pair]:
    """
    Accept an invitation and create the pair.

    Uses row-level locking so an invitation is accepted at most once.

    Returns:
        Tuple of (updated Invitation, created Pair)

    Raises:
        InvitationNotFoundError: If invitation doesn't exist
        NotInviteeError: If the invitation is addressed to another email
        AlreadyRespondedError: If already accepted or declined
        CannotPairWithSelfError: If the user invited themselves
        AlreadyBuddiesError: If the users are already paired
    """
    invitation = _get_pending_for_invitee(invitation_id, user)

    pair = create_pair(user=invitation.inviter, buddy=user)

    invitation.status = InvitationStatus.ACCEPTED
    invitation.responded_at = timezone.now()
    invitation.save(update_fields=['status', 'responded_at'])

    return invitation, pair


@transaction.atomic
def decline_invitation(*, invitation_id: UUID, user: User) -> Invitation:
    """
    Decline an invitation.

    Raises:
        InvitationNotFoundError: If invitation doesn't exist
        NotInviteeError: If the invitation is addressed to another email
        AlreadyRespondedError: If already accepted or declined
    """
    invitation = _get_pending_for_invitee(invitation_id, user)

    invitation.status = InvitationStatus.DECLINED
    invitation.responded_at = timezone.now()
    invitation.save(update_fields=['status', 'responded_at'])

    return invitation


@transaction.atomic
def delete_invitation(*, invitation_id: UUID, user: User) -> None:
    """
    Withdraw an invitation (inviter only).

    Raises:
        InvitationNotFoundError: If invitation doesn't exist
        InsufficientPermissionsError: If the user didn't send it
    """
    try:
        invitation = Invitation.objects.select_for_update().get(id=invitation_id)
    except Invitation.DoesNotExist:
        raise InvitationNotFoundError(f"Invitation with ID {invitation_id} not found")

    if invitation.inviter_id != user.pk:
        raise InsufficientPermissionsError("Only the inviter can delete an invitation")

    invitation.delete()
