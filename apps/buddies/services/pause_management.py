"""
Pause request service.

Pausing or resuming weekly settlement needs both buddies: one asks, the
other accepts. A paused pair keeps accruing penalties but is skipped by the
weekly evaluation. Accepted requests also serve as the pause history, so
weeks that fell inside a pause stay unsettled after the pair resumes.
"""

from uuid import UUID

from django.contrib.auth import get_user_model
from django.db import transaction, IntegrityError
from django.db.models import QuerySet
from django.utils import timezone

from apps.buddies.models import Pair, PauseRequest, PauseAction, PauseRequestStatus

from .exceptions import (
    PairNotFoundError,
    NotPairMemberError,
    PauseRequestNotFoundError,
    DuplicatePauseRequestError,
    InvalidPauseRequestError,
    CannotRespondToOwnRequestError,
    AlreadyRespondedError,
)

User = get_user_model()


@transaction.atomic
def request_pause_change(*, pair_id: UUID, user: User, action: str) -> PauseRequest:
    """
    Ask the buddy to pause or resume settlement for the pair.

    Raises:
        PairNotFoundError: If pair doesn't exist
        NotPairMemberError: If the user is not one of the buddies
        InvalidPauseRequestError: If the pair is already in the requested state
        DuplicatePauseRequestError: If a request is already pending
    """
    if action not in PauseAction.values:
        raise InvalidPauseRequestError(f"Unknown action '{action}'")

    try:
        pair = Pair.objects.get(id=pair_id)
    except Pair.DoesNotExist:
        raise PairNotFoundError(f"Pair with ID {pair_id} not found")

    if not pair.has_member(user):
        raise NotPairMemberError("You are not part of this pair")

    wants_paused = action == PauseAction.PAUSE
    if pair.is_paused == wants_paused:
        state = 'paused' if pair.is_paused else 'active'
        raise InvalidPauseRequestError(f"Pair is already {state}")

    try:
        with transaction.atomic():
            return PauseRequest.objects.create(
                pair=pair,
                requested_by=user,
                action=action,
            )
    except IntegrityError:
        raise DuplicatePauseRequestError("A pause request for this pair is already pending")


def get_received_pause_requests(*, user: User) -> QuerySet[PauseRequest]:
    """Pending requests the user's buddies are waiting on them to answer."""
    return (
        PauseRequest.objects
        .filter(pair__in=Pair.objects.for_user(user.pk), status=PauseRequestStatus.PENDING)
        .exclude(requested_by=user)
        .select_related('pair', 'requested_by')
    )


@transaction.atomic
def respond_to_pause_request(*, request_id: UUID, user: User, accept: bool) -> PauseRequest:
    """
    Accept or deny a buddy's pause request.

    Raises:
        PauseRequestNotFoundError: If request doesn't exist
        NotPairMemberError: If the user is not one of the buddies
        CannotRespondToOwnRequestError: If the user made the request
        AlreadyRespondedError: If the request was already answered
    """
    try:
        pause_request = (
            PauseRequest.objects
            .select_for_update()
            .select_related('pair')
            .get(id=request_id)
        )
    except PauseRequest.DoesNotExist:
        raise PauseRequestNotFoundError(f"Pause request with ID {request_id} not found")

    pair = pause_request.pair
    if not pair.has_member(user):
        raise NotPairMemberError("You are not part of this pair")

    if pause_request.requested_by_id == user.pk:
        raise CannotRespondToOwnRequestError("Your buddy has to answer this request")

    if pause_request.status != PauseRequestStatus.PENDING:
        raise AlreadyRespondedError(f"Request was already {pause_request.status}")

    if accept:
        pause_request.status = PauseRequestStatus.ACCEPTED
        Pair.objects.filter(id=pair.id).update(
            is_paused=pause_request.action == PauseAction.PAUSE,
            updated_at=timezone.now(),
        )
    else:
        pause_request.status = PauseRequestStatus.DENIED

    pause_request.responded_at = timezone.now()
    pause_request.save(update_fields=['status', 'responded_at'])
    return pause_request
