"""
Pair management service.

Handles buddy pair creation, lookup and removal. Uniqueness of a pair is
enforced by the database constraint on the canonically ordered user ids.
"""

import logging
from uuid import UUID

from django.contrib.auth import get_user_model
from django.db import transaction, IntegrityError
from django.db.models import QuerySet, Sum

from apps.buddies.models import Pair

from .exceptions import (
    PairNotFoundError,
    NotPairMemberError,
    CannotPairWithSelfError,
    AlreadyBuddiesError,
)

logger = logging.getLogger(__name__)

User = get_user_model()


@transaction.atomic
def create_pair(*, user: User, buddy: User) -> Pair:
    """
    Create a buddy pair between two users.

    Args:
        user: One of the buddies
        buddy: The other buddy

    Returns:
        Created Pair instance with a zero pot

    Raises:
        CannotPairWithSelfError: If both users are the same
        AlreadyBuddiesError: If the pair already exists in either order
    """
    if user.pk == buddy.pk:
        raise CannotPairWithSelfError("You cannot add yourself as a buddy")

    try:
        with transaction.atomic():
            pair = Pair.objects.create(user_a=user, user_b=buddy)
    except IntegrityError:
        # Database constraint caught duplicate pair
        raise AlreadyBuddiesError(f"You are already buddies with {buddy.get_display_name()}")

    logger.info("Created pair %s between %s and %s", pair.id, pair.user_a_id, pair.user_b_id)
    return pair


def get_user_pairs(*, user: User) -> QuerySet[Pair]:
    """Get all pairs the user belongs to, with both users loaded."""
    return (
        Pair.objects
        .for_user(user.pk)
        .select_related('user_a', 'user_b')
        .order_by('created_at')
    )


def get_pair_for_user(*, pair_id: UUID, user: User) -> Pair:
    """
    Get a pair the user belongs to.

    Raises:
        PairNotFoundError: If pair doesn't exist
        NotPairMemberError: If the user is not one of the buddies
    """
    try:
        pair = Pair.objects.select_related('user_a', 'user_b').get(id=pair_id)
    except Pair.DoesNotExist:
        raise PairNotFoundError(f"Pair with ID {pair_id} not found")

    if not pair.has_member(user):
        raise NotPairMemberError("You are not part of this pair")

    return pair


@transaction.atomic
def delete_pair(*, pair_id: UUID, user: User) -> None:
    """
    Remove a buddy pair.

    Workouts belong to users and are kept. Settlements of the pair go with it.

    Raises:
        PairNotFoundError: If pair doesn't exist
        NotPairMemberError: If the user is not one of the buddies
    """
    try:
        pair = (
            Pair.objects
            .select_for_update()
            .get(id=pair_id)
        )
    except Pair.DoesNotExist:
        raise PairNotFoundError(f"Pair with ID {pair_id} not found")

    if not pair.has_member(user):
        raise NotPairMemberError("You are not part of this pair")

    logger.info("Deleting pair %s (pot %s) at request of %s", pair.id, pair.pot_balance, user.pk)
    pair.delete()


def get_user_stats(*, user: User) -> dict:
    """
    Summarize the user's buddies.

    Returns:
        dict with ``buddy_count`` and ``total_pots`` (sum of pot balances)
    """
    pairs = Pair.objects.for_user(user.pk)
    totals = pairs.aggregate(total=Sum('pot_balance'))
    return {
        'buddy_count': pairs.count(),
        'total_pots': totals['total'] or 0,
    }
