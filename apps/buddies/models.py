# ==========================================
# apps/buddies/models.py
# ==========================================

from django.db import models
from django.db.models import F, Q
from django.utils import timezone
import uuid


class PairQuerySet(models.QuerySet):

    def for_user(self, user_id):
        """Pairs in which the user is either buddy."""
        return self.filter(Q(user_a_id=user_id) | Q(user_b_id=user_id))

    def between(self, user_id, other_user_id):
        first, second = Pair.canonical_order(user_id, other_user_id)
        return self.filter(user_a_id=first, user_b_id=second)


class Pair(models.Model):
    """
    Buddy relationship between two users sharing a penalty pot.

    Users are stored in canonical order (``user_a_id < user_b_id``) so the
    unique constraint on the two columns covers the unordered pair.
    ``pot_balance`` is a cache of a quantity derivable from workout and
    settlement history and is only ever changed through atomic updates.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user_a = models.ForeignKey('accounts.User', on_delete=models.CASCADE, related_name='pairs_as_a')
    user_b = models.ForeignKey('accounts.User', on_delete=models.CASCADE, related_name='pairs_as_b')
    pot_balance = models.IntegerField(default=0)
    is_paused = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = PairQuerySet.as_manager()

    class Meta:
        db_table = 'pairs'
        constraints = [
            models.UniqueConstraint(fields=['user_a', 'user_b'], name='unique_pair_users'),
            models.CheckConstraint(condition=~Q(user_a=F('user_b')), name='pair_users_distinct'),
        ]
        indexes = [
            models.Index(fields=['user_a'], name='pairs_user_a_idx'),
            models.Index(fields=['user_b'], name='pairs_user_b_idx'),
        ]
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.user_a_id} & {self.user_b_id} ({self.pot_balance})"

    @staticmethod
    def canonical_order(user_id, other_user_id):
        """Return the two ids ordered the way they are stored."""
        if str(user_id) <= str(other_user_id):
            return user_id, other_user_id
        return other_user_id, user_id

    def save(self, *args, **kwargs):
        if self._state.adding:
            first, second = self.canonical_order(self.user_a_id, self.user_b_id)
            if first != self.user_a_id:
                self.user_a_id, self.user_b_id = self.user_b_id, self.user_a_id
        super().save(*args, **kwargs)

    @property
    def user_ids(self):
        return [self.user_a_id, self.user_b_id]

    def has_member(self, user):
        return user.pk in self.user_ids

    def get_buddy_id(self, user):
        return self.user_b_id if self.user_a_id == user.pk else self.user_a_id

    def get_buddy(self, user):
        return self.user_b if self.user_a_id == user.pk else self.user_a

    def paused_periods(self):
        """
        Local (start, end) dates of every accepted pause, oldest first.

        ``end`` is the day settlement resumed, or None while still paused.
        """
        periods = []
        paused_from = None
        accepted = (
            self.pause_requests
            .filter(status=PauseRequestStatus.ACCEPTED, responded_at__isnull=False)
            .order_by('responded_at')
        )
        for pause_request in accepted:
            day = timezone.localdate(pause_request.responded_at)
            if pause_request.action == PauseAction.PAUSE and paused_from is None:
                paused_from = day
            elif pause_request.action == PauseAction.RESUME and paused_from is not None:
                periods.append((paused_from, day))
                paused_from = None
        if paused_from is not None:
            periods.append((paused_from, None))
        return periods

    def was_paused_during(self, start, end):
        """True if settlement was paused on any day from start to end inclusive."""
        for paused_from, resumed_on in self.paused_periods():
            if paused_from <= end and (resumed_on is None or resumed_on > start):
                return True
        return False


class InvitationStatus(models.TextChoices):
    PENDING = 'pending', 'Pending'
    ACCEPTED = 'accepted', 'Accepted'
    DECLINED = 'declined', 'Declined'


class Invitation(models.Model):
    """Request to become buddies, addressed to an email."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    inviter = models.ForeignKey('accounts.User', on_delete=models.CASCADE, related_name='sent_invitations')
    invitee_email = models.EmailField(max_length=255)
    invitee_name = models.CharField(max_length=100, blank=True)
    status = models.CharField(max_length=20, choices=InvitationStatus.choices, default=InvitationStatus.PENDING)
    created_at = models.DateTimeField(auto_now_add=True)
    responded_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = 'buddy_invitations'
        constraints = [
            models.UniqueConstraint(
                fields=['inviter', 'invitee_email'],
                condition=Q(status='pending'),
                name='unique_pending_invitation',
            ),
        ]
        indexes = [
            models.Index(fields=['invitee_email', 'status'], name='invitations_email_idx'),
            models.Index(fields=['inviter', 'status'], name='invitations_inviter_idx'),
        ]
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.inviter_id} -> {self.invitee_email} ({self.status})"

    def is_addressed_to(self, user):
        return self.invitee_email.lower() == user.email.lower()


class PauseAction(models.TextChoices):
    PAUSE = 'pause', 'Pause'
    RESUME = 'resume', 'Resume'


class PauseRequestStatus(models.TextChoices):
    PENDING = 'pending', 'Pending'
    ACCEPTED = 'accepted', 'Accepted'
    DENIED = 'denied', 'Denied'


class PauseRequest(models.Model):
    """
    Request to pause or resume weekly settlement for a pair.

    Takes effect only once the other buddy accepts it. Accepted requests,
    ordered by ``responded_at``, are the pair's pause history.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    pair = models.ForeignKey(Pair, on_delete=models.CASCADE, related_name='pause_requests')
    requested_by = models.ForeignKey('accounts.User', on_delete=models.CASCADE, related_name='pause_requests')
    action = models.CharField(max_length=10, choices=PauseAction.choices)
    status = models.CharField(max_length=20, choices=PauseRequestStatus.choices, default=PauseRequestStatus.PENDING)
    created_at = models.DateTimeField(auto_now_add=True)
    responded_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = 'pause_requests'
        constraints = [
            models.UniqueConstraint(
                fields=['pair'],
                condition=Q(status='pending'),
                name='unique_pending_pause_request',
            ),
        ]
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.action} {self.pair_id} ({self.status})"
