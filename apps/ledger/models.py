# ==========================================
# apps/ledger/models.py
# ==========================================

from django.db import models
import uuid


class WorkoutStatus(models.TextChoices):
    WORKED = 'worked', 'Worked out'
    MISSED = 'missed', 'Missed'


class Workout(models.Model):
    """A user's outcome for one calendar day. Shared by all of the user's pairs."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey('accounts.User', on_delete=models.CASCADE, related_name='workouts')
    date = models.DateField()
    status = models.CharField(max_length=10, choices=WorkoutStatus.choices)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'workouts'
        constraints = [
            models.UniqueConstraint(fields=['user', 'date'], name='unique_workout_per_day'),
        ]
        indexes = [
            models.Index(fields=['user', 'status', 'date'], name='workouts_user_status_idx'),
        ]
        ordering = ['date']

    def __str__(self):
        return f"{self.user_id} {self.date}: {self.status}"


class Settlement(models.Model):
    """
    Weekly payout of a pair's pot to the buddy who met the quota.

    At most one settlement exists per (pair, week_start); the constraint is
    what makes settlement exactly-once under concurrent evaluation.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    pair = models.ForeignKey('buddies.Pair', on_delete=models.CASCADE, related_name='settlements')
    week_start = models.DateField(help_text='Monday of the settled week')
    winner = models.ForeignKey('accounts.User', on_delete=models.CASCADE, related_name='settlements_won')
    loser = models.ForeignKey('accounts.User', on_delete=models.CASCADE, related_name='settlements_lost')
    amount = models.IntegerField(help_text='Pot balance at the moment of settlement')
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'settlements'
        constraints = [
            models.UniqueConstraint(fields=['pair', 'week_start'], name='unique_settlement_per_pair_week'),
        ]
        ordering = ['-week_start']

    def __str__(self):
        return f"{self.pair_id} week of {self.week_start}: {self.amount} to {self.winner_id}"
