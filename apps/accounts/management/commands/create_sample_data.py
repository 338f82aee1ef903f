"""
Management command to create sample data for trying out the API.

Usage:
    python manage.py create_sample_data
    python manage.py create_sample_data --clear --weeks 6

This creates:
- 4 users (admin, alice, bob, charlie)
- 2 pairs (alice & bob, alice & charlie)
- 1 pending invitation from bob to dana@example.com
- Workouts for the past weeks, recorded through the ledger so pots add up
- Settlements for the completed weeks
"""

from django.core.management.base import BaseCommand
from django.db import transaction
from datetime import timedelta
import random

from apps.accounts.models import User
from apps.buddies.models import Pair, Invitation
from apps.buddies.services import create_pair, create_invitation
from apps.ledger import weeks
from apps.ledger.models import Workout, WorkoutStatus, Settlement
from apps.ledger.services import record_workout, evaluate_weeks


# Chance of working out on any given day
WORKOUT_RATES = {
    'alice': 0.8,
    'bob': 0.5,
    'charlie': 0.65,
}


class Command(BaseCommand):
    help = 'Create sample data for testing the API'

    def add_arguments(self, parser):
        parser.add_argument(
            '--clear',
            action='store_true',
            help='Clear existing data before creating new sample data',
        )
        parser.add_argument(
            '--weeks',
            type=int,
            default=4,
            help='Number of past weeks of workouts to generate',
        )
        parser.add_argument(
            '--seed',
            type=int,
            default=42,
            help='Random seed for the generated workouts',
        )

    @transaction.atomic
    def handle(self, *args, **options):
        if options['clear']:
            self.stdout.write('Clearing existing data...')
            self.clear_data()

        self.stdout.write('Creating sample data...')

        users = self.create_users()
        pairs = self.create_pairs(users)
        self.create_invitations(users)

        rng = random.Random(options['seed'])
        workout_count = self.create_workouts(users, options['weeks'], rng)

        settlements = []
        for user in users.values():
            settlements.extend(evaluate_weeks(user=user, week_count=options['weeks']))

        self.stdout.write(self.style.SUCCESS('Sample data created successfully!'))
        self.stdout.write('')
        self.stdout.write(f'  {len(pairs)} pairs, {workout_count} workouts, {len(settlements)} settlements')
        for pair in Pair.objects.filter(id__in=[p.id for p in pairs]).select_related('user_a', 'user_b'):
            self.stdout.write(
                f'  {pair.user_a.get_display_name()} & {pair.user_b.get_display_name()}: pot {pair.pot_balance}'
            )
        self.stdout.write('')
        self.stdout.write('Admin account:')
        self.stdout.write('  admin@example.com / admin123 (superuser)')

    def clear_data(self):
        """Clear all data from the database."""
        Settlement.objects.all().delete()
        Workout.objects.all().delete()
        Invitation.objects.all().delete()
        Pair.objects.all().delete()
        User.objects.filter(email__endswith='@example.com').delete()

    def create_users(self):
        """Create sample users."""
        self.stdout.write('  Creating users...')

        if not User.objects.filter(email='admin@example.com').exists():
            User.objects.create_superuser(
                email='admin@example.com',
                password='admin123',
                display_name='Admin',
            )

        users = {}
        for name in WORKOUT_RATES:
            user, _ = User.objects.get_or_create(
                email=f'{name}@example.com',
                defaults={'display_name': name.capitalize()},
            )
            users[name] = user
        return users

    def create_pairs(self, users):
        """Pair alice with bob and with charlie."""
        self.stdout.write('  Creating pairs...')

        pairs = []
        for buddy in ('bob', 'charlie'):
            pair = Pair.objects.between(users['alice'].pk, users[buddy].pk).first()
            if pair is None:
                pair = create_pair(user=users['alice'], buddy=users[buddy])
            pairs.append(pair)

        # Backdate so the generated weeks belong to the pairs
        Pair.objects.filter(id__in=[p.id for p in pairs]).update(
            created_at=pairs[0].created_at - timedelta(weeks=52),
        )
        return pairs

    def create_invitations(self, users):
        self.stdout.write('  Creating invitations...')
        if not Invitation.objects.filter(inviter=users['bob'], invitee_email='dana@example.com').exists():
            create_invitation(inviter=users['bob'], invitee_email='dana@example.com', invitee_name='Dana')

    def create_workouts(self, users, week_count, rng):
        """Record a workout for every past day of the generated weeks."""
        self.stdout.write('  Creating workouts...')

        today = weeks.today()
        first_day = weeks.week_start_for(today) - timedelta(weeks=week_count)

        count = 0
        day = first_day
        while day < today:
            for name, user in users.items():
                worked = rng.random() < WORKOUT_RATES[name]
                record_workout(
                    user_id=user.pk,
                    date=day,
                    status=WorkoutStatus.WORKED if worked else WorkoutStatus.MISSED,
                )
                count += 1
            day += timedelta(days=1)
        return count
