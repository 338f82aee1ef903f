"""
Management command to rebuild pot balances from workout history.

Usage:
    python manage.py recalculate_pots
    python manage.py recalculate_pots --pair <pair_id> --dry-run
"""

from django.core.management.base import BaseCommand, CommandError

from apps.buddies.models import Pair
from apps.ledger.services import recalculate_pot, PairNotFoundError


class Command(BaseCommand):
    help = 'Recalculate pot balances from workouts and settlements'

    def add_arguments(self, parser):
        parser.add_argument(
            '--pair',
            dest='pair_id',
            default=None,
            help='Only recalculate this pair',
        )
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Show the recalculated balances without saving them',
        )

    def handle(self, *args, **options):
        dry_run = options['dry_run']

        if options['pair_id']:
            pair_ids = [options['pair_id']]
        else:
            pair_ids = list(Pair.objects.order_by('created_at').values_list('id', flat=True))

        if not pair_ids:
            self.stdout.write(self.style.SUCCESS('No pairs to recalculate.'))
            return

        changed = 0
        for pair_id in pair_ids:
            try:
                result = recalculate_pot(pair_id=pair_id, dry_run=dry_run)
            except PairNotFoundError as e:
                raise CommandError(str(e))

            if result.changed:
                changed += 1
                self.stdout.write(
                    f'  - Pair {pair_id}: {result.previous_balance} -> {result.balance} '
                    f'({result.missed_count} missed since {result.reference_date})'
                )

        if dry_run:
            self.stdout.write(
                self.style.WARNING(f'\n--dry-run mode: {changed} of {len(pair_ids)} pot(s) would change.')
            )
            return

        self.stdout.write(
            self.style.SUCCESS(f'\nRecalculated {len(pair_ids)} pot(s), {changed} changed.')
        )
