"""
Management command to settle completed weeks for every pair.

Meant for a periodic runner (cron, scheduled job). Running it next to the
in-app evaluation is safe: each pair-week is settled at most once.

Usage:
    python manage.py evaluate_weeks
    python manage.py evaluate_weeks --weeks 8 --dry-run
"""

from django.core.management.base import BaseCommand, CommandError

from apps.ledger.services import evaluate_all_pairs


class Command(BaseCommand):
    help = 'Settle the pots of all pairs for recently completed weeks'

    def add_arguments(self, parser):
        parser.add_argument(
            '--weeks',
            type=int,
            default=None,
            help='Number of completed weeks to inspect (defaults to BUDDY_POT_EVALUATION_WEEKS)',
        )
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Show which weeks would be settled without making changes',
        )

    def handle(self, *args, **options):
        dry_run = options['dry_run']
        week_count = options['weeks']

        if week_count is not None and week_count < 1:
            raise CommandError('--weeks must be at least 1')

        evaluations = evaluate_all_pairs(week_count=week_count, dry_run=dry_run)

        if not evaluations:
            self.stdout.write(self.style.SUCCESS('No weeks to settle. All good!'))
            return

        settled = 0
        for evaluation in evaluations:
            line = (
                f'  - Pair {evaluation.pair.id} | week of {evaluation.week_start} | '
                f'worked {evaluation.user_a_worked}/{evaluation.user_b_worked} | '
                f'winner: {evaluation.winner_id}'
            )
            if evaluation.settlement is not None:
                settled += 1
                line += f' | settled {evaluation.settlement.amount}'
            self.stdout.write(line)

        if dry_run:
            self.stdout.write(
                self.style.WARNING(f'\n--dry-run mode: {len(evaluations)} week(s) would be settled.')
            )
            return

        self.stdout.write(self.style.SUCCESS(f'\nSettled {settled} pair-week(s).'))
