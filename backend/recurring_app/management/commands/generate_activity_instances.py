"""
Management command run by the daily scheduler to materialize recurring activities.

Crontab entry (server clock in Europe/Stockholm):
    0 2 * * * python manage.py generate_activity_instances
"""

from django.core.management.base import BaseCommand, CommandError

from recurring_app.conf import get_setting
from recurring_app.services.generation import generate_activity_instances


class Command(BaseCommand):
    help = 'Generate activity instances for all active recurring activities'

    def add_arguments(self, parser):
        parser.add_argument(
            '--retries',
            type=int,
            default=None,
            help='Times to retry the whole run after an unhandled failure (default: RETRY_COUNT setting)',
        )

    def handle(self, *args, **options):
        retries = options['retries']
        if retries is None:
            retries = get_setting('RETRY_COUNT')

        attempt = 0
        while True:
            attempt += 1
            try:
                stats = generate_activity_instances()
                break
            except Exception as exc:
                if attempt > retries:
                    raise CommandError(f'Activity instance generation failed after {attempt} attempts: {exc}') from exc
                self.stdout.write(
                    self.style.WARNING(f'Generation attempt {attempt} failed ({exc}), retrying')
                )

        if not stats['lease_acquired']:
            self.stdout.write(
                self.style.WARNING('Another generation run holds the lease. Nothing was generated.')
            )
            return

        message = (
            f"Run {stats['execution_id']}: generated {stats['total_generated']}, "
            f"skipped {stats['total_skipped']}, errors {stats['total_errors']} "
            f"across {stats['definitions']} recurring activities"
        )
        if stats['total_errors']:
            self.stdout.write(self.style.WARNING(message))
        else:
            self.stdout.write(self.style.SUCCESS(message))
