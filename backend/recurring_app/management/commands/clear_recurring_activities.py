"""
Management command to wipe the engine's data on a development database.

Instances go first: they only hold a nullable reference to their activity,
so deleting activities first would leave them behind as orphans.
Exceptions go with their activity.
"""

from django.core.management.base import BaseCommand
from django.db import transaction

from recurring_app.models import ActivityInstance, GenerationLease, Horse, RecurringActivity


class Command(BaseCommand):
    help = 'Delete all activity instances, recurring activities, exceptions, horses and generation leases'

    def add_arguments(self, parser):
        parser.add_argument(
            '--confirm',
            action='store_true',
            help='Required, since nothing deleted here can be regenerated from history',
        )

    def handle(self, *args, **options):
        if not options['confirm']:
            self.stdout.write(
                self.style.WARNING('Refusing to wipe recurring activity data without --confirm.')
            )
            return

        with transaction.atomic():
            _, instances = ActivityInstance.objects.all().delete()
            _, activities = RecurringActivity.objects.all().delete()
            _, horses = Horse.objects.all().delete()
            GenerationLease.objects.all().delete()

        self.stdout.write(
            self.style.SUCCESS(
                f"Wiped {activities.get('recurring_app.RecurringActivity', 0)} recurring activities "
                f"({activities.get('recurring_app.RecurringActivityException', 0)} exceptions), "
                f"{instances.get('recurring_app.ActivityInstance', 0)} instances "
                f"and {horses.get('recurring_app.Horse', 0)} horses"
            )
        )
