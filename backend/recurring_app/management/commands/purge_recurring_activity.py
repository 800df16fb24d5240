"""
Management command to remove a recurring activity and its pending instances.
Completed and in-progress instances are kept as history.
"""

from django.core.management.base import BaseCommand, CommandError

from recurring_app.models import RecurringActivity
from recurring_app.services.cleanup import delete_recurring_activity, purge_definition_instances


class Command(BaseCommand):
    help = 'Delete a recurring activity together with its instances that are not completed or in progress'

    def add_arguments(self, parser):
        parser.add_argument('activity_id', type=int, help='Id of the recurring activity')
        parser.add_argument(
            '--keep-definition',
            action='store_true',
            help='Only purge the instances, leave the recurring activity in place',
        )

    def handle(self, *args, **options):
        try:
            activity = RecurringActivity.objects.get(pk=options['activity_id'])
        except RecurringActivity.DoesNotExist:
            raise CommandError(f"Recurring activity {options['activity_id']} does not exist")

        if options['keep_definition']:
            result = purge_definition_instances(activity.pk)
        else:
            result = delete_recurring_activity(activity)

        self.stdout.write(
            self.style.SUCCESS(
                f"Deleted {result['deleted']} instances of '{activity.title}', "
                f"kept {result['preserved']} completed or in progress"
            )
        )
