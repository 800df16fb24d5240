"""
Management command to seed sample horses, recurring activities and exceptions.
Every definition goes through the serializers so the samples are valid.
"""

from datetime import timedelta

from django.core.management.base import BaseCommand, CommandError
from django.utils import timezone

from recurring_app.models import Horse, RecurringActivity
from recurring_app.serializers import RecurringActivityExceptionSerializer, RecurringActivitySerializer
from recurring_app.services.generation import local_today

STABLE_ID = 'stable-1'


class Command(BaseCommand):
    help = 'Seed sample horses, recurring activities and exceptions'

    def handle(self, *args, **options):
        if RecurringActivity.objects.exists():
            self.stdout.write(
                self.style.WARNING(
                    f'There are already {RecurringActivity.objects.count()} recurring activities. '
                    'Skipping seed to avoid duplicates. Use clear_recurring_activities first if needed.'
                )
            )
            return

        self.stdout.write('Seeding recurring activity data...')
        today = local_today(timezone.now())

        for name, group in [('Blixten', 'paddock-a'), ('Stella', 'paddock-a'), ('Max', 'paddock-b')]:
            Horse.objects.create(stable_id=STABLE_ID, horse_group_id=group, name=name)
        self.stdout.write(f'Created {Horse.objects.count()} horses')

        # 1. Daily 07:00 morning feed for all horses, rotating between three members
        morning_feed = self._create_activity({
            'stable_id': STABLE_ID,
            'stable_name': 'Sample Stable',
            'title': 'Morning feed',
            'category': 'feeding',
            'recurrence_rule': 'RRULE:FREQ=DAILY',
            'pattern_start_date': today,
            'time_of_day': '07:00',
            'duration_minutes': 45,
            'assignment_mode': 'rotation',
            'rotation_group': ['user-anna', 'user-erik', 'user-lisa'],
            'rotation_group_names': ['Anna', 'Erik', 'Lisa'],
            'applies_to_all_horses': True,
            'weight': 2,
            'is_holiday_multiplied': True,
            'generate_days_ahead': 30,
        })

        # 2. Mucking out paddock A on Monday, Wednesday and Friday
        mucking = self._create_activity({
            'stable_id': STABLE_ID,
            'title': 'Muck out paddock A',
            'category': 'mucking',
            'recurrence_rule': 'RRULE:FREQ=WEEKLY;BYDAY=MO,WE,FR',
            'pattern_start_date': today,
            'time_of_day': '09:00',
            'duration_minutes': 60,
            'assignment_mode': 'fixed',
            'assigned_to': 'user-erik',
            'assigned_to_name': 'Erik',
            'horse_group_id': 'paddock-a',
            'horse_group_name': 'Paddock A',
            'weight': 3,
        })

        # 3. Farrier every sixth week, distributed fairly later on
        self._create_activity({
            'stable_id': STABLE_ID,
            'title': 'Farrier visit',
            'category': 'health',
            'recurrence_rule': 'RRULE:FREQ=WEEKLY;INTERVAL=6',
            'pattern_start_date': today,
            'time_of_day': '13:30',
            'duration_minutes': 90,
            'assignment_mode': 'fair-distribution',
            'horse_id': str(Horse.objects.get(name='Max').pk),
            'horse_name': 'Max',
            'weight': 1,
            'generate_days_ahead': 90,
        })

        # 4. Skip the morning feed in three days
        self._create_exception({
            'recurring_activity': morning_feed.pk,
            'exception_date': today + timedelta(days=3),
            'exception_type': 'skip',
            'reason': 'Horses away at competition',
        })

        # 5. Move next week's first mucking an hour later and hand it to Lisa
        days_until_monday = (7 - today.weekday()) % 7 or 7
        self._create_exception({
            'recurring_activity': mucking.pk,
            'exception_date': today + timedelta(days=days_until_monday),
            'exception_type': 'modify',
            'modified_time': '10:00',
            'modified_assigned_to': 'user-lisa',
            'modified_assigned_to_name': 'Lisa',
            'reason': 'Erik at the vet',
        })

        self.stdout.write(
            self.style.SUCCESS(
                f'Successfully seeded {RecurringActivity.objects.count()} recurring activities. '
                'Run generate_activity_instances to materialize them.'
            )
        )

    def _create_activity(self, data):
        serializer = RecurringActivitySerializer(data=data)
        if not serializer.is_valid():
            raise CommandError(f"Invalid sample activity '{data['title']}': {serializer.errors}")
        activity = serializer.save()
        self.stdout.write(f'Created {activity.title} ({activity.recurrence_rule})')
        return activity

    def _create_exception(self, data):
        serializer = RecurringActivityExceptionSerializer(data=data)
        if not serializer.is_valid():
            raise CommandError(f'Invalid sample exception: {serializer.errors}')
        exception = serializer.save()
        self.stdout.write(f'Created {exception}')
        return exception
