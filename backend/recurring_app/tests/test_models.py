"""
Test cases for recurring activity models.
"""

from datetime import date, time

from django.core.exceptions import ValidationError
from django.db import IntegrityError, transaction
from django.test import TestCase

from recurring_app.models import ActivityInstance, RecurringActivity, RecurringActivityException


class RecurringActivityModelTest(TestCase):
    """Test RecurringActivity model validation and behavior"""

    def build(self, **kwargs):
        data = {
            'stable_id': 's1',
            'title': 'Evening hay',
            'recurrence_rule': 'RRULE:FREQ=DAILY',
            'time_of_day': time(18, 0),
            'duration_minutes': 20,
        }
        data.update(kwargs)
        return RecurringActivity(**data)

    def test_create_valid_activity(self):
        """Test creating a valid recurring activity with defaults"""
        activity = self.build()
        activity.full_clean()
        activity.save()

        self.assertEqual(activity.assignment_mode, 'fixed')
        self.assertEqual(activity.status, 'active')
        self.assertEqual(activity.current_rotation_index, 0)
        self.assertEqual(activity.generate_days_ahead, 60)
        self.assertEqual(activity.rotation_group, [])
        self.assertIsNone(activity.last_generated_date)

    def test_rule_validation(self):
        """Test that an invalid rule is rejected on the rule field"""
        activity = self.build(recurrence_rule='FREQ=FORTNIGHTLY')
        with self.assertRaises(ValidationError) as ctx:
            activity.clean()
        self.assertIn('recurrence_rule', ctx.exception.message_dict)

    def test_duration_validation(self):
        """Test that duration must be positive"""
        activity = self.build(duration_minutes=0)
        with self.assertRaises(ValidationError):
            activity.clean()

    def test_pattern_dates_validation(self):
        activity = self.build(pattern_start_date=date(2025, 2, 1), pattern_end_date=date(2025, 1, 1))
        with self.assertRaises(ValidationError):
            activity.clean()

    def test_rotation_validation(self):
        """Test that rotation needs a group and an index inside it"""
        activity = self.build(assignment_mode='rotation')
        with self.assertRaises(ValidationError):
            activity.clean()

        activity.rotation_group = ['u1', 'u2']
        activity.clean()  # Should not raise

        activity.current_rotation_index = 2
        with self.assertRaises(ValidationError):
            activity.clean()

    def test_string_representation(self):
        self.assertEqual(str(self.build()), 'Evening hay (RRULE:FREQ=DAILY)')


class RecurringActivityExceptionModelTest(TestCase):
    """Test RecurringActivityException model validation and behavior"""

    def setUp(self):
        self.activity = RecurringActivity.objects.create(
            stable_id='s1', title='Turnout', recurrence_rule='FREQ=DAILY', time_of_day=time(8, 0)
        )

    def test_modify_needs_override(self):
        """Test that a modify exception must change something"""
        exception = RecurringActivityException(
            recurring_activity=self.activity, exception_date=date(2025, 1, 22), exception_type='modify'
        )
        with self.assertRaises(ValidationError):
            exception.clean()

        exception.modified_title = 'Short turnout'
        exception.clean()  # Should not raise

    def test_unique_exception_per_date(self):
        """Test that only one exception can exist per activity and date"""
        RecurringActivityException.objects.create(
            recurring_activity=self.activity, exception_date=date(2025, 1, 22), exception_type='skip'
        )
        with self.assertRaises(IntegrityError):
            with transaction.atomic():
                RecurringActivityException.objects.create(
                    recurring_activity=self.activity, exception_date=date(2025, 1, 22), exception_type='skip'
                )

    def test_string_representation(self):
        exception = RecurringActivityException(
            recurring_activity=self.activity, exception_date=date(2025, 1, 22), exception_type='skip'
        )
        self.assertEqual(str(exception), "Skipped occurrence of 'Turnout' on 2025-01-22")


class ActivityInstanceModelTest(TestCase):
    """Test ActivityInstance constraints"""

    def setUp(self):
        self.activity = RecurringActivity.objects.create(
            stable_id='s1', title='Turnout', recurrence_rule='FREQ=DAILY', time_of_day=time(8, 0)
        )

    def create_instance(self, activity):
        return ActivityInstance.objects.create(
            recurring_activity=activity,
            stable_id='s1',
            title='Turnout',
            scheduled_date=date(2025, 1, 22),
            scheduled_time=time(8, 0),
            scheduled_end_time=time(8, 30),
            duration_minutes=30,
        )

    def test_one_instance_per_activity_and_date(self):
        """Test that a duplicate (activity, date) instance is rejected"""
        self.create_instance(self.activity)
        with self.assertRaises(IntegrityError):
            with transaction.atomic():
                self.create_instance(self.activity)

    def test_bulk_create_ignores_duplicates(self):
        """Test that concurrent writers of the same date do not duplicate it"""
        self.create_instance(self.activity)
        duplicate = ActivityInstance(
            recurring_activity=self.activity,
            stable_id='s1',
            title='Turnout',
            scheduled_date=date(2025, 1, 22),
            scheduled_time=time(8, 0),
            scheduled_end_time=time(8, 30),
            duration_minutes=30,
        )
        ActivityInstance.objects.bulk_create([duplicate], ignore_conflicts=True)
        self.assertEqual(ActivityInstance.objects.count(), 1)

    def test_instance_outlives_activity(self):
        """Test that deleting the activity keeps its instances"""
        instance = self.create_instance(self.activity)
        self.activity.delete()
        instance.refresh_from_db()
        self.assertIsNone(instance.recurring_activity)
        self.assertEqual(instance.status, 'scheduled')
