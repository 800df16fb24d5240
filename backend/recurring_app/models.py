from django.db import models
from django.core.exceptions import ValidationError

from .services.rrule import validate_recurrence_rule


# Choices defined at module level so services and serializers can share them
CATEGORY_CHOICES = [
    ('feeding', 'Feeding'),
    ('mucking', 'Mucking'),
    ('turnout', 'Turnout'),
    ('bring-in', 'Bring in'),
    ('health', 'Health'),
    ('grooming', 'Grooming'),
    ('cleaning', 'Cleaning'),
    ('water', 'Water'),
    ('hay', 'Hay'),
    ('other', 'Other'),
]

ASSIGNMENT_FIXED = 'fixed'
ASSIGNMENT_ROTATION = 'rotation'
ASSIGNMENT_FAIR = 'fair-distribution'

ASSIGNMENT_MODE_CHOICES = [
    (ASSIGNMENT_FIXED, 'Fixed'),
    (ASSIGNMENT_ROTATION, 'Rotation'),
    (ASSIGNMENT_FAIR, 'Fair distribution'),
]

DEFINITION_STATUS_CHOICES = [
    ('active', 'Active'),
    ('paused', 'Paused'),
    ('archived', 'Archived'),
]

EXCEPTION_SKIP = 'skip'
EXCEPTION_MODIFY = 'modify'

EXCEPTION_TYPE_CHOICES = [
    (EXCEPTION_SKIP, 'Skip this occurrence'),
    (EXCEPTION_MODIFY, 'Modify this occurrence'),
]

INSTANCE_STATUS_CHOICES = [
    ('scheduled', 'Scheduled'),
    ('in_progress', 'In progress'),
    ('completed', 'Completed'),
    ('missed', 'Missed'),
    ('cancelled', 'Cancelled'),
    ('skipped', 'Skipped'),
]

# Instances in these states are history and survive definition cleanup
PRESERVED_INSTANCE_STATUSES = ['completed', 'in_progress']

HORSE_STATUS_CHOICES = [
    ('active', 'Active'),
    ('inactive', 'Inactive'),
]

SYSTEM_USER = 'system'


class Horse(models.Model):
    """
    Roster entry used to build per-instance checklists.
    Owned by the horse registry; the engine only reads it.
    """

    stable_id = models.CharField(max_length=64, db_index=True)
    horse_group_id = models.CharField(max_length=64, blank=True, db_index=True)
    name = models.CharField(max_length=255)
    status = models.CharField(max_length=20, choices=HORSE_STATUS_CHOICES, default='active')

    class Meta:
        ordering = ['name']

    def __str__(self):
        return self.name


class RecurringActivity(models.Model):
    """
    A recurring activity definition: the recurrence source of truth.
    The engine only ever writes current_rotation_index and last_generated_date.
    """

    organization_id = models.CharField(max_length=64, blank=True)
    stable_id = models.CharField(max_length=64, db_index=True)
    stable_name = models.CharField(max_length=255, blank=True)

    title = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    category = models.CharField(max_length=20, choices=CATEGORY_CHOICES, default='other')
    color = models.CharField(max_length=20, blank=True)
    icon = models.CharField(max_length=50, blank=True)

    recurrence_rule = models.CharField(
        max_length=255,
        help_text="Rule such as 'RRULE:FREQ=WEEKLY;BYDAY=MO,WE,FR'"
    )
    pattern_start_date = models.DateField(null=True, blank=True, help_text="First date the rule applies")
    pattern_end_date = models.DateField(null=True, blank=True, help_text="Last date the rule applies")
    time_of_day = models.TimeField(help_text="Local start time of each occurrence")
    duration_minutes = models.PositiveIntegerField(default=30)

    assignment_mode = models.CharField(
        max_length=20, choices=ASSIGNMENT_MODE_CHOICES, default=ASSIGNMENT_FIXED
    )
    assigned_to = models.CharField(max_length=64, blank=True)
    assigned_to_name = models.CharField(max_length=255, blank=True)
    rotation_group = models.JSONField(default=list, blank=True, help_text="Ordered list of user ids")
    rotation_group_names = models.JSONField(default=list, blank=True)
    current_rotation_index = models.PositiveIntegerField(default=0)

    horse_id = models.CharField(max_length=64, blank=True)
    horse_name = models.CharField(max_length=255, blank=True)
    applies_to_all_horses = models.BooleanField(default=False)
    horse_group_id = models.CharField(max_length=64, blank=True)
    horse_group_name = models.CharField(max_length=255, blank=True)

    weight = models.FloatField(default=1)
    is_holiday_multiplied = models.BooleanField(default=False)

    generate_days_ahead = models.PositiveIntegerField(default=60)
    status = models.CharField(max_length=20, choices=DEFINITION_STATUS_CHOICES, default='active')
    last_generated_date = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['id']
        verbose_name_plural = 'recurring activities'

    def __str__(self):
        return f"{self.title} ({self.recurrence_rule})"

    def clean(self):
        """Validate model constraints"""
        try:
            validate_recurrence_rule(self.recurrence_rule)
        except ValueError as exc:
            raise ValidationError({'recurrence_rule': str(exc)})

        if self.duration_minutes <= 0:
            raise ValidationError("Duration must be positive")

        if self.pattern_start_date and self.pattern_end_date:
            if self.pattern_end_date < self.pattern_start_date:
                raise ValidationError("Pattern end date must not be before its start date")

        if self.assignment_mode == ASSIGNMENT_ROTATION:
            if not self.rotation_group:
                raise ValidationError("Rotation assignment needs a rotation group")
            if self.current_rotation_index >= len(self.rotation_group):
                raise ValidationError("Rotation index is outside the rotation group")


class RecurringActivityException(models.Model):
    """
    Per-date override of a recurring activity: skip the occurrence or
    modify its title, time or assignee. Created by users ahead of generation.
    """

    recurring_activity = models.ForeignKey(
        RecurringActivity, on_delete=models.CASCADE, related_name='exceptions'
    )
    exception_date = models.DateField(help_text="Date of the occurrence this exception affects")
    exception_type = models.CharField(max_length=10, choices=EXCEPTION_TYPE_CHOICES)

    # Override fields (blank = keep the definition's value)
    modified_title = models.CharField(max_length=255, blank=True)
    modified_time = models.TimeField(null=True, blank=True)
    modified_assigned_to = models.CharField(max_length=64, blank=True)
    modified_assigned_to_name = models.CharField(max_length=255, blank=True)

    reason = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        unique_together = ['recurring_activity', 'exception_date']
        ordering = ['exception_date']

    def __str__(self):
        action = "Skipped" if self.exception_type == EXCEPTION_SKIP else "Modified"
        return f"{action} occurrence of '{self.recurring_activity.title}' on {self.exception_date}"

    def clean(self):
        """Validate override constraints"""
        if self.exception_type == EXCEPTION_MODIFY:
            if not (self.modified_title or self.modified_time or self.modified_assigned_to):
                raise ValidationError("A modify exception must override at least one field")


class ActivityInstance(models.Model):
    """
    One materialized occurrence of a recurring activity.
    Carries a denormalized copy of the definition as it applied on that date.
    """

    recurring_activity = models.ForeignKey(
        RecurringActivity,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='instances',
    )
    organization_id = models.CharField(max_length=64, blank=True)
    stable_id = models.CharField(max_length=64, db_index=True)
    stable_name = models.CharField(max_length=255, blank=True)

    title = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    category = models.CharField(max_length=20, choices=CATEGORY_CHOICES, default='other')
    color = models.CharField(max_length=20, blank=True)
    icon = models.CharField(max_length=50, blank=True)

    scheduled_date = models.DateField()
    scheduled_time = models.TimeField()
    scheduled_end_time = models.TimeField()
    duration_minutes = models.PositiveIntegerField()

    assigned_to = models.CharField(max_length=64, blank=True)
    assigned_to_name = models.CharField(max_length=255, blank=True)
    assigned_at = models.DateTimeField(null=True, blank=True)
    assigned_by = models.CharField(max_length=64, blank=True)
    rotation_index = models.PositiveIntegerField(
        null=True, blank=True, help_text="Rotation slot this occurrence was assigned from"
    )

    horse_id = models.CharField(max_length=64, blank=True)
    horse_name = models.CharField(max_length=255, blank=True)
    applies_to_all_horses = models.BooleanField(default=False)
    horse_group_id = models.CharField(max_length=64, blank=True)
    horse_group_name = models.CharField(max_length=255, blank=True)

    checklist = models.JSONField(default=list, blank=True)
    progress = models.JSONField(default=dict, blank=True)
    status = models.CharField(max_length=20, choices=INSTANCE_STATUS_CHOICES, default='scheduled')

    is_exception = models.BooleanField(default=False)
    exception_note = models.TextField(blank=True)

    weight = models.FloatField(default=1)
    is_holiday_shift = models.BooleanField(default=False)

    created_by = models.CharField(max_length=64, default=SYSTEM_USER)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['scheduled_date', 'scheduled_time']
        constraints = [
            models.UniqueConstraint(
                fields=['recurring_activity', 'scheduled_date'],
                name='unique_instance_per_activity_date',
            ),
        ]

    def __str__(self):
        return f"{self.title} on {self.scheduled_date} ({self.status})"


class GenerationLease(models.Model):
    """
    Time-boxed lock held by one generation run at a time.
    A lease past its expiry can be taken over by any owner.
    """

    name = models.CharField(max_length=100, unique=True)
    owner = models.CharField(max_length=64)
    acquired_at = models.DateTimeField()
    expires_at = models.DateTimeField()

    def __str__(self):
        return f"{self.name} held by {self.owner} until {self.expires_at}"
