from rest_framework import serializers

from .models import (
    ASSIGNMENT_FIXED,
    ASSIGNMENT_ROTATION,
    EXCEPTION_MODIFY,
    RecurringActivity,
    RecurringActivityException,
)
from .services import rrule


# Only the engine writes these
ENGINE_FIELDS = ['current_rotation_index', 'last_generated_date']


class RecurringActivityExceptionSerializer(serializers.ModelSerializer):
    """Serializer for RecurringActivityException with validation"""

    class Meta:
        model = RecurringActivityException
        fields = '__all__'

    def validate(self, data):
        """A modify exception has to change something"""
        if data.get('exception_type') == EXCEPTION_MODIFY:
            if not (data.get('modified_title') or data.get('modified_time') or data.get('modified_assigned_to')):
                raise serializers.ValidationError(
                    "A modify exception must override the title, time or assignee"
                )
        return data


class RecurringActivitySerializer(serializers.ModelSerializer):
    """
    Serializer for RecurringActivity.

    Rules are validated strictly here, at save time, even though the
    generator itself tolerates malformed rule fragments.
    """

    exceptions = RecurringActivityExceptionSerializer(many=True, read_only=True)

    class Meta:
        model = RecurringActivity
        fields = '__all__'
        read_only_fields = ENGINE_FIELDS

    def validate_recurrence_rule(self, value):
        try:
            rrule.validate_recurrence_rule(value)
        except ValueError as exc:
            raise serializers.ValidationError(str(exc))
        return value

    def validate_duration_minutes(self, value):
        """Ensure duration is positive"""
        if value <= 0:
            raise serializers.ValidationError("Duration must be positive")
        return value

    def validate_rotation_group(self, value):
        if not isinstance(value, list) or not all(isinstance(member, str) and member for member in value):
            raise serializers.ValidationError("Rotation group must be a list of user ids")
        return value

    def validate(self, data):
        """Cross-field validation"""
        instance = self.instance
        mode = data.get('assignment_mode', getattr(instance, 'assignment_mode', ASSIGNMENT_FIXED))

        if mode == ASSIGNMENT_ROTATION:
            group = data.get('rotation_group', getattr(instance, 'rotation_group', []))
            if not group:
                raise serializers.ValidationError("Rotation assignment needs a rotation group")
            names = data.get('rotation_group_names', getattr(instance, 'rotation_group_names', []))
            if names and len(names) != len(group):
                raise serializers.ValidationError("Rotation group names must match the rotation group")
            index = getattr(instance, 'current_rotation_index', 0)
            if index >= len(group):
                # Keep the stored cursor inside a group that was shortened
                data['current_rotation_index'] = 0

        start = data.get('pattern_start_date', getattr(instance, 'pattern_start_date', None))
        end = data.get('pattern_end_date', getattr(instance, 'pattern_end_date', None))
        if start and end and end < start:
            raise serializers.ValidationError("Pattern end date must not be before its start date")

        return data
