"""
Test cases for weekend and holiday detection.
"""

from datetime import date
from django.test import SimpleTestCase, override_settings
from recurring_app.services.holidays import is_holiday_or_weekend


class HolidayCalendarTest(SimpleTestCase):
    """Test holiday and weekend classification"""

    def test_weekend(self):
        """Test that Saturdays and Sundays count as holiday shifts"""
        self.assertTrue(is_holiday_or_weekend(date(2025, 1, 25)))  # Saturday
        self.assertTrue(is_holiday_or_weekend(date(2025, 1, 26)))  # Sunday

    def test_weekday(self):
        """Test that an ordinary Tuesday is not a holiday"""
        self.assertFalse(is_holiday_or_weekend(date(2025, 1, 21)))

    def test_fixed_date_holidays(self):
        """Test weekday dates from the default holiday table"""
        self.assertTrue(is_holiday_or_weekend(date(2024, 12, 25)))  # Wednesday
        self.assertTrue(is_holiday_or_weekend(date(2025, 6, 6)))    # Friday
        self.assertTrue(is_holiday_or_weekend(date(2025, 5, 1)))    # Thursday

    def test_moving_holidays_not_detected(self):
        """Test the known limitation: Easter Monday is not in the table"""
        self.assertFalse(is_holiday_or_weekend(date(2025, 4, 21)))

    def test_injected_table(self):
        """Test passing a region-specific table"""
        independence_day = date(2025, 7, 4)  # Friday
        self.assertFalse(is_holiday_or_weekend(independence_day))
        self.assertTrue(is_holiday_or_weekend(independence_day, holidays=[(7, 4)]))
        self.assertFalse(is_holiday_or_weekend(date(2024, 12, 25), holidays=[(7, 4)]))

    @override_settings(RECURRING_ACTIVITIES={'HOLIDAYS': [(7, 4)]})
    def test_table_from_settings(self):
        """Test that the default table comes from configuration"""
        self.assertTrue(is_holiday_or_weekend(date(2025, 7, 4)))
        self.assertFalse(is_holiday_or_weekend(date(2024, 12, 25)))
