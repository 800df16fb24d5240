"""
Test cases for recurrence rule parsing and validation.
"""

from datetime import date
from django.test import SimpleTestCase
from recurring_app.services.rrule import (
    DAILY, MONTHLY, WEEKLY, YEARLY, get_weekday_code, parse_rrule, validate_recurrence_rule,
)


class ParseRRuleTest(SimpleTestCase):
    """Test the lenient rule parser"""

    def test_defaults_for_empty_rule(self):
        """Test that an empty rule means daily, every day, unbounded"""
        rule = parse_rrule('')
        self.assertEqual(rule.freq, DAILY)
        self.assertEqual(rule.interval, 1)
        self.assertIsNone(rule.by_day)
        self.assertIsNone(rule.by_month_day)
        self.assertIsNone(rule.count)
        self.assertIsNone(rule.until)

    def test_full_rule_with_prefix(self):
        """Test parsing every supported key behind the RRULE: prefix"""
        rule = parse_rrule('RRULE:FREQ=WEEKLY;INTERVAL=2;BYDAY=MO,WE,FR;COUNT=10')
        self.assertEqual(rule.freq, WEEKLY)
        self.assertEqual(rule.interval, 2)
        self.assertEqual(rule.by_day, frozenset(['MO', 'WE', 'FR']))
        self.assertEqual(rule.count, 10)

    def test_monthly_and_yearly(self):
        """Test MONTHLY with BYMONTHDAY and plain YEARLY"""
        monthly = parse_rrule('FREQ=MONTHLY;BYMONTHDAY=15')
        self.assertEqual(monthly.freq, MONTHLY)
        self.assertEqual(monthly.by_month_day, 15)
        self.assertEqual(parse_rrule('FREQ=YEARLY').freq, YEARLY)

    def test_until_date(self):
        """Test UNTIL as a compact date, with or without a time part"""
        self.assertEqual(parse_rrule('FREQ=DAILY;UNTIL=20250301').until, date(2025, 3, 1))
        self.assertEqual(parse_rrule('FREQ=DAILY;UNTIL=20250301T235959Z').until, date(2025, 3, 1))

    def test_malformed_integers_are_skipped(self):
        """Test that bad numbers leave the field at its default instead of raising"""
        rule = parse_rrule('FREQ=DAILY;INTERVAL=abc;COUNT=many;BYMONTHDAY=40')
        self.assertEqual(rule.interval, 1)
        self.assertIsNone(rule.count)
        self.assertIsNone(rule.by_month_day)

    def test_non_positive_interval_is_skipped(self):
        """Test that INTERVAL=0 cannot stall the generator"""
        self.assertEqual(parse_rrule('FREQ=DAILY;INTERVAL=0').interval, 1)
        self.assertEqual(parse_rrule('FREQ=DAILY;INTERVAL=-3').interval, 1)

    def test_unknown_keys_and_values_are_ignored(self):
        """Test forward compatibility with keys and values we do not understand"""
        rule = parse_rrule('FREQ=HOURLY;WKST=MO;BYSETPOS=1;BYDAY=MO,XX')
        self.assertEqual(rule.freq, DAILY)
        self.assertEqual(rule.by_day, frozenset(['MO']))

    def test_bad_until_is_skipped(self):
        """Test that an unparseable UNTIL leaves the series unbounded"""
        self.assertIsNone(parse_rrule('FREQ=DAILY;UNTIL=soon').until)

    def test_lowercase_rule(self):
        """Test that keys and values are case-insensitive"""
        rule = parse_rrule('rrule:freq=weekly;byday=sa,su')
        self.assertEqual(rule.freq, WEEKLY)
        self.assertEqual(rule.by_day, frozenset(['SA', 'SU']))


class ValidateRecurrenceRuleTest(SimpleTestCase):
    """Test strict validation used when a definition is saved"""

    def test_valid_rule_returns_parsed_rule(self):
        """Test that a valid rule passes and comes back parsed"""
        rule = validate_recurrence_rule('RRULE:FREQ=WEEKLY;INTERVAL=6')
        self.assertEqual(rule.freq, WEEKLY)
        self.assertEqual(rule.interval, 6)

    def test_rejects_what_parser_tolerates(self):
        """Test that each silently dropped fragment is reported"""
        for text in [
            'FREQ=HOURLY',
            'FREQ=DAILY;INTERVAL=abc',
            'FREQ=DAILY;INTERVAL=0',
            'FREQ=WEEKLY;BYDAY=MO,XX',
            'FREQ=MONTHLY;BYMONTHDAY=32',
            'FREQ=DAILY;COUNT=-1',
            'FREQ=DAILY;UNTIL=tomorrow',
            'FREQ=DAILY;BYHOUR=9',
        ]:
            with self.subTest(rule=text):
                with self.assertRaises(ValueError):
                    validate_recurrence_rule(text)

    def test_rejects_empty_rule(self):
        """Test that an empty rule is not accepted at save time"""
        with self.assertRaises(ValueError):
            validate_recurrence_rule('RRULE:')

    def test_rejects_count_with_until(self):
        """Test that only one of COUNT and UNTIL may bound the series"""
        with self.assertRaises(ValueError):
            validate_recurrence_rule('FREQ=DAILY;COUNT=3;UNTIL=20250301')

    def test_reports_all_problems(self):
        """Test that the error lists every invalid part"""
        with self.assertRaises(ValueError) as ctx:
            validate_recurrence_rule('FREQ=SOMETIMES;INTERVAL=x')
        self.assertIn('FREQ', str(ctx.exception))
        self.assertIn('INTERVAL', str(ctx.exception))


class UtilityFunctionTest(SimpleTestCase):
    """Test utility functions"""

    def test_get_weekday_code(self):
        """Test weekday code extraction from a date"""
        monday = date(2025, 1, 20)
        self.assertEqual(get_weekday_code(monday), 'MO')
        self.assertEqual(get_weekday_code(date(2025, 1, 21)), 'TU')
        self.assertEqual(get_weekday_code(date(2025, 1, 26)), 'SU')
