"""
Expansion of a parsed recurrence rule into concrete occurrence dates.

Only a bounded window is ever expanded; the rule itself may be infinite.
"""

from datetime import date, timedelta
from typing import List, Optional

from dateutil.relativedelta import relativedelta

from ..conf import get_setting
from .rrule import DAILY, MONTHLY, WEEKLY, YEARLY, RecurrenceRule, get_weekday_code


def matches_rule(day: date, rule: RecurrenceRule) -> bool:
    """Check the BYDAY and BYMONTHDAY filters of a rule against a date"""
    if rule.by_day and get_weekday_code(day) not in rule.by_day:
        return False
    if rule.by_month_day and day.day != rule.by_month_day:
        return False
    return True


def next_candidate(day: date, rule: RecurrenceRule) -> date:
    """
    Step from one candidate date to the next according to the rule frequency.

    WEEKLY rules with BYDAY walk day by day so every listed weekday is seen.
    MONTHLY and YEARLY clamp to the end of the target month, so Jan 31 + 1
    month is Feb 28 (or 29), never March.
    """
    if rule.freq == WEEKLY:
        if rule.by_day:
            return day + timedelta(days=1)
        return day + timedelta(weeks=rule.interval)
    if rule.freq == MONTHLY:
        return day + relativedelta(months=rule.interval)
    if rule.freq == YEARLY:
        return day + relativedelta(years=rule.interval)
    return day + timedelta(days=rule.interval)


def expand_rule(
    window_start: date,
    window_end: date,
    rule: RecurrenceRule,
    pattern_start: date,
    pattern_end: Optional[date] = None,
    max_iterations: Optional[int] = None,
) -> List[date]:
    """
    Expand a rule into the ordered dates it produces inside a window.

    Args:
        window_start: First date of the generation window (inclusive)
        window_end: Last date of the generation window (inclusive)
        rule: Parsed recurrence rule
        pattern_start: Date the definition starts applying
        pattern_end: Optional date the definition stops applying (inclusive)
        max_iterations: Loop ceiling, defaults to the MAX_ITERATIONS setting

    Returns:
        Dates within [max(window_start, pattern_start),
        min(window_end, pattern_end, rule.until)], at most rule.count of them.
    """
    if max_iterations is None:
        max_iterations = get_setting('MAX_ITERATIONS')

    effective_end = window_end
    if pattern_end and pattern_end < effective_end:
        effective_end = pattern_end
    if rule.until and rule.until < effective_end:
        effective_end = rule.until

    earliest = max(window_start, pattern_start)
    if rule.freq == WEEKLY and rule.by_day:
        # Weekday filtering can start immediately instead of at the pattern anchor
        current = window_start
    else:
        current = earliest

    dates = []
    iterations = 0
    while current <= effective_end and iterations < max_iterations:
        iterations += 1

        if current >= earliest and matches_rule(current, rule):
            dates.append(current)
            if rule.count and len(dates) >= rule.count:
                break

        current = next_candidate(current, rule)

    return dates
