"""
Parsing of the compact recurrence rules stored on recurring activities.

Only a practical subset of iCalendar RRULE is understood: FREQ, INTERVAL,
BYDAY, BYMONTHDAY, COUNT and UNTIL. parse_rrule is lenient and never raises,
so one badly entered rule cannot stop the daily run; validate_recurrence_rule
is the strict check used when a definition is saved.
"""

from dataclasses import dataclass
from datetime import date, datetime
from typing import FrozenSet, List, Optional, Tuple


DAILY = 'DAILY'
WEEKLY = 'WEEKLY'
MONTHLY = 'MONTHLY'
YEARLY = 'YEARLY'

FREQUENCIES = (DAILY, WEEKLY, MONTHLY, YEARLY)

# Weekday codes keyed the same way as date.weekday()
WEEKDAY_CODES = {
    'MO': 0, 'TU': 1, 'WE': 2, 'TH': 3, 'FR': 4, 'SA': 5, 'SU': 6
}

WEEKDAY_REVERSE = {number: code for code, number in WEEKDAY_CODES.items()}

RULE_PREFIX = 'RRULE:'


@dataclass(frozen=True)
class RecurrenceRule:
    freq: str = DAILY
    interval: int = 1
    by_day: Optional[FrozenSet[str]] = None
    by_month_day: Optional[int] = None
    count: Optional[int] = None
    until: Optional[date] = None


def get_weekday_code(day: date) -> str:
    """Get weekday code (e.g., 'MO') from a date"""
    return WEEKDAY_REVERSE[day.weekday()]


def _split_rule(text: str) -> List[Tuple[str, str]]:
    rule = (text or '').strip()
    if rule.upper().startswith(RULE_PREFIX):
        rule = rule[len(RULE_PREFIX):]

    parts = []
    for part in rule.split(';'):
        if not part.strip():
            continue
        key, _, value = part.partition('=')
        parts.append((key.strip().upper(), value.strip()))
    return parts


def _parse_int(value: str, minimum: int, maximum: Optional[int] = None) -> Optional[int]:
    try:
        number = int(value)
    except (TypeError, ValueError):
        return None
    if number < minimum or (maximum is not None and number > maximum):
        return None
    return number


def _parse_by_day(value: str) -> Optional[FrozenSet[str]]:
    codes = frozenset(
        code.strip().upper() for code in value.split(',')
        if code.strip().upper() in WEEKDAY_CODES
    )
    return codes or None


def _parse_until(value: str) -> Optional[date]:
    # YYYYMMDD, optionally followed by a THHMMSSZ time part we do not use
    try:
        return datetime.strptime(value[:8], '%Y%m%d').date()
    except ValueError:
        return None


def parse_rrule(text: str) -> RecurrenceRule:
    """
    Parse a rule such as 'RRULE:FREQ=WEEKLY;INTERVAL=2;BYDAY=MO,TH'.

    Unknown keys are ignored and malformed values are dropped, leaving the
    field at its default (DAILY, interval 1, otherwise unconstrained).
    """
    fields = {}
    for key, value in _split_rule(text):
        if key == 'FREQ':
            if value.upper() in FREQUENCIES:
                fields['freq'] = value.upper()
        elif key == 'INTERVAL':
            interval = _parse_int(value, minimum=1)
            if interval is not None:
                fields['interval'] = interval
        elif key == 'BYDAY':
            fields['by_day'] = _parse_by_day(value)
        elif key == 'BYMONTHDAY':
            fields['by_month_day'] = _parse_int(value, minimum=1, maximum=31)
        elif key == 'COUNT':
            fields['count'] = _parse_int(value, minimum=1)
        elif key == 'UNTIL':
            fields['until'] = _parse_until(value)

    return RecurrenceRule(**fields)


def validate_recurrence_rule(text: str) -> RecurrenceRule:
    """
    Strictly validate a rule and return its parsed form.

    Raises ValueError describing every fragment parse_rrule would have
    silently dropped.
    """
    parts = _split_rule(text)
    if not parts:
        raise ValueError("Recurrence rule is empty")

    errors = []
    for key, value in parts:
        if key == 'FREQ':
            if value.upper() not in FREQUENCIES:
                errors.append(f"FREQ must be one of {', '.join(FREQUENCIES)}, got '{value}'")
        elif key == 'INTERVAL':
            if _parse_int(value, minimum=1) is None:
                errors.append(f"INTERVAL must be a positive integer, got '{value}'")
        elif key == 'BYDAY':
            unknown = [
                code for code in value.split(',')
                if code.strip().upper() not in WEEKDAY_CODES
            ]
            if unknown or not value:
                errors.append(f"BYDAY has unknown weekday codes: '{value}'")
        elif key == 'BYMONTHDAY':
            if _parse_int(value, minimum=1, maximum=31) is None:
                errors.append(f"BYMONTHDAY must be between 1 and 31, got '{value}'")
        elif key == 'COUNT':
            if _parse_int(value, minimum=1) is None:
                errors.append(f"COUNT must be a positive integer, got '{value}'")
        elif key == 'UNTIL':
            if _parse_until(value) is None:
                errors.append(f"UNTIL must be a YYYYMMDD date, got '{value}'")
        else:
            errors.append(f"Unsupported rule part '{key}'")

    keys = [key for key, _ in parts]
    if 'COUNT' in keys and 'UNTIL' in keys:
        errors.append("COUNT and UNTIL cannot be combined")

    if errors:
        raise ValueError('; '.join(errors))

    return parse_rrule(text)
