"""
Weekend and fixed-date holiday detection for shift weighting.

Date-based only: moving holidays such as Easter or Midsummer are not
recognised. The table comes from the HOLIDAYS setting unless passed in.
"""

from datetime import date
from typing import Iterable, Optional, Tuple

from ..conf import get_setting


def is_holiday_or_weekend(day: date, holidays: Optional[Iterable[Tuple[int, int]]] = None) -> bool:
    """True for Saturdays, Sundays and any (month, day) listed in the holiday table"""
    if day.weekday() >= 5:
        return True

    if holidays is None:
        holidays = get_setting('HOLIDAYS')
    return any(month == day.month and day_of_month == day.day for month, day_of_month in holidays)
