"""
Loading of per-date exceptions (skip / modify) for a recurring activity.
"""

from datetime import date
from typing import Dict

from ..models import RecurringActivityException


def load_exceptions(definition_id: int, window_start: date, window_end: date) -> Dict[date, RecurringActivityException]:
    """
    Fetch the exceptions of one definition inside a window with a single query.

    Returns:
        Mapping from exception date to the exception for that date
    """
    exceptions = RecurringActivityException.objects.filter(
        recurring_activity_id=definition_id,
        exception_date__range=(window_start, window_end),
    )
    return {exception.exception_date: exception for exception in exceptions}
