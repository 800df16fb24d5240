"""
Settings for the recurring activity engine.

Projects override individual keys through the RECURRING_ACTIVITIES dict in
their Django settings; anything missing falls back to DEFAULTS.
"""

from typing import Any

from django.conf import settings


DEFAULTS = {
    # Calendar day boundaries for the daily run are taken in this timezone
    'TIMEZONE': 'Europe/Stockholm',
    'DEFAULT_DAYS_AHEAD': 60,
    # Stays below the 500 write ceiling of a single commit
    'BATCH_SIZE': 400,
    'MAX_ITERATIONS': 1000,
    'HOLIDAY_WEIGHT_MULTIPLIER': 1.5,
    # Fixed-date public holidays as (month, day); no moving holidays
    'HOLIDAYS': [
        (1, 1),    # Nyårsdagen
        (1, 6),    # Trettondedag jul
        (5, 1),    # Första maj
        (6, 6),    # Nationaldagen
        (12, 24),  # Julafton
        (12, 25),  # Juldagen
        (12, 26),  # Annandag jul
        (12, 31),  # Nyårsafton
    ],
    'LEASE_SECONDS': 3600,
    'RETRY_COUNT': 3,
}


def get_setting(name: str) -> Any:
    """Return an engine setting, preferring the project's override."""
    overrides = getattr(settings, 'RECURRING_ACTIVITIES', None) or {}
    if name in overrides:
        return overrides[name]
    return DEFAULTS[name]
