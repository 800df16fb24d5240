"""
Daily generation of activity instances from recurring activities.

Meant to run once a day from an external scheduler (02:00 Europe/Stockholm)
through the generate_activity_instances management command. Definitions are
processed one at a time; a failure in one is logged and counted without
affecting the others.
"""

import logging
import time as clock
import uuid
from datetime import date, datetime, timedelta
from typing import Any, Dict, Optional

import pytz
from django.utils import timezone

from ..conf import get_setting
from ..models import ASSIGNMENT_ROTATION, RecurringActivity
from .checklist import build_roster
from .expand import expand_rule
from .lease import acquire_lease, release_lease
from .materialize import InstanceMaterializer
from .overrides import load_exceptions
from .rrule import parse_rrule

logger = logging.getLogger(__name__)

LEASE_NAME = 'activity-instance-generation'


def local_today(now: datetime) -> date:
    """Calendar date of `now` in the engine's configured timezone"""
    return now.astimezone(pytz.timezone(get_setting('TIMEZONE'))).date()


def generate_for_definition(
    definition: RecurringActivity,
    today: date,
    now: datetime,
    execution_id: Optional[str] = None,
) -> Dict[str, int]:
    """
    Materialize one definition's occurrences for the window starting today.

    Returns:
        Dict with 'generated' and 'skipped' counts
    """
    days_ahead = definition.generate_days_ahead or get_setting('DEFAULT_DAYS_AHEAD')
    window_start = today
    window_end = today + timedelta(days=days_ahead)

    rule = parse_rrule(definition.recurrence_rule)
    dates = expand_rule(
        window_start,
        window_end,
        rule,
        definition.pattern_start_date or window_start,
        definition.pattern_end_date,
    )

    exceptions = load_exceptions(definition.pk, window_start, window_end)
    roster = build_roster(definition)

    materializer = InstanceMaterializer(definition, window_start, window_end, execution_id)
    result = materializer.materialize(dates, exceptions, roster)

    updates = {'last_generated_date': now}
    if definition.assignment_mode == ASSIGNMENT_ROTATION:
        updates['current_rotation_index'] = materializer.rotation_index
    RecurringActivity.objects.filter(pk=definition.pk).update(**updates)
    for field, value in updates.items():
        setattr(definition, field, value)

    return result


def generate_activity_instances(now: Optional[datetime] = None, execution_id: Optional[str] = None) -> Dict[str, Any]:
    """
    Run one generation pass over all active recurring activities.

    Skips the whole run when another execution holds the generation lease.
    Errors listing the definitions propagate to the caller so the scheduler
    can retry the run.

    Returns:
        Run statistics: execution_id, total_generated, total_skipped,
        total_errors, definitions and lease_acquired
    """
    execution_id = execution_id or str(uuid.uuid4())
    now = now or timezone.now()
    started = clock.monotonic()

    stats = {
        'execution_id': execution_id,
        'total_generated': 0,
        'total_skipped': 0,
        'total_errors': 0,
        'definitions': 0,
        'lease_acquired': False,
    }

    if not acquire_lease(LEASE_NAME, execution_id, get_setting('LEASE_SECONDS'), now=now):
        logger.warning("Skipping activity instance generation %s: another run is in progress", execution_id)
        return stats
    stats['lease_acquired'] = True

    logger.info("Starting activity instance generation %s at %s", execution_id, now.isoformat())
    try:
        today = local_today(now)
        definitions = list(RecurringActivity.objects.filter(status='active').order_by('id'))
        logger.info("Found %d active recurring activities (execution %s)", len(definitions), execution_id)

        for definition in definitions:
            stats['definitions'] += 1
            try:
                result = generate_for_definition(definition, today, now, execution_id)
            except Exception:
                stats['total_errors'] += 1
                logger.exception(
                    "Error processing recurring activity %s (execution %s)", definition.pk, execution_id
                )
                continue

            stats['total_generated'] += result['generated']
            stats['total_skipped'] += result['skipped']
    finally:
        release_lease(LEASE_NAME, execution_id)

    logger.info(
        "Activity instance generation %s complete: generated=%d skipped=%d errors=%d duration=%.2fs",
        execution_id,
        stats['total_generated'],
        stats['total_skipped'],
        stats['total_errors'],
        clock.monotonic() - started,
    )
    return stats
