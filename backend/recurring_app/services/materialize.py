"""
Materialization of occurrence dates into persisted activity instances.

Dates that already have an instance are skipped, so a re-run over the
same window creates nothing new. Writes go out in batches below the
per-commit write ceiling; a failed commit aborts the rest of the
definition while earlier batches stay committed.
"""

import logging
from datetime import date, datetime, time, timedelta
from typing import Any, Dict, List, Optional, Tuple

from django.db import transaction
from django.utils import timezone

from ..conf import get_setting
from ..models import (
    ASSIGNMENT_ROTATION,
    EXCEPTION_MODIFY,
    EXCEPTION_SKIP,
    SYSTEM_USER,
    ActivityInstance,
    RecurringActivity,
    RecurringActivityException,
)
from .assignment import Assignee, resolve_assignment
from .checklist import build_checklist, build_progress
from .holidays import is_holiday_or_weekend

logger = logging.getLogger(__name__)


def calculate_end_time(start: time, duration_minutes: int) -> time:
    """Add a duration to a time of day, wrapping past midnight"""
    return (datetime.combine(date.min, start) + timedelta(minutes=duration_minutes)).time()


def effective_weight(definition: RecurringActivity, is_holiday_shift: bool) -> float:
    if definition.is_holiday_multiplied and is_holiday_shift:
        return definition.weight * get_setting('HOLIDAY_WEIGHT_MULTIPLIER')
    return definition.weight


class InstanceMaterializer:
    """
    Turns the candidate dates of one definition into ActivityInstance rows.

    The rotation cursor starts at the definition's stored index and is
    threaded through the dates in order; after materialize() it holds the
    next slot to hand out.
    """

    def __init__(
        self,
        definition: RecurringActivity,
        window_start: date,
        window_end: date,
        execution_id: Optional[str] = None,
        batch_size: Optional[int] = None,
    ):
        self.definition = definition
        self.window_start = window_start
        self.window_end = window_end
        self.execution_id = execution_id
        self.batch_size = batch_size or get_setting('BATCH_SIZE')
        self.rotation_index = definition.current_rotation_index or 0
        self.holidays = get_setting('HOLIDAYS')
        self.commits = 0

    def existing_dates(self) -> set:
        """Dates in the window that already have an instance for this definition"""
        return set(
            ActivityInstance.objects.filter(
                recurring_activity=self.definition,
                scheduled_date__range=(self.window_start, self.window_end),
            ).values_list('scheduled_date', flat=True)
        )

    def materialize(
        self,
        dates: List[date],
        exceptions: Dict[date, RecurringActivityException],
        roster: Optional[List[Dict[str, Any]]] = None,
    ) -> Dict[str, int]:
        """
        Create instances for every date that is neither materialized nor skipped.

        Args:
            dates: Ordered candidate dates from the rule expansion
            exceptions: Per-date exceptions of this definition
            roster: Horses to build each checklist from, fetched once

        Returns:
            Dict with 'generated' and 'skipped' counts
        """
        existing = self.existing_dates()
        generated = 0
        skipped = 0
        pending = []

        for day in dates:
            if day in existing:
                skipped += 1
                continue

            exception = exceptions.get(day)
            if exception is not None and exception.exception_type == EXCEPTION_SKIP:
                skipped += 1
                continue

            pending.append((day, exception))
            if len(pending) >= self.batch_size:
                created, conflicts = self._commit_batch(pending, roster)
                generated += created
                skipped += conflicts
                pending = []

        if pending:
            created, conflicts = self._commit_batch(pending, roster)
            generated += created
            skipped += conflicts

        return {'generated': generated, 'skipped': skipped}

    def build_instance(
        self,
        day: date,
        assignee: Optional[Assignee],
        exception: Optional[RecurringActivityException],
        roster: Optional[List[Dict[str, Any]]],
    ) -> ActivityInstance:
        definition = self.definition
        title = definition.title
        start = definition.time_of_day
        note = ''

        if exception is not None:
            note = exception.reason
            if exception.exception_type == EXCEPTION_MODIFY:
                if exception.modified_title:
                    title = exception.modified_title
                if exception.modified_time:
                    start = exception.modified_time
                if exception.modified_assigned_to:
                    rotation_index = assignee.rotation_index if assignee else None
                    assignee = Assignee(
                        exception.modified_assigned_to,
                        exception.modified_assigned_to_name,
                        rotation_index,
                    )

        is_holiday_shift = is_holiday_or_weekend(day, self.holidays)
        checklist = build_checklist(roster)

        return ActivityInstance(
            recurring_activity=definition,
            organization_id=definition.organization_id,
            stable_id=definition.stable_id,
            stable_name=definition.stable_name,
            title=title,
            description=definition.description,
            category=definition.category,
            color=definition.color,
            icon=definition.icon,
            scheduled_date=day,
            scheduled_time=start,
            scheduled_end_time=calculate_end_time(start, definition.duration_minutes),
            duration_minutes=definition.duration_minutes,
            assigned_to=assignee.user_id if assignee else '',
            assigned_to_name=assignee.name if assignee else '',
            assigned_at=timezone.now() if assignee else None,
            assigned_by=SYSTEM_USER,
            rotation_index=assignee.rotation_index if assignee else None,
            horse_id=definition.horse_id,
            horse_name=definition.horse_name,
            applies_to_all_horses=definition.applies_to_all_horses,
            horse_group_id=definition.horse_group_id,
            horse_group_name=definition.horse_group_name,
            checklist=checklist,
            progress=build_progress(checklist),
            status='scheduled',
            is_exception=exception is not None,
            exception_note=note,
            weight=effective_weight(definition, is_holiday_shift),
            is_holiday_shift=is_holiday_shift,
            created_by=SYSTEM_USER,
        )

    def _commit_batch(
        self,
        pending: List[Tuple[date, Optional[RecurringActivityException]]],
        roster: Optional[List[Dict[str, Any]]] = None,
    ) -> Tuple[int, int]:
        """
        Write one batch of (date, exception) pairs atomically.

        Dates another writer materialized since the run started are dropped
        before assignment, so they neither count as generated nor consume a
        rotation slot. Under rotation the advanced cursor is stored in the
        same transaction as the instances that consumed it, and only kept
        in memory once that transaction commits.

        Returns:
            (instances created, dates dropped as already materialized)
        """
        cursor = self.rotation_index
        instances = []
        try:
            with transaction.atomic():
                taken = set(
                    ActivityInstance.objects.filter(
                        recurring_activity=self.definition,
                        scheduled_date__in=[day for day, _ in pending],
                    ).values_list('scheduled_date', flat=True)
                )
                for day, exception in pending:
                    if day in taken:
                        continue
                    assignee, cursor = resolve_assignment(self.definition, cursor)
                    instances.append(self.build_instance(day, assignee, exception, roster))

                ActivityInstance.objects.bulk_create(instances, ignore_conflicts=True)
                if self.definition.assignment_mode == ASSIGNMENT_ROTATION:
                    RecurringActivity.objects.filter(pk=self.definition.pk).update(
                        current_rotation_index=cursor
                    )
        except Exception:
            logger.error(
                "Failed to commit batch of %d activity instances (execution %s, recurring activity %s)",
                len(pending), self.execution_id, self.definition.pk,
            )
            raise

        self.rotation_index = cursor
        self.commits += 1
        if taken:
            logger.info(
                "Skipped %d dates already materialized by another writer (execution %s, recurring activity %s)",
                len(taken), self.execution_id, self.definition.pk,
            )
        logger.debug(
            "Committed batch of %d activity instances (execution %s, recurring activity %s)",
            len(instances), self.execution_id, self.definition.pk,
        )
        return len(instances), len(pending) - len(instances)
