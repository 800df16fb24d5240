"""
Removal of a recurring activity's instances when the activity goes away.

Instances that are completed or in progress are history and are kept;
everything else is deleted in batches bounded like the generation writes.
"""

import logging
from typing import Dict, Optional

from django.db import transaction

from ..conf import get_setting
from ..models import PRESERVED_INSTANCE_STATUSES, ActivityInstance, RecurringActivity

logger = logging.getLogger(__name__)


def purge_definition_instances(definition_id: int, batch_size: Optional[int] = None) -> Dict[str, int]:
    """
    Delete a definition's instances except completed or in-progress ones.

    Status is checked again when each batch is deleted, so an instance
    started after the ids were listed survives.

    Returns:
        Dict with 'deleted' and 'preserved' counts
    """
    batch_size = batch_size or get_setting('BATCH_SIZE')
    instances = ActivityInstance.objects.filter(recurring_activity_id=definition_id)

    removable_ids = list(
        instances.exclude(status__in=PRESERVED_INSTANCE_STATUSES)
        .order_by('id')
        .values_list('id', flat=True)
    )

    deleted = 0
    for offset in range(0, len(removable_ids), batch_size):
        chunk = removable_ids[offset:offset + batch_size]
        with transaction.atomic():
            count, _ = (
                ActivityInstance.objects.filter(pk__in=chunk)
                .exclude(status__in=PRESERVED_INSTANCE_STATUSES)
                .delete()
            )
        deleted += count
        logger.debug("Deleted batch of %d instances of recurring activity %s", count, definition_id)

    preserved = instances.filter(status__in=PRESERVED_INSTANCE_STATUSES).count()
    logger.info(
        "Purged instances of recurring activity %s: deleted=%d preserved=%d",
        definition_id, deleted, preserved,
    )
    return {'deleted': deleted, 'preserved': preserved}


def delete_recurring_activity(definition: RecurringActivity, batch_size: Optional[int] = None) -> Dict[str, int]:
    """
    Purge a definition's removable instances, then delete the definition itself.

    Both happen in one transaction. Archiving the definition first locks
    its row until commit, so a generation run cannot add instances between
    the purge and the delete.
    """
    with transaction.atomic():
        RecurringActivity.objects.filter(pk=definition.pk).update(status='archived')
        result = purge_definition_instances(definition.pk, batch_size=batch_size)
        definition.delete()
    return result
