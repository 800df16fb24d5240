"""
Run-level mutual exclusion for the generation job.

A lease row names its owner and an expiry; a run only proceeds while it
holds a live lease, and a lease left behind by a crashed run expires.
"""

import logging
from datetime import datetime, timedelta
from typing import Optional

from django.db import transaction
from django.utils import timezone

from ..models import GenerationLease

logger = logging.getLogger(__name__)


def acquire_lease(name: str, owner: str, ttl_seconds: int, now: Optional[datetime] = None) -> bool:
    """
    Take the named lease for owner unless another owner holds a live one.

    Returns:
        True if owner now holds the lease
    """
    now = now or timezone.now()
    expires_at = now + timedelta(seconds=ttl_seconds)

    with transaction.atomic():
        lease, created = GenerationLease.objects.select_for_update().get_or_create(
            name=name,
            defaults={'owner': owner, 'acquired_at': now, 'expires_at': expires_at},
        )
        if created:
            return True

        if lease.owner != owner and lease.expires_at > now:
            logger.warning(
                "Lease %s is held by %s until %s", name, lease.owner, lease.expires_at.isoformat()
            )
            return False

        lease.owner = owner
        lease.acquired_at = now
        lease.expires_at = expires_at
        lease.save(update_fields=['owner', 'acquired_at', 'expires_at'])
        return True


def release_lease(name: str, owner: str) -> None:
    """Drop the lease if owner still holds it"""
    GenerationLease.objects.filter(name=name, owner=owner).delete()
