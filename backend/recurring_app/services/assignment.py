"""
Assignee resolution for generated occurrences.

Fair distribution is not resolved here; those occurrences are generated
unassigned and picked up by the fairness process that runs afterwards.
"""

from typing import NamedTuple, Optional, Tuple

from ..models import ASSIGNMENT_FIXED, ASSIGNMENT_ROTATION, RecurringActivity


class Assignee(NamedTuple):
    user_id: str
    name: str
    rotation_index: Optional[int] = None


def resolve_assignment(definition: RecurringActivity, cursor: int) -> Tuple[Optional[Assignee], int]:
    """
    Resolve who gets one occurrence and where the rotation cursor moves next.

    Args:
        definition: The recurring activity being generated
        cursor: Current index into the rotation group

    Returns:
        (assignee or None when unassigned, next cursor)
    """
    if definition.assignment_mode == ASSIGNMENT_FIXED:
        if not definition.assigned_to:
            return None, cursor
        return Assignee(definition.assigned_to, definition.assigned_to_name), cursor

    if definition.assignment_mode == ASSIGNMENT_ROTATION:
        group = definition.rotation_group or []
        if not group:
            return None, cursor

        # A group that shrank since the cursor was stored wraps around
        index = cursor % len(group)
        names = definition.rotation_group_names or []
        name = names[index] if index < len(names) else ''
        return Assignee(group[index], name, index), (index + 1) % len(group)

    return None, cursor
