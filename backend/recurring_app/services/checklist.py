"""
Per-instance checklists built from the horse roster.

The roster is fetched once per definition and reused for every date,
instead of querying horses for each generated occurrence.
"""

import uuid
from typing import Any, Dict, List, Optional

from ..models import Horse, RecurringActivity


def build_roster(definition: RecurringActivity) -> Optional[List[Dict[str, Any]]]:
    """
    Look up the horses an activity covers.

    Returns:
        Ordered list of {'id', 'name'} dicts, or None when the activity
        is not tied to the stable's horses or a horse group
    """
    horses = Horse.objects.filter(status='active')
    if definition.applies_to_all_horses:
        horses = horses.filter(stable_id=definition.stable_id)
    elif definition.horse_group_id:
        horses = horses.filter(horse_group_id=definition.horse_group_id)
    else:
        return None

    return [
        {'id': str(horse_id), 'name': name}
        for horse_id, name in horses.order_by('name', 'id').values_list('id', 'name')
    ]


def build_checklist(roster: Optional[List[Dict[str, Any]]]) -> List[Dict[str, Any]]:
    """One unchecked item per roster entry, ordered like the roster"""
    return [
        {
            'id': str(uuid.uuid4()),
            'text': horse['name'],
            'entity_type': 'horse',
            'entity_id': horse['id'],
            'completed': False,
            'order': index,
        }
        for index, horse in enumerate(roster or [])
    ]


def build_progress(checklist: List[Dict[str, Any]]) -> Dict[str, Any]:
    """Initial progress: calculated from the checklist when there is one"""
    if checklist:
        return {
            'value': 0,
            'source': 'calculated',
            'display_text': f"0 of {len(checklist)}",
        }
    return {'value': 0, 'source': 'manual', 'display_text': None}
