"""Query layer for database operations using SQLAlchemy Core."""

from .match_groups import (
    create_match_group,
    get_match_groups_for_cycle,
    set_group_finalized,
    update_meeting_details,
)
from .participants import (
    get_participants_for_cycle,
    get_status_counts,
    mark_participants_matched,
)

__all__ = [
    # Participants
    "get_participants_for_cycle",
    "mark_participants_matched",
    "get_status_counts",
    # Match groups
    "create_match_group",
    "get_match_groups_for_cycle",
    "set_group_finalized",
    "update_meeting_details",
]
