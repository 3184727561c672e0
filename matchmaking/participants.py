"""
Participant record helpers.

Converts stored participant rows to Participant objects for the matching
algorithm. Queries live in matchmaking/queries/participants.py.
"""

from typing import Any

from .enums import ParticipantStatus, Slot
from .grouping import Participant, parse_enum, validate_participants

# Per-slot location override columns
SLOT_LOCATION_COLUMNS = {
    Slot.weekday_lunch: "weekday_lunch_locations",
    Slot.weekday_dinner: "weekday_dinner_locations",
    Slot.weekend_lunch: "weekend_lunch_locations",
    Slot.weekend_dinner: "weekend_dinner_locations",
}


def participant_from_row(row: dict[str, Any]) -> Participant:
    """
    Build a Participant from a participants table row.

    Enum values are left for validate_participants to check, except status
    which is owned by the store.
    """
    participant_id = row["participant_id"]

    slot_locations = {}
    for slot, column in SLOT_LOCATION_COLUMNS.items():
        if row.get(column):
            slot_locations[slot] = list(row[column])

    status = row.get("status") or ParticipantStatus.pending

    return Participant(
        id=participant_id,
        practice_areas=list(row.get("practice_areas") or []),
        experience_level=row.get("experience_level"),
        availability=list(row.get("availability") or []),
        locations=list(row.get("locations") or []),
        uses_separate_locations=bool(row.get("uses_separate_locations")),
        slot_locations=slot_locations,
        name=row.get("name") or "",
        email=row.get("email") or "",
        bar_number=row.get("bar_number") or "",
        networking_goals=list(row.get("networking_goals") or []),
        cycle=row.get("cycle") or "",
        status=parse_enum(ParticipantStatus, status, participant_id, "status"),
        match_group_id=row.get("match_group_id"),
    )


def participants_from_rows(rows: list[dict[str, Any]]) -> list[Participant]:
    """
    Convert and validate a batch of participant rows.

    Raises:
        ValidationError: If any row has an unknown experience level or slot
    """
    return validate_participants([participant_from_row(row) for row in rows])
