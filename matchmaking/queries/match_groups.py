"""Match group database queries using SQLAlchemy Core."""

from typing import Any

from sqlalchemy import func, insert, select, update
from sqlalchemy.ext.asyncio import AsyncConnection

from ..enums import Slot
from ..tables import match_groups, match_groups_participants, participants


async def create_match_group(
    conn: AsyncConnection,
    cycle: str,
    slot: Slot,
    location: str,
    participant_ids: list[int],
    meeting_time: str | None = None,
    meeting_location: str | None = None,
) -> dict[str, Any]:
    """
    Create a draft match group with its members and return the group record.

    Args:
        cycle: Cycle tag the group belongs to
        slot: Scheduling slot the group was formed in
        location: Location bucket the group was formed in
        participant_ids: Members of the group
        meeting_time: Defaults to the slot label
        meeting_location: Defaults to the location
    """
    result = await conn.execute(
        insert(match_groups)
        .values(
            cycle=cycle,
            slot=slot,
            location=location,
            meeting_time=meeting_time or slot.value,
            meeting_location=meeting_location or location,
            is_finalized=False,
        )
        .returning(match_groups)
    )
    group = dict(result.mappings().first())

    if participant_ids:
        await conn.execute(
            insert(match_groups_participants),
            [
                {"match_group_id": group["match_group_id"], "participant_id": participant_id}
                for participant_id in participant_ids
            ],
        )

    group["participant_ids"] = list(participant_ids)
    return group


async def get_match_groups_for_cycle(
    conn: AsyncConnection,
    cycle: str,
) -> list[dict[str, Any]]:
    """
    Get all match groups for a cycle with their members.

    Returns:
        [
            {
                "match_group_id": 1,
                "cycle": "March 2025",
                "slot": Slot.weekday_lunch,
                "location": "Tustin",
                "meeting_time": "Weekday Lunch",
                "meeting_location": "Tustin",
                "is_finalized": False,
                "members": [
                    {"participant_id": 4, "name": "Alice", "email": "...", "status": "matched"},
                    ...
                ],
            },
            ...
        ]
    """
    groups_result = await conn.execute(
        select(match_groups)
        .where(match_groups.c.cycle == cycle)
        .order_by(match_groups.c.match_group_id)
    )
    groups_by_id = {}
    for row in groups_result.mappings():
        group = dict(row)
        group["members"] = []
        groups_by_id[group["match_group_id"]] = group

    if not groups_by_id:
        return []

    members_result = await conn.execute(
        select(
            match_groups_participants.c.match_group_id,
            participants.c.participant_id,
            participants.c.name,
            participants.c.email,
            participants.c.status,
        )
        .join(
            participants,
            match_groups_participants.c.participant_id == participants.c.participant_id,
        )
        .where(match_groups_participants.c.match_group_id.in_(list(groups_by_id)))
        .order_by(match_groups_participants.c.match_group_participant_id)
    )
    for row in members_result.mappings():
        member = dict(row)
        group_id = member.pop("match_group_id")
        groups_by_id[group_id]["members"].append(member)

    return list(groups_by_id.values())


async def set_group_finalized(
    conn: AsyncConnection,
    match_group_id: int,
    is_finalized: bool,
) -> dict[str, Any] | None:
    """Mark a group finalized (or back to draft). Returns None if not found."""
    result = await conn.execute(
        update(match_groups)
        .where(match_groups.c.match_group_id == match_group_id)
        .values(is_finalized=is_finalized, updated_at=func.now())
        .returning(match_groups)
    )
    row = result.mappings().first()
    return dict(row) if row else None


async def update_meeting_details(
    conn: AsyncConnection,
    match_group_id: int,
    meeting_time: str | None = None,
    meeting_location: str | None = None,
) -> dict[str, Any] | None:
    """
    Set a group's concrete meeting time and/or place.

    Only the provided fields are changed. Returns None if the group doesn't exist.
    """
    values = {}
    if meeting_time is not None:
        values["meeting_time"] = meeting_time
    if meeting_location is not None:
        values["meeting_location"] = meeting_location

    if not values:
        result = await conn.execute(
            select(match_groups).where(match_groups.c.match_group_id == match_group_id)
        )
    else:
        values["updated_at"] = func.now()
        result = await conn.execute(
            update(match_groups)
            .where(match_groups.c.match_group_id == match_group_id)
            .values(**values)
            .returning(match_groups)
        )
    row = result.mappings().first()
    return dict(row) if row else None
