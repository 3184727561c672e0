"""Participant-related database queries using SQLAlchemy Core."""

from typing import Any

from sqlalchemy import bindparam, func, select, update
from sqlalchemy.ext.asyncio import AsyncConnection

from ..enums import ParticipantStatus
from ..tables import participants


async def get_participants_for_cycle(
    conn: AsyncConnection,
    cycle: str,
    statuses: list[ParticipantStatus] | None = None,
) -> list[dict[str, Any]]:
    """
    Get a cycle's participant records in submission order.

    Args:
        cycle: Cycle tag (e.g., "March 2025")
        statuses: Only include these statuses (None = all)
    """
    query = select(participants).where(participants.c.cycle == cycle)
    if statuses:
        query = query.where(participants.c.status.in_(list(statuses)))
    query = query.order_by(participants.c.submitted_at, participants.c.participant_id)

    result = await conn.execute(query)
    return [dict(row) for row in result.mappings()]


async def mark_participants_matched(
    conn: AsyncConnection,
    updates: dict[int, int],
) -> int:
    """
    Set status=matched and the group back-reference for many participants.

    Runs as a single executemany statement.

    Args:
        updates: participant_id -> match_group_id

    Returns:
        Number of participants in the batch
    """
    if not updates:
        return 0

    stmt = (
        update(participants)
        .where(participants.c.participant_id == bindparam("b_participant_id"))
        .values(
            status=ParticipantStatus.matched,
            match_group_id=bindparam("b_match_group_id"),
            updated_at=func.now(),
        )
    )
    await conn.execute(
        stmt,
        [
            {"b_participant_id": participant_id, "b_match_group_id": group_id}
            for participant_id, group_id in updates.items()
        ],
    )
    return len(updates)


async def get_status_counts(
    conn: AsyncConnection,
    cycle: str,
) -> dict[str, int]:
    """
    Count a cycle's participants by status.

    Returns:
        {"pending": 12, "matched": 30, "emailed": 0} (every status present)
    """
    result = await conn.execute(
        select(participants.c.status, func.count().label("count"))
        .where(participants.c.cycle == cycle)
        .group_by(participants.c.status)
    )
    counts = {status.value: 0 for status in ParticipantStatus}
    for row in result.mappings():
        status = row["status"]
        key = status.value if isinstance(status, ParticipantStatus) else status
        counts[key] = row["count"]
    return counts
