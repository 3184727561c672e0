"""
Matching run orchestration.

Two phases:
1. Compute: pure, in memory (matchmaking.grouping.compute_match_groups)
2. Commit: one insert per group, each committed on its own, then one
   batched participant status update

The commit phase is not transactional. If it fails partway, groups that
were already committed stay committed and RunFailure reports them, so an
admin can reconcile before re-running. Runs for the same cycle must not
overlap; nothing here locks.
"""

import logging
from dataclasses import replace

import sentry_sdk
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncConnection

from .config import is_single_membership_enabled
from .database import get_connection
from .enums import ParticipantStatus
from .grouping import (
    MatchGroup,
    MatchingResult,
    RunFailure,
    compute_match_groups,
    derive_status_updates,
)
from .participants import participants_from_rows
from .queries import match_groups as group_queries
from .queries import participants as participant_queries

logger = logging.getLogger(__name__)


async def commit_match_groups(conn: AsyncConnection, groups: list[MatchGroup]) -> list[MatchGroup]:
    """
    Persist draft groups, then mark their members matched.

    Returns:
        The groups with ids assigned, in the same order

    Raises:
        RunFailure: On any database error. created_groups holds the groups
            committed before the failure.
    """
    created = []
    try:
        for group in groups:
            row = await group_queries.create_match_group(
                conn,
                cycle=group.cycle,
                slot=group.slot,
                location=group.location,
                participant_ids=group.participant_ids,
                meeting_time=group.meeting_time,
                meeting_location=group.meeting_location,
            )
            await conn.commit()
            created.append(replace(group, id=row["match_group_id"]))

        updates = derive_status_updates(created)
        if updates:
            await participant_queries.mark_participants_matched(conn, updates)
            await conn.commit()
    except SQLAlchemyError as e:
        logger.error(
            f"Matching commit failed after {len(created)} of {len(groups)} group(s): {e}"
        )
        sentry_sdk.capture_exception(e)
        raise RunFailure(
            f"Failed to save match groups ({len(created)} of {len(groups)} created)",
            created_groups=created,
        ) from e

    logger.info(f"Saved {len(created)} group(s), marked {len(updates)} participant(s) matched")
    return created


async def _load_participants(conn: AsyncConnection, cycle: str, statuses) -> list:
    rows = await participant_queries.get_participants_for_cycle(conn, cycle, list(statuses))
    return participants_from_rows(rows)


async def preview_matching(
    cycle: str,
    statuses: tuple = (ParticipantStatus.pending,),
    single_membership: bool | None = None,
) -> tuple[list, MatchingResult]:
    """
    Compute the groups run_matching would save, without writing anything.

    Uses the same participant selection and single-membership setting as
    run_matching.

    Returns:
        (participants, result): the loaded participants and computed groups
    """
    if single_membership is None:
        single_membership = is_single_membership_enabled()

    async with get_connection() as conn:
        participants = await _load_participants(conn, cycle, statuses)

    result = compute_match_groups(participants, cycle, single_membership=single_membership)
    return participants, result


async def run_matching(
    cycle: str,
    participants: list | None = None,
    statuses: tuple = (ParticipantStatus.pending,),
    single_membership: bool | None = None,
) -> list[MatchGroup]:
    """
    Match a cycle's participants into groups and save them.

    Args:
        cycle: Cycle tag (e.g., "March 2025")
        participants: Participants to match. If None, the cycle's
            participants with one of `statuses` are loaded from the database.
        statuses: Statuses to load when participants is None
        single_membership: Keep each participant in one group only
            (None = MATCHING_SINGLE_MEMBERSHIP setting)

    Returns:
        Saved MatchGroups. Empty if nothing could be grouped (not an error).

    Raises:
        ValidationError: If a participant record is malformed (nothing saved)
        RunFailure: If saving failed partway
    """
    if single_membership is None:
        single_membership = is_single_membership_enabled()

    async with get_connection() as conn:
        if participants is None:
            participants = await _load_participants(conn, cycle, statuses)

        logger.info(f"Starting matching for {cycle!r} with {len(participants)} participant(s)")
        result = compute_match_groups(participants, cycle, single_membership=single_membership)

        if result.unplaced_ids:
            logger.info(f"{len(result.unplaced_ids)} participant(s) could not be placed")

        if not result.groups:
            logger.info(f"No groups produced for {cycle!r}")
            return []

        return await commit_match_groups(conn, result.groups)
