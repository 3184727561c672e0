#!/usr/bin/env python
"""
Run the matching algorithm for a cycle.

Run locally:  python scripts/run_matching.py --cycle "March 2025"
Preview only: python scripts/run_matching.py --cycle "March 2025" --dry-run

Groups are saved as drafts (is_finalized = false). Finalizing, setting
meeting details and notifying participants happen in the admin dashboard.
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from dotenv import load_dotenv

env_path = Path(__file__).parent.parent
load_dotenv(env_path / ".env")
load_dotenv(env_path / ".env.local", override=True)

import sentry_sdk

from db_safety import check_database_safety
from matchmaking.config import check_required_env_vars, get_sentry_dsn
from matchmaking.database import close_engine
from matchmaking.enums import ParticipantStatus
from matchmaking.grouping import RunFailure, ValidationError
from matchmaking.runner import preview_matching, run_matching


def print_group(group) -> None:
    label = f"#{group.id}" if group.id is not None else "(draft)"
    print(f"  {label} {group.slot.value} at {group.location} - {len(group.members)} people")
    for participant in group.members:
        areas = ", ".join(participant.practice_areas) or "no practice area"
        name = participant.name or f"Participant {participant.id}"
        print(f"      {name} [{participant.experience_level.value}; {areas}]")


async def preview(cycle: str, statuses: list, single_membership: bool | None) -> int:
    """Compute groups without saving anything."""
    try:
        participants, result = await preview_matching(
            cycle, statuses=tuple(statuses), single_membership=single_membership
        )
    except ValidationError as e:
        print(f"ERROR: {e}")
        return 1
    finally:
        await close_engine()

    print(f"Dry run for {cycle!r}: {len(participants)} participants, {len(result.groups)} groups")
    for group in result.groups:
        print_group(group)
    print(f"Unplaced participants: {len(result.unplaced_ids)}")
    return 0


async def run(cycle: str, statuses: list, single_membership: bool | None) -> int:
    try:
        groups = await run_matching(
            cycle, statuses=tuple(statuses), single_membership=single_membership
        )
    except ValidationError as e:
        print(f"ERROR: {e}")
        return 1
    except RunFailure as e:
        print(f"ERROR: {e}")
        print(f"Groups already saved: {[g.id for g in e.created_groups]}")
        print("Reconcile these in the admin dashboard before re-running.")
        return 2
    finally:
        await close_engine()

    if not groups:
        print(f"No groups produced for {cycle!r} (not enough compatible participants)")
        return 0

    print(f"Created {len(groups)} draft groups for {cycle!r}:")
    for group in groups:
        print_group(group)
    return 0


def main():
    parser = argparse.ArgumentParser(description="Match a cycle's participants into groups")
    parser.add_argument(
        "--cycle",
        required=True,
        help="Cycle tag (e.g., 'March 2025')",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Compute and print groups without saving",
    )
    parser.add_argument(
        "--all-statuses",
        action="store_true",
        help="Include already matched/emailed participants (default: pending only)",
    )
    parser.add_argument(
        "--single-membership",
        action="store_true",
        default=None,
        help="Keep each participant in only their first group",
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    dsn = get_sentry_dsn()
    if dsn:
        sentry_sdk.init(dsn=dsn)

    ok, warnings = check_required_env_vars()
    for warning in warnings:
        print(warning)
    if not ok:
        sys.exit(1)

    check_database_safety()

    statuses = list(ParticipantStatus) if args.all_statuses else [ParticipantStatus.pending]

    if args.dry_run:
        sys.exit(asyncio.run(preview(args.cycle, statuses, args.single_membership)))
    sys.exit(asyncio.run(run(args.cycle, statuses, args.single_membership)))


if __name__ == "__main__":
    main()
