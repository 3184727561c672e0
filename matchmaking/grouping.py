"""
Match Group Algorithm

Partitions one cycle's participants into small discussion groups.

Algorithm: deterministic single-pass greedy assignment (not an optimizer).
- Classify participants into scheduling slots by their top availability,
  backfilling sparse slots from secondary preferences
- Within each slot, bucket participants by first-choice location
- Within each bucket, spread practice areas and experience bands across
  ceil(N / 4) groups by always filling the currently smallest group

Everything here is pure: no database access. Persisting the resulting
groups is done separately by matchmaking.runner.
"""

import logging
import math
from dataclasses import dataclass, field, replace
from typing import Optional

from .constants import BACKFILL_THRESHOLD, MIN_GROUP_SIZE, TARGET_GROUP_SIZE
from .enums import ExperienceLevel, ParticipantStatus, Slot

logger = logging.getLogger(__name__)


@dataclass
class Participant:
    """A participant's validated preferences for one cycle."""
    id: int
    practice_areas: list  # First entry is the primary practice area
    experience_level: ExperienceLevel
    availability: list  # Slots, most preferred first
    locations: list = field(default_factory=list)
    uses_separate_locations: bool = False
    slot_locations: dict = field(default_factory=dict)  # Slot -> list of locations
    name: str = ""
    email: str = ""
    bar_number: str = ""
    networking_goals: list = field(default_factory=list)
    cycle: str = ""
    status: ParticipantStatus = ParticipantStatus.pending
    match_group_id: Optional[int] = None


@dataclass
class MatchGroup:
    """A draft group for one slot and location. id is None until committed."""
    members: list  # list of Participant
    slot: Slot
    location: str
    cycle: str
    is_finalized: bool = False
    id: Optional[int] = None
    meeting_time: Optional[str] = None
    meeting_location: Optional[str] = None

    @property
    def participant_ids(self) -> list:
        return [p.id for p in self.members]


@dataclass
class MatchingResult:
    """Result of computing groups for a cycle (before anything is persisted)."""
    cycle: str
    groups: list  # list of MatchGroup, in emission order
    unplaced_ids: list  # participant ids that ended up in no group


# Exceptions
class MatchingError(Exception):
    """Base exception for matching errors."""
    pass


class ValidationError(MatchingError):
    """A participant record failed validation."""

    def __init__(self, participant_id, field_name: str, message: str):
        self.participant_id = participant_id
        self.field_name = field_name
        super().__init__(f"Participant {participant_id}: invalid {field_name}: {message}")


class RunFailure(MatchingError):
    """Persisting a run failed partway. created_groups were already committed."""

    def __init__(self, message: str, created_groups: list = None):
        self.created_groups = created_groups or []
        super().__init__(message)


def parse_enum(enum_cls, value, participant_id, field_name: str):
    """Coerce a raw value to enum_cls, raising ValidationError if it isn't a member."""
    try:
        return enum_cls(value)
    except ValueError:
        raise ValidationError(
            participant_id, field_name, f"{value!r} is not a valid {enum_cls.__name__}"
        ) from None


def validate_participants(participants: list) -> list:
    """
    Check every participant and normalize enum-valued fields.

    Raw strings for experience level, availability and per-slot location
    keys are converted to their enums. Fails on the first bad record.

    Returns:
        New list of Participant objects (inputs are not mutated)

    Raises:
        ValidationError: unknown experience level or slot, or duplicate id
    """
    seen_ids = set()
    validated = []

    for participant in participants:
        if participant.id in seen_ids:
            raise ValidationError(participant.id, "id", "duplicate participant id")
        seen_ids.add(participant.id)

        experience_level = parse_enum(
            ExperienceLevel, participant.experience_level, participant.id, "experience_level"
        )
        availability = [
            parse_enum(Slot, slot, participant.id, "availability")
            for slot in participant.availability
        ]
        slot_locations = {
            parse_enum(Slot, slot, participant.id, "slot_locations"): list(locations or [])
            for slot, locations in participant.slot_locations.items()
        }

        validated.append(replace(
            participant,
            practice_areas=list(participant.practice_areas or []),
            experience_level=experience_level,
            availability=availability,
            locations=list(participant.locations or []),
            slot_locations=slot_locations,
        ))

    return validated


def classify_by_slot(participants: list) -> dict:
    """
    Group participants by scheduling slot.

    First pass puts everyone in the slot of their top availability choice.
    Second pass: each slot with fewer than BACKFILL_THRESHOLD members also
    takes anyone who lists it further down their availability. Such people
    end up in more than one slot.

    Participants with no availability are left out entirely.

    Returns: dict mapping Slot -> list of Participant (every slot present)
    """
    slots = {slot: [] for slot in Slot}

    for participant in participants:
        if participant.availability:
            slots[participant.availability[0]].append(participant)

    # Threshold is checked against primary-pass members only, since
    # backfilling one slot never adds to another
    for slot, members in slots.items():
        if len(members) >= BACKFILL_THRESHOLD:
            continue

        member_ids = {p.id for p in members}
        for participant in participants:
            if (
                participant.id not in member_ids
                and slot in participant.availability
                and participant.availability[0] != slot
            ):
                members.append(participant)
                member_ids.add(participant.id)

    return slots


def preferred_locations(participant: Participant, slot: Slot) -> list:
    """Location preferences that apply to this participant for the given slot."""
    if participant.uses_separate_locations:
        return participant.slot_locations.get(slot, [])
    return participant.locations


def bucket_by_location(participants: list, slot: Slot) -> dict:
    """
    Group a slot's participants by their first-choice location for that slot.

    Participants with no location preference for the slot are skipped.

    Returns: dict mapping location -> list of Participant, in first-seen order
    """
    buckets = {}
    for participant in participants:
        locations = preferred_locations(participant, slot)
        if not locations:
            continue

        location = locations[0]
        if location not in buckets:
            buckets[location] = []
        buckets[location].append(participant)
    return buckets


def primary_practice_area(participant: Participant) -> Optional[str]:
    """First listed practice area, or None if none given."""
    return participant.practice_areas[0] if participant.practice_areas else None


def _place_in_smallest(groups: list, sizes: list, participant: Participant) -> None:
    # list.index returns the first minimum, so ties go to the lowest index
    index = sizes.index(min(sizes))
    groups[index].append(participant)
    sizes[index] += 1


def build_groups(participants: list, target_size: int = TARGET_GROUP_SIZE) -> list:
    """
    Split one slot+location bucket into diverse groups.

    Creates ceil(N / target_size) groups. Participants are sorted by
    experience (stable), then walked practice area by practice area, each
    going to the currently smallest group. This spreads every practice
    area and experience band across groups before doubling up.

    May return groups smaller than MIN_GROUP_SIZE; callers filter those.

    Returns: list of groups, each a list of Participant
    """
    if not participants:
        return []

    ordered = sorted(participants, key=lambda p: p.experience_level.rank)

    by_practice_area = {}
    for participant in ordered:
        area = primary_practice_area(participant)
        if area not in by_practice_area:
            by_practice_area[area] = []
        by_practice_area[area].append(participant)

    total_groups = math.ceil(len(ordered) / target_size)
    groups = [[] for _ in range(total_groups)]
    sizes = [0] * total_groups

    placed_ids = set()
    for area_members in by_practice_area.values():
        for participant in area_members:
            _place_in_smallest(groups, sizes, participant)
            placed_ids.add(participant.id)

    for participant in ordered:
        if participant.id not in placed_ids:
            _place_in_smallest(groups, sizes, participant)
            placed_ids.add(participant.id)

    return [group for group in groups if group]


def keep_first_membership(groups: list) -> list:
    """
    Drop repeat memberships so each participant sits in one group only.

    A participant stays in the first group (in emission order) that holds
    them. Groups that fall below MIN_GROUP_SIZE as a result are dropped,
    and their remaining members become free for later groups.
    """
    assigned_ids = set()
    kept = []

    for group in groups:
        members = [p for p in group.members if p.id not in assigned_ids]
        if len(members) < MIN_GROUP_SIZE:
            logger.debug(
                f"Dropping {group.slot.value} group at {group.location}: "
                f"{len(members)} member(s) left after removing repeats"
            )
            continue
        assigned_ids.update(p.id for p in members)
        kept.append(replace(group, members=members))

    return kept


def compute_match_groups(participants: list, cycle: str,
                         single_membership: bool = False) -> MatchingResult:
    """
    Compute draft match groups for a cycle without touching the database.

    Args:
        participants: Participant records to match (order matters for ties)
        cycle: Cycle tag copied onto every group
        single_membership: Keep each participant in their first group only

    Returns:
        MatchingResult with groups in slot, then location, then build order

    Raises:
        ValidationError: If any participant record is malformed
    """
    if len(participants) < MIN_GROUP_SIZE:
        logger.info(f"Only {len(participants)} participant(s) for {cycle!r}, nothing to match")
        return MatchingResult(
            cycle=cycle, groups=[], unplaced_ids=[p.id for p in participants]
        )

    validated = validate_participants(participants)
    match_groups = []

    for slot, slot_members in classify_by_slot(validated).items():
        if len(slot_members) < MIN_GROUP_SIZE:
            logger.debug(f"Skipping {slot.value}: {len(slot_members)} participant(s)")
            continue

        for location, bucket in bucket_by_location(slot_members, slot).items():
            if len(bucket) < MIN_GROUP_SIZE:
                logger.debug(f"Skipping {slot.value} at {location}: {len(bucket)} participant(s)")
                continue

            built = [g for g in build_groups(bucket) if len(g) >= MIN_GROUP_SIZE]
            for members in built:
                match_groups.append(MatchGroup(
                    members=members,
                    slot=slot,
                    location=location,
                    cycle=cycle,
                    meeting_time=slot.value,
                    meeting_location=location,
                ))
            logger.info(
                f"{slot.value} at {location}: {len(bucket)} participants -> {len(built)} group(s)"
            )

    if single_membership:
        match_groups = keep_first_membership(match_groups)

    placed_ids = {p.id for group in match_groups for p in group.members}
    unplaced_ids = [p.id for p in validated if p.id not in placed_ids]

    return MatchingResult(cycle=cycle, groups=match_groups, unplaced_ids=unplaced_ids)


def derive_status_updates(groups: list) -> dict:
    """
    Map each placed participant to the group they should point back to.

    When someone is in several groups, the most recently created one wins.

    Returns: dict mapping participant id -> group id
    """
    updates = {}
    for group in groups:
        for participant in group.members:
            updates[participant.id] = group.id
    return updates
