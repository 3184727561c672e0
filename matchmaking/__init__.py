"""
Core matching logic - platform-agnostic.
Can be used by the operator CLI, an admin UI, or any other interface.
"""

# Database (SQLAlchemy)
from .database import get_connection, get_engine, close_engine

# Constants and enums
from .constants import SLOT_LABELS, EXPERIENCE_BANDS, TARGET_GROUP_SIZE, MIN_GROUP_SIZE
from .enums import Slot, ExperienceLevel, ParticipantStatus

# Matching algorithm
from .grouping import (
    Participant, MatchGroup, MatchingResult,
    MatchingError, ValidationError, RunFailure,
    validate_participants, classify_by_slot, preferred_locations,
    bucket_by_location, build_groups, keep_first_membership,
    compute_match_groups, derive_status_updates,
)

# Participant records
from .participants import participant_from_row, participants_from_rows

# Run orchestration (async)
from .runner import commit_match_groups, preview_matching, run_matching

__all__ = [
    # Database (SQLAlchemy)
    'get_connection', 'get_engine', 'close_engine',
    # Constants and enums
    'SLOT_LABELS', 'EXPERIENCE_BANDS', 'TARGET_GROUP_SIZE', 'MIN_GROUP_SIZE',
    'Slot', 'ExperienceLevel', 'ParticipantStatus',
    # Matching algorithm
    'Participant', 'MatchGroup', 'MatchingResult',
    'MatchingError', 'ValidationError', 'RunFailure',
    'validate_participants', 'classify_by_slot', 'preferred_locations',
    'bucket_by_location', 'build_groups', 'keep_first_membership',
    'compute_match_groups', 'derive_status_updates',
    # Participant records
    'participant_from_row', 'participants_from_rows',
    # Run orchestration (async)
    'commit_match_groups', 'preview_matching', 'run_matching',
]
