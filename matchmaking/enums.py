"""Enum definitions for participants, slots and the database schema."""

import enum

from sqlalchemy import Enum as SQLEnum

from .constants import EXPERIENCE_BANDS


# =====================================================
# Python Enum Classes
# =====================================================


class Slot(str, enum.Enum):
    weekday_lunch = "Weekday Lunch"
    weekday_dinner = "Weekday Dinner"
    weekend_lunch = "Weekend Lunch"
    weekend_dinner = "Weekend Dinner"


class ExperienceLevel(str, enum.Enum):
    years_0_3 = "0-3 years"
    years_4_7 = "4-7 years"
    years_8_15 = "8-15 years"
    years_15_plus = "15+ years"
    judicial_officer = "Judicial Officer"

    @property
    def rank(self) -> int:
        """Position in the fixed band ordering (1 = least experienced)."""
        return EXPERIENCE_BANDS.index(self.value) + 1


class ParticipantStatus(str, enum.Enum):
    pending = "pending"
    matched = "matched"
    emailed = "emailed"


# =====================================================
# SQLAlchemy Enum Types
# Values (not member names) are stored, matching what intake writes
# =====================================================


def _enum_values(enum_cls) -> list[str]:
    return [member.value for member in enum_cls]


slot_enum = SQLEnum(
    Slot, name="match_slot", values_callable=_enum_values, native_enum=True
)
experience_level_enum = SQLEnum(
    ExperienceLevel,
    name="experience_level",
    values_callable=_enum_values,
    native_enum=True,
)
participant_status_enum = SQLEnum(
    ParticipantStatus,
    name="participant_status",
    values_callable=_enum_values,
    native_enum=True,
)
