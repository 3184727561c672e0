"""SQLAlchemy Core table definitions for the database schema."""

from sqlalchemy import (
    Boolean,
    Column,
    ForeignKey,
    Index,
    Integer,
    MetaData,
    Table,
    Text,
    UniqueConstraint,
    func,
    text,
)
from sqlalchemy.dialects.postgresql import JSONB, TIMESTAMP

from .enums import experience_level_enum, participant_status_enum, slot_enum

# Naming convention for constraints (helps Alembic generate better names)
convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}
metadata = MetaData(naming_convention=convention)


# =====================================================
# 1. MATCH_GROUPS
# =====================================================
match_groups = Table(
    "match_groups",
    metadata,
    Column("match_group_id", Integer, primary_key=True, autoincrement=True),
    Column("cycle", Text, nullable=False),
    Column("slot", slot_enum, nullable=False),
    Column("location", Text, nullable=False),
    # Editable by admins; initialised from slot / location
    Column("meeting_time", Text),
    Column("meeting_location", Text),
    Column("is_finalized", Boolean, nullable=False, server_default="false"),
    Column("created_at", TIMESTAMP(timezone=True), server_default=func.now()),
    Column("updated_at", TIMESTAMP(timezone=True), server_default=func.now()),
    Index("idx_match_groups_cycle", "cycle"),
)


# =====================================================
# 2. PARTICIPANTS
# =====================================================
participants = Table(
    "participants",
    metadata,
    Column("participant_id", Integer, primary_key=True, autoincrement=True),
    Column("cycle", Text, nullable=False),
    Column("name", Text),
    Column("email", Text),
    Column("bar_number", Text),
    Column("practice_areas", JSONB, nullable=False, server_default=text("'[]'::jsonb")),
    Column("experience_level", experience_level_enum, nullable=False),
    Column("networking_goals", JSONB, server_default=text("'[]'::jsonb")),
    Column("availability", JSONB, nullable=False, server_default=text("'[]'::jsonb")),
    Column("locations", JSONB, nullable=False, server_default=text("'[]'::jsonb")),
    Column("uses_separate_locations", Boolean, nullable=False, server_default="false"),
    Column("weekday_lunch_locations", JSONB),
    Column("weekday_dinner_locations", JSONB),
    Column("weekend_lunch_locations", JSONB),
    Column("weekend_dinner_locations", JSONB),
    Column("status", participant_status_enum, nullable=False, server_default="pending"),
    # Most recently assigned group (a participant may belong to more than one)
    Column(
        "match_group_id",
        Integer,
        ForeignKey("match_groups.match_group_id", ondelete="SET NULL"),
    ),
    Column("submitted_at", TIMESTAMP(timezone=True), server_default=func.now()),
    Column("created_at", TIMESTAMP(timezone=True), server_default=func.now()),
    Column("updated_at", TIMESTAMP(timezone=True), server_default=func.now()),
    UniqueConstraint("cycle", "email", name="uq_participants_cycle_email"),
    Index("idx_participants_cycle", "cycle"),
    Index("idx_participants_status", "status"),
)


# =====================================================
# 3. MATCH_GROUPS_PARTICIPANTS
# =====================================================
match_groups_participants = Table(
    "match_groups_participants",
    metadata,
    Column("match_group_participant_id", Integer, primary_key=True, autoincrement=True),
    Column(
        "match_group_id",
        Integer,
        ForeignKey("match_groups.match_group_id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column(
        "participant_id",
        Integer,
        ForeignKey("participants.participant_id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("created_at", TIMESTAMP(timezone=True), server_default=func.now()),
    UniqueConstraint(
        "match_group_id", "participant_id", name="uq_match_groups_participants_member"
    ),
    Index("idx_match_groups_participants_group_id", "match_group_id"),
    Index("idx_match_groups_participants_participant_id", "participant_id"),
)
