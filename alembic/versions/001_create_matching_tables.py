"""create participants, match_groups and match_groups_participants

Revision ID: 001
Revises:
Create Date: 2025-02-10 12:00:00.000000

Participants are written by the preference intake form; match groups
and memberships are written by the matching run.
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

JSONB_EMPTY_LIST = sa.text("'[]'::jsonb")


def upgrade() -> None:
    slot_enum = postgresql.ENUM(
        "Weekday Lunch", "Weekday Dinner", "Weekend Lunch", "Weekend Dinner",
        name="match_slot",
    )
    experience_level_enum = postgresql.ENUM(
        "0-3 years", "4-7 years", "8-15 years", "15+ years", "Judicial Officer",
        name="experience_level",
    )
    participant_status_enum = postgresql.ENUM(
        "pending", "matched", "emailed",
        name="participant_status",
    )
    bind = op.get_bind()
    slot_enum.create(bind, checkfirst=True)
    experience_level_enum.create(bind, checkfirst=True)
    participant_status_enum.create(bind, checkfirst=True)

    op.create_table(
        "match_groups",
        sa.Column("match_group_id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("cycle", sa.Text, nullable=False),
        sa.Column("slot", postgresql.ENUM(name="match_slot", create_type=False), nullable=False),
        sa.Column("location", sa.Text, nullable=False),
        sa.Column("meeting_time", sa.Text),
        sa.Column("meeting_location", sa.Text),
        sa.Column("is_finalized", sa.Boolean, nullable=False, server_default="false"),
        sa.Column("created_at", postgresql.TIMESTAMP(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", postgresql.TIMESTAMP(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("idx_match_groups_cycle", "match_groups", ["cycle"])

    op.create_table(
        "participants",
        sa.Column("participant_id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("cycle", sa.Text, nullable=False),
        sa.Column("name", sa.Text),
        sa.Column("email", sa.Text),
        sa.Column("bar_number", sa.Text),
        sa.Column("practice_areas", postgresql.JSONB, nullable=False, server_default=JSONB_EMPTY_LIST),
        sa.Column(
            "experience_level",
            postgresql.ENUM(name="experience_level", create_type=False),
            nullable=False,
        ),
        sa.Column("networking_goals", postgresql.JSONB, server_default=JSONB_EMPTY_LIST),
        sa.Column("availability", postgresql.JSONB, nullable=False, server_default=JSONB_EMPTY_LIST),
        sa.Column("locations", postgresql.JSONB, nullable=False, server_default=JSONB_EMPTY_LIST),
        sa.Column("uses_separate_locations", sa.Boolean, nullable=False, server_default="false"),
        sa.Column("weekday_lunch_locations", postgresql.JSONB),
        sa.Column("weekday_dinner_locations", postgresql.JSONB),
        sa.Column("weekend_lunch_locations", postgresql.JSONB),
        sa.Column("weekend_dinner_locations", postgresql.JSONB),
        sa.Column(
            "status",
            postgresql.ENUM(name="participant_status", create_type=False),
            nullable=False,
            server_default="pending",
        ),
        sa.Column(
            "match_group_id",
            sa.Integer,
            sa.ForeignKey("match_groups.match_group_id", ondelete="SET NULL"),
        ),
        sa.Column("submitted_at", postgresql.TIMESTAMP(timezone=True), server_default=sa.func.now()),
        sa.Column("created_at", postgresql.TIMESTAMP(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", postgresql.TIMESTAMP(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint("cycle", "email", name="uq_participants_cycle_email"),
    )
    op.create_index("idx_participants_cycle", "participants", ["cycle"])
    op.create_index("idx_participants_status", "participants", ["status"])

    op.create_table(
        "match_groups_participants",
        sa.Column("match_group_participant_id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "match_group_id",
            sa.Integer,
            sa.ForeignKey("match_groups.match_group_id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "participant_id",
            sa.Integer,
            sa.ForeignKey("participants.participant_id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("created_at", postgresql.TIMESTAMP(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint(
            "match_group_id", "participant_id", name="uq_match_groups_participants_member"
        ),
    )
    op.create_index(
        "idx_match_groups_participants_group_id", "match_groups_participants", ["match_group_id"]
    )
    op.create_index(
        "idx_match_groups_participants_participant_id",
        "match_groups_participants",
        ["participant_id"],
    )


def downgrade() -> None:
    op.drop_table("match_groups_participants")
    op.drop_table("participants")
    op.drop_table("match_groups")

    bind = op.get_bind()
    postgresql.ENUM(name="participant_status").drop(bind, checkfirst=True)
    postgresql.ENUM(name="experience_level").drop(bind, checkfirst=True)
    postgresql.ENUM(name="match_slot").drop(bind, checkfirst=True)
