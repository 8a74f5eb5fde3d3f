"""initial_schema

Revision ID: 0001
Revises:
Create Date: 2026-10-17

Creates users, events and attendances with the lookup indexes used by the
event listings (start time, location, visibility, deleted flag, host).
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

# Enum labels are the Python member names, matching SAEnum's default storage.
role_enum = sa.Enum("user", "admin", name="role")
visibility_enum = sa.Enum("public", "private", name="visibility")
attendance_status_enum = sa.Enum("going", "maybe", "declined", name="attendancestatus")


def upgrade() -> None:
    # --- users ---
    op.create_table(
        "users",
        sa.Column("user_id", sa.String(36), primary_key=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("role", role_enum, nullable=False, server_default="user"),
        sa.Column("created_at", sa.DateTime, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime, server_default=sa.func.now()),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)
    op.create_index("ix_users_role", "users", ["role"])

    # --- events ---
    op.create_table(
        "events",
        sa.Column("event_id", sa.String(36), primary_key=True),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("host_id", sa.String(36), sa.ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False),
        sa.Column("start_time", sa.DateTime, nullable=False),
        sa.Column("end_time", sa.DateTime, nullable=False),
        sa.Column("location", sa.String(500), nullable=True),
        sa.Column("visibility", visibility_enum, nullable=False, server_default="public"),
        sa.Column("deleted", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime, server_default=sa.func.now()),
    )
    op.create_index("ix_events_start_time", "events", ["start_time"])
    op.create_index("ix_events_location", "events", ["location"])
    op.create_index("ix_events_visibility", "events", ["visibility"])
    op.create_index("ix_events_deleted", "events", ["deleted"])
    op.create_index("ix_events_host_id", "events", ["host_id"])

    # --- attendances ---
    op.create_table(
        "attendances",
        sa.Column("event_id", sa.String(36), sa.ForeignKey("events.event_id", ondelete="CASCADE"), primary_key=True),
        sa.Column("user_id", sa.String(36), sa.ForeignKey("users.user_id", ondelete="CASCADE"), primary_key=True),
        sa.Column("status", attendance_status_enum, nullable=False, server_default="going"),
        sa.Column("responded_at", sa.DateTime, nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_attendances_event_id", "attendances", ["event_id"])
    op.create_index("ix_attendances_user_id", "attendances", ["user_id"])
    op.create_index("ix_attendances_status", "attendances", ["status"])


def downgrade() -> None:
    op.drop_table("attendances")
    op.drop_table("events")
    op.drop_table("users")
    attendance_status_enum.drop(op.get_bind(), checkfirst=True)
    visibility_enum.drop(op.get_bind(), checkfirst=True)
    role_enum.drop(op.get_bind(), checkfirst=True)
