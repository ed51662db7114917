"""Initial schema

Revision ID: 001_initial
Revises:
Create Date: 2026-10-18

"""
from collections.abc import Sequence
from typing import Union

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Create users table
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("rfid_tag", sa.String(length=50), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_users_id"), "users", ["id"], unique=False)
    op.create_index(op.f("ix_users_rfid_tag"), "users", ["rfid_tag"], unique=True)

    # Create sessions table
    op.create_table(
        "sessions",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("session_id", sa.String(length=64), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("dumbbell_weight", sa.Float(), nullable=False),
        sa.Column("start_time", sa.DateTime(), nullable=False),
        sa.Column("end_time", sa.DateTime(), nullable=True),
        sa.Column("total_reps", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("total_sets", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("total_calories", sa.Float(), nullable=False, server_default="0"),
        sa.Column("avg_form_score", sa.Float(), nullable=False, server_default="0"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_sessions_id"), "sessions", ["id"], unique=False)
    op.create_index(op.f("ix_sessions_session_id"), "sessions", ["session_id"], unique=True)
    op.create_index(op.f("ix_sessions_user_id"), "sessions", ["user_id"], unique=False)

    # Create workout_data table
    op.create_table(
        "workout_data",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("session_id", sa.String(length=64), nullable=False),
        sa.Column("weight", sa.Float(), nullable=False),
        sa.Column("reps", sa.Integer(), nullable=False),
        sa.Column("sets", sa.Integer(), nullable=False),
        sa.Column("duration", sa.Integer(), nullable=False),
        sa.Column("calories", sa.Float(), nullable=False, server_default="0"),
        sa.Column("form_score", sa.Float(), nullable=False, server_default="4.5"),
        sa.Column("timestamp", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["session_id"], ["sessions.session_id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_workout_data_id"), "workout_data", ["id"], unique=False)
    op.create_index(op.f("ix_workout_data_session_id"), "workout_data", ["session_id"], unique=False)
    op.create_index(op.f("ix_workout_data_timestamp"), "workout_data", ["timestamp"], unique=False)

    # Create rep_data table
    op.create_table(
        "rep_data",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("session_id", sa.String(length=64), nullable=False),
        sa.Column("rep_number", sa.Integer(), nullable=False),
        sa.Column("angle_range", sa.Float(), nullable=False, server_default="0"),
        sa.Column("max_accel", sa.Float(), nullable=False, server_default="0"),
        sa.Column("displacement", sa.Float(), nullable=False, server_default="0"),
        sa.Column("work_done", sa.Float(), nullable=False, server_default="0"),
        sa.Column("calories", sa.Float(), nullable=False, server_default="0"),
        sa.Column("duration", sa.Float(), nullable=True),
        sa.Column("timestamp", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["session_id"], ["sessions.session_id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_rep_data_id"), "rep_data", ["id"], unique=False)
    op.create_index(op.f("ix_rep_data_session_id"), "rep_data", ["session_id"], unique=False)


def downgrade() -> None:
    op.drop_index(op.f("ix_rep_data_session_id"), table_name="rep_data")
    op.drop_index(op.f("ix_rep_data_id"), table_name="rep_data")
    op.drop_table("rep_data")

    op.drop_index(op.f("ix_workout_data_timestamp"), table_name="workout_data")
    op.drop_index(op.f("ix_workout_data_session_id"), table_name="workout_data")
    op.drop_index(op.f("ix_workout_data_id"), table_name="workout_data")
    op.drop_table("workout_data")

    op.drop_index(op.f("ix_sessions_user_id"), table_name="sessions")
    op.drop_index(op.f("ix_sessions_session_id"), table_name="sessions")
    op.drop_index(op.f("ix_sessions_id"), table_name="sessions")
    op.drop_table("sessions")

    op.drop_index(op.f("ix_users_rfid_tag"), table_name="users")
    op.drop_index(op.f("ix_users_id"), table_name="users")
    op.drop_table("users")
