"""initial schema

Revision ID: 0001
Revises:
Create Date: 2026-10-19 00:00:00.000000

users + activities. Derived user counters (aura_score, cigarettes_avoided,
total_money_saved) default to zero and are only ever overwritten by full
recomputes.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # --- ENUM types ---
    activity_type_enum = sa.Enum(
        "cigarette_consumed", "gym_workout", "healthy_meal", "skin_care", "social_event",
        name="activity_type_enum",
    )
    activity_type_enum.create(op.get_bind(), checkfirst=True)

    # --- users ---
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("display_name", sa.String(100), nullable=False),
        sa.Column("onboarding_completed", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("years_smoked", sa.Numeric(5, 1), nullable=True),
        sa.Column("cigarettes_per_day", sa.Integer(), nullable=True),
        sa.Column("cost_per_cigarette", sa.Numeric(10, 2), nullable=True),
        sa.Column("motivations", sa.Text(), nullable=True),
        sa.Column("aura_score", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("cigarettes_avoided", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("total_money_saved", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("streak_start_time", sa.DateTime(timezone=True), nullable=True),
        sa.Column("last_smoked", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_users_id", "users", ["id"])
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    # --- activities ---
    op.create_table(
        "activities",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("type", sa.Enum(
            "cigarette_consumed", "gym_workout", "healthy_meal", "skin_care", "social_event",
            name="activity_type_enum", create_type=False,
        ), nullable=False),
        sa.Column("points", sa.Integer(), nullable=False),
        sa.Column("metadata", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_activities_id", "activities", ["id"])
    op.create_index("ix_activities_user_id", "activities", ["user_id"])
    op.create_index("ix_activities_type", "activities", ["type"])
    op.create_index("ix_activities_created_at", "activities", ["created_at"])
    op.create_index("ix_activities_user_created", "activities", ["user_id", "created_at"])
    op.create_index(
        "ix_activities_user_type_created", "activities", ["user_id", "type", "created_at"]
    )


def downgrade() -> None:
    op.drop_index("ix_activities_user_type_created", table_name="activities")
    op.drop_index("ix_activities_user_created", table_name="activities")
    op.drop_index("ix_activities_created_at", table_name="activities")
    op.drop_index("ix_activities_type", table_name="activities")
    op.drop_index("ix_activities_user_id", table_name="activities")
    op.drop_index("ix_activities_id", table_name="activities")
    op.drop_table("activities")

    op.drop_index("ix_users_email", table_name="users")
    op.drop_index("ix_users_id", table_name="users")
    op.drop_table("users")

    sa.Enum(name="activity_type_enum").drop(op.get_bind(), checkfirst=True)
