"""Initial ReflectAI schema: users, auth, outbox, journal, goals, check-ins, challenges, chat.

Revision ID: 20261019_initial_schema
Revises:
Create Date: 2026-10-19
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "20261019_initial_schema"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps():
    return [
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
    ]


def upgrade():
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("username", sa.String(length=64), nullable=True),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column("full_name", sa.String(length=255), nullable=True),
        sa.Column("timezone", sa.String(length=64), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("subscription_plan", sa.String(length=32), nullable=False, server_default="free"),
        sa.Column("has_active_subscription", sa.Boolean(), nullable=False),
        sa.Column("trial_ends_at", sa.DateTime(), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint("username", name="uq_users_username"),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "user_preference",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("key", sa.String(length=128), nullable=False),
        sa.Column("value", sa.JSON(), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint("user_id", "key", name="uq_user_preference_user_key"),
    )
    op.create_index("ix_user_preference_user_id", "user_preference", ["user_id"])

    op.create_table(
        "role",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(length=64), nullable=False),
        sa.Column("description", sa.String(length=255), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint("name", name="uq_role_name"),
    )
    op.create_table(
        "user_role",
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("role_id", sa.Integer(), sa.ForeignKey("role.id"), primary_key=True),
    )
    op.create_table(
        "session_token",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("jti", sa.String(length=64), nullable=False),
        sa.Column("revoked", sa.Boolean(), nullable=False),
        sa.Column("expires_at", sa.DateTime(), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint("jti", name="uq_session_token_jti"),
    )
    op.create_index("ix_session_token_user_id", "session_token", ["user_id"])
    op.create_table(
        "jwt_blocklist",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("jti", sa.String(length=64), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint("jti", name="uq_jwt_blocklist_jti"),
    )

    op.create_table(
        "platform_outbox",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="SET NULL"), nullable=True),
        sa.Column("event_type", sa.String(length=128), nullable=False),
        sa.Column("payload", sa.JSON(), nullable=False),
        sa.Column("status", sa.String(length=32), nullable=False, server_default="pending"),
        sa.Column("attempts", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("available_at", sa.DateTime(), nullable=False),
        sa.Column("last_error", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_platform_outbox_user_id", "platform_outbox", ["user_id"])
    op.create_index("ix_platform_outbox_event_type", "platform_outbox", ["event_type"])
    op.create_index("ix_platform_outbox_status_available_at", "platform_outbox", ["status", "available_at"])
    op.create_index("ix_platform_outbox_user_created_at", "platform_outbox", ["user_id", "created_at"])

    op.create_table(
        "journal_entries",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("title", sa.String(length=255), nullable=True),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("entry_date", sa.DateTime(), nullable=False),
        sa.Column("entry_day", sa.Date(), nullable=False),
        sa.Column("moods", sa.JSON(), nullable=False),
        sa.Column("ai_response", sa.Text(), nullable=True),
        sa.Column("is_favorite", sa.Boolean(), nullable=False, server_default=sa.false()),
        *_timestamps(),
        sa.UniqueConstraint("user_id", "entry_day", name="uq_journal_entries_user_day"),
    )
    op.create_index("ix_journal_entries_user_id", "journal_entries", ["user_id"])
    op.create_index("ix_journal_entries_user_entry_date", "journal_entries", ["user_id", "entry_date"])
    op.create_index("ix_journal_entries_user_favorite", "journal_entries", ["user_id", "is_favorite"])

    op.create_table(
        "journal_stats",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("entries_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("current_streak", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("longest_streak", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("top_moods", sa.JSON(), nullable=False),
        sa.Column("last_updated", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
        sa.UniqueConstraint("user_id", name="uq_journal_stats_user_id"),
    )

    op.create_table(
        "goals",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("type", sa.String(length=16), nullable=False),
        sa.Column("status", sa.String(length=16), nullable=False, server_default="not_started"),
        sa.Column("target_date", sa.Date(), nullable=True),
        sa.Column("completed_date", sa.DateTime(), nullable=True),
        sa.Column("progress", sa.Float(), nullable=False, server_default="0"),
        sa.Column("time_spent", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("target_minutes", sa.Integer(), nullable=True),
        sa.Column("parent_goal_id", sa.Integer(), sa.ForeignKey("goals.id", ondelete="SET NULL"), nullable=True),
        *_timestamps(),
        sa.CheckConstraint("progress >= 0 AND progress <= 100", name="ck_goals_progress_range"),
        sa.CheckConstraint("time_spent >= 0", name="ck_goals_time_spent_positive"),
    )
    op.create_index("ix_goals_user_id", "goals", ["user_id"])
    op.create_index("ix_goals_parent_goal_id", "goals", ["parent_goal_id"])
    op.create_index("ix_goals_user_type", "goals", ["user_id", "type"])
    op.create_index("ix_goals_user_status", "goals", ["user_id", "status"])

    op.create_table(
        "goal_activities",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("goal_id", sa.Integer(), sa.ForeignKey("goals.id", ondelete="CASCADE"), nullable=False),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("minutes_spent", sa.Integer(), nullable=False),
        sa.Column("progress_increment", sa.Float(), nullable=False, server_default="0"),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=True),
    )
    op.create_index("ix_goal_activities_goal_date", "goal_activities", ["goal_id", "date"])
    op.create_index("ix_goal_activities_user_date", "goal_activities", ["user_id", "date"])

    op.create_table(
        "check_ins",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("type", sa.String(length=32), nullable=False),
        sa.Column("question", sa.Text(), nullable=False),
        sa.Column("original_date", sa.DateTime(), nullable=False),
        sa.Column("scheduled_date", sa.DateTime(), nullable=False),
        sa.Column("is_answered", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("user_response", sa.Text(), nullable=True),
        sa.Column("ai_follow_up", sa.Text(), nullable=True),
        sa.Column("is_resolved", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("priority", sa.String(length=16), nullable=False, server_default="normal"),
        sa.Column("tags", sa.JSON(), nullable=False),
        sa.Column(
            "related_entry_id",
            sa.Integer(),
            sa.ForeignKey("journal_entries.id", ondelete="SET NULL"),
            nullable=True,
        ),
        *_timestamps(),
    )
    op.create_index("ix_check_ins_user_id", "check_ins", ["user_id"])
    op.create_index("ix_check_ins_user_scheduled", "check_ins", ["user_id", "scheduled_date"])
    op.create_index("ix_check_ins_user_type", "check_ins", ["user_id", "type"])

    op.create_table(
        "challenges",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("type", sa.String(length=32), nullable=False),
        sa.Column("target_value", sa.Integer(), nullable=False),
        sa.Column("duration", sa.Integer(), nullable=False, server_default="7"),
        sa.Column("points", sa.Integer(), nullable=False, server_default="100"),
        sa.Column("badge_icon", sa.String(length=32), nullable=False, server_default="trophy"),
        sa.Column("badge_color", sa.String(length=16), nullable=False, server_default="#FFD700"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.UniqueConstraint("title", name="uq_challenges_title"),
    )
    op.create_index("ix_challenges_type", "challenges", ["type"])

    op.create_table(
        "user_challenges",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("challenge_id", sa.Integer(), sa.ForeignKey("challenges.id", ondelete="CASCADE"), nullable=False),
        sa.Column("status", sa.String(length=16), nullable=False, server_default="not_started"),
        sa.Column("current_progress", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("started_at", sa.DateTime(), nullable=True),
        sa.Column("completed_at", sa.DateTime(), nullable=True),
        sa.Column("expires_at", sa.DateTime(), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint("user_id", "challenge_id", name="uq_user_challenges_user_challenge"),
    )
    op.create_index("ix_user_challenges_user_status", "user_challenges", ["user_id", "status"])

    op.create_table(
        "user_badges",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("challenge_id", sa.Integer(), sa.ForeignKey("challenges.id", ondelete="CASCADE"), nullable=False),
        sa.Column("earned_at", sa.DateTime(), nullable=False),
        sa.Column("points", sa.Integer(), nullable=False, server_default="0"),
        sa.UniqueConstraint("user_id", "challenge_id", name="uq_user_badges_user_challenge"),
    )
    op.create_index("ix_user_badges_user_id", "user_badges", ["user_id"])

    op.create_table(
        "chat_usage",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("week_start_date", sa.DateTime(), nullable=False),
        sa.Column("chat_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("last_updated", sa.DateTime(), nullable=True),
        sa.UniqueConstraint("user_id", "week_start_date", name="uq_chat_usage_user_week"),
    )
    op.create_index("ix_chat_usage_user_id", "chat_usage", ["user_id"])


def downgrade():
    op.drop_table("chat_usage")
    op.drop_table("user_badges")
    op.drop_table("user_challenges")
    op.drop_table("challenges")
    op.drop_table("check_ins")
    op.drop_table("goal_activities")
    op.drop_table("goals")
    op.drop_table("journal_stats")
    op.drop_table("journal_entries")
    op.drop_table("platform_outbox")
    op.drop_table("jwt_blocklist")
    op.drop_table("session_token")
    op.drop_table("user_role")
    op.drop_table("role")
    op.drop_table("user_preference")
    op.drop_table("users")
