"""initial schema for Daily Journal

Revision ID: 20261001_core_initial
Revises:
Create Date: 2026-10-01
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "20261001_core_initial"
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        "user",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("username", sa.String(length=64), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_user_username", "user", ["username"], unique=True)
    op.create_index("ix_user_email", "user", ["email"], unique=True)

    op.create_table(
        "token_blocklist",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("jti", sa.String(length=64), nullable=False),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("user.id", ondelete="CASCADE")),
        sa.Column("expires_at", sa.DateTime()),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_token_blocklist_jti", "token_blocklist", ["jti"], unique=True)

    op.create_table(
        "journal_entry",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("user.id", ondelete="CASCADE"), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("entry_date", sa.Date(), nullable=False),
        sa.Column("theme", sa.String(length=255)),
        sa.Column("evaluation", sa.Text()),
        sa.Column("thought_process", sa.Text()),
        sa.Column("sentiment", sa.String(length=16)),
        sa.Column("depth", sa.String(length=16)),
        sa.Column("emotion_label", sa.String(length=64)),
        sa.Column("is_analyzed", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("analyzed_at", sa.DateTime()),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_journal_entry_user_id", "journal_entry", ["user_id"])
    op.create_index("ix_journal_entry_user_entry_date", "journal_entry", ["user_id", "entry_date"])
    op.create_index("ix_journal_entry_user_created_at", "journal_entry", ["user_id", "created_at"])

    op.create_table(
        "task",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("user.id", ondelete="CASCADE"), nullable=False),
        sa.Column(
            "journal_id", sa.Integer(), sa.ForeignKey("journal_entry.id", ondelete="CASCADE"), nullable=True
        ),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("original_text", sa.Text()),
        sa.Column("time_context", sa.String(length=32), nullable=False, server_default="unspecified"),
        sa.Column("deadline", sa.Date()),
        sa.Column("completed", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("completed_at", sa.DateTime()),
        sa.Column("last_reminder_time", sa.DateTime()),
        sa.Column("reminder_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_task_user_id", "task", ["user_id"])
    op.create_index("ix_task_journal_id", "task", ["journal_id"])
    op.create_index("ix_task_user_completed", "task", ["user_id", "completed"])
    op.create_index("ix_task_user_deadline", "task", ["user_id", "deadline"])
    op.create_index("ix_task_user_completed_at", "task", ["user_id", "completed_at"])

    op.create_table(
        "user_settings",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("user.id", ondelete="CASCADE"), nullable=False),
        sa.Column("reminder_interval", sa.Integer(), nullable=False, server_default="20"),
        sa.Column("theme", sa.String(length=16), nullable=False, server_default="system"),
        sa.Column("email_notifications", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("deepseek_api_key_encrypted", sa.Text()),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint("user_id", name="uq_user_settings_user_id"),
    )

    op.create_table(
        "weekly_summary",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("user.id", ondelete="CASCADE"), nullable=False),
        sa.Column("week_start_date", sa.Date(), nullable=False),
        sa.Column("week_end_date", sa.Date(), nullable=False),
        sa.Column("emotion_stats", sa.JSON()),
        sa.Column("theme_summary", sa.Text()),
        sa.Column("task_completion_rate", sa.Float()),
        sa.Column("generated_content", sa.Text(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint("user_id", "week_start_date", name="uq_weekly_summary_user_week"),
    )
    op.create_index("ix_weekly_summary_user_id", "weekly_summary", ["user_id"])


def downgrade():
    op.drop_index("ix_weekly_summary_user_id", table_name="weekly_summary")
    op.drop_table("weekly_summary")
    op.drop_table("user_settings")
    for name in (
        "ix_task_user_completed_at",
        "ix_task_user_deadline",
        "ix_task_user_completed",
        "ix_task_journal_id",
        "ix_task_user_id",
    ):
        op.drop_index(name, table_name="task")
    op.drop_table("task")
    for name in (
        "ix_journal_entry_user_created_at",
        "ix_journal_entry_user_entry_date",
        "ix_journal_entry_user_id",
    ):
        op.drop_index(name, table_name="journal_entry")
    op.drop_table("journal_entry")
    op.drop_index("ix_token_blocklist_jti", table_name="token_blocklist")
    op.drop_table("token_blocklist")
    op.drop_index("ix_user_email", table_name="user")
    op.drop_index("ix_user_username", table_name="user")
    op.drop_table("user")
