"""initial schema

Revision ID: 3b1f0c2d9a41
Revises:
Create Date: 2026-10-19 09:12:44.512306

"""
from __future__ import annotations

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "3b1f0c2d9a41"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _uuid(name: str, *fk: sa.ForeignKey, nullable: bool = False) -> sa.Column:
    return sa.Column(name, sa.String(length=36), *fk, nullable=nullable)


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
    ]


def upgrade() -> None:
    """Create account, content, moderation and notification tables."""
    op.create_table(
        "members",
        _uuid("id"),
        sa.Column("email", sa.String(length=320), nullable=False),
        sa.Column("password_hash", sa.Text(), nullable=False),
        sa.Column("nickname", sa.String(length=64), nullable=False),
        sa.Column("email_verified", sa.Boolean(), nullable=False),
        sa.Column("status", sa.String(length=32), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("email"),
        sa.UniqueConstraint("nickname"),
    )
    op.create_table(
        "administrators",
        _uuid("id"),
        _uuid("member_id", sa.ForeignKey("members.id")),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("member_id"),
    )
    op.create_table(
        "moderators",
        _uuid("id"),
        _uuid("member_id", sa.ForeignKey("members.id")),
        _uuid("assigned_by_administrator_id", sa.ForeignKey("administrators.id"), nullable=True),
        sa.Column("status", sa.String(length=32), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("member_id"),
    )
    op.create_table(
        "consent_records",
        _uuid("id"),
        _uuid("member_id", sa.ForeignKey("members.id", ondelete="CASCADE")),
        sa.Column("policy_type", sa.String(length=64), nullable=False),
        sa.Column("policy_version", sa.String(length=32), nullable=False),
        sa.Column("consent_action", sa.String(length=16), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_table(
        "posts",
        _uuid("id"),
        _uuid("author_member_id", sa.ForeignKey("members.id")),
        sa.Column("title", sa.String(length=300), nullable=False),
        sa.Column("body", sa.Text(), nullable=False),
        sa.Column("business_status", sa.String(length=32), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_table(
        "comments",
        _uuid("id"),
        _uuid("post_id", sa.ForeignKey("posts.id")),
        _uuid("author_member_id", sa.ForeignKey("members.id")),
        sa.Column("body", sa.Text(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_table(
        "moderation_actions",
        _uuid("id"),
        _uuid("moderator_id", sa.ForeignKey("moderators.id")),
        _uuid("target_member_id", sa.ForeignKey("members.id"), nullable=True),
        _uuid("target_post_id", sa.ForeignKey("posts.id"), nullable=True),
        _uuid("target_comment_id", sa.ForeignKey("comments.id"), nullable=True),
        sa.Column("action_type", sa.String(length=32), nullable=False),
        sa.Column("action_reason", sa.Text(), nullable=False),
        sa.Column("details", sa.Text(), nullable=True),
        sa.Column("effective_from", sa.DateTime(timezone=True), nullable=False),
        sa.Column("effective_until", sa.DateTime(timezone=True), nullable=True),
        sa.Column("status", sa.String(length=32), nullable=False),
        _uuid("appeal_id", nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_table(
        "appeals",
        _uuid("id"),
        _uuid("moderation_action_id", sa.ForeignKey("moderation_actions.id")),
        _uuid("appellant_member_id", sa.ForeignKey("members.id")),
        sa.Column("appeal_rationale", sa.Text(), nullable=False),
        sa.Column("status", sa.String(length=32), nullable=False),
        sa.Column("resolution_notes", sa.Text(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "uq_appeals_live_action",
        "appeals",
        ["moderation_action_id"],
        unique=True,
        sqlite_where=sa.text("deleted_at IS NULL"),
        postgresql_where=sa.text("deleted_at IS NULL"),
    )
    op.create_table(
        "content_reports",
        _uuid("id"),
        _uuid("reporter_member_id", sa.ForeignKey("members.id")),
        sa.Column("content_type", sa.String(length=32), nullable=False),
        _uuid("content_post_id", sa.ForeignKey("posts.id"), nullable=True),
        _uuid("content_comment_id", sa.ForeignKey("comments.id"), nullable=True),
        sa.Column("reason", sa.Text(), nullable=False),
        sa.Column("status", sa.String(length=32), nullable=False),
        _uuid("moderation_action_id", sa.ForeignKey("moderation_actions.id"), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_table(
        "moderation_logs",
        _uuid("id"),
        _uuid("actor_member_id", sa.ForeignKey("members.id"), nullable=True),
        _uuid("related_action_id", sa.ForeignKey("moderation_actions.id")),
        _uuid("related_appeal_id", sa.ForeignKey("appeals.id"), nullable=True),
        _uuid("related_report_id", sa.ForeignKey("content_reports.id"), nullable=True),
        sa.Column("event_type", sa.String(length=64), nullable=False),
        sa.Column("event_details", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_table(
        "notifications",
        _uuid("id"),
        _uuid("recipient_member_id", sa.ForeignKey("members.id")),
        _uuid("actor_member_id", sa.ForeignKey("members.id"), nullable=True),
        sa.Column("type", sa.String(length=64), nullable=False),
        sa.Column("status", sa.String(length=32), nullable=False),
        sa.Column("title", sa.String(length=300), nullable=True),
        sa.Column("body", sa.Text(), nullable=True),
        _uuid("related_action_id", sa.ForeignKey("moderation_actions.id"), nullable=True),
        _uuid("related_appeal_id", sa.ForeignKey("appeals.id"), nullable=True),
        sa.Column("failure_reason", sa.Text(), nullable=True),
        sa.Column("delivered_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("read_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )

    for table, column in (
        ("members", "deleted_at"),
        ("moderators", "deleted_at"),
        ("administrators", "deleted_at"),
        ("consent_records", "member_id"),
        ("posts", "author_member_id"),
        ("posts", "deleted_at"),
        ("comments", "post_id"),
        ("comments", "author_member_id"),
        ("comments", "deleted_at"),
        ("moderation_actions", "moderator_id"),
        ("moderation_actions", "target_member_id"),
        ("moderation_actions", "target_post_id"),
        ("moderation_actions", "target_comment_id"),
        ("moderation_actions", "deleted_at"),
        ("appeals", "appellant_member_id"),
        ("appeals", "deleted_at"),
        ("content_reports", "reporter_member_id"),
        ("content_reports", "content_post_id"),
        ("content_reports", "content_comment_id"),
        ("content_reports", "deleted_at"),
        ("moderation_logs", "actor_member_id"),
        ("moderation_logs", "related_action_id"),
        ("moderation_logs", "related_appeal_id"),
        ("moderation_logs", "related_report_id"),
        ("moderation_logs", "event_type"),
        ("moderation_logs", "deleted_at"),
        ("notifications", "recipient_member_id"),
        ("notifications", "type"),
        ("notifications", "deleted_at"),
    ):
        op.create_index(f"ix_{table}_{column}", table, [column])


def downgrade() -> None:
    """Drop every table created by this revision."""
    for table in (
        "notifications",
        "moderation_logs",
        "content_reports",
        "appeals",
        "moderation_actions",
        "comments",
        "posts",
        "consent_records",
        "moderators",
        "administrators",
        "members",
    ):
        op.drop_table(table)
