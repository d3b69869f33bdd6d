"""comment reactions

Revision ID: 7c5e2a81d6f3
Revises: 3b1f0c2d9a41
Create Date: 2026-10-19 11:02:17.904115

"""
from __future__ import annotations

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "7c5e2a81d6f3"
down_revision: Union[str, Sequence[str], None] = "3b1f0c2d9a41"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Add per-member like/dislike reactions on comments."""
    op.create_table(
        "comment_reactions",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("member_id", sa.String(length=36), sa.ForeignKey("members.id"), nullable=False),
        sa.Column(
            "comment_id", sa.String(length=36), sa.ForeignKey("comments.id"), nullable=False
        ),
        sa.Column("reaction_type", sa.String(length=32), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("member_id", "comment_id", name="uq_comment_reactions_member_comment"),
    )
    for column in ("member_id", "comment_id", "deleted_at"):
        op.create_index(f"ix_comment_reactions_{column}", "comment_reactions", [column])


def downgrade() -> None:
    """Drop comment reactions."""
    for column in ("member_id", "comment_id", "deleted_at"):
        op.drop_index(f"ix_comment_reactions_{column}", table_name="comment_reactions")
    op.drop_table("comment_reactions")
