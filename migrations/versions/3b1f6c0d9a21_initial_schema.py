"""initial schema: users, tuits, likes

Revision ID: 3b1f6c0d9a21
Revises:
Create Date: 2026-10-18 09:00:00.000000

"""
from __future__ import annotations

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "3b1f6c0d9a21"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create the users, tuits and likes tables."""
    op.create_table(
        "users",
        sa.Column("id", sa.String(length=32), nullable=False),
        sa.Column("username", sa.String(length=64), nullable=False),
        sa.Column("password", sa.Text(), nullable=False),
        sa.Column("role", sa.Enum("REGULAR", "ADMIN", name="user_role"), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=True),
        sa.Column("first_name", sa.String(length=100), nullable=True),
        sa.Column("last_name", sa.String(length=100), nullable=True),
        sa.Column("biography", sa.Text(), nullable=True),
        sa.Column("date_of_birth", sa.DateTime(timezone=True), nullable=True),
        sa.Column("account_type", sa.String(length=16), nullable=False),
        sa.Column("marital_status", sa.String(length=16), nullable=False),
        sa.Column("latitude", sa.Float(), nullable=True),
        sa.Column("longitude", sa.Float(), nullable=True),
        sa.Column("profile_photo", sa.Text(), nullable=True),
        sa.Column("header_image", sa.Text(), nullable=True),
        sa.Column("joined", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("username"),
    )
    op.create_table(
        "tuits",
        sa.Column("id", sa.String(length=32), nullable=False),
        sa.Column("tuit", sa.Text(), nullable=False),
        sa.Column("posted_by", sa.String(length=32), nullable=False),
        sa.Column("posted_on", sa.DateTime(timezone=True), nullable=False),
        sa.Column("image", sa.JSON(), nullable=False),
        sa.Column("video", sa.JSON(), nullable=False),
        sa.Column("likes", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(["posted_by"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_tuits_posted_by", "tuits", ["posted_by"])
    op.create_table(
        "likes",
        sa.Column("tuit_id", sa.String(length=32), nullable=False),
        sa.Column("liked_by", sa.String(length=32), nullable=False),
        sa.ForeignKeyConstraint(["tuit_id"], ["tuits.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["liked_by"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("tuit_id", "liked_by"),
    )
    op.create_index("ix_likes_liked_by", "likes", ["liked_by"])


def downgrade() -> None:
    """Drop all tables."""
    op.drop_index("ix_likes_liked_by", table_name="likes")
    op.drop_table("likes")
    op.drop_index("ix_tuits_posted_by", table_name="tuits")
    op.drop_table("tuits")
    op.drop_table("users")
    sa.Enum(name="user_role").drop(op.get_bind(), checkfirst=True)
