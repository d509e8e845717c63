# src/tuiter_stage/models/like.py
"""Models capturing like interactions on tuits."""

from __future__ import annotations

from sqlalchemy import ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from tuiter_stage.db.session import Base
from tuiter_stage.models.tuit import Tuit


class Like(Base):
    """Per-user like on a tuit.

    The composite primary key is the natural key (tuit, liked_by) and rejects
    duplicate likes from the same user at the storage layer.
    """

    __tablename__ = "likes"
    __table_args__ = (Index("ix_likes_liked_by", "liked_by"),)

    tuit_id: Mapped[str] = mapped_column(
        String(32),
        ForeignKey("tuits.id", ondelete="CASCADE"),
        primary_key=True,
    )
    liked_by: Mapped[str] = mapped_column(
        String(32),
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    )

    tuit: Mapped[Tuit] = relationship("Tuit")
