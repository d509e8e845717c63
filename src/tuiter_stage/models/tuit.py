# src/tuiter_stage/models/tuit.py
"""SQLAlchemy model for tuits and their attached media."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import JSON, DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from tuiter_stage.db.session import Base
from tuiter_stage.db.time import utcnow
from tuiter_stage.models.user import User, new_object_id


class Tuit(Base):
    """Primary content entity produced by users.

    Attachments hold either image URLs or video URLs, never both. ``likes`` is a
    cached count recomputed from the ``likes`` table on every toggle.
    """

    __tablename__ = "tuits"
    __table_args__ = (Index("ix_tuits_posted_by", "posted_by"),)

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_object_id)
    tuit: Mapped[str] = mapped_column(Text, nullable=False)
    posted_by: Mapped[str] = mapped_column(
        String(32),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    posted_on: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )

    image: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    video: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)

    # Derived from the likes table; never the source of truth.
    likes: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    author: Mapped[User] = relationship("User", lazy="joined")

    @property
    def has_media(self) -> bool:
        return bool(self.image) or bool(self.video)
