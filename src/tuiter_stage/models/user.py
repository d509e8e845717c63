# src/tuiter_stage/models/user.py
"""SQLAlchemy models for user accounts."""

from __future__ import annotations

import enum
import uuid
from datetime import datetime

from sqlalchemy import DateTime, Enum, Float, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from tuiter_stage.db.session import Base
from tuiter_stage.db.time import utcnow


def new_object_id() -> str:
    """Return a fresh 32-character hex identifier."""
    return uuid.uuid4().hex


class Role(str, enum.Enum):
    """Account role; only an admin may change it after creation."""

    REGULAR = "REGULAR"
    ADMIN = "ADMIN"


class User(Base):
    """Registered account able to author tuits and like them."""

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_object_id)
    username: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    # bcrypt digest; never serialized back to clients.
    password: Mapped[str] = mapped_column(Text, nullable=False)
    role: Mapped[Role] = mapped_column(
        Enum(Role, name="user_role"),
        nullable=False,
        default=Role.REGULAR,
    )

    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    first_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    last_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    biography: Mapped[str | None] = mapped_column(Text, nullable=True)
    date_of_birth: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    account_type: Mapped[str] = mapped_column(String(16), nullable=False, default="PERSONAL")
    marital_status: Mapped[str] = mapped_column(String(16), nullable=False, default="SINGLE")
    latitude: Mapped[float | None] = mapped_column(Float, nullable=True)
    longitude: Mapped[float | None] = mapped_column(Float, nullable=True)

    # Remote object store URLs; both count toward the media reference set.
    profile_photo: Mapped[str | None] = mapped_column(Text, nullable=True)
    header_image: Mapped[str | None] = mapped_column(Text, nullable=True)

    joined: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )