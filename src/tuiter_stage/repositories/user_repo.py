"""Data access helpers for working with users."""
from __future__ import annotations

from typing import Any

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from tuiter_stage.models.user import User

__all__ = ["UserRepository"]


class UserRepository:
    """Thin wrapper around database access for user entities."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get_by_id(self, user_id: str) -> User | None:
        return self.session.get(User, user_id)

    def get_by_username(self, username: str) -> User | None:
        result = self.session.execute(select(User).where(User.username == username))
        return result.scalars().first()

    def list_all(self) -> list[User]:
        result = self.session.execute(select(User).order_by(User.joined))
        return list(result.scalars())

    def media_fields(self) -> list[tuple[str | None, str | None]]:
        """Return ``(profile_photo, header_image)`` for every user."""
        result = self.session.execute(select(User.profile_photo, User.header_image))
        return [(row[0], row[1]) for row in result]

    def create(self, **fields: Any) -> User:
        user = User(**fields)
        self.session.add(user)
        self.session.flush()
        return user

    def update(self, user: User, fields: dict[str, Any]) -> User:
        for key, value in fields.items():
            setattr(user, key, value)
        self.session.flush()
        return user

    def delete(self, user: User) -> None:
        self.session.delete(user)
        self.session.flush()

    def delete_all(self) -> int:
        result = self.session.execute(delete(User))
        return int(result.rowcount or 0)
