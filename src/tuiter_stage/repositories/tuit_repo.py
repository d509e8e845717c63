"""Data access helpers for working with tuits."""
from __future__ import annotations

from typing import Any

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from tuiter_stage.models.tuit import Tuit

__all__ = ["TuitRepository"]


class TuitRepository:
    """Thin wrapper around database access for tuit entities."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get_by_id(self, tuit_id: str) -> Tuit | None:
        return self.session.get(Tuit, tuit_id)

    def list_all(self) -> list[Tuit]:
        result = self.session.execute(select(Tuit).order_by(Tuit.posted_on.desc()))
        return list(result.scalars().unique())

    def list_by_author(self, user_id: str) -> list[Tuit]:
        """Return tuits posted by ``user_id``, newest first."""
        result = self.session.execute(
            select(Tuit)
            .where(Tuit.posted_by == user_id)
            .order_by(Tuit.posted_on.desc())
        )
        return list(result.scalars().unique())

    def list_with_media_by_author(self, user_id: str) -> list[Tuit]:
        return [tuit for tuit in self.list_by_author(user_id) if tuit.has_media]

    def ids_by_author(self, user_id: str) -> list[str]:
        result = self.session.execute(select(Tuit.id).where(Tuit.posted_by == user_id))
        return list(result.scalars())

    def media_fields(self) -> list[tuple[list[str], list[str]]]:
        """Return ``(image, video)`` URL lists for every tuit."""
        result = self.session.execute(select(Tuit.image, Tuit.video))
        return [(row[0] or [], row[1] or []) for row in result]

    def create(self, *, posted_by: str, tuit: str, image: list[str], video: list[str]) -> Tuit:
        entity = Tuit(posted_by=posted_by, tuit=tuit, image=list(image), video=list(video), likes=0)
        self.session.add(entity)
        self.session.flush()
        return entity

    def update(self, tuit: Tuit, fields: dict[str, Any]) -> Tuit:
        for key, value in fields.items():
            setattr(tuit, key, value)
        self.session.flush()
        return tuit

    def set_like_count(self, tuit: Tuit, count: int) -> Tuit:
        tuit.likes = count
        self.session.flush()
        return tuit

    def delete(self, tuit: Tuit) -> None:
        self.session.delete(tuit)
        self.session.flush()

    def delete_by_author(self, user_id: str) -> int:
        result = self.session.execute(delete(Tuit).where(Tuit.posted_by == user_id))
        return int(result.rowcount or 0)

    def delete_all(self) -> int:
        result = self.session.execute(delete(Tuit))
        return int(result.rowcount or 0)
