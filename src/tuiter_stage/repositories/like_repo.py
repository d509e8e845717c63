"""Data access helpers for like records."""
from __future__ import annotations

from sqlalchemy import delete, func, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from tuiter_stage.models.like import Like
from tuiter_stage.models.tuit import Tuit

__all__ = ["LikeRepository"]


class LikeRepository:
    """Access to like records keyed by the (tuit_id, liked_by) natural key."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def find(self, user_id: str, tuit_id: str) -> Like | None:
        return self.session.get(Like, (tuit_id, user_id))

    def insert(self, user_id: str, tuit_id: str) -> bool:
        """Insert a like record.

        Returns:
            False when a concurrent writer already stored the same pair. On
            SQLite and PostgreSQL the duplicate is skipped with ``ON CONFLICT DO
            NOTHING``; other backends absorb the integrity error in a savepoint.
        """
        values = {"tuit_id": tuit_id, "liked_by": user_id}
        dialect = self.session.get_bind().dialect.name
        if dialect == "postgresql":
            stmt = pg_insert(Like).values(**values).on_conflict_do_nothing()
        elif dialect == "sqlite":
            stmt = sqlite_insert(Like).values(**values).on_conflict_do_nothing()
        else:
            try:
                with self.session.begin_nested():
                    self.session.add(Like(**values))
            except IntegrityError:
                return False
            return True
        result = self.session.execute(stmt)
        return bool(result.rowcount)

    def remove(self, user_id: str, tuit_id: str) -> int:
        """Delete the pair if present; deleting an absent pair is not an error."""
        result = self.session.execute(
            delete(Like).where(Like.tuit_id == tuit_id, Like.liked_by == user_id)
        )
        return int(result.rowcount or 0)

    def count_for_tuit(self, tuit_id: str) -> int:
        result = self.session.execute(
            select(func.count()).select_from(Like).where(Like.tuit_id == tuit_id)
        )
        return int(result.scalar_one())

    def list_all(self) -> list[Like]:
        return list(self.session.execute(select(Like)).scalars())

    def tuits_liked_by(self, user_id: str) -> list[Tuit]:
        result = self.session.execute(
            select(Tuit).join(Like, Like.tuit_id == Tuit.id).where(Like.liked_by == user_id)
        )
        return list(result.scalars().unique())

    def tuit_ids_liked_by(self, user_id: str) -> list[str]:
        result = self.session.execute(select(Like.tuit_id).where(Like.liked_by == user_id))
        return list(result.scalars())

    def delete_by_user(self, user_id: str) -> int:
        result = self.session.execute(delete(Like).where(Like.liked_by == user_id))
        return int(result.rowcount or 0)

    def delete_by_tuits(self, tuit_ids: list[str]) -> int:
        if not tuit_ids:
            return 0
        result = self.session.execute(delete(Like).where(Like.tuit_id.in_(tuit_ids)))
        return int(result.rowcount or 0)

    def delete_all(self) -> int:
        result = self.session.execute(delete(Like))
        return int(result.rowcount or 0)
