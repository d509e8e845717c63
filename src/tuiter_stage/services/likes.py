"""Like ledger: toggles like records and keeps each tuit's like count in step."""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass

from sqlalchemy.orm import Session

from tuiter_stage.core.errors import NoSuchTuitError
from tuiter_stage.models.like import Like
from tuiter_stage.models.tuit import Tuit
from tuiter_stage.repositories.like_repo import LikeRepository
from tuiter_stage.repositories.tuit_repo import TuitRepository

logger = logging.getLogger(__name__)


class LikeState(str, enum.Enum):
    """State of the (user, tuit) relation after a toggle."""

    LIKED = "LIKED"
    UNLIKED = "UNLIKED"


@dataclass(frozen=True)
class ToggleResult:
    state: LikeState
    likes: int


class EngagementLedger:
    """Owns the like relation and the derived ``Tuit.likes`` counter.

    The counter is recomputed from the like table after every toggle rather
    than incremented, so any earlier drift is corrected on the next toggle.
    """

    def toggle_like(self, db: Session, user_id: str, tuit_id: str) -> ToggleResult:
        """Flip the like relation between ``user_id`` and ``tuit_id``.

        Raises:
            NoSuchTuitError: If the tuit does not exist. Checked before any write.
        """
        tuits = TuitRepository(db)
        tuit = tuits.get_by_id(tuit_id)
        if tuit is None:
            raise NoSuchTuitError()

        likes = LikeRepository(db)
        if likes.find(user_id, tuit_id) is not None:
            likes.remove(user_id, tuit_id)
            state = LikeState.UNLIKED
        else:
            # A concurrent toggle may have inserted the same pair; the storage
            # key absorbs it and the caller still ends up liking the tuit.
            likes.insert(user_id, tuit_id)
            state = LikeState.LIKED

        count = self.recount(db, tuit)
        db.commit()
        logger.debug("User %s toggled like on %s -> %s (%d)", user_id, tuit_id, state.value, count)
        return ToggleResult(state=state, likes=count)

    def recount(self, db: Session, tuit: Tuit) -> int:
        """Recompute and persist the like count for ``tuit``."""
        count = LikeRepository(db).count_for_tuit(tuit.id)
        TuitRepository(db).set_like_count(tuit, count)
        return count

    def likes_by_user(self, db: Session, user_id: str) -> list[Tuit]:
        """Return every tuit ``user_id`` currently likes, in storage order."""
        return LikeRepository(db).tuits_liked_by(user_id)

    def all_likes(self, db: Session) -> list[Like]:
        return LikeRepository(db).list_all()

    def forget_user(self, db: Session, user_id: str) -> int:
        """Drop a user's likes and recount the tuits they touched.

        Returns:
            Number of like records removed. Does not commit.
        """
        likes = LikeRepository(db)
        tuits = TuitRepository(db)
        touched = likes.tuit_ids_liked_by(user_id)
        removed = likes.delete_by_user(user_id)
        for tuit_id in touched:
            tuit = tuits.get_by_id(tuit_id)
            if tuit is not None:
                self.recount(db, tuit)
        return removed
