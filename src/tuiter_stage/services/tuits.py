"""Tuit creation, editing and removal."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence

from sqlalchemy.orm import Session

from tuiter_stage.core.errors import EmptyContentError, NoSuchTuitError, NoSuchUserError
from tuiter_stage.models.tuit import Tuit
from tuiter_stage.repositories.like_repo import LikeRepository
from tuiter_stage.repositories.tuit_repo import TuitRepository
from tuiter_stage.repositories.user_repo import UserRepository
from tuiter_stage.schemas.user import PrincipalSnapshot
from tuiter_stage.services.identity import IdentityService
from tuiter_stage.services.media import Attachments, MediaAsset, MediaIntake

logger = logging.getLogger(__name__)


class TuitService:
    def __init__(self, identity: IdentityService, intake: MediaIntake) -> None:
        self.identity = identity
        self.intake = intake

    def get(self, db: Session, tuit_id: str) -> Tuit:
        self.identity.require_valid_id(tuit_id)
        tuit = TuitRepository(db).get_by_id(tuit_id)
        if tuit is None:
            raise NoSuchTuitError()
        return tuit

    def create(
        self,
        db: Session,
        actor: PrincipalSnapshot,
        author_id: str,
        text: str | None,
        files: Mapping[str, Sequence[MediaAsset]],
    ) -> Tuit:
        """Create a tuit for ``author_id`` with optional attachments.

        Validation and authorization run before any upload.
        """
        self.identity.require_valid_id(author_id)
        self.identity.require_owner_or_admin(actor, author_id)
        if UserRepository(db).get_by_id(author_id) is None:
            raise NoSuchUserError()
        if not text or not text.strip():
            raise EmptyContentError()

        attachments = self.intake.attach_new(files)
        tuit = TuitRepository(db).create(
            posted_by=author_id,
            tuit=text,
            image=attachments.image,
            video=attachments.video,
        )
        db.commit()
        db.refresh(tuit)
        logger.info("User %s created tuit %s", author_id, tuit.id)
        return tuit

    def update(
        self,
        db: Session,
        actor: PrincipalSnapshot,
        tuit_id: str,
        text: str | None,
        retained: Attachments,
        files: Mapping[str, Sequence[MediaAsset]],
    ) -> Tuit:
        """Replace a tuit's text and attachments.

        The new attachment set is the URLs kept in the payload plus freshly
        uploaded files. ``text`` of None keeps the current body.
        """
        tuit = self.get(db, tuit_id)
        self.identity.require_owner_or_admin(actor, tuit.posted_by)
        if text is not None and not text.strip():
            raise EmptyContentError()

        attachments = self.intake.merge_update(retained, files)
        fields: dict[str, object] = {"image": attachments.image, "video": attachments.video}
        if text is not None:
            fields["tuit"] = text
        TuitRepository(db).update(tuit, fields)
        db.commit()
        db.refresh(tuit)
        return tuit

    def delete(self, db: Session, actor: PrincipalSnapshot, tuit_id: str) -> None:
        tuit = self.get(db, tuit_id)
        self.identity.require_owner_or_admin(actor, tuit.posted_by)
        LikeRepository(db).delete_by_tuits([tuit.id])
        TuitRepository(db).delete(tuit)
        db.commit()
        logger.info("Tuit %s deleted by %s", tuit_id, actor.username)

    def delete_all(self, db: Session, actor: PrincipalSnapshot) -> int:
        self.identity.require_admin(actor)
        LikeRepository(db).delete_all()
        removed = TuitRepository(db).delete_all()
        db.commit()
        logger.info("All %d tuits deleted by %s", removed, actor.username)
        return removed

    def list_all(self, db: Session) -> list[Tuit]:
        return TuitRepository(db).list_all()

    def list_by_author(self, db: Session, author_id: str) -> list[Tuit]:
        self.identity.require_valid_id(author_id)
        return TuitRepository(db).list_by_author(author_id)

    def list_with_media_by_author(self, db: Session, author_id: str) -> list[Tuit]:
        self.identity.require_valid_id(author_id)
        return TuitRepository(db).list_with_media_by_author(author_id)
