"""Account management on behalf of the acting principal."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from sqlalchemy.orm import Session

from tuiter_stage.core.errors import (
    InvalidInputError,
    NoPermissionError,
    NoSuchUserError,
    UserAlreadyExistsError,
)
from tuiter_stage.models.user import Role, User
from tuiter_stage.repositories.like_repo import LikeRepository
from tuiter_stage.repositories.tuit_repo import TuitRepository
from tuiter_stage.repositories.user_repo import UserRepository
from tuiter_stage.schemas.user import PrincipalSnapshot, UserCreate
from tuiter_stage.services.identity import IdentityService
from tuiter_stage.services.likes import EngagementLedger
from tuiter_stage.services.media import MediaAsset, MediaIntake

logger = logging.getLogger(__name__)

# Profile fields a client may set through the update endpoint.
EDITABLE_FIELDS = (
    "username",
    "email",
    "first_name",
    "last_name",
    "biography",
    "date_of_birth",
    "account_type",
    "marital_status",
    "latitude",
    "longitude",
    "profile_photo",
    "header_image",
)


class UserService:
    def __init__(
        self,
        identity: IdentityService,
        intake: MediaIntake,
        ledger: EngagementLedger,
    ) -> None:
        self.identity = identity
        self.intake = intake
        self.ledger = ledger

    def get(self, db: Session, user_id: str) -> User:
        self.identity.require_valid_id(user_id)
        user = UserRepository(db).get_by_id(user_id)
        if user is None:
            raise NoSuchUserError()
        return user

    def list_all(self, db: Session) -> list[User]:
        return UserRepository(db).list_all()

    def create(self, db: Session, actor: PrincipalSnapshot, payload: UserCreate) -> User:
        self.identity.require_admin(actor)
        users = UserRepository(db)
        if users.get_by_username(payload.username) is not None:
            raise UserAlreadyExistsError()
        fields = payload.model_dump()
        fields["password"] = self.identity.hash_password(payload.password)
        user = users.create(**fields)
        db.commit()
        db.refresh(user)
        logger.info("Admin %s created user %s", actor.username, user.username)
        return user

    def update(
        self,
        db: Session,
        actor: PrincipalSnapshot,
        user_id: str,
        data: Mapping[str, Any],
        files: Mapping[str, Sequence[MediaAsset]],
    ) -> User:
        """Apply a partial profile update, uploading new profile media first.

        Uploaded files take precedence over URL values for the same field. A
        role change requires an admin actor.
        """
        self.identity.require_valid_id(user_id)
        self.identity.require_owner_or_admin(actor, user_id)
        users = UserRepository(db)
        user = users.get_by_id(user_id)
        if user is None:
            raise NoSuchUserError()

        fields = {key: value for key, value in data.items() if key in EDITABLE_FIELDS}
        if "role" in data and data["role"] is not None:
            try:
                role = Role(data["role"])
            except ValueError as err:
                raise InvalidInputError("Unknown role") from err
            if role != user.role:
                if not actor.is_admin:
                    raise NoPermissionError("Only an admin may change roles.")
                fields["role"] = role

        username = fields.get("username")
        if username:
            existing = users.get_by_username(username)
            if existing is not None and existing.id != user_id:
                raise UserAlreadyExistsError()
        elif "username" in fields:
            fields.pop("username")

        fields.update(self.intake.upload_profile_media(files))
        users.update(user, fields)
        db.commit()
        db.refresh(user)
        return user

    def delete(self, db: Session, actor: PrincipalSnapshot, user_id: str) -> None:
        """Remove an account together with its tuits and likes."""
        self.identity.require_valid_id(user_id)
        self.identity.require_owner_or_admin(actor, user_id)
        user = self.get(db, user_id)

        self.ledger.forget_user(db, user_id)
        tuits = TuitRepository(db)
        LikeRepository(db).delete_by_tuits(tuits.ids_by_author(user_id))
        tuits.delete_by_author(user_id)
        UserRepository(db).delete(user)
        db.commit()
        logger.info("User %s deleted by %s", user_id, actor.username)

    def delete_all(self, db: Session, actor: PrincipalSnapshot) -> int:
        self.identity.require_admin(actor)
        LikeRepository(db).delete_all()
        TuitRepository(db).delete_all()
        removed = UserRepository(db).delete_all()
        db.commit()
        logger.info("All %d users deleted by %s", removed, actor.username)
        return removed
