"""Identity resolution and authorization checks.

Resolution (who is acting, which user id a path refers to) is kept apart from
enforcement (whether the actor may touch a resource) so read endpoints can
reuse the former without the latter.
"""

from __future__ import annotations

import logging
import re
from typing import Final

from sqlalchemy.orm import Session

from tuiter_stage.core import security
from tuiter_stage.core.errors import (
    InvalidInputError,
    NoPermissionError,
    NoSuchUserError,
    NotAuthenticatedError,
    UserAlreadyExistsError,
)
from tuiter_stage.models.user import Role, User
from tuiter_stage.repositories.user_repo import UserRepository
from tuiter_stage.schemas.user import Credentials, PrincipalSnapshot
from tuiter_stage.services.sessions import SessionContext

logger = logging.getLogger(__name__)

MY: Final[str] = "my"
_ID_PATTERN: Final[re.Pattern[str]] = re.compile(r"^[0-9a-f]{32}$")


class IdentityService:
    """Resolves the acting principal and enforces ownership/admin rules."""

    def __init__(self, bcrypt_rounds: int | None = None) -> None:
        self._bcrypt_rounds = bcrypt_rounds

    # --- resolution -----------------------------------------------------------------
    @staticmethod
    def is_valid_id(candidate: object) -> bool:
        """Return True if ``candidate`` is structurally a resource id (no existence check)."""
        return isinstance(candidate, str) and bool(_ID_PATTERN.match(candidate))

    def resolve_principal(self, session: SessionContext) -> PrincipalSnapshot:
        principal = session.principal
        if principal is None:
            raise NotAuthenticatedError()
        return principal

    def resolve_target_id(self, requested_id: str, session: SessionContext) -> str:
        """Substitute the session principal's id for the ``my`` sentinel.

        Any other value is returned verbatim; ownership is checked separately.
        """
        if requested_id == MY:
            return self.resolve_principal(session).id
        return requested_id

    def resolve_valid_target_id(self, requested_id: str, session: SessionContext) -> str:
        target_id = self.resolve_target_id(requested_id, session)
        self.require_valid_id(target_id)
        return target_id

    def require_valid_id(self, *candidates: str) -> None:
        for candidate in candidates:
            if not self.is_valid_id(candidate):
                raise InvalidInputError("Received invalid id")

    # --- enforcement ----------------------------------------------------------------
    def require_owner_or_admin(self, actor: PrincipalSnapshot, resource_owner_id: str) -> None:
        if actor.id == resource_owner_id or actor.role == Role.ADMIN:
            return
        logger.warning(
            "Denied %s on resource owned by %s", actor.username, resource_owner_id
        )
        raise NoPermissionError()

    def require_admin(self, actor: PrincipalSnapshot) -> None:
        if actor.role == Role.ADMIN:
            return
        logger.warning("Denied admin-only operation to %s", actor.username)
        raise NoPermissionError()

    # --- session lifecycle ----------------------------------------------------------
    def register(
        self,
        db: Session,
        session: SessionContext,
        credentials: Credentials,
    ) -> PrincipalSnapshot:
        """Create a REGULAR account and bind it to the session."""
        username, password = self._require_credentials(credentials)
        users = UserRepository(db)
        if users.get_by_username(username) is not None:
            raise UserAlreadyExistsError()

        user = users.create(
            username=username,
            password=self.hash_password(password),
            role=Role.REGULAR,
            email=credentials.email,
            first_name=credentials.first_name,
            last_name=credentials.last_name,
        )
        db.commit()
        db.refresh(user)

        principal = PrincipalSnapshot.model_validate(user)
        session.establish(principal)
        logger.info("Registered user %s", username)
        return principal

    def login(
        self,
        db: Session,
        session: SessionContext,
        credentials: Credentials,
    ) -> PrincipalSnapshot:
        username, password = self._require_credentials(credentials)
        user = UserRepository(db).get_by_username(username)
        if user is None or not security.verify_password(password, user.password):
            logger.info("Failed login for %s", username)
            raise NoSuchUserError()

        principal = PrincipalSnapshot.model_validate(user)
        session.establish(principal)
        logger.info("User %s logged in", username)
        return principal

    def profile(self, session: SessionContext) -> PrincipalSnapshot:
        return self.resolve_principal(session)

    def logout(self, session: SessionContext) -> None:
        principal = session.principal
        session.destroy()
        if principal is not None:
            logger.info("User %s logged out", principal.username)

    def refresh_if_self(self, session: SessionContext, user: User) -> None:
        """Update the session snapshot when the caller edited their own account."""
        principal = session.principal
        if principal is not None and principal.id == user.id:
            session.refresh(PrincipalSnapshot.model_validate(user))

    def hash_password(self, password: str) -> str:
        return security.hash_password(password, rounds=self._bcrypt_rounds)

    @staticmethod
    def _require_credentials(credentials: Credentials) -> tuple[str, str]:
        if not credentials.username or not credentials.password:
            raise InvalidInputError("No username or password")
        return credentials.username, credentials.password
