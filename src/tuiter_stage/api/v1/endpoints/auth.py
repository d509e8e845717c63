# src/tuiter_stage/api/v1/endpoints/auth.py
"""Authentication endpoints for the Tuiter API."""

from __future__ import annotations

from fastapi import APIRouter, Response, status

from tuiter_stage.api.v1.dependencies import (
    RegistryDep,
    SessionContextDep,
    SessionDep,
    write_session,
)
from tuiter_stage.schemas.user import Credentials, PrincipalSnapshot

router = APIRouter(prefix="/auth", tags=["authentication"])


@router.post("/register", response_model=PrincipalSnapshot, status_code=status.HTTP_201_CREATED)
def register(
    credentials: Credentials,
    response: Response,
    db: SessionDep,
    session: SessionContextDep,
    registry: RegistryDep,
) -> PrincipalSnapshot:
    """Create an account and log it in.

    The session token is returned as a cookie and in the ``X-Session-Token`` header.
    """
    principal = registry.identity.register(db, session, credentials)
    write_session(response, session)
    return principal


@router.post("/login", response_model=PrincipalSnapshot)
def login(
    credentials: Credentials,
    response: Response,
    db: SessionDep,
    session: SessionContextDep,
    registry: RegistryDep,
) -> PrincipalSnapshot:
    principal = registry.identity.login(db, session, credentials)
    write_session(response, session)
    return principal


@router.api_route("/profile", methods=["GET", "POST"], response_model=PrincipalSnapshot)
async def profile(session: SessionContextDep, registry: RegistryDep) -> PrincipalSnapshot:
    """Return the principal bound to the current session."""
    return registry.identity.profile(session)


@router.post("/logout")
async def logout(
    response: Response,
    session: SessionContextDep,
    registry: RegistryDep,
) -> dict[str, bool]:
    registry.identity.logout(session)
    write_session(response, session)
    return {"success": True}
