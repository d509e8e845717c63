# src/tuiter_stage/api/v1/endpoints/users.py
"""User account endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Response, status
from pydantic import ValidationError

from tuiter_stage.api.v1.dependencies import (
    CurrentPrincipalDep,
    PayloadDep,
    RegistryDep,
    SessionContextDep,
    SessionDep,
    write_session,
)
from tuiter_stage.core.errors import InvalidInputError
from tuiter_stage.models import User
from tuiter_stage.schemas.user import UserCreate, UserResponse, UserUpdate

router = APIRouter(prefix="/users", tags=["users"])


@router.get("", response_model=list[UserResponse])
async def list_users(db: SessionDep, registry: RegistryDep) -> list[User]:
    return registry.users.list_all(db)


@router.get("/{uid}", response_model=UserResponse)
async def get_user(
    uid: str,
    db: SessionDep,
    session: SessionContextDep,
    registry: RegistryDep,
) -> User:
    """Return one user; ``my`` refers to the logged-in user."""
    user_id = registry.identity.resolve_target_id(uid, session)
    return registry.users.get(db, user_id)


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def create_user(
    payload: UserCreate,
    actor: CurrentPrincipalDep,
    db: SessionDep,
    registry: RegistryDep,
) -> User:
    """Create an account directly (admin only)."""
    return registry.users.create(db, actor, payload)


@router.put("/{uid}", response_model=UserResponse)
def update_user(
    uid: str,
    payload: PayloadDep,
    actor: CurrentPrincipalDep,
    db: SessionDep,
    session: SessionContextDep,
    registry: RegistryDep,
) -> User:
    """Update profile fields; accepts ``profile_photo`` / ``header_image`` files."""
    user_id = registry.identity.resolve_target_id(uid, session)
    try:
        update = UserUpdate.model_validate(payload.scalars())
    except ValidationError as err:
        raise InvalidInputError(f"Invalid profile fields: {err.error_count()} error(s)") from err

    user = registry.users.update(
        db,
        actor,
        user_id,
        update.model_dump(exclude_unset=True),
        payload.files,
    )
    registry.identity.refresh_if_self(session, user)
    return user


@router.delete("/{uid}")
async def delete_user(
    uid: str,
    response: Response,
    actor: CurrentPrincipalDep,
    db: SessionDep,
    session: SessionContextDep,
    registry: RegistryDep,
) -> dict[str, int]:
    user_id = registry.identity.resolve_target_id(uid, session)
    registry.users.delete(db, actor, user_id)
    if actor.id == user_id:
        session.destroy()
        write_session(response, session)
    return {"deleted": 1}


@router.delete("")
async def delete_all_users(
    actor: CurrentPrincipalDep,
    db: SessionDep,
    registry: RegistryDep,
) -> dict[str, int]:
    """Remove every account (admin only)."""
    return {"deleted": registry.users.delete_all(db, actor)}
