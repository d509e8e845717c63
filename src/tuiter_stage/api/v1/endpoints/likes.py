# src/tuiter_stage/api/v1/endpoints/likes.py
"""Like endpoints for the Tuiter API."""

from __future__ import annotations

from fastapi import APIRouter

from tuiter_stage.api.v1.dependencies import (
    CurrentPrincipalDep,
    RegistryDep,
    SessionContextDep,
    SessionDep,
)
from tuiter_stage.models import Like, Tuit
from tuiter_stage.schemas.like import LikeResponse, LikeToggleResponse
from tuiter_stage.schemas.tuit import TuitResponse

router = APIRouter(tags=["likes"])


@router.get("/likes", response_model=list[LikeResponse])
async def list_likes(db: SessionDep, registry: RegistryDep) -> list[Like]:
    return registry.ledger.all_likes(db)


@router.get("/users/{uid}/likes", response_model=list[TuitResponse])
async def list_tuits_liked_by_user(
    uid: str,
    db: SessionDep,
    session: SessionContextDep,
    registry: RegistryDep,
) -> list[Tuit]:
    user_id = registry.identity.resolve_valid_target_id(uid, session)
    return registry.ledger.likes_by_user(db, user_id)


@router.put("/users/{uid}/likes/{tid}", response_model=LikeToggleResponse)
async def toggle_like(
    uid: str,
    tid: str,
    actor: CurrentPrincipalDep,
    db: SessionDep,
    session: SessionContextDep,
    registry: RegistryDep,
) -> LikeToggleResponse:
    """Like the tuit if the user has not liked it yet, otherwise unlike it."""
    user_id = registry.identity.resolve_target_id(uid, session)
    registry.identity.require_valid_id(user_id, tid)
    registry.identity.require_owner_or_admin(actor, user_id)
    registry.users.get(db, user_id)

    result = registry.ledger.toggle_like(db, user_id, tid)
    return LikeToggleResponse(state=result.state.value, likes=result.likes)
