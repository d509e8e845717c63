# src/tuiter_stage/api/v1/endpoints/tuits.py
"""Tuit-related endpoints for the Tuiter API."""

from __future__ import annotations

from fastapi import APIRouter, status

from tuiter_stage.api.v1.dependencies import (
    CurrentPrincipalDep,
    PayloadDep,
    RegistryDep,
    SessionContextDep,
    SessionDep,
)
from tuiter_stage.models import Tuit
from tuiter_stage.schemas.tuit import TuitResponse
from tuiter_stage.services.media import Attachments
from tuiter_stage.services.object_store import MediaKind

router = APIRouter(tags=["tuits"])


@router.get("/tuits", response_model=list[TuitResponse])
async def list_tuits(db: SessionDep, registry: RegistryDep) -> list[Tuit]:
    return registry.tuits.list_all(db)


@router.get("/tuits/{tid}", response_model=TuitResponse)
async def get_tuit(tid: str, db: SessionDep, registry: RegistryDep) -> Tuit:
    return registry.tuits.get(db, tid)


@router.get("/users/{uid}/tuits", response_model=list[TuitResponse])
async def list_tuits_by_user(
    uid: str,
    db: SessionDep,
    session: SessionContextDep,
    registry: RegistryDep,
) -> list[Tuit]:
    """List a user's tuits, newest first."""
    user_id = registry.identity.resolve_target_id(uid, session)
    return registry.tuits.list_by_author(db, user_id)


@router.get("/users/{uid}/tuits-with-media", response_model=list[TuitResponse])
async def list_tuits_with_media_by_user(
    uid: str,
    db: SessionDep,
    session: SessionContextDep,
    registry: RegistryDep,
) -> list[Tuit]:
    user_id = registry.identity.resolve_target_id(uid, session)
    return registry.tuits.list_with_media_by_author(db, user_id)


@router.post(
    "/users/{uid}/tuits",
    response_model=TuitResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_tuit(
    uid: str,
    payload: PayloadDep,
    actor: CurrentPrincipalDep,
    db: SessionDep,
    session: SessionContextDep,
    registry: RegistryDep,
) -> Tuit:
    """Create a tuit with optional ``image`` files or a ``video`` file."""
    user_id = registry.identity.resolve_target_id(uid, session)
    return registry.tuits.create(db, actor, user_id, payload.first("tuit"), payload.files)


@router.put("/tuits/{tid}", response_model=TuitResponse)
def update_tuit(
    tid: str,
    payload: PayloadDep,
    actor: CurrentPrincipalDep,
    db: SessionDep,
    registry: RegistryDep,
) -> Tuit:
    """Edit a tuit.

    ``image`` / ``video`` string values are existing URLs to keep; files under
    the same field names are uploaded and appended.
    """
    retained = Attachments(
        image=payload.all(MediaKind.IMAGE.value),
        video=payload.all(MediaKind.VIDEO.value),
    )
    return registry.tuits.update(db, actor, tid, payload.first("tuit"), retained, payload.files)


@router.delete("/tuits/{tid}")
async def delete_tuit(
    tid: str,
    actor: CurrentPrincipalDep,
    db: SessionDep,
    registry: RegistryDep,
) -> dict[str, int]:
    registry.tuits.delete(db, actor, tid)
    return {"deleted": 1}


@router.delete("/tuits")
async def delete_all_tuits(
    actor: CurrentPrincipalDep,
    db: SessionDep,
    registry: RegistryDep,
) -> dict[str, int]:
    return {"deleted": registry.tuits.delete_all(db, actor)}
