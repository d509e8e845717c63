# src/tuiter_stage/api/v1/endpoints/media.py
"""Media maintenance endpoints (admin only)."""

from __future__ import annotations

from fastapi import APIRouter, Query

from tuiter_stage.api.v1.dependencies import CurrentPrincipalDep, RegistryDep, SessionDep
from tuiter_stage.schemas.media import ReconciliationReport, ReferenceSetResponse

router = APIRouter(prefix="/media", tags=["media"])


@router.post("/reconcile", response_model=ReconciliationReport)
def reconcile_media(
    actor: CurrentPrincipalDep,
    db: SessionDep,
    registry: RegistryDep,
    dry_run: bool = Query(False, description="Count orphans without deleting them"),
) -> ReconciliationReport:
    """Delete remote objects that no tuit or profile references any more."""
    return registry.reconciler.reconcile(db, actor, dry_run=dry_run)


@router.get("/references", response_model=ReferenceSetResponse)
async def list_references(
    actor: CurrentPrincipalDep,
    db: SessionDep,
    registry: RegistryDep,
) -> ReferenceSetResponse:
    registry.identity.require_admin(actor)
    urls = registry.reconciler.compute_local_reference_set(db)
    return ReferenceSetResponse(urls=sorted(urls))
