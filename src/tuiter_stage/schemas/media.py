"""Schemas for media maintenance endpoints."""

from pydantic import BaseModel, Field


class ReconciliationReport(BaseModel):
    """Outcome of one reconciliation run."""

    referenced: int = Field(..., description="Size of the local reference set")
    remote_images: int = Field(..., description="Image objects listed in the object store")
    remote_videos: int = Field(..., description="Video objects listed in the object store")
    deleted_images: int = Field(0, description="Orphaned images deleted (or eligible on dry run)")
    deleted_videos: int = Field(0, description="Orphaned videos deleted (or eligible on dry run)")
    dry_run: bool = False


class ReferenceSetResponse(BaseModel):
    urls: list[str]
