"""Garbage collection of remote media no longer referenced locally.

Reconciliation recomputes the full local reference set on every run instead of
maintaining a live reference count. The set is a point-in-time snapshot: an
object referenced by a write that lands between the scan and the delete call
can still be removed. Run it during quiet periods.
"""

from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from tuiter_stage.repositories.tuit_repo import TuitRepository
from tuiter_stage.repositories.user_repo import UserRepository
from tuiter_stage.schemas.media import ReconciliationReport
from tuiter_stage.schemas.user import PrincipalSnapshot
from tuiter_stage.services.identity import IdentityService
from tuiter_stage.services.object_store import MediaKind, ObjectStore, StoredObject

logger = logging.getLogger(__name__)


class MediaReconciler:
    """Finds orphaned objects in the object store and deletes them per kind."""

    def __init__(self, store: ObjectStore, identity: IdentityService) -> None:
        self.store = store
        self.identity = identity

    def compute_local_reference_set(self, db: Session) -> set[str]:
        """Union every media URL held by tuits and user profiles."""
        references: set[str] = set()
        for image, video in TuitRepository(db).media_fields():
            references.update(url for url in image if url)
            references.update(url for url in video if url)
        for profile_photo, header_image in UserRepository(db).media_fields():
            if profile_photo:
                references.add(profile_photo)
            if header_image:
                references.add(header_image)
        return references

    def list_remote_objects(self) -> dict[MediaKind, list[StoredObject]]:
        return {kind: self.store.list(kind) for kind in MediaKind}

    def find_orphans(
        self,
        references: set[str],
        remote: dict[MediaKind, list[StoredObject]],
    ) -> dict[MediaKind, list[StoredObject]]:
        return {
            kind: [obj for obj in objects if obj.url not in references]
            for kind, objects in remote.items()
        }

    def reconcile(
        self,
        db: Session,
        actor: PrincipalSnapshot,
        *,
        dry_run: bool = False,
    ) -> ReconciliationReport:
        """Delete every remote object whose URL is not referenced locally.

        Only admins may run this; the check happens before any scan. Images and
        videos are deleted with one bulk call each. A delete failure propagates
        without retry.
        """
        self.identity.require_admin(actor)

        references = self.compute_local_reference_set(db)
        remote = self.list_remote_objects()
        orphans = self.find_orphans(references, remote)

        deleted: dict[MediaKind, int] = {}
        for kind in MediaKind:
            kind_orphans = orphans.get(kind, [])
            if dry_run or not kind_orphans:
                deleted[kind] = len(kind_orphans)
                continue
            try:
                deleted[kind] = self.store.bulk_delete([obj.public_id for obj in kind_orphans], kind)
            except Exception:
                logger.error("Bulk delete of %d %s objects failed", len(kind_orphans), kind.value, exc_info=True)
                raise

        report = ReconciliationReport(
            referenced=len(references),
            remote_images=len(remote.get(MediaKind.IMAGE, [])),
            remote_videos=len(remote.get(MediaKind.VIDEO, [])),
            deleted_images=deleted[MediaKind.IMAGE],
            deleted_videos=deleted[MediaKind.VIDEO],
            dry_run=dry_run,
        )
        logger.info(
            "Media reconciliation by %s: %d referenced, %d/%d images and %d/%d videos %s",
            actor.username,
            report.referenced,
            report.deleted_images,
            report.remote_images,
            report.deleted_videos,
            report.remote_videos,
            "eligible" if dry_run else "deleted",
        )
        return report
