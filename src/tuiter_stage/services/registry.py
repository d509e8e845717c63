"""Process-wide service instances.

Services are built once at startup and handed to request handlers through the
``get_registry`` dependency, so tests can swap in fakes for the external
collaborators (object store, session store).
"""

from __future__ import annotations

from dataclasses import dataclass

from tuiter_stage.core.settings import Settings
from tuiter_stage.services.identity import IdentityService
from tuiter_stage.services.likes import EngagementLedger
from tuiter_stage.services.media import MediaIntake, MediaLimits
from tuiter_stage.services.object_store import CloudinaryObjectStore, ObjectStore
from tuiter_stage.services.reconciler import MediaReconciler
from tuiter_stage.services.sessions import InMemorySessionStore, RedisSessionStore, SessionStore
from tuiter_stage.services.tuits import TuitService
from tuiter_stage.services.users import UserService


@dataclass(frozen=True)
class ServiceRegistry:
    session_store: SessionStore
    object_store: ObjectStore
    identity: IdentityService
    ledger: EngagementLedger
    intake: MediaIntake
    reconciler: MediaReconciler
    tuits: TuitService
    users: UserService

    @classmethod
    def build(
        cls,
        settings: Settings,
        *,
        object_store: ObjectStore | None = None,
        session_store: SessionStore | None = None,
    ) -> ServiceRegistry:
        """Wire every service from ``settings``; collaborators may be supplied directly."""
        ttl_seconds = settings.session_ttl_minutes * 60
        if session_store is None:
            if settings.session_redis_url:
                session_store = RedisSessionStore.from_url(settings.session_redis_url, ttl_seconds)
            else:
                session_store = InMemorySessionStore(ttl_seconds)
        if object_store is None:
            object_store = CloudinaryObjectStore(
                cloud_name=settings.cloudinary_cloud_name,
                api_key=settings.cloudinary_api_key,
                api_secret=settings.cloudinary_api_secret,
                folder=settings.cloudinary_folder,
                list_page_size=settings.cloudinary_list_page_size,
                delete_batch_size=settings.cloudinary_delete_batch_size,
            )

        limits = MediaLimits(
            image=settings.image_limit,
            video=settings.video_limit,
            profile=settings.profile_media_limit,
        )
        identity = IdentityService(bcrypt_rounds=settings.bcrypt_rounds)
        ledger = EngagementLedger()
        intake = MediaIntake(object_store, limits)
        return cls(
            session_store=session_store,
            object_store=object_store,
            identity=identity,
            ledger=ledger,
            intake=intake,
            reconciler=MediaReconciler(object_store, identity),
            tuits=TuitService(identity, intake),
            users=UserService(identity, intake, ledger),
        )
