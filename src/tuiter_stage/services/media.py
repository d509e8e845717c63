"""Media intake: validation and upload of attachments.

Uploads are not transactional across assets. If the object store fails after
some assets were stored, those objects stay remote with no local reference and
the error propagates; the reconciler removes them on its next run.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field

from tuiter_stage.core.errors import (
    MediaContentExceedsLimitError,
    MultiTypeMediaError,
    UnsupportedMediaError,
)
from tuiter_stage.services.object_store import MediaKind, ObjectStore

logger = logging.getLogger(__name__)

PROFILE_PHOTO_FIELD = "profile_photo"
HEADER_IMAGE_FIELD = "header_image"
PROFILE_MEDIA_FIELDS = (PROFILE_PHOTO_FIELD, HEADER_IMAGE_FIELD)


@dataclass(frozen=True)
class MediaAsset:
    """One uploaded file held in memory."""

    filename: str
    content_type: str
    data: bytes


@dataclass(frozen=True)
class ClassifiedMedia:
    """Uploaded assets split by attachment kind."""

    images: list[MediaAsset] = field(default_factory=list)
    video: list[MediaAsset] = field(default_factory=list)

    def of(self, kind: MediaKind) -> list[MediaAsset]:
        return self.images if kind is MediaKind.IMAGE else self.video


@dataclass(frozen=True)
class Attachments:
    """Final URL lists persisted on a tuit."""

    image: list[str] = field(default_factory=list)
    video: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class MediaLimits:
    image: int
    video: int
    profile: int

    def for_kind(self, kind: MediaKind) -> int:
        return self.image if kind is MediaKind.IMAGE else self.video


class MediaIntake:
    """Validates attachment sets and dispatches assets to the object store."""

    def __init__(self, store: ObjectStore, limits: MediaLimits) -> None:
        self.store = store
        self.limits = limits

    @staticmethod
    def classify(files: Mapping[str, Sequence[MediaAsset]]) -> ClassifiedMedia:
        """Split uploaded files by declared field name.

        Fields other than ``image`` and ``video`` are ignored.

        Raises:
            MultiTypeMediaError: If both image and video fields carry files.
        """
        images = list(files.get(MediaKind.IMAGE.value, ()))
        video = list(files.get(MediaKind.VIDEO.value, ()))
        if images and video:
            raise MultiTypeMediaError()
        return ClassifiedMedia(images=images, video=video)

    def upload(self, assets: Sequence[MediaAsset], kind: MediaKind, limit: int) -> list[str]:
        """Upload ``assets`` one by one and return their public URLs.

        Raises:
            MediaContentExceedsLimitError: If more than ``limit`` assets are given.
            UnsupportedMediaError: If an asset's content type is not of ``kind``.
        """
        if len(assets) > limit:
            raise MediaContentExceedsLimitError()
        for asset in assets:
            if not asset.content_type.startswith(kind.mime_prefix):
                raise UnsupportedMediaError(
                    f"Expected {kind.value} content, received {asset.content_type or 'unknown'}."
                )

        urls: list[str] = []
        for asset in assets:
            stored = self.store.upload(asset.data, asset.content_type, kind)
            logger.debug("Uploaded %s as %s (%s)", asset.filename, stored.public_id, kind.value)
            urls.append(stored.url)
        return urls

    def attach_new(self, files: Mapping[str, Sequence[MediaAsset]]) -> Attachments:
        """Validate and upload the attachments of a tuit being created."""
        classified = self.classify(files)
        urls = {
            kind: self.upload(classified.of(kind), kind, self.limits.for_kind(kind))
            for kind in MediaKind
        }
        return Attachments(image=urls[MediaKind.IMAGE], video=urls[MediaKind.VIDEO])

    def merge_update(
        self,
        retained: Attachments,
        files: Mapping[str, Sequence[MediaAsset]],
    ) -> Attachments:
        """Combine URLs kept in the update payload with newly uploaded files.

        The combined set is checked against the limits and the image/video
        exclusion before anything is uploaded; an oversized set is rejected
        rather than truncated.
        """
        classified = self.classify(files)
        image_count = len(retained.image) + len(classified.images)
        video_count = len(retained.video) + len(classified.video)
        if image_count > 0 and video_count > 0:
            raise MultiTypeMediaError()
        if image_count > self.limits.image or video_count > self.limits.video:
            raise MediaContentExceedsLimitError()

        new_images = self.upload(
            classified.images,
            MediaKind.IMAGE,
            self.limits.image - len(retained.image),
        )
        new_video = self.upload(
            classified.video,
            MediaKind.VIDEO,
            self.limits.video - len(retained.video),
        )
        return Attachments(
            image=[*retained.image, *new_images],
            video=[*retained.video, *new_video],
        )

    def upload_profile_media(self, files: Mapping[str, Sequence[MediaAsset]]) -> dict[str, str]:
        """Upload profile photo / header image files.

        Returns:
            Mapping of field name to the uploaded URL, for fields that carried a file.
        """
        for field_name in PROFILE_MEDIA_FIELDS:
            if len(files.get(field_name, ())) > self.limits.profile:
                raise MediaContentExceedsLimitError()

        uploaded: dict[str, str] = {}
        for field_name in PROFILE_MEDIA_FIELDS:
            assets = list(files.get(field_name, ()))
            if not assets:
                continue
            urls = self.upload(assets, MediaKind.IMAGE, self.limits.profile)
            uploaded[field_name] = urls[0]
        return uploaded
