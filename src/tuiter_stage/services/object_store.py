"""Remote object store for uploaded images and videos.

The service layer only needs three operations: upload one asset, list stored
objects of a kind, and bulk-delete objects of a kind. ``CloudinaryObjectStore``
implements them on top of the Cloudinary SDK.
"""

from __future__ import annotations

import base64
import enum
import logging
from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from typing import Any, Protocol

import cloudinary
import cloudinary.api
import cloudinary.uploader

logger = logging.getLogger(__name__)


class MediaKind(str, enum.Enum):
    """Closed set of attachment kinds; values double as multipart field names."""

    IMAGE = "image"
    VIDEO = "video"

    @property
    def mime_prefix(self) -> str:
        return f"{self.value}/"


@dataclass(frozen=True)
class StoredObject:
    """An object held by the remote store."""

    public_id: str
    url: str
    kind: MediaKind


class ObjectStore(Protocol):
    def upload(self, data: bytes, content_type: str, kind: MediaKind) -> StoredObject: ...

    def list(self, kind: MediaKind) -> list[StoredObject]: ...

    def bulk_delete(self, public_ids: Sequence[str], kind: MediaKind) -> int: ...


def to_data_uri(data: bytes, content_type: str) -> str:
    """Encode raw bytes as a ``data:`` URI accepted by the upload API."""
    encoded = base64.b64encode(data).decode("ascii")
    return f"data:{content_type};base64,{encoded}"


def _chunks(items: Sequence[str], size: int) -> Iterator[Sequence[str]]:
    for start in range(0, len(items), size):
        yield items[start:start + size]


class CloudinaryObjectStore:
    """Object store backed by Cloudinary.

    Args:
        cloud_name: Cloudinary cloud name.
        api_key: API key.
        api_secret: API secret.
        folder: Optional folder uploads are placed in and listings are scoped to.
        list_page_size: ``max_results`` per listing page.
        delete_batch_size: Maximum ids per ``delete_resources`` call.
    """

    def __init__(
        self,
        *,
        cloud_name: str | None,
        api_key: str | None,
        api_secret: str | None,
        folder: str | None = None,
        list_page_size: int = 500,
        delete_batch_size: int = 100,
    ) -> None:
        cloudinary.config(
            cloud_name=cloud_name,
            api_key=api_key,
            api_secret=api_secret,
            secure=True,
        )
        self._folder = folder
        self._list_page_size = list_page_size
        self._delete_batch_size = delete_batch_size

    def upload(self, data: bytes, content_type: str, kind: MediaKind) -> StoredObject:
        options: dict[str, Any] = {"resource_type": kind.value}
        if self._folder:
            options["folder"] = self._folder
        response = cloudinary.uploader.upload(to_data_uri(data, content_type), **options)
        url = response.get("secure_url") or response["url"]
        return StoredObject(public_id=response["public_id"], url=url, kind=kind)

    def list(self, kind: MediaKind) -> list[StoredObject]:
        objects: list[StoredObject] = []
        cursor: str | None = None
        while True:
            options: dict[str, Any] = {
                "resource_type": kind.value,
                "type": "upload",
                "max_results": self._list_page_size,
            }
            if self._folder:
                options["prefix"] = f"{self._folder}/"
            if cursor:
                options["next_cursor"] = cursor
            page = cloudinary.api.resources(**options)
            for resource in page.get("resources", []):
                url = resource.get("secure_url") or resource.get("url")
                objects.append(StoredObject(public_id=resource["public_id"], url=url, kind=kind))
            cursor = page.get("next_cursor")
            if not cursor:
                return objects

    def bulk_delete(self, public_ids: Sequence[str], kind: MediaKind) -> int:
        """Delete ``public_ids`` of one kind; ids already gone are not an error.

        Returns:
            Number of objects the store reports as deleted.
        """
        deleted = 0
        for batch in _chunks(list(public_ids), self._delete_batch_size):
            response = cloudinary.api.delete_resources(list(batch), resource_type=kind.value)
            statuses = response.get("deleted", {})
            deleted += sum(1 for status in statuses.values() if status == "deleted")
        return deleted
