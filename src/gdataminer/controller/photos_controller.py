"""Google Photos collection source ("photos")."""

from __future__ import annotations

from typing import Any, Optional, Sequence

from gdataminer.auth import READONLY_SCOPES, AuthInfo, OAuthClient
from gdataminer.errors import InvalidArgumentError
from gdataminer.models import AccessRule, Author, ItemKind, MediaInfo, Page, RemoteItem
from gdataminer.util.mime import kind_for_media_mime
from gdataminer.util.time import parse_optional

from .base import ApiController, RetryPolicy, as_float, as_int, as_str
from .fields import ALBUM_PAGE_SIZE_MAX, MEDIA_PAGE_SIZE_MAX


class GooglePhotosController(ApiController):
    """
    Photos Library v1 listing: albums are the pages, media items are
    listed per album as children.
    """

    namespace = "photos"
    DEFAULT_SCOPES: tuple[str, ...] = (READONLY_SCOPES["photos"],)

    def __init__(
        self,
        auth_info: AuthInfo,
        *,
        scopes: Optional[Sequence[str]] = None,
        page_size: int = 50,
        retry_policy: Optional[RetryPolicy] = None,
    ) -> None:
        use_scopes = list(scopes) if scopes is not None else list(self.DEFAULT_SCOPES)
        service = OAuthClient(auth_info).build_service(
            "photoslibrary",
            "v1",
            use_scopes,
            static_discovery=False,
        )
        super().__init__(service, page_size=page_size, retry_policy=retry_policy)

    @classmethod
    def from_service(
        cls,
        service: Any,
        *,
        page_size: int = 50,
        retry_policy: Optional[RetryPolicy] = None,
    ) -> "GooglePhotosController":
        """Create controller from a pre-built Photos service (useful for tests)."""
        obj = cls.__new__(cls)
        ApiController.__init__(obj, service, page_size=page_size, retry_policy=retry_policy)
        return obj

    def list_page(self, cursor: Optional[str]) -> Page:
        req = self._service.albums().list(
            pageSize=min(self._page_size, ALBUM_PAGE_SIZE_MAX),
            pageToken=cursor,
        )
        data = self._execute(req.execute)
        items = [_album_to_item(a) for a in data.get("albums", []) or []]
        return Page(items=items, next_cursor=data.get("nextPageToken") or None)

    def list_children(self, container_id: str) -> list[RemoteItem]:
        if not container_id:
            raise InvalidArgumentError("container_id must be a non-empty string")

        items: list[RemoteItem] = []
        page_token: Optional[str] = None
        while True:
            body: dict[str, Any] = {
                "albumId": container_id,
                "pageSize": min(self._page_size * 2, MEDIA_PAGE_SIZE_MAX),
            }
            if page_token:
                body["pageToken"] = page_token

            req = self._service.mediaItems().search(body=body)
            data = self._execute(req.execute)
            items.extend(_media_item_to_item(m) for m in data.get("mediaItems", []) or [])

            page_token = data.get("nextPageToken")
            if not page_token:
                return items

    def list_access_rules(self, item_id: str) -> list[AccessRule]:
        # The Library API exposes no per-item sharing rules.
        return []

    def has_children(self, item: RemoteItem) -> bool:
        return item.kind is ItemKind.ALBUM


def _album_to_item(data: dict[str, Any]) -> RemoteItem:
    return RemoteItem(
        provider_id=as_str(data.get("id")) or "",
        kind=ItemKind.ALBUM,
        title=as_str(data.get("title")) or "",
        url=as_str(data.get("productUrl")),
    )


def _media_item_to_item(data: dict[str, Any]) -> RemoteItem:
    mime_type = as_str(data.get("mimeType")) or ""
    meta = data.get("mediaMetadata")
    if not isinstance(meta, dict):
        meta = {}
    photo = meta.get("photo")
    if not isinstance(photo, dict):
        photo = {}
    created = parse_optional(meta.get("creationTime"))

    authors = []
    contributor = data.get("contributorInfo")
    if isinstance(contributor, dict) and as_str(contributor.get("displayName")):
        authors.append(Author(name=contributor["displayName"]))

    media = None
    if meta:
        media = MediaInfo(
            width=as_int(meta.get("width")),
            height=as_int(meta.get("height")),
            camera_make=as_str(photo.get("cameraMake")),
            camera_model=as_str(photo.get("cameraModel")),
            exposure_time=as_float(photo.get("exposureTime")),
            aperture=as_float(photo.get("apertureFNumber")),
            focal_length=as_float(photo.get("focalLength")),
            iso=as_int(photo.get("isoEquivalent")),
        )

    return RemoteItem(
        provider_id=as_str(data.get("id")) or "",
        kind=kind_for_media_mime(mime_type),
        title=as_str(data.get("filename")) or "",
        description=as_str(data.get("description")),
        # Media items are immutable once uploaded; creation time doubles as mtime.
        created_time=created,
        modified_time=created,
        url=as_str(data.get("productUrl")),
        mime_type=mime_type or None,
        authors=authors,
        media=media,
    )
