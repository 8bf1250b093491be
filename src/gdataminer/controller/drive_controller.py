"""Google Drive collection source ("documents")."""

from __future__ import annotations

from typing import Any, Optional, Sequence

from gdataminer.auth import READONLY_SCOPES, AuthInfo, OAuthClient
from gdataminer.errors import InvalidArgumentError
from gdataminer.models import (
    SCOPE_DEFAULT,
    STARRED_CATEGORY,
    AccessRule,
    Author,
    ItemKind,
    MediaInfo,
    Page,
    ParentRef,
    RemoteItem,
)
from gdataminer.util.mime import kind_for_drive_mime
from gdataminer.util.time import parse_optional

from .base import ApiController, RetryPolicy, as_float, as_int, as_str
from .fields import LIST_FIELDS, PERMISSION_LIST_FIELDS

# Drive permission types -> access-rule scope types.
_SCOPE_BY_PERMISSION_TYPE: dict[str, str] = {
    "anyone": SCOPE_DEFAULT,
    "domain": "domain",
    "user": "user",
    "group": "group",
}


class GoogleDriveController(ApiController):
    """
    Drive v3 listing (read-only).

    Notes:
        - The flat files.list listing covers every folder's content, so
          folders never trigger a child listing.
        - `supports_all_drives` is applied to all requests consistently.
    """

    namespace = "drive"
    DEFAULT_SCOPES: tuple[str, ...] = (READONLY_SCOPES["documents"],)

    def __init__(
        self,
        auth_info: AuthInfo,
        *,
        scopes: Optional[Sequence[str]] = None,
        supports_all_drives: bool = True,
        page_size: int = 100,
        retry_policy: Optional[RetryPolicy] = None,
    ) -> None:
        use_scopes = list(scopes) if scopes is not None else list(self.DEFAULT_SCOPES)
        service = OAuthClient(auth_info).build_service("drive", "v3", use_scopes)
        super().__init__(service, page_size=page_size, retry_policy=retry_policy)
        self._supports_all_drives = supports_all_drives

    @classmethod
    def from_service(
        cls,
        service: Any,
        *,
        supports_all_drives: bool = True,
        page_size: int = 100,
        retry_policy: Optional[RetryPolicy] = None,
    ) -> "GoogleDriveController":
        """Create controller from a pre-built Drive service (useful for tests)."""
        obj = cls.__new__(cls)
        ApiController.__init__(obj, service, page_size=page_size, retry_policy=retry_policy)
        obj._supports_all_drives = supports_all_drives
        return obj

    # ----------------------------
    # Collection source API
    # ----------------------------
    def list_page(self, cursor: Optional[str]) -> Page:
        return self._list_files("trashed=false", cursor)

    def list_children(self, container_id: str) -> list[RemoteItem]:
        if not container_id:
            raise InvalidArgumentError("container_id must be a non-empty string")

        q = f"'{container_id}' in parents and trashed=false"
        items: list[RemoteItem] = []
        cursor: Optional[str] = None
        while True:
            page = self._list_files(q, cursor)
            items.extend(page.items)
            cursor = page.next_cursor
            if not cursor:
                return items

    def list_access_rules(self, item_id: str) -> list[AccessRule]:
        rules: list[AccessRule] = []
        page_token: Optional[str] = None
        while True:
            req = self._service.permissions().list(
                fileId=item_id,
                fields=PERMISSION_LIST_FIELDS,
                pageToken=page_token,
                **self._common_get_kwargs(),
            )
            data = self._execute(req.execute)
            for perm in data.get("permissions", []) or []:
                rule = _permission_to_rule(perm)
                if rule is not None:
                    rules.append(rule)

            page_token = data.get("nextPageToken")
            if not page_token:
                return rules

    def has_children(self, item: RemoteItem) -> bool:
        return False

    # ----------------------------
    # Internals
    # ----------------------------
    def _common_get_kwargs(self) -> dict[str, Any]:
        if not self._supports_all_drives:
            return {}
        return {"supportsAllDrives": True}

    def _common_list_kwargs(self) -> dict[str, Any]:
        if not self._supports_all_drives:
            return {}
        return {"supportsAllDrives": True, "includeItemsFromAllDrives": True}

    def _list_files(self, q: str, cursor: Optional[str]) -> Page:
        req = self._service.files().list(
            q=q,
            fields=LIST_FIELDS,
            pageSize=self._page_size,
            pageToken=cursor,
            **self._common_list_kwargs(),
        )
        data = self._execute(req.execute)
        items = [_file_dict_to_item(f) for f in data.get("files", []) or []]
        return Page(items=items, next_cursor=data.get("nextPageToken") or None)


def _file_dict_to_item(data: dict[str, Any]) -> RemoteItem:
    mime_type = as_str(data.get("mimeType")) or ""
    parents = data.get("parents", []) or []

    authors = []
    for owner in data.get("owners", []) or []:
        if isinstance(owner, dict):
            authors.append(
                Author(
                    name=as_str(owner.get("displayName")) or "",
                    email=as_str(owner.get("emailAddress")),
                )
            )

    return RemoteItem(
        provider_id=as_str(data.get("id")) or "",
        kind=kind_for_drive_mime(mime_type),
        title=as_str(data.get("name")) or "",
        description=as_str(data.get("description")),
        created_time=parse_optional(data.get("createdTime")),
        modified_time=parse_optional(data.get("modifiedTime")),
        url=as_str(data.get("webViewLink")),
        mime_type=mime_type or None,
        parents=[ParentRef(p, ItemKind.FOLDER) for p in parents if isinstance(p, str)],
        categories=[STARRED_CATEGORY] if data.get("starred") is True else [],
        authors=authors,
        media=_image_metadata_to_media(data.get("imageMediaMetadata")),
    )


def _image_metadata_to_media(meta: Any) -> Optional[MediaInfo]:
    if not isinstance(meta, dict) or not meta:
        return None
    return MediaInfo(
        width=as_int(meta.get("width")),
        height=as_int(meta.get("height")),
        camera_make=as_str(meta.get("cameraMake")),
        camera_model=as_str(meta.get("cameraModel")),
        exposure_time=as_float(meta.get("exposureTime")),
        aperture=as_float(meta.get("aperture")),
        focal_length=as_float(meta.get("focalLength")),
        iso=as_int(meta.get("isoSpeed")),
    )


def _permission_to_rule(perm: Any) -> Optional[AccessRule]:
    if not isinstance(perm, dict):
        return None
    perm_type = perm.get("type")
    scope_type = _SCOPE_BY_PERMISSION_TYPE.get(perm_type) if isinstance(perm_type, str) else None
    if scope_type is None:
        return None
    value = as_str(perm.get("emailAddress")) or as_str(perm.get("domain")) or ""
    return AccessRule(scope_type=scope_type, scope_value=value)
