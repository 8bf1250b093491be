"""Data model for remote items listed by a collection source."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional


class ItemKind(str, Enum):
    """Closed set of remote item kinds (leaf subtypes and containers)."""

    DOCUMENT = "document"
    SPREADSHEET = "spreadsheet"
    PRESENTATION = "presentation"
    DRAWING = "drawing"
    PDF = "pdf"
    FILE = "file"
    PHOTO = "photo"
    VIDEO = "video"
    FOLDER = "folder"
    ALBUM = "album"

    @property
    def is_container(self) -> bool:
        return self in (ItemKind.FOLDER, ItemKind.ALBUM)


STARRED_CATEGORY: str = "starred"

# Access-rule scope types. "default" is the public scope.
SCOPE_DEFAULT: str = "default"
SCOPE_DOMAIN: str = "domain"
SCOPE_USER: str = "user"
SCOPE_GROUP: str = "group"


@dataclass(slots=True, frozen=True)
class ParentRef:
    """Reference to a container holding an item."""

    provider_id: str
    kind: ItemKind = ItemKind.FOLDER


@dataclass(slots=True, frozen=True)
class Author:
    """Author/owner record; email may be missing for some providers."""

    name: str = ""
    email: Optional[str] = None


@dataclass(slots=True, frozen=True)
class AccessRule:
    """A single (scope_type, scope_value) sharing rule."""

    scope_type: str
    scope_value: str = ""

    @property
    def is_individual(self) -> bool:
        return self.scope_type not in (SCOPE_DEFAULT, SCOPE_DOMAIN)


@dataclass(slots=True)
class MediaInfo:
    """Media-specific attributes (dimensions and camera metadata)."""

    width: Optional[int] = None
    height: Optional[int] = None
    camera_make: Optional[str] = None
    camera_model: Optional[str] = None
    exposure_time: Optional[float] = None
    aperture: Optional[float] = None
    focal_length: Optional[float] = None
    iso: Optional[int] = None

    @property
    def has_equipment(self) -> bool:
        return bool(self.camera_make or self.camera_model)


@dataclass(slots=True)
class RemoteItem:
    """
    A remote leaf (document, photo) or container (folder, album).

    Notes:
        - access_rules=None means "not fetched yet"; the driver asks the
          source for them only when the item needs a resync.
        - modified_time=None means the provider exposes no modification time.
    """

    provider_id: str
    kind: ItemKind
    title: str = ""

    description: Optional[str] = None
    created_time: Optional[datetime] = None
    modified_time: Optional[datetime] = None
    url: Optional[str] = None
    mime_type: Optional[str] = None

    parents: list[ParentRef] = field(default_factory=list)
    categories: list[str] = field(default_factory=list)
    authors: list[Author] = field(default_factory=list)
    media: Optional[MediaInfo] = None
    access_rules: Optional[list[AccessRule]] = None

    @property
    def starred(self) -> bool:
        return STARRED_CATEGORY in self.categories


@dataclass(slots=True)
class Page:
    """One page of a remote listing. next_cursor=None means the end."""

    items: list[RemoteItem]
    next_cursor: Optional[str] = None
