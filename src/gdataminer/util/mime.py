from __future__ import annotations

from typing import Optional

from gdataminer.models.remote_item import ItemKind

FOLDER_MIME: str = "application/vnd.google-apps.folder"

# Base type carried by every mirrored item.
REMOTE_DATA_OBJECT: str = "nfo:RemoteDataObject"

# kind -> (type tag, mimetype override)
KIND_TABLE: dict[ItemKind, tuple[str, Optional[str]]] = {
    ItemKind.DOCUMENT: ("nfo:PaginatedTextDocument", None),
    ItemKind.SPREADSHEET: ("nfo:Spreadsheet", None),
    ItemKind.PRESENTATION: ("nfo:Presentation", None),
    # fake a drawing mimetype so viewers pick the right icon
    ItemKind.DRAWING: ("nfo:PaginatedTextDocument", "application/vnd.sun.xml.draw"),
    ItemKind.PDF: ("nfo:PaginatedTextDocument", "application/pdf"),
    ItemKind.FILE: ("nfo:Document", None),
    ItemKind.PHOTO: ("nmm:Photo", None),
    ItemKind.VIDEO: ("nmm:Video", None),
    ItemKind.FOLDER: ("nfo:DataContainer", None),
    ItemKind.ALBUM: ("nfo:DataContainer", None),
}

_DRIVE_KINDS: dict[str, ItemKind] = {
    FOLDER_MIME: ItemKind.FOLDER,
    "application/vnd.google-apps.document": ItemKind.DOCUMENT,
    "application/vnd.google-apps.spreadsheet": ItemKind.SPREADSHEET,
    "application/vnd.google-apps.presentation": ItemKind.PRESENTATION,
    "application/vnd.google-apps.drawing": ItemKind.DRAWING,
    "application/pdf": ItemKind.PDF,
}


def type_tags_for(kind: ItemKind) -> tuple[str, ...]:
    """Return the type hierarchy for a kind (base tag first)."""
    tag, _ = KIND_TABLE[ItemKind(kind)]
    return (REMOTE_DATA_OBJECT, tag)


def mime_override_for(kind: ItemKind) -> Optional[str]:
    return KIND_TABLE[ItemKind(kind)][1]


def kind_for_drive_mime(mime_type: str) -> ItemKind:
    """Map a Drive MIME type to an item kind; unknown types are plain files."""
    kind = _DRIVE_KINDS.get(mime_type)
    if kind is not None:
        return kind
    if mime_type.startswith("image/"):
        return ItemKind.PHOTO
    if mime_type.startswith("video/"):
        return ItemKind.VIDEO
    return ItemKind.FILE


def kind_for_media_mime(mime_type: str) -> ItemKind:
    """Photos library items are either videos or photos."""
    if mime_type.startswith("video/"):
        return ItemKind.VIDEO
    return ItemKind.PHOTO
