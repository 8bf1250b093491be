"""Public model exports for gdataminer."""

from __future__ import annotations

from .remote_item import (
    SCOPE_DEFAULT,
    SCOPE_DOMAIN,
    SCOPE_GROUP,
    SCOPE_USER,
    STARRED_CATEGORY,
    AccessRule,
    Author,
    ItemKind,
    MediaInfo,
    Page,
    ParentRef,
    RemoteItem,
)
from .results import CollectionResult, CollectionStatus, ItemFailure, PassResult

__all__ = [
    "ItemKind",
    "ParentRef",
    "Author",
    "AccessRule",
    "MediaInfo",
    "RemoteItem",
    "Page",
    "STARRED_CATEGORY",
    "SCOPE_DEFAULT",
    "SCOPE_DOMAIN",
    "SCOPE_USER",
    "SCOPE_GROUP",
    "ItemFailure",
    "CollectionResult",
    "CollectionStatus",
    "PassResult",
]
