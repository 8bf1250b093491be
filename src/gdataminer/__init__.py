"""gdataminer public API."""

from __future__ import annotations

import logging

from gdataminer.auth import AuthInfo, OAuthClient
from gdataminer.config import MinerSettings, get_settings
from gdataminer.controller import GoogleDriveController, GooglePhotosController, RetryPolicy
from gdataminer.errors import (
    ApiError,
    AuthError,
    CollectionError,
    GDataMinerError,
    HttpErrorInfo,
    InvalidArgumentError,
    InvalidStateError,
    NetworkError,
    NotFoundError,
    PassCancelledError,
    PermissionError,
    QuotaExceededError,
    RateLimitError,
    StoreError,
    map_http_error,
)
from gdataminer.manager import MinerManager
from gdataminer.miner import AccountContext, ReconciliationDriver
from gdataminer.models import (
    AccessRule,
    Author,
    CollectionResult,
    ItemFailure,
    ItemKind,
    MediaInfo,
    Page,
    ParentRef,
    PassResult,
    RemoteItem,
)
from gdataminer.store import LocalStore, MemoryStore, SqliteStore
from gdataminer.util import CancelToken, identifier

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    # High-level
    "MinerManager",
    "ReconciliationDriver",
    "AccountContext",
    "CancelToken",
    "identifier",
    # Config / Auth
    "MinerSettings",
    "get_settings",
    "AuthInfo",
    "OAuthClient",
    # Sources
    "GoogleDriveController",
    "GooglePhotosController",
    "RetryPolicy",
    # Stores
    "LocalStore",
    "MemoryStore",
    "SqliteStore",
    # Models
    "ItemKind",
    "RemoteItem",
    "ParentRef",
    "Author",
    "AccessRule",
    "MediaInfo",
    "Page",
    "PassResult",
    "CollectionResult",
    "ItemFailure",
    # Errors
    "GDataMinerError",
    "InvalidStateError",
    "AuthError",
    "PermissionError",
    "InvalidArgumentError",
    "NotFoundError",
    "RateLimitError",
    "QuotaExceededError",
    "NetworkError",
    "ApiError",
    "StoreError",
    "CollectionError",
    "PassCancelledError",
    "HttpErrorInfo",
    "map_http_error",
]
