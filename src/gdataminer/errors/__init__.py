"""Public error exports for gdataminer."""

from __future__ import annotations

from .exceptions import (
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

__all__ = [
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
