"""Exception hierarchy and HTTP error mapping for gdataminer."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


class GDataMinerError(Exception):
    """
    Base exception for gdataminer.

    Attributes:
        details: Optional structured information (e.g., HTTP status, provider id).
        cause: Optional original exception that triggered this error.
    """

    def __init__(
        self,
        message: str,
        *,
        details: Optional[dict[str, Any]] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        super().__init__(message)
        self.details = details or {}
        self.cause = cause


class InvalidStateError(GDataMinerError):
    """Raised when the miner is used in an invalid state (e.g., concurrent passes)."""


class AuthError(GDataMinerError):
    """Raised when OAuth authentication/refresh fails."""


class PermissionError(GDataMinerError):
    """Raised when access is denied (HTTP 403 non-quota)."""


class InvalidArgumentError(GDataMinerError):
    """Raised when arguments are invalid (empty ids, HTTP 400, etc.)."""


class NotFoundError(GDataMinerError):
    """Raised when a remote resource is not found (HTTP 404)."""


class RateLimitError(GDataMinerError):
    """Raised when rate-limited (HTTP 429)."""


class QuotaExceededError(GDataMinerError):
    """Raised when quota is exceeded (HTTP 403 with quota-related reason)."""


class NetworkError(GDataMinerError):
    """Raised when network/timeout issues prevent the request."""


class ApiError(GDataMinerError):
    """Raised for unclassified API errors (5xx, unknown 4xx, etc.)."""


class StoreError(GDataMinerError):
    """Raised when the local store fails to read or write a resource."""


class CollectionError(GDataMinerError):
    """Raised when a collection cannot be listed at all (first page failed)."""


class PassCancelledError(GDataMinerError):
    """Raised when a reconciliation pass observes its cancellation signal."""


@dataclass(frozen=True)
class HttpErrorInfo:
    """Lightweight HTTP error information for mapping to gdataminer exceptions."""

    status_code: int
    reason: str | None = None
    message: str | None = None
    details: dict[str, Any] | None = None


_QUOTA_REASON_KEYWORDS: tuple[str, ...] = (
    "quota",
    "dailyLimitExceeded",
    "usageLimits",
    "storageQuotaExceeded",
)


def _is_quota_reason(reason: str | None) -> bool:
    if not reason:
        return False
    return any(key.lower() in reason.lower() for key in _QUOTA_REASON_KEYWORDS)


def _is_rate_limit_reason(reason: str | None) -> bool:
    if not reason:
        return False
    return "ratelimitexceeded" in reason.lower()


def map_http_error(
    info: HttpErrorInfo,
    *,
    cause: Optional[BaseException] = None,
) -> GDataMinerError:
    """
    Map an HTTP error to a gdataminer exception.

    Policy:
        - 401 -> AuthError
        - 403 -> PermissionError (default), RateLimitError for
          (user)rateLimitExceeded, QuotaExceededError if quota-related
        - 404 -> NotFoundError
        - 429 -> RateLimitError
        - 400 -> InvalidArgumentError
        - 5xx and anything else -> ApiError
    """
    details: dict[str, Any] = {
        "status_code": info.status_code,
        "reason": info.reason,
    }
    if info.details:
        details.update(info.details)

    message = info.message or f"HTTP error {info.status_code}"

    if info.status_code == 400:
        return InvalidArgumentError(message, details=details, cause=cause)
    if info.status_code == 401:
        return AuthError(message, details=details, cause=cause)
    if info.status_code == 403:
        # Drive reports per-user throttling as 403 rather than 429.
        if _is_rate_limit_reason(info.reason):
            return RateLimitError(message, details=details, cause=cause)
        if _is_quota_reason(info.reason):
            return QuotaExceededError(message, details=details, cause=cause)
        return PermissionError(message, details=details, cause=cause)
    if info.status_code == 404:
        return NotFoundError(message, details=details, cause=cause)
    if info.status_code == 429:
        return RateLimitError(message, details=details, cause=cause)

    return ApiError(message, details=details, cause=cause)
