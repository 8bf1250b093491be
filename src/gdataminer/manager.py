"""MinerManager: wires account sources, store and driver together."""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterable, Optional, Sequence

from gdataminer.auth import AuthInfo, scopes_for
from gdataminer.config import MinerSettings, get_settings
from gdataminer.controller import GoogleDriveController, GooglePhotosController, RetryPolicy
from gdataminer.errors import InvalidArgumentError
from gdataminer.miner import AccountContext, ReconciliationDriver
from gdataminer.models import PassResult
from gdataminer.store import LocalStore, MemoryStore, SqliteStore
from gdataminer.util.cancel import CancelToken

logger = logging.getLogger(__name__)

DeletionCallback = Callable[[set[str]], None]


def _drive_source(auth_info: AuthInfo, scopes: Sequence[str], **options: Any) -> Any:
    return GoogleDriveController(
        auth_info,
        scopes=scopes,
        supports_all_drives=options.get("supports_all_drives", True),
        page_size=options.get("page_size", 100),
        retry_policy=options.get("retry_policy"),
    )


def _photos_source(auth_info: AuthInfo, scopes: Sequence[str], **options: Any) -> Any:
    return GooglePhotosController(
        auth_info,
        scopes=scopes,
        page_size=options.get("page_size", 50),
        retry_policy=options.get("retry_policy"),
    )


# Collection kind -> source factory.
SOURCE_FACTORIES: dict[str, Callable[..., Any]] = {
    "documents": _drive_source,
    "photos": _photos_source,
}


class MinerManager:
    """High-level entry point: run reconciliation passes for one account."""

    def __init__(
        self,
        auth_info: AuthInfo,
        *,
        store: Optional[LocalStore] = None,
        account_id: str = "default",
        collections: Sequence[str] = ("documents", "photos"),
        max_workers: int = 1,
        on_deletion_candidates: Optional[DeletionCallback] = None,
        **source_options: Any,
    ) -> None:
        if not collections:
            raise InvalidArgumentError("at least one collection is required")
        unknown = [c for c in collections if c not in SOURCE_FACTORIES]
        if unknown:
            raise InvalidArgumentError(
                "Unknown collection kind",
                details={"collections": unknown},
            )

        # One token covers every collection, so request all scopes up front.
        scopes = scopes_for(list(collections))
        sources = {
            name: SOURCE_FACTORIES[name](auth_info, scopes, **source_options)
            for name in collections
        }
        self._init(sources, store, account_id, max_workers, on_deletion_candidates)

    @classmethod
    def from_sources(
        cls,
        sources: dict[str, Any],
        *,
        store: Optional[LocalStore] = None,
        account_id: str = "default",
        max_workers: int = 1,
        on_deletion_candidates: Optional[DeletionCallback] = None,
    ) -> "MinerManager":
        """Create manager with injected collection sources (useful for tests)."""
        obj = cls.__new__(cls)
        obj._init(dict(sources), store, account_id, max_workers, on_deletion_candidates)
        return obj

    @classmethod
    def from_settings(
        cls,
        settings: Optional[MinerSettings] = None,
        *,
        on_deletion_candidates: Optional[DeletionCallback] = None,
    ) -> "MinerManager":
        settings = settings or get_settings()
        if not settings.is_auth_configured():
            raise InvalidArgumentError(
                "client_secrets_file and token_file must be configured",
                details={"hint": "Set GDATAMINER_CLIENT_SECRETS_FILE and GDATAMINER_TOKEN_FILE"},
            )

        auth_info = AuthInfo(
            kind="oauth",
            data={
                "client_secrets_file": settings.client_secrets_file,
                "token_file": settings.token_file,
            },
        )
        store: LocalStore = SqliteStore(settings.db_path) if settings.db_path else MemoryStore()
        return cls(
            auth_info,
            store=store,
            account_id=settings.account_id,
            collections=settings.collection_list,
            max_workers=settings.max_workers,
            on_deletion_candidates=on_deletion_candidates,
            page_size=settings.page_size,
            supports_all_drives=settings.supports_all_drives,
            retry_policy=RetryPolicy(
                max_retries=settings.max_retries,
                initial_delay_sec=settings.initial_retry_delay_sec,
            ),
        )

    def _init(
        self,
        sources: dict[str, Any],
        store: Optional[LocalStore],
        account_id: str,
        max_workers: int,
        on_deletion_candidates: Optional[DeletionCallback],
    ) -> None:
        self._store = store if store is not None else MemoryStore()
        self._account = AccountContext(account_id=account_id, sources=sources)
        self._driver = ReconciliationDriver(self._store, max_workers=max_workers)
        self._on_deletion_candidates = on_deletion_candidates

    @property
    def store(self) -> LocalStore:
        return self._store

    @property
    def account(self) -> AccountContext:
        return self._account

    def run_pass(self, *, cancel: Optional[CancelToken] = None) -> PassResult:
        """
        Run one reconciliation pass.

        Deletion candidates go to `on_deletion_candidates` when set; the
        manager never deletes on its own.
        """
        result = self._driver.run_pass(self._account, cancel=cancel)
        if self._on_deletion_candidates is not None and result.deletion_candidates:
            self._on_deletion_candidates(set(result.deletion_candidates))
        return result

    def apply_deletions(self, candidates: Iterable[str]) -> int:
        """Default deletion collaborator: drop the resources from the store."""
        removed = self._store.delete_resources(candidates)
        logger.info("Removed %d resource(s) no longer present remotely", removed)
        return removed
