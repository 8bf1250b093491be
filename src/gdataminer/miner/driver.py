"""One reconciliation pass over an account's remote collections."""

from __future__ import annotations

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Iterable, Optional

from gdataminer.errors import (
    CollectionError,
    GDataMinerError,
    InvalidArgumentError,
    InvalidStateError,
    PassCancelledError,
)
from gdataminer.models import (
    CollectionResult,
    ItemFailure,
    MediaInfo,
    ParentRef,
    PassResult,
    RemoteItem,
)
from gdataminer.store import LocalStore, ResourceHandle, WriteBatch
from gdataminer.util.cancel import CancelToken
from gdataminer.util.ids import identifier, namespace_of
from gdataminer.util.mime import mime_override_for, type_tags_for
from gdataminer.util.time import to_rfc3339

from . import vocab
from .account import AccountContext
from .crawler import PaginatedCrawler
from .linker import HierarchyLinker, SharingResolver
from .resolver import AuxiliaryResolver
from .resource_set import PreviousResourceSet
from .upserter import Upserter

logger = logging.getLogger(__name__)

_RESYNCED_RELATIONS: tuple[str, ...] = (
    vocab.IS_PART_OF,
    vocab.CREATOR,
    vocab.CONTRIBUTOR,
    vocab.EQUIPMENT,
)


class ReconciliationDriver:
    """
    Mirrors every configured collection of an account into the store.

    Collections run sequentially by default; with max_workers > 1 they run
    on a thread pool and share only the previous-resource set and the
    auxiliary resolver, both of which are lock-protected.
    """

    def __init__(self, store: LocalStore, *, max_workers: int = 1) -> None:
        if max_workers < 1:
            raise InvalidArgumentError("max_workers must be >= 1")
        self._store = store
        self._max_workers = max_workers
        self._active_lock = threading.Lock()
        self._active: set[str] = set()

    def run_pass(
        self,
        account: AccountContext,
        *,
        cancel: Optional[CancelToken] = None,
    ) -> PassResult:
        """
        Run one pass and return its result.

        Raises:
            InvalidArgumentError: if the account has no collection sources.
            InvalidStateError: if a pass for the same datasource is running.
            PassCancelledError: if `cancel` fires during the pass.
        """
        if not account.sources:
            raise InvalidArgumentError("account has no collection sources")

        datasource = account.datasource
        with self._active_lock:
            if datasource in self._active:
                raise InvalidStateError(
                    "A pass is already running for this datasource",
                    details={"datasource": datasource},
                )
            self._active.add(datasource)

        try:
            return self._run(account, cancel or CancelToken())
        finally:
            with self._active_lock:
                self._active.discard(datasource)

    def _run(self, account: AccountContext, cancel: CancelToken) -> PassResult:
        datasource = account.datasource
        previous = PreviousResourceSet(self._store.list_observed_identifiers(datasource))
        upserter = Upserter(self._store, datasource)
        resolver = AuxiliaryResolver(self._store)
        logger.info("Starting pass for %s (%d known resources)", datasource, len(previous))

        jobs = [
            _CollectionJob(
                collection=name,
                source=source,
                store=self._store,
                upserter=upserter,
                resolver=resolver,
                previous=previous,
                cancel=cancel,
            )
            for name, source in account.sources.items()
        ]

        if self._max_workers > 1 and len(jobs) > 1:
            with ThreadPoolExecutor(max_workers=min(self._max_workers, len(jobs))) as pool:
                futures = [pool.submit(job.run) for job in jobs]
                for future in futures:
                    future.result()
        else:
            for job in jobs:
                job.run()

        result = PassResult(datasource=datasource)
        withheld: set[str] = set()
        for job in jobs:
            result.collections[job.collection] = job.result
            result.failures.extend(job.failures)
            if job.result.status != "success":
                withheld.add(job.namespace)

        # A partial listing cannot prove that an item is gone.
        result.deletion_candidates = previous.remaining(
            exclude=lambda lid: namespace_of(lid) in withheld
        )
        logger.info(
            "Finished pass for %s: %s",
            datasource,
            ", ".join(f"{k}={v}" for k, v in result.summary.items()),
        )
        return result


class _CollectionJob:
    """Crawl and reconcile one collection; owns its result and failure log."""

    def __init__(
        self,
        *,
        collection: str,
        source: Any,
        store: LocalStore,
        upserter: Upserter,
        resolver: AuxiliaryResolver,
        previous: PreviousResourceSet,
        cancel: CancelToken,
    ) -> None:
        self.collection = collection
        self.namespace: str = source.namespace
        self._source = source
        self._store = store
        self._upserter = upserter
        self._resolver = resolver
        self._linker = HierarchyLinker(upserter, self.namespace)
        self._sharing = SharingResolver(resolver)
        self._previous = previous
        self._cancel = cancel

        self.result = CollectionResult(collection=collection, namespace=self.namespace)
        self.failures: list[ItemFailure] = []
        # local id -> containers that listed it during this pass
        self._listed_in: dict[str, list[ParentRef]] = {}

    def run(self) -> None:
        crawler = PaginatedCrawler(self.collection, self._source.list_page, cancel=self._cancel)
        try:
            for item in crawler.items():
                self._process_entry(item)
        except CollectionError as exc:
            self.result.status = "failed"
            self._set_error(exc.cause or exc)
            logger.error("Collection %s failed: %s", self.collection, exc.cause or exc)
            return
        finally:
            self.result.pages = crawler.pages_fetched

        if crawler.truncated:
            self.result.status = "truncated"
            self._set_error(crawler.error)

        logger.info(
            "Collection %s: %s, %d item(s), %d resynced, %d unchanged, %d failed",
            self.collection,
            self.result.status,
            self.result.items_seen,
            self.result.items_resynced,
            self.result.items_skipped,
            self.result.items_failed,
        )

    # ----------------------------
    # Items
    # ----------------------------
    def _process_entry(self, item: RemoteItem) -> None:
        self._visit(item, (), stage="item")

        if self._source.has_children(item):
            self._process_children(item)

    def _process_children(self, container: RemoteItem) -> None:
        self._cancel.raise_if_cancelled()
        try:
            children = self._source.list_children(container.provider_id)
        except PassCancelledError:
            raise
        except Exception as exc:
            self._record(container.provider_id, "children", exc)
            if self.result.status == "success":
                self.result.status = "truncated"
                self._set_error(exc)
            return

        parent = ParentRef(container.provider_id, container.kind)
        for child in children:
            self._visit(child, (parent,), stage="child")

    def _visit(self, item: RemoteItem, extra_parents: tuple[ParentRef, ...], *, stage: str) -> None:
        self._cancel.raise_if_cancelled()
        self.result.items_seen += 1
        try:
            changed = self._process_item(item, extra_parents)
        except PassCancelledError:
            raise
        except Exception as exc:
            self.result.items_failed += 1
            self._record(item.provider_id, stage, exc)
            return

        if changed:
            self.result.items_resynced += 1
        else:
            self.result.items_skipped += 1

    def _process_item(self, item: RemoteItem, extra_parents: tuple[ParentRef, ...]) -> bool:
        local_id = identifier(item.kind, self.namespace, item.provider_id)
        self._previous.discard(local_id)

        handle, existed = self._upserter.upsert(
            local_id, type_tags_for(item.kind), observed=True
        )
        listed_in = [*self._listed_in.get(local_id, ()), *extra_parents]
        with self._store.batch() as batch:
            changed = self._upserter.reconcile_modification_time(
                handle, item.modified_time, existed, writer=batch
            )
            if changed:
                self._resync(batch, handle, item, listed_in)
            elif extra_parents:
                # Unchanged items still belong to every container listing them.
                self._linker.link_parents(batch, handle, extra_parents)
            # Nothing is committed once the pass is cancelled.
            self._cancel.raise_if_cancelled()

        if extra_parents:
            self._listed_in[local_id] = listed_in
        return changed

    def _resync(
        self,
        batch: WriteBatch,
        handle: ResourceHandle,
        item: RemoteItem,
        containers: Iterable[ParentRef],
    ) -> None:
        created = to_rfc3339(item.created_time) if item.created_time else None
        batch.set_property(handle, vocab.URL, item.url)
        batch.set_property(handle, vocab.MIME_TYPE, mime_override_for(item.kind) or item.mime_type)
        batch.set_property(handle, vocab.TITLE, item.title or None)
        batch.set_property(handle, vocab.DESCRIPTION, item.description)
        batch.set_property(handle, vocab.CONTENT_CREATED, created)
        batch.set_property(handle, vocab.HAS_TAG, vocab.FAVORITE_TAG if item.starred else None)
        _write_media(batch, handle, item.media)

        for relation in _RESYNCED_RELATIONS:
            batch.clear_relation(handle, relation)

        self._linker.link_parents(batch, handle, [*item.parents, *containers])

        for author in item.authors:
            try:
                contact = self._resolver.ensure_person(author.email, author.name)
            except GDataMinerError as exc:
                self._record(item.provider_id, "creator", exc)
                continue
            batch.set_relation(handle, vocab.CREATOR, contact)

        rules = item.access_rules
        if rules is None:
            try:
                rules = self._source.list_access_rules(item.provider_id)
            except PassCancelledError:
                raise
            except GDataMinerError as exc:
                self._record(item.provider_id, "contributor", exc)
                rules = []
        for _, exc in self._sharing.link_contributors(batch, handle, rules):
            self._record(item.provider_id, "contributor", exc)

        media = item.media
        if media is not None and media.has_equipment:
            try:
                equipment = self._resolver.ensure_equipment(media.camera_make, media.camera_model)
            except GDataMinerError as exc:
                self._record(item.provider_id, "equipment", exc)
            else:
                batch.set_relation(handle, vocab.EQUIPMENT, equipment)

    # ----------------------------
    # Failure log
    # ----------------------------
    def _record(self, provider_id: str, stage: str, exc: BaseException) -> None:
        logger.warning(
            "Unable to process %s entry %s (%s): %s",
            self.collection,
            provider_id or "<no id>",
            stage,
            exc,
        )
        self.failures.append(
            ItemFailure(
                collection=self.collection,
                provider_id=provider_id,
                stage=stage,  # type: ignore[arg-type]
                error_type=exc.__class__.__name__,
                message=str(exc),
            )
        )

    def _set_error(self, exc: Optional[BaseException]) -> None:
        if exc is None:
            return
        self.result.error_type = exc.__class__.__name__
        self.result.error_message = str(exc)


def _media_properties(media: Optional[MediaInfo]) -> Iterable[tuple[str, Any]]:
    if media is None:
        media = MediaInfo()
    return (
        (vocab.WIDTH, media.width),
        (vocab.HEIGHT, media.height),
        (vocab.EXPOSURE_TIME, media.exposure_time),
        (vocab.FNUMBER, media.aperture),
        (vocab.FOCAL_LENGTH, media.focal_length),
        (vocab.ISO_SPEED, media.iso),
    )


def _write_media(batch: WriteBatch, handle: ResourceHandle, media: Optional[MediaInfo]) -> None:
    for name, value in _media_properties(media):
        batch.set_property(handle, name, value)
