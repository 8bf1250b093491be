"""Create-if-absent upsert plus modification-clock change detection."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Iterable, Optional

from gdataminer.store import LocalStore, ResourceHandle
from gdataminer.util.mime import REMOTE_DATA_OBJECT
from gdataminer.util.time import is_newer

logger = logging.getLogger(__name__)


class Upserter:
    """
    Ensures resources exist in the datasource scope and decides whether
    their descriptive properties need rewriting.
    """

    def __init__(self, store: LocalStore, datasource: str) -> None:
        self._store = store
        self._datasource = datasource

    @property
    def datasource(self) -> str:
        return self._datasource

    def upsert(
        self,
        local_id: str,
        type_tags: Iterable[str],
        *,
        observed: bool = False,
    ) -> tuple[ResourceHandle, bool]:
        """
        Create the resource if absent. Returns (handle, existed_before).

        Pass observed=True for items seen in a listing; only those feed the
        next pass's deletion candidates.
        """
        tags = [REMOTE_DATA_OBJECT]
        tags.extend(t for t in type_tags if t and t != REMOTE_DATA_OBJECT)
        return self._store.ensure_resource(self._datasource, local_id, tags, observed=observed)

    def reconcile_modification_time(
        self,
        resource: ResourceHandle,
        remote_mtime: Optional[datetime],
        existed_before: bool,
        writer: Optional[Any] = None,
    ) -> bool:
        """
        Return True when the resource must be resynced.

        New resources always resync. Existing ones resync only when
        remote_mtime is strictly newer than the stored clock; the new clock
        is then written to `writer` (the store, or an open write batch so it
        lands together with the property rewrite). Without a remote mtime
        the item always resyncs and the clock is left untouched.
        """
        writer = writer if writer is not None else self._store

        if remote_mtime is None:
            return True

        if existed_before:
            stored = writer.get_modification_clock(resource)
            if not is_newer(remote_mtime, stored):
                logger.debug("%s unchanged since %s", resource.local_id, stored)
                return False

        writer.set_modification_clock(resource, remote_mtime)
        return True
