"""Idempotent resolution of people and equipment shared across items."""

from __future__ import annotations

import logging
import threading
from typing import Optional

from gdataminer.store import CONTACTS_SCOPE, EQUIPMENT_SCOPE, LocalStore
from gdataminer.util.ids import equipment_identifier, person_identifier

from . import vocab

logger = logging.getLogger(__name__)


class AuxiliaryResolver:
    """
    Resolves natural keys (email, display name, make/model) to local ids.

    Create-if-absent runs under a per-identifier lock, so collections
    crawled concurrently never create the same entity twice.
    """

    def __init__(self, store: LocalStore) -> None:
        self._store = store
        self._guard = threading.Lock()
        self._locks: dict[str, threading.Lock] = {}
        self._known: set[str] = set()

    def ensure_person(self, email: Optional[str], display_name: Optional[str]) -> str:
        local_id = person_identifier(email, display_name)
        name = (display_name or "").strip()
        email = (email or "").strip().lower()

        with self._lock_for(local_id):
            if local_id in self._known and not name:
                return local_id

            handle, existed = self._store.ensure_resource(
                CONTACTS_SCOPE, local_id, [vocab.CONTACT_TYPE]
            )
            with self._store.batch() as batch:
                if not existed and email:
                    batch.set_property(handle, vocab.EMAIL_ADDRESS, email)
                # Contributors arrive without names; fill the name in later.
                if name and self._store.get_property(local_id, vocab.FULLNAME) is None:
                    batch.set_property(handle, vocab.FULLNAME, name)

            if not existed:
                logger.debug("Created contact %s", local_id)
            self._known.add(local_id)
            return local_id

    def ensure_equipment(self, make: Optional[str], model: Optional[str]) -> str:
        local_id = equipment_identifier(make, model)

        with self._lock_for(local_id):
            if local_id in self._known:
                return local_id

            handle, existed = self._store.ensure_resource(
                EQUIPMENT_SCOPE, local_id, [vocab.EQUIPMENT_TYPE]
            )
            if not existed:
                with self._store.batch() as batch:
                    batch.set_property(handle, vocab.MANUFACTURER, (make or "").strip() or None)
                    batch.set_property(handle, vocab.MODEL, (model or "").strip() or None)
                logger.debug("Created equipment %s", local_id)

            self._known.add(local_id)
            return local_id

    def _lock_for(self, local_id: str) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(local_id)
            if lock is None:
                lock = threading.Lock()
                self._locks[local_id] = lock
            return lock
