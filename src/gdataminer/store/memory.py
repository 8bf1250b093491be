"""Thread-safe in-memory store."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Iterable, Optional

from gdataminer.errors import StoreError

from .base import (
    CLEAR_RELATION,
    SET_CLOCK,
    SET_PROPERTY,
    SET_RELATION,
    LocalStore,
    ResourceHandle,
    WriteOp,
)


@dataclass(slots=True)
class _Record:
    scope: str
    types: set[str] = field(default_factory=set)
    properties: dict[str, Any] = field(default_factory=dict)
    relations: dict[str, set[str]] = field(default_factory=dict)
    clock: Optional[datetime] = None
    observed: bool = False


class MemoryStore(LocalStore):
    """In-process store; state lives as long as the object."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._records: dict[str, _Record] = {}

    def ensure_resource(
        self,
        scope: str,
        local_id: str,
        type_tags: Iterable[str],
        *,
        observed: bool = False,
    ) -> tuple[ResourceHandle, bool]:
        if not local_id:
            raise StoreError("local_id must be a non-empty string")

        with self._lock:
            record = self._records.get(local_id)
            existed = record is not None
            if record is None:
                record = _Record(scope=scope)
                self._records[local_id] = record
            record.types.update(type_tags)
            if observed:
                record.observed = True
            return ResourceHandle(local_id=local_id, scope=record.scope), existed

    def get_modification_clock(self, handle: ResourceHandle) -> Optional[datetime]:
        with self._lock:
            return self._get(handle.local_id).clock

    def list_known_identifiers(self, scope: str) -> set[str]:
        with self._lock:
            return {lid for lid, rec in self._records.items() if rec.scope == scope}

    def list_observed_identifiers(self, scope: str) -> set[str]:
        with self._lock:
            return {
                lid
                for lid, rec in self._records.items()
                if rec.scope == scope and rec.observed
            }

    def has_resource(self, local_id: str) -> bool:
        with self._lock:
            return local_id in self._records

    def get_types(self, local_id: str) -> set[str]:
        with self._lock:
            return set(self._get(local_id).types)

    def get_property(self, local_id: str, name: str) -> Any:
        with self._lock:
            return self._get(local_id).properties.get(name)

    def get_relations(self, local_id: str, name: str) -> set[str]:
        with self._lock:
            return set(self._get(local_id).relations.get(name, set()))

    def delete_resources(self, local_ids: Iterable[str]) -> int:
        with self._lock:
            ids = set(local_ids)
            removed = 0
            for local_id in ids:
                if self._records.pop(local_id, None) is not None:
                    removed += 1
            for record in self._records.values():
                for targets in record.relations.values():
                    targets.difference_update(ids)
            return removed

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def _apply(self, ops: list[WriteOp]) -> None:
        with self._lock:
            # Validate first so a bad op leaves nothing half-applied.
            for _, local_id, _, _ in ops:
                self._get(local_id)

            for op, local_id, name, value in ops:
                record = self._records[local_id]
                if op == SET_CLOCK:
                    record.clock = value
                elif op == SET_PROPERTY:
                    if value is None:
                        record.properties.pop(name, None)
                    else:
                        record.properties[name] = value
                elif op == SET_RELATION:
                    record.relations.setdefault(name, set()).add(value)
                elif op == CLEAR_RELATION:
                    record.relations.pop(name, None)
                else:
                    raise StoreError(f"Unsupported write op: {op}")

    def _get(self, local_id: str) -> _Record:
        record = self._records.get(local_id)
        if record is None:
            raise StoreError("Unknown resource", details={"local_id": local_id})
        return record
