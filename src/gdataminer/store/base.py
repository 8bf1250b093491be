"""Local store contract shared by the in-memory and SQLite backends."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Iterable, Optional, Union

# Shared scopes for auxiliary entities; they never belong to an account.
CONTACTS_SCOPE: str = "gd:contacts"
EQUIPMENT_SCOPE: str = "gd:equipment"


@dataclass(slots=True, frozen=True)
class ResourceHandle:
    """Opaque reference to a local resource."""

    local_id: str
    scope: Optional[str] = None


Target = Union[ResourceHandle, str]

# Buffered write operation: (op, local_id, name, value)
WriteOp = tuple[str, str, Optional[str], Any]

SET_PROPERTY = "set_property"
SET_RELATION = "set_relation"
CLEAR_RELATION = "clear_relation"
SET_CLOCK = "set_clock"


def _target_id(target: Target) -> str:
    if isinstance(target, ResourceHandle):
        return target.local_id
    return target


class WriteBatch:
    """
    Buffered writes applied to the store atomically.

    Used as a context manager: writes are committed on a clean exit and
    discarded when the block raises.
    """

    def __init__(self, store: LocalStore) -> None:
        self._store = store
        self._ops: list[WriteOp] = []
        self._closed = False

    def __enter__(self) -> WriteBatch:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is None:
            self.commit()
        else:
            self.discard()

    @property
    def pending(self) -> int:
        return len(self._ops)

    def get_modification_clock(self, handle: ResourceHandle) -> Optional[datetime]:
        for op, local_id, _, value in reversed(self._ops):
            if op == SET_CLOCK and local_id == handle.local_id:
                return value
        return self._store.get_modification_clock(handle)

    def set_modification_clock(self, handle: ResourceHandle, value: datetime) -> None:
        self._append((SET_CLOCK, handle.local_id, None, value))

    def set_property(self, handle: ResourceHandle, name: str, value: Any) -> None:
        self._append((SET_PROPERTY, handle.local_id, name, value))

    def set_relation(self, handle: ResourceHandle, name: str, target: Target) -> None:
        self._append((SET_RELATION, handle.local_id, name, _target_id(target)))

    def clear_relation(self, handle: ResourceHandle, name: str) -> None:
        self._append((CLEAR_RELATION, handle.local_id, name, None))

    def commit(self) -> None:
        if self._closed:
            return
        self._closed = True
        if self._ops:
            self._store._apply(list(self._ops))
        self._ops.clear()

    def discard(self) -> None:
        self._closed = True
        self._ops.clear()

    def _append(self, op: WriteOp) -> None:
        if self._closed:
            raise RuntimeError("write batch is already closed")
        self._ops.append(op)


class LocalStore(ABC):
    """
    Indexed graph store holding mirrored resources.

    Backends implement resource creation, reads and `_apply`; single writes
    are one-op batches so every write goes through the same atomic path.
    """

    @abstractmethod
    def ensure_resource(
        self,
        scope: str,
        local_id: str,
        type_tags: Iterable[str],
        *,
        observed: bool = False,
    ) -> tuple[ResourceHandle, bool]:
        """
        Create the resource if absent. Returns (handle, existed_before).

        observed=True marks the resource as seen in a remote listing; the
        mark is never cleared. Resources created only as link targets stay
        unmarked.
        """

    @abstractmethod
    def get_modification_clock(self, handle: ResourceHandle) -> Optional[datetime]:
        ...

    @abstractmethod
    def list_known_identifiers(self, scope: str) -> set[str]:
        ...

    @abstractmethod
    def list_observed_identifiers(self, scope: str) -> set[str]:
        """Identifiers in scope that were marked observed by a listing."""

    @abstractmethod
    def has_resource(self, local_id: str) -> bool:
        ...

    @abstractmethod
    def get_types(self, local_id: str) -> set[str]:
        ...

    @abstractmethod
    def get_property(self, local_id: str, name: str) -> Any:
        ...

    @abstractmethod
    def get_relations(self, local_id: str, name: str) -> set[str]:
        ...

    @abstractmethod
    def delete_resources(self, local_ids: Iterable[str]) -> int:
        """Delete resources and every relation from or to them. Returns count."""

    @abstractmethod
    def _apply(self, ops: list[WriteOp]) -> None:
        """Apply buffered writes atomically."""

    def batch(self) -> WriteBatch:
        return WriteBatch(self)

    def set_modification_clock(self, handle: ResourceHandle, value: datetime) -> None:
        self._apply([(SET_CLOCK, handle.local_id, None, value)])

    def set_property(self, handle: ResourceHandle, name: str, value: Any) -> None:
        self._apply([(SET_PROPERTY, handle.local_id, name, value)])

    def set_relation(self, handle: ResourceHandle, name: str, target: Target) -> None:
        self._apply([(SET_RELATION, handle.local_id, name, _target_id(target))])

    def clear_relation(self, handle: ResourceHandle, name: str) -> None:
        self._apply([(CLEAR_RELATION, handle.local_id, name, None)])
