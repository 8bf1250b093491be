"""Working set of identifiers known before a pass."""

from __future__ import annotations

import threading
from typing import Callable, Iterable


class PreviousResourceSet:
    """
    Identifiers tagged with the datasource before the pass started.

    Only ever shrinks: an id is discarded the moment its remote item is
    observed. Whatever remains at the end is a deletion candidate.
    """

    def __init__(self, identifiers: Iterable[str]) -> None:
        self._lock = threading.Lock()
        self._ids: set[str] = set(identifiers)

    def discard(self, local_id: str) -> bool:
        """Remove local_id; returns True if it was present."""
        with self._lock:
            if local_id in self._ids:
                self._ids.remove(local_id)
                return True
            return False

    def remaining(self, *, exclude: Callable[[str], bool] | None = None) -> set[str]:
        with self._lock:
            if exclude is None:
                return set(self._ids)
            return {lid for lid in self._ids if not exclude(lid)}

    def __contains__(self, local_id: object) -> bool:
        with self._lock:
            return local_id in self._ids

    def __len__(self) -> int:
        with self._lock:
            return len(self._ids)
