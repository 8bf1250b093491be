"""Cooperative cancellation for reconciliation passes."""

from __future__ import annotations

import threading
from typing import Optional

from gdataminer.errors import PassCancelledError


class CancelToken:
    """Thread-safe cancellation flag observed by crawlers and the driver."""

    def __init__(self) -> None:
        self._event = threading.Event()
        self._reason: Optional[str] = None

    def cancel(self, reason: str = "cancelled") -> None:
        self._reason = reason
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise PassCancelledError(
                "Reconciliation pass cancelled",
                details={"reason": self._reason},
            )
