"""Page-at-a-time crawl of one remote collection."""

from __future__ import annotations

import logging
from typing import Callable, Iterator, Optional

from gdataminer.errors import CollectionError, PassCancelledError
from gdataminer.models import Page, RemoteItem
from gdataminer.util.cancel import CancelToken

logger = logging.getLogger(__name__)


class PaginatedCrawler:
    """
    Drives list_page(cursor) until the listing is exhausted.

    Policy:
        - The first page failing is fatal: CollectionError is raised.
        - A later page failing truncates the crawl: the items already
          emitted stand as this pass's result, `truncated` is set.
        - An empty page, or a page without a next cursor, ends the crawl.
    """

    def __init__(
        self,
        collection: str,
        fetch_page: Callable[[Optional[str]], Page],
        *,
        cancel: Optional[CancelToken] = None,
    ) -> None:
        self.collection = collection
        self._fetch_page = fetch_page
        self._cancel = cancel or CancelToken()

        self.pages_fetched = 0
        self.items_emitted = 0
        self.truncated = False
        self.error: Optional[Exception] = None

    def items(self) -> Iterator[RemoteItem]:
        cursor: Optional[str] = None
        while True:
            self._cancel.raise_if_cancelled()
            try:
                page = self._fetch_page(cursor)
            except PassCancelledError:
                raise
            except Exception as exc:
                if self.pages_fetched == 0:
                    raise CollectionError(
                        f"Unable to list collection {self.collection}",
                        details={"collection": self.collection},
                        cause=exc,
                    ) from exc
                logger.warning(
                    "Listing %s stopped after %d page(s): %s",
                    self.collection,
                    self.pages_fetched,
                    exc,
                )
                self.truncated = True
                self.error = exc
                return

            self.pages_fetched += 1
            if not page.items:
                return

            for item in page.items:
                self.items_emitted += 1
                yield item

            if not page.next_cursor:
                return
            cursor = page.next_cursor
