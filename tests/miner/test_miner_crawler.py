import unittest

from gdataminer.errors import ApiError, CollectionError, PassCancelledError
from gdataminer.miner.crawler import PaginatedCrawler
from gdataminer.models import ItemKind, Page, RemoteItem
from gdataminer.util.cancel import CancelToken


def _item(pid: str) -> RemoteItem:
    return RemoteItem(provider_id=pid, kind=ItemKind.DOCUMENT)


class FakePager:
    def __init__(self, pages, fail_at=None):
        self.pages = pages
        self.fail_at = fail_at
        self.cursors = []

    def __call__(self, cursor):
        self.cursors.append(cursor)
        index = 0 if cursor is None else int(cursor)
        if index == self.fail_at:
            raise ApiError("listing failed", details={"status_code": 500})
        items = self.pages[index]
        next_cursor = str(index + 1) if index + 1 < len(self.pages) else None
        return Page(items=[_item(p) for p in items], next_cursor=next_cursor)


class TestPaginatedCrawler(unittest.TestCase):
    def test_follows_cursors_until_exhausted(self) -> None:
        pager = FakePager([["a", "b"], ["c"]])
        crawler = PaginatedCrawler("documents", pager)

        ids = [i.provider_id for i in crawler.items()]

        self.assertEqual(ids, ["a", "b", "c"])
        self.assertEqual(pager.cursors, [None, "1"])
        self.assertEqual(crawler.pages_fetched, 2)
        self.assertEqual(crawler.items_emitted, 3)
        self.assertFalse(crawler.truncated)

    def test_first_page_failure_is_fatal(self) -> None:
        crawler = PaginatedCrawler("documents", FakePager([["a"]], fail_at=0))
        with self.assertRaises(CollectionError) as ctx:
            list(crawler.items())
        self.assertIsInstance(ctx.exception.cause, ApiError)
        self.assertEqual(crawler.pages_fetched, 0)

    def test_later_page_failure_truncates(self) -> None:
        crawler = PaginatedCrawler("documents", FakePager([["a", "b"], ["c"]], fail_at=1))

        ids = [i.provider_id for i in crawler.items()]

        self.assertEqual(ids, ["a", "b"])
        self.assertTrue(crawler.truncated)
        self.assertIsInstance(crawler.error, ApiError)

    def test_unexpected_first_page_error_is_fatal(self) -> None:
        def fetch(cursor):
            raise KeyError("files")

        crawler = PaginatedCrawler("documents", fetch)
        with self.assertRaises(CollectionError) as ctx:
            list(crawler.items())
        self.assertIsInstance(ctx.exception.cause, KeyError)

    def test_unexpected_later_page_error_truncates(self) -> None:
        def fetch(cursor):
            if cursor is not None:
                raise KeyError("files")
            return Page(items=[_item("a")], next_cursor="1")

        crawler = PaginatedCrawler("documents", fetch)

        self.assertEqual([i.provider_id for i in crawler.items()], ["a"])
        self.assertTrue(crawler.truncated)
        self.assertIsInstance(crawler.error, KeyError)

    def test_cancellation_raised_by_the_source_propagates(self) -> None:
        def fetch(cursor):
            raise PassCancelledError("shutdown")

        crawler = PaginatedCrawler("documents", fetch)
        with self.assertRaises(PassCancelledError):
            list(crawler.items())

    def test_empty_page_ends_crawl(self) -> None:
        calls = []

        def fetch(cursor):
            calls.append(cursor)
            return Page(items=[], next_cursor="more")

        crawler = PaginatedCrawler("documents", fetch)
        self.assertEqual(list(crawler.items()), [])
        self.assertEqual(calls, [None])
        self.assertEqual(crawler.pages_fetched, 1)

    def test_cancellation_stops_before_next_page(self) -> None:
        token = CancelToken()
        pager = FakePager([["a"], ["b"]])
        crawler = PaginatedCrawler("documents", pager, cancel=token)

        items = crawler.items()
        self.assertEqual(next(items).provider_id, "a")
        token.cancel()
        with self.assertRaises(PassCancelledError):
            next(items)
        self.assertEqual(pager.cursors, [None])


if __name__ == "__main__":
    unittest.main()
