import unittest
from datetime import datetime, timezone

from gdataminer.errors import StoreError
from gdataminer.store import MemoryStore, ResourceHandle


class TestMemoryStore(unittest.TestCase):
    def setUp(self) -> None:
        self.store = MemoryStore()
        self.t1 = datetime(2025, 1, 1, tzinfo=timezone.utc)

    def test_ensure_resource_reports_existence(self) -> None:
        h1, existed1 = self.store.ensure_resource("ds", "r1", ["a"])
        h2, existed2 = self.store.ensure_resource("ds", "r1", ["b"])
        self.assertFalse(existed1)
        self.assertTrue(existed2)
        self.assertEqual(h1, h2)
        self.assertEqual(self.store.get_types("r1"), {"a", "b"})
        self.assertEqual(len(self.store), 1)

    def test_scope_is_kept_from_creation(self) -> None:
        self.store.ensure_resource("ds1", "r1", [])
        handle, _ = self.store.ensure_resource("ds2", "r1", [])
        self.assertEqual(handle.scope, "ds1")
        self.assertEqual(self.store.list_known_identifiers("ds1"), {"r1"})
        self.assertEqual(self.store.list_known_identifiers("ds2"), set())

    def test_single_writes(self) -> None:
        handle, _ = self.store.ensure_resource("ds", "r1", [])
        self.store.ensure_resource("ds", "r2", [])
        self.store.set_modification_clock(handle, self.t1)
        self.store.set_property(handle, "p", "v")
        self.store.set_relation(handle, "rel", "r2")
        self.store.set_relation(handle, "rel", ResourceHandle("r2"))

        self.assertEqual(self.store.get_modification_clock(handle), self.t1)
        self.assertEqual(self.store.get_property("r1", "p"), "v")
        self.assertEqual(self.store.get_relations("r1", "rel"), {"r2"})

        self.store.set_property(handle, "p", None)
        self.store.clear_relation(handle, "rel")
        self.assertIsNone(self.store.get_property("r1", "p"))
        self.assertEqual(self.store.get_relations("r1", "rel"), set())

    def test_batch_commits_on_clean_exit(self) -> None:
        handle, _ = self.store.ensure_resource("ds", "r1", [])
        with self.store.batch() as batch:
            batch.set_modification_clock(handle, self.t1)
            batch.set_property(handle, "p", 1)
            self.assertEqual(batch.get_modification_clock(handle), self.t1)
            self.assertIsNone(self.store.get_modification_clock(handle))
            self.assertEqual(batch.pending, 2)

        self.assertEqual(self.store.get_modification_clock(handle), self.t1)
        self.assertEqual(self.store.get_property("r1", "p"), 1)

    def test_batch_discards_on_exception(self) -> None:
        handle, _ = self.store.ensure_resource("ds", "r1", [])
        with self.assertRaises(ValueError):
            with self.store.batch() as batch:
                batch.set_modification_clock(handle, self.t1)
                batch.set_property(handle, "p", 1)
                raise ValueError("boom")

        self.assertIsNone(self.store.get_modification_clock(handle))
        self.assertIsNone(self.store.get_property("r1", "p"))

    def test_batch_with_unknown_resource_applies_nothing(self) -> None:
        handle, _ = self.store.ensure_resource("ds", "r1", [])
        with self.assertRaises(StoreError):
            with self.store.batch() as batch:
                batch.set_property(handle, "p", 1)
                batch.set_property(ResourceHandle("missing"), "p", 1)

        self.assertIsNone(self.store.get_property("r1", "p"))

    def test_closed_batch_rejects_writes(self) -> None:
        handle, _ = self.store.ensure_resource("ds", "r1", [])
        batch = self.store.batch()
        batch.commit()
        with self.assertRaises(RuntimeError):
            batch.set_property(handle, "p", 1)

    def test_unknown_resource_reads(self) -> None:
        self.assertFalse(self.store.has_resource("nope"))
        with self.assertRaises(StoreError):
            self.store.get_property("nope", "p")

    def test_delete_resources(self) -> None:
        self.store.ensure_resource("ds", "r1", [])
        self.store.ensure_resource("ds", "r2", [])
        removed = self.store.delete_resources(["r1", "missing"])
        self.assertEqual(removed, 1)
        self.assertFalse(self.store.has_resource("r1"))
        self.assertTrue(self.store.has_resource("r2"))

    def test_delete_drops_inbound_relations(self) -> None:
        handle, _ = self.store.ensure_resource("ds", "r1", [])
        self.store.ensure_resource("ds", "r2", [])
        self.store.ensure_resource("ds", "r3", [])
        self.store.set_relation(handle, "rel", "r2")
        self.store.set_relation(handle, "rel", "r3")

        self.store.delete_resources(["r2"])

        self.assertEqual(self.store.get_relations("r1", "rel"), {"r3"})

    def test_observed_mark_is_kept(self) -> None:
        self.store.ensure_resource("ds", "r1", [], observed=True)
        self.store.ensure_resource("ds", "r1", [])
        self.store.ensure_resource("ds", "r2", [])
        self.store.ensure_resource("other", "r3", [], observed=True)

        self.assertEqual(self.store.list_observed_identifiers("ds"), {"r1"})
        self.assertEqual(self.store.list_known_identifiers("ds"), {"r1", "r2"})


if __name__ == "__main__":
    unittest.main()
