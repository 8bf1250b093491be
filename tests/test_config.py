import os
import unittest
from unittest.mock import patch

from pydantic import ValidationError

from gdataminer.config import MinerSettings, get_settings, refresh_settings


class TestMinerSettings(unittest.TestCase):
    def test_defaults(self) -> None:
        with patch.dict(os.environ, {}, clear=True):
            settings = MinerSettings(_env_file=None)
        self.assertEqual(settings.collection_list, ["documents", "photos"])
        self.assertEqual(settings.account_id, "default")
        self.assertEqual(settings.max_workers, 1)
        self.assertFalse(settings.is_auth_configured())

    def test_reads_prefixed_environment(self) -> None:
        env = {
            "GDATAMINER_CLIENT_SECRETS_FILE": " /tmp/cs.json ",
            "GDATAMINER_TOKEN_FILE": "/tmp/token.json",
            "GDATAMINER_COLLECTIONS": "photos, documents",
            "GDATAMINER_MAX_WORKERS": "2",
        }
        with patch.dict(os.environ, env, clear=True):
            settings = MinerSettings(_env_file=None)
        self.assertEqual(settings.client_secrets_file, "/tmp/cs.json")
        self.assertEqual(settings.collection_list, ["photos", "documents"])
        self.assertEqual(settings.max_workers, 2)
        self.assertTrue(settings.is_auth_configured())

    def test_rejects_unknown_collection(self) -> None:
        with self.assertRaises(ValidationError):
            MinerSettings(_env_file=None, collections="documents,calendar")
        with self.assertRaises(ValidationError):
            MinerSettings(_env_file=None, collections=" , ")

    def test_bounds(self) -> None:
        with self.assertRaises(ValidationError):
            MinerSettings(_env_file=None, max_workers=0)
        with self.assertRaises(ValidationError):
            MinerSettings(_env_file=None, page_size=5000)

    def test_refresh_settings_reloads(self) -> None:
        with patch.dict(os.environ, {"GDATAMINER_ACCOUNT_ID": "first"}, clear=True):
            first = refresh_settings()
            self.assertIs(get_settings(), first)
        with patch.dict(os.environ, {"GDATAMINER_ACCOUNT_ID": "second"}, clear=True):
            second = refresh_settings()
        self.assertEqual(first.account_id, "first")
        self.assertEqual(second.account_id, "second")
        get_settings.cache_clear()


if __name__ == "__main__":
    unittest.main()
